"""Configuration management for classroom epidemic simulations."""

from typing import List, Optional
from pathlib import Path
from pydantic import BaseModel, Field, field_validator
import json


DEFAULT_CLUSTER_LABELS = ["9A", "9B", "10A", "10B", "11A"]


class GraphConfig(BaseModel):
    """Configuration for synthetic contact graph generation."""

    node_count: int = Field(default=120, ge=1, description="Number of students (nodes)")
    cluster_labels: List[str] = Field(
        default_factory=lambda: list(DEFAULT_CLUSTER_LABELS),
        min_length=1,
        description="Ordered class labels; nodes are split into contiguous blocks",
    )
    p_intra: float = Field(
        default=0.12,
        ge=0.0,
        le=1.0,
        description="Edge probability between two students of the same class",
    )
    p_inter: float = Field(
        default=0.003,
        ge=0.0,
        le=1.0,
        description="Edge probability between students of different classes",
    )
    double_draw: bool = Field(
        default=True,
        description="Draw once per ordered pair (True) or once per unordered pair",
    )
    id_prefix: str = Field(default="Student", description="Prefix for generated node ids")

    @field_validator("cluster_labels")
    @classmethod
    def validate_labels(cls, v: List[str]) -> List[str]:
        """Labels must be non-empty and distinct."""
        if any(not label for label in v):
            raise ValueError("cluster labels must be non-empty strings")
        if len(set(v)) != len(v):
            raise ValueError("cluster labels must be distinct")
        return v


class EpidemicConfig(BaseModel):
    """Configuration for SIR dynamics."""

    beta: float = Field(
        default=0.3, ge=0.0, le=1.0, description="Infection probability per infected neighbour per tick"
    )
    gamma: float = Field(
        default=0.1, ge=0.0, le=1.0, description="Recovery probability per infected node per tick"
    )
    tick_interval_ms: int = Field(
        default=300, ge=1, description="Interval between ticks for timer-driven runs"
    )
    max_steps: int = Field(
        default=10000, ge=1, description="Upper bound on ticks for synchronous runs"
    )


class AnalyticsConfig(BaseModel):
    """Configuration for ranking and risk labelling."""

    top_k: int = Field(default=8, ge=0, description="Rows in the bridge table")
    risk_threshold: int = Field(
        default=8, ge=0, description="Degree above which a node is HIGH risk"
    )


class Config(BaseModel):
    """Main configuration for a simulation context."""

    # None keeps the random source unseeded
    seed: Optional[int] = Field(default=None, description="Random seed for reproducibility")

    graph: GraphConfig = Field(default_factory=GraphConfig, description="Graph generation config")
    epidemic: EpidemicConfig = Field(default_factory=EpidemicConfig, description="SIR config")
    analytics: AnalyticsConfig = Field(default_factory=AnalyticsConfig, description="Analytics config")

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return self.model_dump()

    def to_json(self) -> str:
        """Convert config to JSON string."""
        return self.model_dump_json(indent=2)

    def save(self, path: Path | str) -> None:
        """Save config to JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            f.write(self.to_json())

    @classmethod
    def load(cls, path: Path | str) -> "Config":
        """Load config from JSON file."""
        path = Path(path)
        with open(path, "r") as f:
            data = json.load(f)
        return cls(**data)

    @classmethod
    def default(cls) -> "Config":
        """Create the default classroom config (120 students, 5 classes)."""
        return cls()

    @classmethod
    def toy_chain(cls) -> "Config":
        """Create toy config: 3 students in one class, deterministic spread."""
        return cls(
            seed=42,
            graph=GraphConfig(node_count=3, cluster_labels=["9A"]),
            epidemic=EpidemicConfig(beta=1.0, gamma=0.0, max_steps=10),
        )
