"""Summary metrics for a single in-memory simulation run."""

import numpy as np
from typing import List, Optional
from dataclasses import dataclass, asdict

from edugraph.simulate_sir import SIRCounts


@dataclass
class RunMetrics:
    """Container for run-level metrics."""

    total_steps: int
    peak_infected: int
    peak_step: Optional[int]
    final_susceptible: int
    final_recovered: int
    attack_rate: float  # Fraction of population ever infected
    terminated: bool  # No infected nodes left at the last tick

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)


def compute_attack_rate(ever_infected: int, node_count: int) -> float:
    """Compute attack rate (fraction of population ever infected)."""
    return ever_infected / node_count if node_count > 0 else 0.0


def summarize_history(history: List[SIRCounts], node_count: int) -> RunMetrics:
    """
    Compute run metrics from the per-tick history.

    Args:
        history: Counts appended once per committed tick
        node_count: Population size

    Returns:
        RunMetrics for the run; an empty history yields zeroed metrics
    """
    if not history:
        return RunMetrics(
            total_steps=0,
            peak_infected=0,
            peak_step=None,
            final_susceptible=node_count,
            final_recovered=0,
            attack_rate=0.0,
            terminated=False,
        )

    I_counts = np.array([c.i for c in history])
    peak = int(np.argmax(I_counts))
    last = history[-1]

    return RunMetrics(
        total_steps=last.step,
        peak_infected=int(I_counts[peak]),
        peak_step=history[peak].step,
        final_susceptible=last.s,
        final_recovered=last.r,
        attack_rate=compute_attack_rate(last.i + last.r, node_count),
        terminated=last.i == 0,
    )
