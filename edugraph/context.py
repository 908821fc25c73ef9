"""Simulation context: one graph, one engine and one tick source per run.

This is the interface a presentation layer talks to. It owns everything the
run needs, so independent contexts never share state.
"""

import numpy as np
from typing import Dict, List, Optional
from loguru import logger

from edugraph.analytics import RiskLevel, bridge_table, graph_summary, risk_label, top_by_degree
from edugraph.config import Config
from edugraph.graph import Graph, Node
from edugraph.graph_generation import generate_graph_from_config
from edugraph.metrics import RunMetrics, summarize_history
from edugraph.scheduler import IntervalTickSource, TickSource
from edugraph.simulate_sir import EpidemicEngine, SIRCounts, TickListener


class SimulationContext:
    """Owns config, random state, graph, engine and tick source."""

    def __init__(
        self,
        config: Optional[Config] = None,
        graph: Optional[Graph] = None,
        tick_source: Optional[TickSource] = None,
        rng: Optional[np.random.RandomState] = None,
    ):
        """
        Build a context.

        Args:
            config: Configuration (default: Config.default())
            graph: Pre-built graph; generated from config when omitted
            tick_source: Periodic trigger (default: IntervalTickSource at the
                configured interval)
            rng: Random state shared by generator and engine
        """
        self.config = config or Config.default()
        self.rng = rng if rng is not None else np.random.RandomState(self.config.seed)
        if tick_source is None:
            tick_source = IntervalTickSource(self.config.epidemic.tick_interval_ms)
        self.tick_source = tick_source

        if graph is None:
            graph = generate_graph_from_config(self.config, self.rng)
        else:
            graph.validate()

        self._listeners: List[TickListener] = []
        self._attach(graph)

    def _attach(self, graph: Graph) -> None:
        self.graph = graph
        self.engine = EpidemicEngine(
            graph,
            beta=self.config.epidemic.beta,
            gamma=self.config.epidemic.gamma,
            rng=self.rng,
            tick_source=self.tick_source,
        )
        for listener in self._listeners:
            self.engine.on_tick(listener)

    @classmethod
    def from_config(cls, config: Config, **kwargs) -> "SimulationContext":
        return cls(config=config, **kwargs)

    def regenerate(self) -> Graph:
        """Discard the current graph and run, and generate a fresh graph."""
        beta, gamma = self.engine.beta, self.engine.gamma
        self.engine.stop()
        graph = generate_graph_from_config(self.config, self.rng)
        self._attach(graph)
        self.engine.set_params(beta, gamma)
        logger.info("Context reinitialized with a new graph")
        return graph

    # Graph access

    def get_graph(self) -> Dict:
        """Snapshot of nodes {id, group, state, degree, influence} and edges."""
        return self.graph.to_dict()

    # Simulation control

    def on_tick(self, callback: TickListener) -> None:
        self._listeners.append(callback)
        self.engine.on_tick(callback)

    def set_params(self, beta: float, gamma: float) -> None:
        self.engine.set_params(beta, gamma)

    def start(self) -> None:
        self.engine.start()

    def stop(self) -> None:
        self.engine.stop()

    def toggle(self) -> bool:
        """Start if stopped, stop if running. Returns the new running flag."""
        if self.engine.is_running:
            self.engine.stop()
        else:
            self.engine.start()
        return self.engine.is_running

    def reset(self) -> None:
        self.engine.reset()

    def step(self) -> SIRCounts:
        return self.engine.step()

    def seed_random_node(self) -> Optional[Node]:
        return self.engine.seed()

    def seed_node(self, node_id: str) -> Node:
        return self.engine.seed_node(node_id)

    def run_to_completion(self, max_steps: Optional[int] = None) -> List[SIRCounts]:
        return self.engine.run_to_completion(max_steps or self.config.epidemic.max_steps)

    @property
    def is_running(self) -> bool:
        return self.engine.is_running

    def counts(self) -> SIRCounts:
        return self.engine.counts()

    def history(self) -> List[SIRCounts]:
        return self.engine.history

    # Analytics

    def top_by_degree(self, k: Optional[int] = None) -> List[Node]:
        return top_by_degree(self.graph, self.config.analytics.top_k if k is None else k)

    def risk_label(self, node: Node) -> RiskLevel:
        return risk_label(node, self.config.analytics.risk_threshold)

    def bridge_table(self, k: Optional[int] = None) -> List[Dict]:
        k = self.config.analytics.top_k if k is None else k
        return bridge_table(self.graph, k, self.config.analytics.risk_threshold)

    def summary(self) -> Dict:
        return graph_summary(self.graph)

    def run_metrics(self) -> RunMetrics:
        return summarize_history(self.engine.history, len(self.graph))
