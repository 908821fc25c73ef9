"""Discrete-time SIR simulation on an explicit contact graph."""

import math
import threading
import numpy as np
from typing import Callable, List, Optional
from dataclasses import dataclass, field
from loguru import logger

from edugraph.errors import InvalidParameterError
from edugraph.graph import Graph, Node, NodeState
from edugraph.scheduler import TickSource

S, I, R = NodeState.SUSCEPTIBLE, NodeState.INFECTED, NodeState.RECOVERED


@dataclass(frozen=True)
class SIRCounts:
    """Aggregate compartment sizes after a tick."""

    step: int
    s: int
    i: int
    r: int

    @property
    def total(self) -> int:
        return self.s + self.i + self.r

    def to_dict(self) -> dict:
        return {"step": self.step, "s": self.s, "i": self.i, "r": self.r}


@dataclass
class SimulationRun:
    """Ephemeral state of the current run: step counter and S/I/R history."""

    step: int = 0
    history: List[SIRCounts] = field(default_factory=list)
    running: bool = False

    def clear(self) -> None:
        self.step = 0
        self.history.clear()
        self.running = False


TickListener = Callable[[SIRCounts], None]


def _check_probability(name: str, value: float) -> float:
    value = float(value)
    if not math.isfinite(value) or not 0.0 <= value <= 1.0:
        raise InvalidParameterError(f"{name} must be in [0, 1], got {value}")
    return value


def sir_transition(
    graph: Graph,
    beta: float,
    gamma: float,
    rng: np.random.RandomState,
) -> List[NodeState]:
    """
    Compute next states for one synchronous tick without mutating the graph.

    Every draw reads the pre-tick states. Each infected node makes one
    independent infection draw per incident edge to a susceptible neighbour
    (parallel edges draw once each), then one recovery draw for itself.

    Args:
        graph: Graph whose node states form the pre-tick snapshot
        beta: Infection probability per exposed edge
        gamma: Recovery probability per infected node
        rng: Random state

    Returns:
        List of next states aligned with graph.nodes
    """
    current = graph.states()
    next_states = list(current)
    adj = graph.adjacency()

    for node in range(len(current)):
        if current[node] is not I:
            continue

        start, end = adj.indptr[node], adj.indptr[node + 1]
        for neighbor, multiplicity in zip(adj.indices[start:end], adj.data[start:end]):
            if current[neighbor] is not S:
                continue
            for _ in range(int(multiplicity)):
                if rng.rand() < beta:
                    next_states[neighbor] = I

        if rng.rand() < gamma:
            next_states[node] = R

    return next_states


class EpidemicEngine:
    """Owns SIR state for a graph and advances it one tick at a time."""

    def __init__(
        self,
        graph: Graph,
        beta: float = 0.3,
        gamma: float = 0.1,
        rng: Optional[np.random.RandomState] = None,
        tick_source: Optional[TickSource] = None,
    ):
        """
        Initialize the engine.

        Args:
            graph: Contact graph; node states are mutated in place
            beta: Infection probability per infected neighbour per tick
            gamma: Recovery probability per infected node per tick
            rng: Random state (default: unseeded)
            tick_source: Optional periodic trigger used by start()/stop()
        """
        self.graph = graph
        self._beta = _check_probability("beta", beta)
        self._gamma = _check_probability("gamma", gamma)
        self.rng = rng if rng is not None else np.random.RandomState()
        self.tick_source = tick_source
        self.run = SimulationRun()
        self._listeners: List[TickListener] = []
        self._lock = threading.RLock()

        logger.info(
            f"Initialized EpidemicEngine: N={len(graph)}, beta={self._beta}, gamma={self._gamma}"
        )

    # Parameters

    @property
    def beta(self) -> float:
        return self._beta

    @beta.setter
    def beta(self, value: float) -> None:
        self._beta = _check_probability("beta", value)

    @property
    def gamma(self) -> float:
        return self._gamma

    @gamma.setter
    def gamma(self, value: float) -> None:
        self._gamma = _check_probability("gamma", value)

    def set_params(self, beta: float, gamma: float) -> None:
        """Set both rates; nothing changes if either is out of range."""
        beta = _check_probability("beta", beta)
        gamma = _check_probability("gamma", gamma)
        with self._lock:
            self._beta, self._gamma = beta, gamma
        logger.debug(f"Parameters updated: beta={beta}, gamma={gamma}")

    # Observation

    @property
    def is_running(self) -> bool:
        return self.run.running

    @property
    def step_count(self) -> int:
        return self.run.step

    @property
    def history(self) -> List[SIRCounts]:
        return list(self.run.history)

    def counts(self) -> SIRCounts:
        s, i, r = self.graph.counts()
        return SIRCounts(step=self.run.step, s=s, i=i, r=r)

    def on_tick(self, callback: TickListener) -> None:
        """Register a listener called with the counts of every committed tick."""
        self._listeners.append(callback)

    # Seeding

    def seed(self) -> Optional[Node]:
        """Infect one random node if every node is still susceptible."""
        with self._lock:
            if not self.graph.nodes or any(n.state is not S for n in self.graph.nodes):
                return None
            node = self.graph.nodes[self.rng.randint(len(self.graph.nodes))]
            node.state = I
        logger.info(f"Seeded random node {node.id} ({node.group})")
        return node

    def seed_node(self, node_id: str) -> Node:
        """Reset the run and infect a specific node."""
        node = self.graph.node(node_id)
        self.reset()
        with self._lock:
            node.state = I
        logger.info(f"Seeded node {node.id} ({node.group})")
        return node

    # Lifecycle

    def _begin(self) -> bool:
        with self._lock:
            if self.run.running:
                return False
            self.seed()
            self.run.running = True
        logger.info(f"Simulation started at step {self.run.step}")
        return True

    def start(self) -> None:
        """Start ticking; seeds a random node if nobody is infected yet."""
        if self._begin() and self.tick_source is not None:
            self.tick_source.start(self._on_tick)

    def stop(self) -> None:
        """Stop ticking. Safe to call when already stopped."""
        with self._lock:
            was_running = self.run.running
            self.run.running = False
        if self.tick_source is not None:
            self.tick_source.stop()
        if was_running:
            logger.info(f"Simulation stopped at step {self.run.step}")

    def reset(self) -> None:
        """Return every node to S and clear the run. Degree/influence are kept."""
        self.stop()
        with self._lock:
            for node in self.graph.nodes:
                node.state = S
            self.run.clear()
        logger.info("Simulation reset")

    def _on_tick(self) -> None:
        if self.run.running:
            self.step()

    def step(self) -> SIRCounts:
        """
        Advance one synchronous tick and return the committed counts.

        A no-op when nobody is infected and the run is not running. The run
        auto-stops once no node remains infected.
        """
        with self._lock:
            s, i, r = self.graph.counts()
            if i == 0 and not self.run.running:
                return SIRCounts(step=self.run.step, s=s, i=i, r=r)

            next_states = sir_transition(self.graph, self._beta, self._gamma, self.rng)
            for node, state in zip(self.graph.nodes, next_states):
                node.state = state

            self.run.step += 1
            s, i, r = self.graph.counts()
            counts = SIRCounts(step=self.run.step, s=s, i=i, r=r)
            self.run.history.append(counts)
            was_running = self.run.running
            if i == 0:
                self.run.running = False

        logger.debug(f"t={counts.step}: S={s} I={i} R={r}")
        if i == 0:
            logger.info(f"Epidemic ended at t={counts.step}: S={s}, R={r}")
            # Stopped before listeners run so a listener may restart the run
            if was_running and self.tick_source is not None:
                self.tick_source.stop()

        for listener in list(self._listeners):
            listener(counts)

        return counts

    def run_to_completion(self, max_steps: int = 10000) -> List[SIRCounts]:
        """
        Drive ticks synchronously until no node is infected.

        Args:
            max_steps: Upper bound on ticks

        Returns:
            History of the run
        """
        if max_steps < 1:
            raise InvalidParameterError(f"max_steps must be >= 1, got {max_steps}")
        self._begin()
        for _ in range(max_steps):
            if not self.run.running:
                break
            self.step()
        else:
            if self.run.running:
                logger.warning(f"Run still active after {max_steps} steps, stopping")
                self.stop()
        return self.history
