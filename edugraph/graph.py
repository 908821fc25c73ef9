"""Graph data model: students (nodes), friendships (edges) and SIR states."""

from enum import Enum
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass, field, asdict

import numpy as np
import networkx as nx
from scipy import sparse

from edugraph.errors import InvalidParameterError, InvalidReferenceError


class NodeState(str, Enum):
    """SIR compartment of a node."""

    SUSCEPTIBLE = "S"
    INFECTED = "I"
    RECOVERED = "R"


@dataclass
class Node:
    """A student in the contact graph."""

    id: str
    group: str
    state: NodeState = NodeState.SUSCEPTIBLE
    degree: int = 0
    influence: float = 0.0  # static proxy for structural importance, in [0, 0.5)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["state"] = self.state.value
        return data


@dataclass(frozen=True)
class Edge:
    """Undirected friendship between two students."""

    source: str
    target: str

    def matches(self, a: str, b: str) -> bool:
        """True if this edge joins `a` and `b` in either direction."""
        return (self.source, self.target) in ((a, b), (b, a))

    def to_dict(self) -> dict:
        return {"source": self.source, "target": self.target}


@dataclass
class Graph:
    """Ordered node list plus an edge list referencing node ids.

    Parallel edges are allowed and kept; self loops are not.
    """

    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)
    _index: Dict[str, int] = field(default_factory=dict, init=False, repr=False, compare=False)
    _adjacency: Optional[sparse.csr_matrix] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        self._reindex()

    def _reindex(self) -> None:
        self._index = {}
        for i, node in enumerate(self.nodes):
            if node.id in self._index:
                raise InvalidParameterError(f"Duplicate node id: {node.id}")
            self._index[node.id] = i
        self._adjacency = None

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._index

    def index_of(self, node_id: str) -> int:
        """Position of `node_id` in the node list."""
        try:
            return self._index[node_id]
        except KeyError:
            raise InvalidReferenceError(f"Unknown node id: {node_id}") from None

    def node(self, node_id: str) -> Node:
        """Look up a node by id."""
        return self.nodes[self.index_of(node_id)]

    def validate(self) -> None:
        """Check that every edge joins two distinct, existing nodes."""
        for edge in self.edges:
            for endpoint in (edge.source, edge.target):
                if endpoint not in self:
                    raise InvalidReferenceError(
                        f"Edge ({edge.source}, {edge.target}) references unknown node {endpoint}"
                    )
            if edge.source == edge.target:
                raise InvalidReferenceError(f"Self loop on node {edge.source}")

    def edge_indices(self) -> Tuple[np.ndarray, np.ndarray]:
        """Source and target node positions for every edge."""
        src = np.fromiter((self._index[e.source] for e in self.edges), dtype=np.int64, count=len(self.edges))
        dst = np.fromiter((self._index[e.target] for e in self.edges), dtype=np.int64, count=len(self.edges))
        return src, dst

    def adjacency(self) -> sparse.csr_matrix:
        """Symmetric adjacency matrix whose entries count parallel edges."""
        if self._adjacency is None:
            n = len(self.nodes)
            src, dst = self.edge_indices()
            rows = np.concatenate([src, dst])
            cols = np.concatenate([dst, src])
            data = np.ones(len(rows), dtype=np.int64)
            # tocsr() sums duplicate entries into multiplicities
            self._adjacency = sparse.coo_matrix((data, (rows, cols)), shape=(n, n)).tocsr()
        return self._adjacency

    def states(self) -> List[NodeState]:
        return [node.state for node in self.nodes]

    def counts(self) -> Tuple[int, int, int]:
        """Number of (susceptible, infected, recovered) nodes."""
        s = i = r = 0
        for node in self.nodes:
            if node.state is NodeState.SUSCEPTIBLE:
                s += 1
            elif node.state is NodeState.INFECTED:
                i += 1
            else:
                r += 1
        return s, i, r

    def to_dict(self) -> dict:
        """Read-only snapshot of nodes and edges."""
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }

    def to_networkx(self) -> nx.MultiGraph:
        """MultiGraph view with node attributes, for layout and interop."""
        G = nx.MultiGraph()
        for node in self.nodes:
            G.add_node(
                node.id,
                group=node.group,
                state=node.state.value,
                degree=node.degree,
                influence=node.influence,
            )
        G.add_edges_from((e.source, e.target) for e in self.edges)
        return G

    @classmethod
    def from_dict(cls, data: dict) -> "Graph":
        """Load an externally supplied graph and validate it.

        Accepts edges under either "edges" or "links". Degrees missing from
        the node records are computed from the edge list; supplied degrees
        must agree with it.
        """
        raw_nodes = data.get("nodes") or []
        raw_edges = data.get("edges", data.get("links")) or []

        nodes = [
            Node(
                id=str(item["id"]),
                group=str(item.get("group", "")),
                state=NodeState(item.get("state", NodeState.SUSCEPTIBLE.value)),
                degree=int(item.get("degree", 0)),
                influence=float(item.get("influence", 0.0)),
            )
            for item in raw_nodes
        ]
        edges = [Edge(str(item["source"]), str(item["target"])) for item in raw_edges]

        graph = cls(nodes=nodes, edges=edges)
        graph.validate()

        degrees = np.asarray(graph.adjacency().sum(axis=1)).ravel()
        for item, node, degree in zip(raw_nodes, graph.nodes, degrees):
            if "degree" in item and node.degree != degree:
                raise InvalidParameterError(
                    f"Node {node.id} declares degree {node.degree} but has {degree} edges"
                )
            node.degree = int(degree)

        return graph
