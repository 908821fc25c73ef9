"""Ranking and summary analytics over a generated contact graph."""

from enum import Enum
from typing import Dict, List

import numpy as np

from edugraph.errors import InvalidParameterError
from edugraph.graph import Graph, Node

HIGH_RISK_DEGREE = 8


class RiskLevel(str, Enum):
    """Spreading risk label shown in the bridge table."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"


def top_by_degree(graph: Graph, k: int) -> List[Node]:
    """
    Return the k nodes with the highest degree.

    Python's sort is stable, so ties keep their insertion order.
    """
    if k < 0:
        raise InvalidParameterError(f"k must be non-negative, got {k}")
    return sorted(graph.nodes, key=lambda n: n.degree, reverse=True)[:k]


def risk_label(node: Node, threshold: int = HIGH_RISK_DEGREE) -> RiskLevel:
    """HIGH if the node has more than `threshold` contacts, else MEDIUM."""
    return RiskLevel.HIGH if node.degree > threshold else RiskLevel.MEDIUM


def influence_score(node: Node) -> float:
    """Influence rescaled to a score out of 10, one decimal place."""
    return round(node.influence * 10, 1)


def bridge_table(graph: Graph, k: int = 8, threshold: int = HIGH_RISK_DEGREE) -> List[Dict]:
    """Rows for the top-k bridge table: id, degree, influence score, risk."""
    return [
        {
            "id": node.id,
            "degree": node.degree,
            "influence": influence_score(node),
            "risk": risk_label(node, threshold).value,
        }
        for node in top_by_degree(graph, k)
    ]


def graph_summary(graph: Graph) -> Dict:
    """
    Summarize graph composition.

    Returns:
        Dictionary with node/edge counts, mean degree, cluster sizes and
        intra/inter-cluster edge counts
    """
    N = len(graph)
    groups = np.array([node.group for node in graph.nodes], dtype=object)
    src, dst = graph.edge_indices()
    intra = int(np.sum(groups[src] == groups[dst])) if len(src) else 0

    cluster_sizes: Dict[str, int] = {}
    for node in graph.nodes:
        cluster_sizes[node.group] = cluster_sizes.get(node.group, 0) + 1

    degrees = [node.degree for node in graph.nodes]
    return {
        "node_count": N,
        "edge_count": len(graph.edges),
        "mean_degree": float(np.mean(degrees)) if degrees else 0.0,
        "max_degree": max(degrees) if degrees else 0,
        "cluster_sizes": cluster_sizes,
        "intra_cluster_edges": intra,
        "inter_cluster_edges": len(graph.edges) - intra,
    }
