"""Graph generation for clustered classroom contact networks."""

import numpy as np
from typing import Optional, Sequence
from loguru import logger

from edugraph.config import Config
from edugraph.errors import InvalidParameterError
from edugraph.graph import Edge, Graph, Node


def assign_clusters(node_count: int, cluster_labels: Sequence[str]) -> np.ndarray:
    """
    Assign each node index to a cluster label index.

    Nodes are split into contiguous blocks of size floor(N / K). Indices past
    the last full block are clamped to the final label, so remainder nodes
    join the last cluster.

    Args:
        node_count: Number of nodes
        cluster_labels: Ordered cluster labels

    Returns:
        Array of length node_count with the label index of each node
    """
    K = len(cluster_labels)
    block = max(1, node_count // K)
    return np.minimum(np.arange(node_count) // block, K - 1)


def generate_graph(
    node_count: int,
    cluster_labels: Sequence[str],
    p_intra: float = 0.12,
    p_inter: float = 0.003,
    double_draw: bool = True,
    id_prefix: str = "Student",
    rng: Optional[np.random.RandomState] = None,
) -> Graph:
    """
    Generate a synthetic clustered contact graph.

    Args:
        node_count: Total number of nodes
        cluster_labels: Ordered cluster labels (e.g. class names)
        p_intra: Edge probability for a pair in the same cluster
        p_inter: Edge probability for a pair in different clusters
        double_draw: Draw once per ordered pair (i, j); otherwise once per i < j
        id_prefix: Node ids are "<id_prefix>-<index>"
        rng: Random state (default: unseeded)

    Returns:
        Graph with degree and influence set on every node
    """
    if node_count <= 0:
        raise InvalidParameterError(f"node_count must be positive, got {node_count}")
    if len(cluster_labels) == 0:
        raise InvalidParameterError("cluster_labels must not be empty")
    for name, p in (("p_intra", p_intra), ("p_inter", p_inter)):
        if not 0.0 <= p <= 1.0:
            raise InvalidParameterError(f"{name} must be in [0, 1], got {p}")

    if rng is None:
        rng = np.random.RandomState()

    N, K = node_count, len(cluster_labels)
    logger.info(
        f"Generating graph: N={N}, K={K}, p_intra={p_intra}, p_inter={p_inter}, "
        f"double_draw={double_draw}"
    )

    node_to_cluster = assign_clusters(N, cluster_labels)
    influence = rng.uniform(0.0, 0.5, size=N)

    nodes = [
        Node(
            id=f"{id_prefix}-{i}",
            group=cluster_labels[node_to_cluster[i]],
            influence=float(influence[i]),
        )
        for i in range(N)
    ]

    # One uniform draw per ordered pair, row by row like a nested i/j loop
    row_chunks, col_chunks = [], []
    for i in range(N):
        p_row = np.where(node_to_cluster == node_to_cluster[i], p_intra, p_inter)
        hits = np.flatnonzero(rng.rand(N) < p_row)
        hits = hits[hits != i] if double_draw else hits[hits > i]
        row_chunks.append(np.full(len(hits), i, dtype=np.int64))
        col_chunks.append(hits)

    rows = np.concatenate(row_chunks)
    cols = np.concatenate(col_chunks)
    edges = [Edge(nodes[i].id, nodes[j].id) for i, j in zip(rows, cols)]

    degrees = np.bincount(rows, minlength=N) + np.bincount(cols, minlength=N)
    for node, degree in zip(nodes, degrees):
        node.degree = int(degree)

    graph = Graph(nodes=nodes, edges=edges)

    mean_degree = degrees.mean() if N else 0.0
    logger.info(f"Generated graph: {len(edges)} edges, mean_degree={mean_degree:.2f}")

    return graph


def generate_graph_from_config(
    config: Config, rng: Optional[np.random.RandomState] = None
) -> Graph:
    """Generate a graph using the graph section of a Config."""
    if rng is None:
        rng = np.random.RandomState(config.seed)
    g = config.graph
    return generate_graph(
        node_count=g.node_count,
        cluster_labels=g.cluster_labels,
        p_intra=g.p_intra,
        p_inter=g.p_inter,
        double_draw=g.double_draw,
        id_prefix=g.id_prefix,
        rng=rng,
    )
