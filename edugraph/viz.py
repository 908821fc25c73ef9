"""Visualization utilities for graph snapshots and S/I/R curves."""

import networkx as nx
import matplotlib.pyplot as plt
import plotly.graph_objects as go
from typing import List, Optional
from pathlib import Path
from loguru import logger

from edugraph.analytics import influence_score
from edugraph.graph import Graph, Node, NodeState
from edugraph.simulate_sir import SIRCounts

CLUSTER_COLORS = {
    "9A": "#2a4494",
    "9B": "#3fa9f5",
    "10A": "#ed1c24",
    "10B": "#f59e0b",
    "11A": "#10b981",
}
DEFAULT_COLOR = "#94a3b8"
INFECTED_COLOR = "#ed1c24"
RECOVERED_COLOR = "#10b981"
SUSCEPTIBLE_LINE_COLOR = "#3fa9f5"


def node_color(node: Node) -> str:
    """State color for infected/recovered nodes, cluster color otherwise."""
    if node.state is NodeState.INFECTED:
        return INFECTED_COLOR
    if node.state is NodeState.RECOVERED:
        return RECOVERED_COLOR
    return CLUSTER_COLORS.get(node.group, DEFAULT_COLOR)


def plot_sir_history(
    history: List[SIRCounts],
    title: str = "SIR Dynamics",
    output_path: Optional[Path] = None,
) -> None:
    """
    Plot susceptible, infected and recovered counts over time.

    Args:
        history: Counts appended once per tick
        title: Plot title
        output_path: Path to save figure (shown interactively if None)
    """
    steps = [c.step for c in history]

    fig, ax = plt.subplots(figsize=(10, 5))
    for values, color, label in (
        ([c.s for c in history], SUSCEPTIBLE_LINE_COLOR, "Susceptible"),
        ([c.i for c in history], INFECTED_COLOR, "Infected"),
        ([c.r for c in history], RECOVERED_COLOR, "Recovered"),
    ):
        ax.plot(steps, values, color=color, linewidth=2, label=label)
        ax.fill_between(steps, values, color=color, alpha=0.1)

    ax.set_xlabel("Time (steps)")
    ax.set_ylabel("Number of Students")
    ax.set_ylim(bottom=0)
    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.grid(True, alpha=0.3)
    ax.legend()

    plt.tight_layout()

    if output_path:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        plt.savefig(output_path, dpi=150, bbox_inches="tight")
        logger.info(f"Saved plot to {output_path}")
    else:
        plt.show()

    plt.close(fig)


def plot_graph(
    graph: Graph,
    title: str = "Classroom Contact Network",
    output_path: Optional[Path] = None,
    seed: Optional[int] = None,
) -> go.Figure:
    """
    Plot the contact graph with a spring layout, colored by state/cluster.

    Args:
        graph: Graph to draw
        title: Plot title
        output_path: Path to save an HTML figure (not shown if given)
        seed: Layout seed

    Returns:
        The plotly figure
    """
    G = nx.Graph(graph.to_networkx())
    pos = nx.spring_layout(G, seed=seed)

    edge_x, edge_y = [], []
    for edge in graph.edges:
        x0, y0 = pos[edge.source]
        x1, y1 = pos[edge.target]
        edge_x += [x0, x1, None]
        edge_y += [y0, y1, None]

    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=edge_x,
            y=edge_y,
            mode="lines",
            line=dict(width=1, color="#cbd5e1"),
            opacity=0.4,
            hoverinfo="none",
            name="Friendships",
        )
    )
    fig.add_trace(
        go.Scatter(
            x=[pos[n.id][0] for n in graph.nodes],
            y=[pos[n.id][1] for n in graph.nodes],
            mode="markers",
            marker=dict(
                size=[6 + n.degree * 0.4 for n in graph.nodes],
                color=[node_color(n) for n in graph.nodes],
                line=dict(width=2, color="#fff"),
            ),
            text=[
                f"{n.id}<br>Class: {n.group}<br>Friends: {n.degree}"
                f"<br>Influence: {influence_score(n):.1f}/10"
                for n in graph.nodes
            ],
            hoverinfo="text",
            name="Students",
        )
    )

    fig.update_layout(
        title=title,
        showlegend=False,
        xaxis=dict(visible=False),
        yaxis=dict(visible=False),
        height=600,
        width=800,
    )

    if output_path:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig.write_html(str(output_path))
        logger.info(f"Saved graph figure to {output_path}")

    return fig
