#!/usr/bin/env python
"""Simple demonstration of the classroom epidemic simulation."""

from pathlib import Path
import sys

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from edugraph.config import Config
from edugraph.context import SimulationContext
from edugraph.scheduler import ManualTickSource
from edugraph.viz import plot_graph, plot_sir_history


def demo_toy_chain():
    """Demonstrate the deterministic three-student chain."""
    print("\n" + "=" * 60)
    print("DEMO 1: Toy Chain (A - B - C, beta=1, gamma=0)")
    print("=" * 60)

    from edugraph.graph import Graph

    graph = Graph.from_dict(
        {
            "nodes": [{"id": "A", "group": "9A"}, {"id": "B", "group": "9A"}, {"id": "C", "group": "9A"}],
            "edges": [{"source": "A", "target": "B"}, {"source": "B", "target": "C"}],
        }
    )
    ctx = SimulationContext(Config.toy_chain(), graph=graph, tick_source=ManualTickSource())
    ctx.set_params(1.0, 0.0)
    ctx.seed_node("A")

    for _ in range(2):
        counts = ctx.step()
        states = {n["id"]: n["state"] for n in ctx.get_graph()["nodes"]}
        print(f"t={counts.step}: {states}")


def demo_classroom():
    """Demonstrate a full run on the default 120-student network."""
    print("\n" + "=" * 60)
    print("DEMO 2: Classroom Network (N=120, 5 classes)")
    print("=" * 60)

    config = Config(seed=42)
    ctx = SimulationContext(config, tick_source=ManualTickSource())

    summary = ctx.summary()
    print(f"Students: {summary['node_count']}, friendships: {summary['edge_count']}")
    print(f"Mean degree: {summary['mean_degree']:.2f}")

    print("\nTop bridges:")
    for row in ctx.bridge_table():
        print(f"  {row['id']:<14} degree={row['degree']:<3} influence={row['influence']:.1f}/10  {row['risk']}")

    history = ctx.run_to_completion()
    metrics = ctx.run_metrics()
    print(f"\nEpidemic ended after {metrics.total_steps} steps")
    print(f"Peak infected: {metrics.peak_infected} at step {metrics.peak_step}")
    print(f"Attack rate: {metrics.attack_rate:.1%}")

    output_dir = Path("runs/demo")
    plot_sir_history(history, output_path=output_dir / "sir_history.png")
    plot_graph(ctx.graph, output_path=output_dir / "graph.html", seed=config.seed)


if __name__ == "__main__":
    demo_toy_chain()
    demo_classroom()
