"""Tests for the command line and plotting helpers."""

import matplotlib

matplotlib.use("Agg")

import numpy as np
from typer.testing import CliRunner

from edugraph.cli import app
from edugraph.graph import Node, NodeState
from edugraph.graph_generation import generate_graph
from edugraph.simulate_sir import EpidemicEngine
from edugraph.viz import (
    CLUSTER_COLORS,
    DEFAULT_COLOR,
    INFECTED_COLOR,
    RECOVERED_COLOR,
    node_color,
    plot_graph,
    plot_sir_history,
)

runner = CliRunner()


class TestCLI:
    """Test the Typer commands."""

    def test_stats(self):
        result = runner.invoke(app, ["stats", "--nodes", "30", "--seed", "1", "--top", "3"])
        assert result.exit_code == 0, result.output
        assert "Students: 30" in result.output
        assert "9A: 6" in result.output

    def test_run_terminates(self):
        result = runner.invoke(
            app, ["run", "--nodes", "30", "--seed", "3", "--beta", "0", "--gamma", "1"]
        )
        assert result.exit_code == 0, result.output
        assert "Steps: 1" in result.output
        assert "Final: S=29 R=1" in result.output

    def test_run_with_patient_zero_and_labels(self, tmp_path):
        result = runner.invoke(
            app,
            [
                "run", "--nodes", "20", "--label", "x", "--label", "y",
                "--seed", "4", "--patient-zero", "Student-5",
                "--output-dir", str(tmp_path),
            ],
        )
        assert result.exit_code == 0, result.output
        assert (tmp_path / "config.json").exists()
        assert (tmp_path / "sir_history.png").exists()
        assert (tmp_path / "graph.html").exists()


class TestViz:
    """Test plotting helpers."""

    def test_node_color(self):
        assert node_color(Node("a", "9A")) == CLUSTER_COLORS["9A"]
        assert node_color(Node("a", "12C")) == DEFAULT_COLOR
        assert node_color(Node("a", "9A", state=NodeState.INFECTED)) == INFECTED_COLOR
        assert node_color(Node("a", "9A", state=NodeState.RECOVERED)) == RECOVERED_COLOR

    def test_plot_sir_history(self, tmp_path):
        graph = generate_graph(40, ["9A", "9B"], rng=np.random.RandomState(0))
        engine = EpidemicEngine(graph, rng=np.random.RandomState(0))
        history = engine.run_to_completion(max_steps=200)

        output = tmp_path / "plots" / "sir.png"
        plot_sir_history(history, output_path=output)
        assert output.exists()

    def test_plot_graph(self, tmp_path):
        graph = generate_graph(25, ["9A", "9B"], rng=np.random.RandomState(1))
        output = tmp_path / "graph.html"
        fig = plot_graph(graph, output_path=output, seed=1)
        assert output.exists()
        assert len(fig.data) == 2
        assert len(fig.data[1].x) == 25
