"""
EduGraph Simulation Package

A Python package for simulating an SIR epidemic spreading over a synthetic
classroom contact network with class (cluster) structure, plus the degree
rankings used to spot the students most likely to bridge classes.
"""

__version__ = "0.1.0"
__author__ = "Author"

from edugraph.config import Config
from edugraph.graph import Edge, Graph, Node, NodeState
from edugraph.graph_generation import generate_graph
from edugraph.analytics import RiskLevel, risk_label, top_by_degree
from edugraph.simulate_sir import EpidemicEngine, SIRCounts
from edugraph.context import SimulationContext

__all__ = [
    "Config",
    "Edge",
    "Graph",
    "Node",
    "NodeState",
    "generate_graph",
    "RiskLevel",
    "risk_label",
    "top_by_degree",
    "EpidemicEngine",
    "SIRCounts",
    "SimulationContext",
]
