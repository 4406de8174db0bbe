"""
Firefighter problem simulation on road graphs.

Fire ignites at random root nodes and spreads along weighted edges, while a
containment strategy defends a bounded number of nodes at fixed intervals.
"""

from .graph import Coords, Edge, Graph, GraphParseError, GridBounds, Node, parse_graph
from .heap import IndexedMinHeap
from .dijkstra import INFINITY, distances_from_roots, run_dijkstra
from .node_data import NodeDataStore, NodeRecord
from .settings import SimulationSettings
from .strategy import (
    STRATEGIES,
    GreedyStrategy,
    MinDistanceGroupStrategy,
    PriorityStrategy,
    Strategy,
    build_strategy,
)
from .metrics import SimulationSummary, StepMetadata
from .model import FirefighterModel
from .batch import simulate_many

__version__ = "0.1.0"

__all__ = [
    "Coords",
    "Edge",
    "Graph",
    "GraphParseError",
    "GridBounds",
    "Node",
    "parse_graph",
    "IndexedMinHeap",
    "INFINITY",
    "distances_from_roots",
    "run_dijkstra",
    "NodeDataStore",
    "NodeRecord",
    "SimulationSettings",
    "STRATEGIES",
    "GreedyStrategy",
    "MinDistanceGroupStrategy",
    "PriorityStrategy",
    "Strategy",
    "build_strategy",
    "SimulationSummary",
    "StepMetadata",
    "FirefighterModel",
    "simulate_many",
]
