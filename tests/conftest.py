import sys
from pathlib import Path

import pytest


def pytest_configure() -> None:
    """Ensure `src/` is on sys.path so tests can import `firefighter.*`.

    This repo uses the common `src/` layout but is not necessarily installed as a package
    in the active environment.
    """

    project_root = Path(__file__).resolve().parents[1]
    src_dir = project_root / "src"
    if str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


@pytest.fixture
def toy_graph_path():
    """Path of the small sample graph shipped in `data/`."""
    return Path(__file__).resolve().parents[1] / "data" / "toy.fmi"


@pytest.fixture
def toy_graph(toy_graph_path):
    from firefighter.graph import Graph

    return Graph.from_file(toy_graph_path)


@pytest.fixture
def make_graph():
    """Build a graph from a node count and (src, tgt, dist) triples."""
    from firefighter.graph import Edge, Graph, Node

    def _make(num_nodes, edges):
        nodes = [Node(id=i, lat=48.0 + i * 0.001, lon=9.0 + i * 0.002) for i in range(num_nodes)]
        return Graph.from_edges(nodes, [Edge(*e) for e in edges])

    return _make


@pytest.fixture
def path_graph(make_graph):
    """0 -> 1 (2) -> 2 (3) -> 3 (1)"""
    return make_graph(4, [(0, 1, 2), (1, 2, 3), (2, 3, 1)])


@pytest.fixture
def settings_factory():
    from firefighter.settings import SimulationSettings

    def _settings(**overrides):
        values = dict(
            graph_name="test",
            strategy_name="greedy",
            num_roots=1,
            num_ffs=1,
            strategy_every=1,
        )
        values.update(overrides)
        return SimulationSettings(**values)

    return _settings
