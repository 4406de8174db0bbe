"""Directed road graph in offsets (CSR) form and its text-file parser.

File layout::

    # comment lines
    <number of nodes>
    <number of edges>
    <id> <second id> <lat> <lon> ...      (one line per node)
    <src> <tgt> <dist> ...                (one line per edge, grouped by src)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

import numpy as np

logger = logging.getLogger(__name__)


class GraphParseError(ValueError):
    """Raised when a graph file cannot be read or is malformed."""

    def __init__(self, message: str, source: str = "<lines>", line_no: int | None = None):
        self.source = source
        self.line_no = line_no
        location = source if line_no is None else f"{source}:{line_no}"
        super().__init__(f"{location}: {message}")


@dataclass(frozen=True)
class GridBounds:
    """Minimal/maximal latitude and longitude of a set of nodes."""

    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    def contains(self, other: GridBounds) -> bool:
        """True if `other` lies completely within these bounds."""
        return (
            self.min_lat <= other.min_lat
            and self.max_lat >= other.max_lat
            and self.min_lon <= other.min_lon
            and self.max_lon >= other.max_lon
        )


@dataclass(frozen=True)
class Coords:
    lat: float
    lon: float


@dataclass(frozen=True)
class Node:
    """A graph node with id, latitude and longitude."""

    id: int
    lat: float
    lon: float

    def is_located_in(self, bounds: GridBounds) -> bool:
        return (
            bounds.min_lat <= self.lat <= bounds.max_lat
            and bounds.min_lon <= self.lon <= bounds.max_lon
        )


@dataclass(frozen=True)
class Edge:
    """A directed edge; `dist` is the number of ticks the fire needs to cross it."""

    src: int
    tgt: int
    dist: int


class Graph:
    """Immutable directed graph with nodes, edges and node offsets.

    The outgoing edges of node ``v`` are ``edges[offsets[v]:offsets[v + 1]]``.
    Instances are never modified after construction, so a single graph can be
    shared by any number of simulations, also across threads.
    """

    def __init__(self, nodes: Iterable[Node], edges: Iterable[Edge], offsets: Iterable[int]):
        self._nodes = tuple(nodes)
        self._edges = tuple(edges)
        self._offsets = np.asarray(list(offsets), dtype=np.int64)
        self._offsets.flags.writeable = False

        if len(self._offsets) != len(self._nodes) + 1:
            raise ValueError(
                f"Expected {len(self._nodes) + 1} offsets, got {len(self._offsets)}"
            )
        if self._offsets[0] != 0 or self._offsets[-1] != len(self._edges):
            raise ValueError(
                f"Offsets must start at 0 and end at {len(self._edges)}, "
                f"got {self._offsets[0]} and {self._offsets[-1]}"
            )

    @classmethod
    def from_edges(cls, nodes: Iterable[Node], edges: Iterable[Edge]) -> Graph:
        """Build a graph from nodes and edges, sorting the edges by source."""
        nodes = tuple(nodes)
        edges = sorted(edges, key=lambda e: e.src)
        return cls(nodes, edges, _build_offsets(edges, len(nodes)))

    @classmethod
    def from_file(cls, path: str | Path) -> Graph:
        """Create a graph from a file that contains node and edge data."""
        path = Path(path)
        try:
            with open(path, "r") as f:
                graph = parse_graph(f, source=str(path))
        except OSError as err:
            logger.error(f"Failed to read graph file {path}: {err}")
            raise GraphParseError(str(err), source=str(path)) from err
        except GraphParseError as err:
            logger.error(f"Failed to create graph from {path}: {err}")
            raise

        logger.info(f"Loaded graph {path.name} with {graph.num_nodes} nodes and {graph.num_edges} edges")
        return graph

    @property
    def nodes(self) -> tuple[Node, ...]:
        return self._nodes

    @property
    def edges(self) -> tuple[Edge, ...]:
        return self._edges

    @property
    def offsets(self) -> np.ndarray:
        return self._offsets

    @property
    def num_nodes(self) -> int:
        return len(self._nodes)

    @property
    def num_edges(self) -> int:
        return len(self._edges)

    def degree(self, node_id: int) -> int:
        """Number of outgoing edges of the node with id `node_id`."""
        return int(self._offsets[node_id + 1] - self._offsets[node_id])

    def out_edges(self, node_id: int) -> tuple[Edge, ...]:
        return self._edges[self._offsets[node_id]:self._offsets[node_id + 1]]

    def grid_bounds(self) -> GridBounds:
        """Minimal/maximal latitude and longitude over all nodes.

        All bounds are NaN for a graph without nodes.
        """
        if not self._nodes:
            return GridBounds(math.nan, math.nan, math.nan, math.nan)

        lats = np.fromiter((n.lat for n in self._nodes), dtype=float, count=len(self._nodes))
        lons = np.fromiter((n.lon for n in self._nodes), dtype=float, count=len(self._nodes))
        return GridBounds(
            min_lat=float(lats.min()),
            max_lat=float(lats.max()),
            min_lon=float(lons.min()),
            max_lon=float(lons.max()),
        )

    def center(self) -> Coords:
        gb = self.grid_bounds()
        return Coords(lat=(gb.min_lat + gb.max_lat) / 2, lon=(gb.min_lon + gb.max_lon) / 2)

    def __repr__(self) -> str:
        return f"Graph(num_nodes={self.num_nodes}, num_edges={self.num_edges})"


def _build_offsets(edges: Iterable[Edge], num_nodes: int) -> list[int]:
    """Offsets for edges already grouped by ascending source.

    Sources without edges get the running edge count, so the table stays
    non-decreasing.
    """
    offsets = [0] * (num_nodes + 1)
    last_src = -1
    count = 0
    for edge in edges:
        if edge.src > last_src:
            for j in range(last_src + 1, edge.src + 1):
                offsets[j] = count
            last_src = edge.src
        count += 1
    for j in range(last_src + 1, num_nodes + 1):
        offsets[j] = count
    return offsets


def _parse_count(line: str, what: str, source: str, line_no: int) -> int:
    try:
        value = int(line.strip())
    except ValueError as err:
        raise GraphParseError(f"Malformed {what}: {line.strip()!r}", source, line_no) from err
    if value < 0:
        raise GraphParseError(f"Negative {what}: {value}", source, line_no)
    return value


def parse_graph(lines: Iterable[str], source: str = "<lines>") -> Graph:
    """Parse node and edge data into a directed graph.

    Args:
        lines: Lines of a graph file (an open file works).
        source: Name used in error messages.

    Raises:
        GraphParseError: On malformed numbers, truncated input or edges whose
            endpoints are not valid node ids.
    """
    it: Iterator[tuple[int, str]] = enumerate(lines, start=1)

    def next_line(what: str) -> tuple[int, str]:
        try:
            return next(it)
        except StopIteration:
            raise GraphParseError(f"Unexpected EOF while parsing {what}", source) from None

    # Header: comments and blank lines before the node count
    while True:
        line_no, line = next_line("header")
        stripped = line.strip()
        if stripped and not stripped.startswith("#"):
            break

    num_nodes = _parse_count(line, "number of nodes", source, line_no)
    line_no, line = next_line("number of edges")
    num_edges = _parse_count(line, "number of edges", source, line_no)

    nodes = []
    for i in range(num_nodes):
        line_no, line = next_line("nodes")
        fields = line.split()
        if len(fields) < 4:
            raise GraphParseError("Unexpected EOL while parsing node", source, line_no)
        try:
            nodes.append(Node(id=i, lat=float(fields[2]), lon=float(fields[3])))
        except ValueError as err:
            raise GraphParseError(f"Malformed node coordinates: {line.strip()!r}", source, line_no) from err

    edges = []
    for _ in range(num_edges):
        line_no, line = next_line("edges")
        fields = line.split()
        if len(fields) < 3:
            raise GraphParseError("Unexpected EOL while parsing edge", source, line_no)
        try:
            edge = Edge(src=int(fields[0]), tgt=int(fields[1]), dist=int(fields[2]))
        except ValueError as err:
            raise GraphParseError(f"Malformed edge: {line.strip()!r}", source, line_no) from err

        if not (0 <= edge.src < num_nodes and 0 <= edge.tgt < num_nodes):
            raise GraphParseError(f"Edge {edge.src}->{edge.tgt} references an unknown node", source, line_no)
        if edge.dist < 0:
            raise GraphParseError(f"Negative edge weight {edge.dist}", source, line_no)
        edges.append(edge)

    return Graph(nodes, edges, _build_offsets(edges, num_nodes))
