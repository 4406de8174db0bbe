"""Containment strategies deciding which nodes the firefighters defend.

Every strategy defends at most ``settings.num_ffs`` undefended nodes per call
of `Strategy.execute` and never touches burning or defended nodes.

Ranking rules:

- ``greedy``: frontier nodes (undefended out-neighbours of burning nodes),
  ranked by the number of nodes a defender there protects (the node plus its
  undefended out-neighbours), then by earliest fire arrival, then by node id.
- ``min_distance_group``: nodes grouped by their distance from the nearest
  root. Each round defends nodes of the closest group that still has
  undefended nodes, in node id order, never mixing two groups in one round.
- ``priority``: nodes queued by (fire arrival tick from the nearest root,
  highest degree, node id), where every edge takes at least one tick. Nodes
  the fire should already have reached are skipped.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import defaultdict, deque
from typing import Iterable

from .dijkstra import INFINITY, distances_from_roots
from .graph import Graph
from .heap import IndexedMinHeap
from .node_data import NodeDataStore
from .settings import SimulationSettings

logger = logging.getLogger(__name__)


class Strategy(ABC):
    """Base class for containment strategies."""

    name: str = ""

    def __init__(self, graph: Graph):
        self.graph = graph

    def precompute(self, roots: Iterable[int], settings: SimulationSettings) -> None:
        """Prepare the strategy once the fire roots are known.

        Called exactly once, right after the roots were ignited.
        """

    @abstractmethod
    def execute(self, settings: SimulationSettings, node_data: NodeDataStore, global_time: int) -> list[int]:
        """Defend up to `settings.num_ffs` nodes at `global_time`.

        Returns:
            Ids of the nodes defended in this round.
        """

    def _defend(self, nodes: list[int], node_data: NodeDataStore, global_time: int) -> list[int]:
        if nodes:
            node_data.mark_defended(nodes, global_time)
            logger.debug(f"{self.name}: defending nodes {nodes} at time {global_time}")
        return nodes

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.graph!r})"


class GreedyStrategy(Strategy):
    """Defend the frontier nodes that shield the most undefended nodes."""

    name = "greedy"

    def execute(self, settings, node_data, global_time):
        graph = self.graph

        # Earliest time the fire would cross into each frontier node
        arrival: dict[int, int] = {}
        for record in node_data.burning.values():
            for edge in graph.out_edges(record.node_id):
                if node_data.is_undefended(edge.tgt):
                    t = record.time + max(edge.dist, 1)
                    if t < arrival.get(edge.tgt, INFINITY):
                        arrival[edge.tgt] = t

        if not arrival:
            return []

        protected = {
            node_id: 1 + len({
                e.tgt for e in graph.out_edges(node_id)
                if e.tgt != node_id and node_data.is_undefended(e.tgt)
            })
            for node_id in arrival
        }
        ranked = sorted(arrival, key=lambda v: (-protected[v], arrival[v], v))
        return self._defend(ranked[:settings.num_ffs], node_data, global_time)


class MinDistanceGroupStrategy(Strategy):
    """Defend nodes group by group in increasing distance from the roots."""

    name = "min_distance_group"

    def __init__(self, graph: Graph):
        super().__init__(graph)
        self._groups: deque[deque[int]] = deque()

    @property
    def groups(self) -> list[list[int]]:
        """Remaining scheduled groups, closest first."""
        return [list(group) for group in self._groups]

    def precompute(self, roots, settings):
        roots = set(roots)
        distances = distances_from_roots(self.graph, roots)

        groups: dict[int, list[int]] = defaultdict(list)
        for node_id in range(self.graph.num_nodes):
            dist = int(distances[node_id])
            if dist == INFINITY or node_id in roots:
                continue
            groups[dist].append(node_id)

        self._groups = deque(deque(groups[dist]) for dist in sorted(groups))
        logger.debug(f"{self.name}: scheduled {len(self._groups)} distance groups")

    def execute(self, settings, node_data, global_time):
        chosen: list[int] = []
        while self._groups:
            group = self._groups[0]
            while group and len(chosen) < settings.num_ffs:
                node_id = group.popleft()
                if node_data.is_undefended(node_id):
                    chosen.append(node_id)
            if not group:
                self._groups.popleft()
            if chosen:
                break
        return self._defend(chosen, node_data, global_time)


class PriorityStrategy(Strategy):
    """Defend the nodes the fire will reach soonest."""

    name = "priority"

    def __init__(self, graph: Graph):
        super().__init__(graph)
        self._distances: list[int] = []
        self._keys: list[tuple[int, int, int]] = []
        self._queue = IndexedMinHeap()

    def __len__(self) -> int:
        return len(self._queue)

    def precompute(self, roots, settings):
        roots = set(roots)
        graph = self.graph
        # Fire arrival ticks: a weight 0 edge still takes one tick to cross
        self._distances = [int(d) for d in distances_from_roots(graph, roots, min_weight=1)]
        self._keys = [
            (dist, -graph.degree(node_id), node_id)
            for node_id, dist in enumerate(self._distances)
        ]

        self._queue = IndexedMinHeap()
        for node_id, dist in enumerate(self._distances):
            if dist != INFINITY and node_id not in roots:
                self._queue.push(node_id, self._keys)
        logger.debug(f"{self.name}: queued {len(self._queue)} nodes")

    def execute(self, settings, node_data, global_time):
        chosen: list[int] = []
        while self._queue and len(chosen) < settings.num_ffs:
            node_id = self._queue.pop(self._keys)
            # Dropped for good: the state of a node never reverts and time only grows
            if node_data.is_undefended(node_id) and self._distances[node_id] >= global_time:
                chosen.append(node_id)
        return self._defend(chosen, node_data, global_time)


STRATEGIES: dict[str, type[Strategy]] = {
    cls.name: cls for cls in (GreedyStrategy, MinDistanceGroupStrategy, PriorityStrategy)
}


def build_strategy(name: str, graph: Graph) -> Strategy:
    """Create the strategy registered under `name` for `graph`."""
    try:
        cls = STRATEGIES[name]
    except KeyError:
        logger.error(f"Unknown strategy {name!r}")
        raise ValueError(
            f"Unknown strategy {name!r}, expected one of {', '.join(sorted(STRATEGIES))}"
        ) from None
    return cls(graph)
