"""Single-source shortest paths over a `Graph`."""

import logging
from typing import Iterable

import numpy as np

from .graph import Graph
from .heap import IndexedMinHeap

logger = logging.getLogger(__name__)

# Distance of nodes that cannot be reached from the source
INFINITY = int(np.iinfo(np.int64).max)


def run_dijkstra(graph: Graph, src_id: int, min_weight: int = 0) -> np.ndarray:
    """Run a one-to-all Dijkstra from the node with id `src_id`.

    Args:
        graph: Graph with non-negative integer edge weights.
        src_id: Id of the source node.
        min_weight: Lower bound applied to every edge weight. With 1 the
            distances are the ticks the fire needs, as it crosses at most one
            edge per tick.

    Returns:
        int64 array indexed by node id. Unreached nodes keep `INFINITY`.
    """
    if not 0 <= src_id < graph.num_nodes:
        raise IndexError(f"Source node {src_id} is not in the graph")

    offsets = graph.offsets
    edges = graph.edges

    distances = [INFINITY] * graph.num_nodes
    distances[src_id] = 0

    pq = IndexedMinHeap()
    pq.push(src_id, distances)

    while pq:
        node = pq.pop(distances)
        base = distances[node]

        for i in range(offsets[node], offsets[node + 1]):
            edge = edges[i]
            dist = base + max(edge.dist, min_weight)

            if dist < distances[edge.tgt]:
                distances[edge.tgt] = dist

                if pq.contains(edge.tgt):
                    pq.decrease_key(edge.tgt, distances)
                else:
                    pq.push(edge.tgt, distances)

    return np.asarray(distances, dtype=np.int64)


def distances_from_roots(graph: Graph, roots: Iterable[int], min_weight: int = 0) -> np.ndarray:
    """Distance from the nearest of `roots` for every node."""
    result = np.full(graph.num_nodes, INFINITY, dtype=np.int64)
    for root in roots:
        np.minimum(result, run_dijkstra(graph, root, min_weight), out=result)
    logger.debug(f"Computed root distances, {int(np.sum(result < INFINITY))} nodes reachable")
    return result
