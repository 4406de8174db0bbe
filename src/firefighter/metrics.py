from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from .graph import Coords, Graph, GridBounds
from .node_data import NodeDataStore


@dataclass(frozen=True)
class SimulationSummary:
    """Outcome of a finished (or running) simulation."""

    nodes_burned: int
    nodes_defended: int
    nodes_total: int
    end_time: int
    view_bounds: GridBounds
    view_center: Coords

    @property
    def burned_ratio(self) -> float:
        return 0.0 if self.nodes_total == 0 else self.nodes_burned / self.nodes_total


@dataclass(frozen=True)
class StepMetadata:
    """State of a simulation at one tick.

    The ``*_by`` fields are cumulative counts, the ``*_at`` fields list the
    nodes that changed state exactly at that tick.
    """

    time: int
    nodes_burned_by: int
    nodes_defended_by: int
    nodes_burned_at: list[int]
    nodes_defended_at: list[int]


def simulation_summary(graph: Graph, node_data: NodeDataStore, end_time: int) -> SimulationSummary:
    return SimulationSummary(
        nodes_burned=node_data.num_burning,
        nodes_defended=node_data.num_defended,
        nodes_total=graph.num_nodes,
        end_time=end_time,
        view_bounds=graph.grid_bounds(),
        view_center=graph.center(),
    )


def step_metadata(node_data: NodeDataStore, time: int) -> StepMetadata:
    return StepMetadata(
        time=time,
        nodes_burned_by=node_data.count_burning_by(time),
        nodes_defended_by=node_data.count_defended_by(time),
        nodes_burned_at=node_data.burning_at(time),
        nodes_defended_at=node_data.defended_at(time),
    )


def timeline(node_data: NodeDataStore, end_time: int) -> list[StepMetadata]:
    """Step metadata for every tick from 0 to `end_time` inclusive."""
    return [step_metadata(node_data, t) for t in range(end_time + 1)]


def time_of_arrival(node_data: NodeDataStore, num_nodes: int) -> np.ndarray:
    """Tick at which each node caught fire, NaN for nodes that never burned."""
    toa = np.full(num_nodes, np.nan, dtype=float)
    for record in node_data.burning.values():
        toa[record.node_id] = record.time
    return toa


def burned_mask(toa: Any) -> np.ndarray:
    """Convert a time-of-arrival vector to a burned/unburned boolean vector.

    NaN/inf values are treated as unburned.
    """
    return np.isfinite(np.asarray(toa, dtype=float))
