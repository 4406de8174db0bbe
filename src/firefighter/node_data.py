"""Burning and defended node bookkeeping for one simulation."""

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class NodeRecord:
    """Tick at which a node started burning or got defended."""

    node_id: int
    time: int


class NodeDataStore:
    """Storage for the burning and defended nodes of a simulation.

    A node is in at most one of the two maps and never leaves it again, so
    the state of any node at any past tick can be answered from the records.
    """

    def __init__(self):
        self.burning: dict[int, NodeRecord] = {}
        self.defended: dict[int, NodeRecord] = {}

    @property
    def num_burning(self) -> int:
        return len(self.burning)

    @property
    def num_defended(self) -> int:
        return len(self.defended)

    def is_root(self, node_id: int) -> bool:
        """Is node `node_id` a fire root?"""
        record = self.burning.get(node_id)
        return record is not None and record.time == 0

    def is_burning(self, node_id: int) -> bool:
        return node_id in self.burning

    def is_defended(self, node_id: int) -> bool:
        return node_id in self.defended

    def is_burning_by(self, node_id: int, time: int) -> bool:
        """Is node `node_id` burning by time `time`?"""
        record = self.burning.get(node_id)
        return record is not None and record.time <= time

    def is_defended_by(self, node_id: int, time: int) -> bool:
        """Is node `node_id` defended by time `time`?"""
        record = self.defended.get(node_id)
        return record is not None and record.time <= time

    def count_burning_by(self, time: int) -> int:
        return sum(1 for record in self.burning.values() if record.time <= time)

    def count_defended_by(self, time: int) -> int:
        return sum(1 for record in self.defended.values() if record.time <= time)

    def is_undefended(self, node_id: int) -> bool:
        """True if the node is neither burning nor defended."""
        return node_id not in self.burning and node_id not in self.defended

    def mark_burning(self, nodes: Iterable[int], time: int) -> None:
        for node_id in nodes:
            assert self.is_undefended(node_id), f"Node {node_id} is already burning or defended"
            self.burning[node_id] = NodeRecord(node_id, time)

    def mark_defended(self, nodes: Iterable[int], time: int) -> None:
        for node_id in nodes:
            assert self.is_undefended(node_id), f"Node {node_id} is already burning or defended"
            self.defended[node_id] = NodeRecord(node_id, time)

    def burning_records(self) -> list[NodeRecord]:
        """Records of all burning nodes, ordered by node id."""
        return [self.burning[node_id] for node_id in sorted(self.burning)]

    def burning_at(self, time: int) -> list[int]:
        """Ids of the nodes that caught fire exactly at `time`."""
        return sorted(r.node_id for r in self.burning.values() if r.time == time)

    def defended_at(self, time: int) -> list[int]:
        """Ids of the nodes that got defended exactly at `time`."""
        return sorted(r.node_id for r in self.defended.values() if r.time == time)
