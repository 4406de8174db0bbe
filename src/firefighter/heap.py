"""Binary min-heap over node ids with decrease-key support."""

from typing import Any, Sequence


class IndexedMinHeap:
    """Min-heap of node ids ordered by an external key sequence.

    Keys are not stored in the heap. Every operation receives the key sequence
    (usually the distance vector of a Dijkstra run) and reads ``keys[node]``.
    The caller owns the keys and must call `decrease_key` right after lowering
    the key of a queued node. Raising a queued node's key is not supported.
    """

    def __init__(self):
        self._heap: list[int] = []
        # node id -> slot in self._heap
        self._index: dict[int, int] = {}

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def __contains__(self, node: int) -> bool:
        return node in self._index

    def is_empty(self) -> bool:
        return not self._heap

    def contains(self, node: int) -> bool:
        return node in self._index

    def push(self, node: int, keys: Sequence[Any]) -> None:
        """Insert `node` with its current key and restore heap order."""
        assert node not in self._index, f"Node {node} is already queued"
        self._heap.append(node)
        self._index[node] = len(self._heap) - 1
        self._sift_up(len(self._heap) - 1, keys)

    def pop(self, keys: Sequence[Any]) -> int:
        """Remove and return the node with the minimal key.

        Raises:
            IndexError: If the heap is empty.
        """
        if not self._heap:
            raise IndexError("pop from an empty heap")

        top = self._heap[0]
        last = self._heap.pop()
        del self._index[top]
        if self._heap:
            self._heap[0] = last
            self._index[last] = 0
            self._sift_down(0, keys)
        return top

    def peek(self) -> int:
        if not self._heap:
            raise IndexError("peek into an empty heap")
        return self._heap[0]

    def decrease_key(self, node: int, keys: Sequence[Any]) -> None:
        """Move `node` up after its key has been lowered."""
        self._sift_up(self._index[node], keys)

    def _swap(self, i: int, j: int) -> None:
        heap = self._heap
        heap[i], heap[j] = heap[j], heap[i]
        self._index[heap[i]] = i
        self._index[heap[j]] = j

    def _sift_up(self, pos: int, keys: Sequence[Any]) -> None:
        heap = self._heap
        while pos > 0:
            parent = (pos - 1) // 2
            if keys[heap[pos]] < keys[heap[parent]]:
                self._swap(pos, parent)
                pos = parent
            else:
                break

    def _sift_down(self, pos: int, keys: Sequence[Any]) -> None:
        heap = self._heap
        size = len(heap)
        while True:
            left = 2 * pos + 1
            right = left + 1
            smallest = pos
            if left < size and keys[heap[left]] < keys[heap[smallest]]:
                smallest = left
            if right < size and keys[heap[right]] < keys[heap[smallest]]:
                smallest = right
            if smallest == pos:
                break
            self._swap(pos, smallest)
            pos = smallest
