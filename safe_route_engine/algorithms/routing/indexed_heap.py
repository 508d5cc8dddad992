"""
Binary min-heap with an item -> slot index for O(log n) decrease-key.
"""

from typing import Dict, Generic, Hashable, List, Tuple, TypeVar

T = TypeVar('T', bound=Hashable)


class IndexedMinHeap(Generic[T]):
    """
    Priority queue keyed by hashable items, lowest priority first.

    _positions[item] is always the slot of item in _heap; every swap goes
    through _swap so the two stay in step.
    """

    def __init__(self):
        self._heap: List[Tuple[float, T]] = []
        self._positions: Dict[T, int] = {}

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def __contains__(self, item: T) -> bool:
        return item in self._positions

    def priority(self, item: T) -> float:
        return self._heap[self._positions[item]][0]

    def peek(self) -> Tuple[T, float]:
        if not self._heap:
            raise IndexError("peek from an empty heap")
        priority, item = self._heap[0]
        return item, priority

    def push(self, item: T, priority: float) -> None:
        """Insert item, or change its priority if it is already queued."""
        if item in self._positions:
            self.change_priority(item, priority)
            return

        self._heap.append((priority, item))
        self._positions[item] = len(self._heap) - 1
        self._sift_up(len(self._heap) - 1)

    def pop(self) -> Tuple[T, float]:
        """Remove and return (item, priority) with the lowest priority."""
        if not self._heap:
            raise IndexError("pop from an empty heap")

        self._swap(0, len(self._heap) - 1)
        priority, item = self._heap.pop()
        del self._positions[item]

        if self._heap:
            self._sift_down(0)
        return item, priority

    def decrease_key(self, item: T, priority: float) -> None:
        """
        Lower the priority of a queued item.

        Raises:
            KeyError: If item is not queued
            ValueError: If priority is higher than the current one
        """
        slot = self._positions[item]
        current = self._heap[slot][0]
        if priority > current:
            raise ValueError(f"New priority {priority} is higher than current {current}")
        self._heap[slot] = (priority, item)
        self._sift_up(slot)

    def change_priority(self, item: T, priority: float) -> None:
        """Set the priority of a queued item in either direction."""
        slot = self._positions[item]
        current = self._heap[slot][0]
        self._heap[slot] = (priority, item)
        if priority < current:
            self._sift_up(slot)
        else:
            self._sift_down(slot)

    def check_invariants(self) -> bool:
        """True if heap order holds and every item's recorded slot is correct."""
        if len(self._positions) != len(self._heap):
            return False
        for slot, (priority, item) in enumerate(self._heap):
            if self._positions.get(item) != slot:
                return False
            parent = (slot - 1) // 2
            if slot > 0 and self._heap[parent][0] > priority:
                return False
        return True

    def _swap(self, i: int, j: int) -> None:
        heap = self._heap
        heap[i], heap[j] = heap[j], heap[i]
        self._positions[heap[i][1]] = i
        self._positions[heap[j][1]] = j

    def _sift_up(self, slot: int) -> None:
        while slot > 0:
            parent = (slot - 1) // 2
            if self._heap[slot][0] >= self._heap[parent][0]:
                break
            self._swap(slot, parent)
            slot = parent

    def _sift_down(self, slot: int) -> None:
        size = len(self._heap)
        while True:
            left = 2 * slot + 1
            right = left + 1
            smallest = slot
            if left < size and self._heap[left][0] < self._heap[smallest][0]:
                smallest = left
            if right < size and self._heap[right][0] < self._heap[smallest][0]:
                smallest = right
            if smallest == slot:
                break
            self._swap(slot, smallest)
            slot = smallest
