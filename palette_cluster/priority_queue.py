"""
Binary heap priority queue ordered by a caller-supplied comparator.

The comparator follows the classic cmp protocol: negative when the first
element should leave the queue first, positive when the second should,
zero when they are equivalent. A max-heap is a min-heap over a reversed
comparator.
"""

import functools
import heapq
from typing import Callable, Generic, Iterator, Optional, TypeVar

E = TypeVar('E')

Comparator = Callable[[E, E], int]


def reverse(comparator: Comparator) -> Comparator:
    """Return a comparator with the opposite ordering."""
    return lambda element1, element2: comparator(element2, element1)


class PriorityQueue(Generic[E]):
    """Priority queue with O(log n) push/pop and O(1) peek."""

    def __init__(self, comparator: Comparator):
        self._key = functools.cmp_to_key(comparator)
        self._heap: list = []

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def __iter__(self) -> Iterator[E]:
        """Iterate in heap (array) order, not in priority order."""
        return (entry.obj for entry in self._heap)

    @property
    def size(self) -> int:
        return len(self._heap)

    @property
    def is_empty(self) -> bool:
        return not self._heap

    def push(self, element: E) -> None:
        heapq.heappush(self._heap, self._key(element))

    def pop(self) -> Optional[E]:
        """Remove and return the first element, or None when the queue is empty."""
        if not self._heap:
            return None
        return heapq.heappop(self._heap).obj

    def push_pop(self, element: E) -> E:
        """Push an element then pop the first one, in a single sift."""
        return heapq.heappushpop(self._heap, self._key(element)).obj

    def peek(self) -> Optional[E]:
        """Return the first element without removing it, or None when empty."""
        if not self._heap:
            return None
        return self._heap[0].obj

    def to_list(self) -> list[E]:
        return [entry.obj for entry in self._heap]

    def clear(self) -> None:
        self._heap.clear()
