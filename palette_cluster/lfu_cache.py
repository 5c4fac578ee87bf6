"""
Least-frequently-used cache with O(1) get, put and remove.

Entries live in an arena of nodes addressed by integer handles. Every
access frequency owns a doubly linked list of handles, most recently
touched first, so moving an entry to the next frequency and evicting the
least recently touched entry of the lowest frequency are both O(1).
"""

from dataclasses import dataclass
from typing import Any, Generic, Hashable, Optional, TypeVar

from .errors import ensure, is_positive_integer

K = TypeVar('K', bound=Hashable)
V = TypeVar('V')

NIL = -1


@dataclass
class _Node:
    key: Any
    value: Any
    frequency: int = 1
    prev: int = NIL
    next: int = NIL


@dataclass
class _Bucket:
    head: int = NIL  # most recently touched
    tail: int = NIL  # eviction candidate
    length: int = 0


class LFUCache(Generic[K, V]):
    """
    Bounded key-value map evicting the least frequently used entry.

    Ties within the lowest frequency go to the entry untouched the longest.

    Args:
        capacity: Maximum number of entries
    """

    def __init__(self, capacity: int):
        ensure(is_positive_integer(capacity), f"The capacity({capacity}) must be a positive integer")
        self.capacity = int(capacity)
        self._nodes: list[_Node] = []
        self._free: list[int] = []
        self._index: dict = {}
        self._buckets: dict[int, _Bucket] = {}
        self._min_frequency = 0

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, key) -> bool:
        return key in self._index

    def get(self, key: K) -> Optional[V]:
        """Return the cached value and count the access, or None on a miss."""
        handle = self._index.get(key)
        if handle is None:
            return None
        self._touch(handle)
        return self._nodes[handle].value

    def put(self, key: K, value: V) -> Optional[V]:
        """
        Insert or update an entry.

        Returns:
            The previous value for the key, or None if the key was new
        """
        handle = self._index.get(key)
        if handle is not None:
            node = self._nodes[handle]
            previous, node.value = node.value, value
            self._touch(handle)
            return previous

        if len(self._index) >= self.capacity:
            self._evict()

        handle = self._allocate(key, value)
        self._index[key] = handle
        self._link(handle, 1)
        self._min_frequency = 1
        return None

    def remove(self, key: K) -> bool:
        handle = self._index.pop(key, None)
        if handle is None:
            return False

        # The minimum frequency may go stale here. Only a full cache evicts,
        # and the put that refills it resets the minimum to 1.
        self._unlink(handle)
        self._release(handle)
        return True

    def clear(self) -> None:
        self._nodes.clear()
        self._free.clear()
        self._index.clear()
        self._buckets.clear()
        self._min_frequency = 0

    def _touch(self, handle: int) -> None:
        node = self._nodes[handle]
        frequency = node.frequency
        self._unlink(handle)
        if frequency == self._min_frequency and frequency not in self._buckets:
            self._min_frequency = frequency + 1
        self._link(handle, frequency + 1)

    def _evict(self) -> None:
        bucket = self._buckets[self._min_frequency]
        handle = bucket.tail
        del self._index[self._nodes[handle].key]
        self._unlink(handle)
        self._release(handle)

    def _allocate(self, key, value) -> int:
        if self._free:
            handle = self._free.pop()
            self._nodes[handle] = _Node(key, value)
        else:
            handle = len(self._nodes)
            self._nodes.append(_Node(key, value))
        return handle

    def _release(self, handle: int) -> None:
        node = self._nodes[handle]
        node.key = node.value = None
        self._free.append(handle)

    def _link(self, handle: int, frequency: int) -> None:
        node = self._nodes[handle]
        node.frequency = frequency
        bucket = self._buckets.setdefault(frequency, _Bucket())
        node.prev = NIL
        node.next = bucket.head
        if bucket.head != NIL:
            self._nodes[bucket.head].prev = handle
        bucket.head = handle
        if bucket.tail == NIL:
            bucket.tail = handle
        bucket.length += 1

    def _unlink(self, handle: int) -> None:
        node = self._nodes[handle]
        bucket = self._buckets[node.frequency]
        if node.prev != NIL:
            self._nodes[node.prev].next = node.next
        else:
            bucket.head = node.next
        if node.next != NIL:
            self._nodes[node.next].prev = node.prev
        else:
            bucket.tail = node.prev
        node.prev = node.next = NIL
        bucket.length -= 1
        if bucket.length == 0:
            del self._buckets[node.frequency]
