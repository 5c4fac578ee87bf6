"""
Append-only merge history of a hierarchical clustering.

A dendrogram for n leaves holds 2n - 1 steps. The n leaves come first
(child indices -1), every merge step references two earlier steps.
"""

from dataclasses import dataclass
from typing import Iterator, Optional

from .errors import StateError, ensure, is_positive_integer
from .priority_queue import PriorityQueue

NO_CHILD = -1


@dataclass(frozen=True)
class Step:
    """A leaf or a merge of two earlier steps."""
    label: int
    child_index1: int
    child_index2: int
    distance: float
    size: int

    @property
    def is_leaf(self) -> bool:
        return self.child_index1 == NO_CHILD and self.child_index2 == NO_CHILD


class Dendrogram:
    """
    Merge history with cuts into flat clusters.

    Args:
        capacity: Maximum number of steps, 2n - 1 for n leaves
    """

    def __init__(self, capacity: int):
        ensure(is_positive_integer(capacity), f"The capacity({capacity}) must be a positive integer")
        self._capacity = int(capacity)
        self._steps: list[Step] = []

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def leaf_count(self) -> int:
        """Number of leaves a complete dendrogram of this capacity holds."""
        return (self._capacity + 1) // 2

    @property
    def length(self) -> int:
        return self.leaf_count

    @property
    def is_empty(self) -> bool:
        return not self._steps

    @property
    def is_complete(self) -> bool:
        return len(self._steps) == self._capacity

    def __iter__(self) -> Iterator[Step]:
        return iter(self._steps)

    def step_at(self, index: int) -> Optional[Step]:
        """Return the step at index, or None when there is no such step."""
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(self._steps):
            return None
        return self._steps[index]

    def push(self, step: Step) -> None:
        """
        Append a step.

        Raises:
            StateError: If the dendrogram is already full
            ValidationError: If a child index does not reference an earlier step
        """
        if len(self._steps) >= self._capacity:
            raise StateError(f"The dendrogram capacity({self._capacity}) is exceeded")
        position = len(self._steps)
        for child in (step.child_index1, step.child_index2):
            ensure(
                child == NO_CHILD or 0 <= child < position,
                f"The child index({child}) must reference an earlier step than {position}",
            )
        self._steps.append(step)

    def partition(self, n: int) -> list[int]:
        """
        Cut the dendrogram into n flat clusters.

        The root is split repeatedly, always at the step with the largest
        merge distance, until n subtrees remain. Groups are labeled 0..n-1
        in order of their smallest leaf.

        Args:
            n: Number of clusters, 1 <= n <= leaf_count

        Returns:
            labels[leaf] for every leaf label; empty for an empty dendrogram

        Raises:
            ValidationError: If n is not a positive integer
            StateError: If n exceeds the number of leaves
        """
        ensure(is_positive_integer(n), f"The number of clusters({n}) must be a positive integer")
        if n > self.leaf_count:
            raise StateError(f"The number of clusters({n}) exceeds the leaf count({self.leaf_count})")
        if not self._steps:
            return []

        roots = self._split(int(n))
        groups = sorted((self._collect_leaves(root) for root in roots), key=min)
        labels = [0] * (max(max(group) for group in groups) + 1)
        for label, group in enumerate(groups):
            for leaf in group:
                labels[leaf] = label
        return labels

    def _split(self, n: int) -> list[int]:
        def compare(index1: int, index2: int) -> int:
            step1, step2 = self._steps[index1], self._steps[index2]
            # Merges before leaves, then largest distance, then later steps.
            key1 = (not step1.is_leaf, step1.distance, index1)
            key2 = (not step2.is_leaf, step2.distance, index2)
            return (key1 < key2) - (key1 > key2)

        queue = PriorityQueue(compare)
        queue.push(len(self._steps) - 1)
        while len(queue) < n:
            index = queue.peek()
            step = self._steps[index]
            if step.is_leaf:
                break
            queue.pop()
            queue.push(step.child_index1)
            queue.push(step.child_index2)
        return queue.to_list()

    def _collect_leaves(self, root: int) -> list[int]:
        leaves = []
        stack = [root]
        while stack:
            step = self._steps[stack.pop()]
            if step.is_leaf:
                leaves.append(step.label)
            else:
                stack.append(step.child_index2)
                stack.append(step.child_index1)
        return leaves
