"""
k-d tree nearest-neighbor search.

The tree is built once over a point array: indices are split at the median
along an axis chosen round-robin by depth, and a leaf is created once a
node holds leaf_size indices or fewer. Queries descend into the branch
containing the query first and visit the sibling branch only when the
splitting hyperplane is not farther than the current bound.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .distance import DistanceFunction, checked, euclidean
from .errors import StateError, ensure, is_positive_integer
from .neighbor import Neighbor, check_k, check_query, check_radius
from .point import as_point_array
from .priority_queue import PriorityQueue

DEFAULT_LEAF_SIZE = 16


@dataclass(frozen=True)
class Node:
    """
    Node of the tree.

    A leaf holds a non-empty tuple of point indices. An internal node holds
    the split axis, the split coordinate and both children.
    """
    indices: tuple = ()
    axis: int = -1
    split: float = 0.0
    left: Optional['Node'] = None
    right: Optional['Node'] = None

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None


def _farthest_first(neighbor1: Neighbor, neighbor2: Neighbor) -> int:
    return (neighbor1 < neighbor2) - (neighbor1 > neighbor2)


class KDTreeSearch:
    """
    Nearest-neighbor search backed by a k-d tree.

    Use KDTreeSearch.build() to construct one.
    """

    def __init__(self, root: Node, points: np.ndarray, distance_function: DistanceFunction):
        self._root = root
        self._points = points
        self._distance = checked(distance_function)

    @classmethod
    def build(
        cls,
        points,
        distance_function: DistanceFunction = euclidean,
        leaf_size: int = DEFAULT_LEAF_SIZE,
    ) -> 'KDTreeSearch':
        """
        Build a tree over the given points.

        Args:
            points: Sequence of points or a (n, dimension) array
            distance_function: Distance used by every query on this tree
            leaf_size: Maximum number of indices held by a leaf

        Raises:
            StateError: If the points are empty
            ValidationError: If the points are ragged or non-finite, or leaf_size is invalid
        """
        ensure(is_positive_integer(leaf_size), f"The leaf size({leaf_size}) must be a positive integer")
        array = as_point_array(points)
        if len(array) == 0:
            raise StateError('The given points array is empty')
        root = cls._build_node(array, np.arange(len(array)), 0, int(leaf_size))
        return cls(root, array, distance_function)

    @classmethod
    def _build_node(cls, points: np.ndarray, indices: np.ndarray, depth: int, leaf_size: int) -> Node:
        if len(indices) <= leaf_size:
            return Node(indices=tuple(int(index) for index in indices))

        axis = depth % points.shape[1]
        ordered = indices[np.argsort(points[indices, axis], kind='stable')]
        median = len(ordered) // 2
        return Node(
            axis=axis,
            split=float(points[ordered[median], axis]),
            left=cls._build_node(points, ordered[:median], depth + 1, leaf_size),
            right=cls._build_node(points, ordered[median:], depth + 1, leaf_size),
        )

    @property
    def dimension(self) -> int:
        return self._points.shape[1]

    def __len__(self) -> int:
        return len(self._points)

    def search(self, query, k: int) -> list[Neighbor]:
        """
        Find the k nearest neighbors of a query point.

        Returns:
            min(k, n) neighbors sorted by (distance, index)
        """
        k = check_k(k)
        query = check_query(query, self.dimension)
        queue = PriorityQueue(_farthest_first)
        self._search_node(self._root, query, k, queue)
        return sorted(queue)

    def search_nearest(self, query) -> Neighbor:
        return self.search(query, 1)[0]

    def search_radius(self, query, radius: float) -> list[Neighbor]:
        """Find every point within radius of the query, sorted by (distance, index)."""
        radius = check_radius(radius)
        query = check_query(query, self.dimension)
        neighbors: list[Neighbor] = []
        self._radius_node(self._root, query, radius, neighbors)
        return sorted(neighbors)

    def _search_node(self, node: Node, query: np.ndarray, k: int, queue: PriorityQueue) -> None:
        if node.is_leaf:
            for index in node.indices:
                neighbor = Neighbor(distance=self._distance(query, self._points[index]), index=index)
                if len(queue) < k:
                    queue.push(neighbor)
                elif neighbor < queue.peek():
                    queue.push_pop(neighbor)
            return

        near, far = (node.left, node.right) if query[node.axis] < node.split else (node.right, node.left)
        self._search_node(near, query, k, queue)
        if len(queue) < k or self._plane_distance(node, query) <= queue.peek().distance:
            self._search_node(far, query, k, queue)

    def _radius_node(self, node: Node, query: np.ndarray, radius: float, neighbors: list) -> None:
        if node.is_leaf:
            for index in node.indices:
                distance = self._distance(query, self._points[index])
                if distance <= radius:
                    neighbors.append(Neighbor(distance=distance, index=index))
            return

        near, far = (node.left, node.right) if query[node.axis] < node.split else (node.right, node.left)
        self._radius_node(near, query, radius, neighbors)
        if self._plane_distance(node, query) <= radius:
            self._radius_node(far, query, radius, neighbors)

    def _plane_distance(self, node: Node, query: np.ndarray) -> float:
        # Distance from the query to its projection onto the splitting hyperplane.
        projection = query.copy()
        projection[node.axis] = node.split
        return self._distance(query, projection)
