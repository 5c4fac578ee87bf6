"""
Brute-force nearest-neighbor search.

Measures the query against every point. Cheaper than a k-d tree for small
point sets and used as the reference the tree is checked against.
"""

import numpy as np

from .distance import DistanceFunction, checked, euclidean
from .errors import StateError
from .neighbor import Neighbor, check_k, check_query, check_radius
from .point import as_point_array


class LinearSearch:

    def __init__(self, points, distance_function: DistanceFunction = euclidean):
        array = as_point_array(points)
        if len(array) == 0:
            raise StateError('The given points array is empty')
        self._points = array
        self._distance = checked(distance_function)

    @classmethod
    def build(cls, points, distance_function: DistanceFunction = euclidean) -> 'LinearSearch':
        return cls(points, distance_function)

    @property
    def dimension(self) -> int:
        return self._points.shape[1]

    def __len__(self) -> int:
        return len(self._points)

    def search(self, query, k: int) -> list[Neighbor]:
        k = check_k(k)
        return self._measure(check_query(query, self.dimension))[:k]

    def search_nearest(self, query) -> Neighbor:
        return self.search(query, 1)[0]

    def search_radius(self, query, radius: float) -> list[Neighbor]:
        radius = check_radius(radius)
        neighbors = self._measure(check_query(query, self.dimension))
        return [neighbor for neighbor in neighbors if neighbor.distance <= radius]

    def _measure(self, query: np.ndarray) -> list[Neighbor]:
        return sorted(
            Neighbor(distance=self._distance(query, point), index=index)
            for index, point in enumerate(self._points)
        )
