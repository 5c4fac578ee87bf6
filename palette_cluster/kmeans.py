"""
K-means clustering (Lloyd's algorithm) with K-means++ seeding.
"""

import math
import numbers
from typing import Optional, Protocol

import numpy as np
from loguru import logger

from .cluster import Cluster
from .distance import DistanceFunction, checked, euclidean
from .errors import StateError, ensure, is_positive_integer
from .kdtree import KDTreeSearch
from .point import as_point_array
from .sampling import RandomSource


class CenterInitializer(Protocol):

    def initialize(self, points: np.ndarray, k: int) -> np.ndarray:
        """Return up to k initial centroids as a (m, dimension) array."""
        ...


class KMeansPlusPlusInitializer:
    """
    K-means++ seeding.

    The first centroid is a uniformly random point. Each following centroid
    is drawn with probability proportional to the squared distance to the
    nearest centroid chosen so far. When every remaining point coincides
    with a chosen centroid, seeding stops early and fewer than k centroids
    are returned.

    Args:
        distance_function: Distance between two points
        random_source: Source of uniform [0, 1) values, a fresh numpy Generator by default
    """

    def __init__(self, distance_function: DistanceFunction = euclidean, random_source: Optional[RandomSource] = None):
        self._distance = checked(distance_function)
        self._random = random_source if random_source is not None else np.random.default_rng()

    def initialize(self, points: np.ndarray, k: int) -> np.ndarray:
        ensure(is_positive_integer(k), f"The k({k}) must be a positive integer")
        points = as_point_array(points)
        size = len(points)
        if size <= k:
            return points.copy()

        first = min(int(self._random.random() * size), size - 1)
        selected = [first]
        weights = self._squared_distances_from(points, first)
        while len(selected) < k:
            total = float(weights.sum())
            if total <= 0.0:
                break

            target = self._random.random() * total
            index = int(np.searchsorted(np.cumsum(weights), target, side='right'))
            # Guard against rounding in the cumulative sum pushing past the last candidate.
            index = min(index, int(np.flatnonzero(weights)[-1]))
            selected.append(index)
            weights = np.minimum(weights, self._squared_distances_from(points, index))

        logger.debug(f"K-means++ selected {len(selected)} of {k} centroids")
        return points[selected].copy()

    def _squared_distances_from(self, points: np.ndarray, index: int) -> np.ndarray:
        origin = points[index]
        return np.array([self._distance(origin, point) ** 2 for point in points], dtype=np.float64)


class KMeans:
    """
    K-means clustering.

    Args:
        k: Maximum number of clusters
        max_iterations: Maximum number of assignment/update rounds
        tolerance: Stop once no centroid moves farther than this
        distance_function: Distance between two points
        initializer: Centroid seeding strategy, K-means++ by default
        random_source: Random source handed to the default initializer
    """

    def __init__(
        self,
        k: int,
        max_iterations: int = 10,
        tolerance: float = 1e-4,
        distance_function: DistanceFunction = euclidean,
        initializer: Optional[CenterInitializer] = None,
        random_source: Optional[RandomSource] = None,
    ):
        ensure(is_positive_integer(k), f"The k({k}) must be a positive integer")
        ensure(
            is_positive_integer(max_iterations),
            f"The max iterations({max_iterations}) must be a positive integer",
        )
        ensure(
            isinstance(tolerance, numbers.Real) and math.isfinite(tolerance) and tolerance >= 0.0,
            f"The tolerance({tolerance}) must be a finite non-negative number",
        )
        self.k = int(k)
        self.max_iterations = int(max_iterations)
        self.tolerance = float(tolerance)
        self._distance = checked(distance_function)
        self._initializer = initializer or KMeansPlusPlusInitializer(self._distance, random_source)

    def fit(self, points) -> list[Cluster]:
        """
        Cluster the points.

        Returns:
            At most k non-empty clusters that partition the point indices

        Raises:
            StateError: If the points are empty
        """
        points = as_point_array(points)
        if len(points) == 0:
            raise StateError('The given points array is empty')

        centroids = as_point_array(self._initializer.initialize(points, self.k))
        clusters: list[Cluster] = []
        for iteration in range(self.max_iterations):
            clusters = self._assign(points, centroids)
            updated = np.array([
                cluster.centroid if not cluster.is_empty else centroids[index]
                for index, cluster in enumerate(clusters)
            ], dtype=np.float64)
            displacement = max(self._distance(old, new) for old, new in zip(centroids, updated))
            centroids = updated
            if displacement <= self.tolerance:
                logger.debug(f"K-means converged after {iteration + 1} iterations")
                break

        result = [cluster for cluster in clusters if not cluster.is_empty]
        logger.debug(f"K-means produced {len(result)} clusters from {len(points)} points")
        return result

    def _assign(self, points: np.ndarray, centroids: np.ndarray) -> list[Cluster]:
        clusters = [Cluster(centroid) for centroid in centroids]
        search = KDTreeSearch.build(centroids, self._distance)
        for index, point in enumerate(points):
            nearest = search.search_nearest(point)
            clusters[nearest.index].add_member(index, point)
        return clusters
