"""
Density-based clustering: DBSCAN and its sampled variant DBSCAN++.

Both algorithms answer radius queries through an injected neighbor search
factory, the k-d tree by default. Points that no core point reaches are
noise and appear in no cluster.
"""

import math
import numbers
from collections import deque
from typing import Optional

import numpy as np
from loguru import logger

from .cluster import Cluster
from .distance import DistanceFunction, checked, euclidean
from .errors import ensure, is_positive_integer
from .kdtree import KDTreeSearch
from .neighbor import NeighborSearch, NeighborSearchFactory
from .point import as_point_array
from .sampling import RandomSampling, RandomSource

# Point labels during a DBSCAN run; cluster ids are >= 0.
UNDEFINED = -3
QUEUED = -2
NOISE = -1


def _check_density(min_points, epsilon) -> tuple[int, float]:
    ensure(is_positive_integer(min_points), f"The minimum points({min_points}) must be an integer >= 1")
    ensure(
        isinstance(epsilon, numbers.Real) and math.isfinite(epsilon) and epsilon >= 0.0,
        f"The epsilon({epsilon}) must be a finite number >= 0.0",
    )
    return int(min_points), float(epsilon)


def _build_clusters(points: np.ndarray, labels: list[int], count: int) -> list[Cluster]:
    origin = np.zeros(points.shape[1])
    clusters = [Cluster(origin) for _ in range(count)]
    for index, label in enumerate(labels):
        if label >= 0:
            clusters[label].add_member(index, points[index])
    return clusters


class DBSCAN:
    """
    DBSCAN clustering.

    A point with at least min_points neighbors within epsilon (itself
    included) is a core point. Clusters grow from core points breadth-first;
    a non-core point joins the first cluster that reaches it.

    Args:
        min_points: Neighbor count that makes a point a core point
        epsilon: Neighborhood radius
        distance_function: Distance between two points
        neighbor_search: Factory building a search structure over the points
    """

    def __init__(
        self,
        min_points: int,
        epsilon: float,
        distance_function: DistanceFunction = euclidean,
        neighbor_search: NeighborSearchFactory = KDTreeSearch.build,
    ):
        self.min_points, self.epsilon = _check_density(min_points, epsilon)
        self._distance = checked(distance_function)
        self._neighbor_search = neighbor_search

    def fit(self, points) -> list[Cluster]:
        points = as_point_array(points)
        if len(points) == 0:
            return []

        search = self._neighbor_search(points, self._distance)
        labels = [UNDEFINED] * len(points)
        count = 0
        for index in range(len(points)):
            if labels[index] != UNDEFINED:
                continue

            neighbors = search.search_radius(points[index], self.epsilon)
            if len(neighbors) < self.min_points:
                labels[index] = NOISE
                continue

            labels[index] = count
            self._expand(points, search, labels, count, neighbors)
            count += 1

        noise = labels.count(NOISE)
        logger.debug(f"DBSCAN found {count} clusters and {noise} noise points in {len(points)} points")
        return _build_clusters(points, labels, count)

    def _expand(self, points: np.ndarray, search: NeighborSearch, labels: list[int], label: int, neighbors) -> None:
        queue = deque()
        self._enqueue(neighbors, labels, label, queue)
        while queue:
            index = queue.popleft()
            labels[index] = label
            secondary = search.search_radius(points[index], self.epsilon)
            if len(secondary) >= self.min_points:
                self._enqueue(secondary, labels, label, queue)

    @staticmethod
    def _enqueue(neighbors, labels: list[int], label: int, queue: deque) -> None:
        for neighbor in neighbors:
            index = neighbor.index
            if labels[index] == NOISE:
                # Known non-core point: it becomes a border point and is not expanded.
                labels[index] = label
            elif labels[index] == UNDEFINED:
                labels[index] = QUEUED
                queue.append(index)


class DBSCANPlusPlus:
    """
    DBSCAN++ clustering.

    Only ceil(probability * n) randomly sampled points are tested for core
    status. Core points within epsilon of each other form one cluster, and
    every point joins the cluster of its nearest core point when that core
    is within epsilon. Everything else is noise.

    Args:
        probability: Fraction of points tested for core status, in (0, 1]
        min_points: Neighbor count that makes a point a core point
        epsilon: Neighborhood radius
        distance_function: Distance between two points
        neighbor_search: Factory building a search structure over the points
        random_source: Source of uniform [0, 1) values for the candidate sample
    """

    def __init__(
        self,
        probability: float,
        min_points: int,
        epsilon: float,
        distance_function: DistanceFunction = euclidean,
        neighbor_search: NeighborSearchFactory = KDTreeSearch.build,
        random_source: Optional[RandomSource] = None,
    ):
        ensure(
            isinstance(probability, numbers.Real) and 0.0 < probability <= 1.0,
            f"The probability({probability}) must be in the range (0, 1]",
        )
        self.probability = float(probability)
        self.min_points, self.epsilon = _check_density(min_points, epsilon)
        self._distance = checked(distance_function)
        self._neighbor_search = neighbor_search
        self._sampling = RandomSampling(random_source)

    def fit(self, points) -> list[Cluster]:
        points = as_point_array(points)
        if len(points) == 0:
            return []

        cores = self._find_cores(points)
        if not cores:
            logger.debug('DBSCAN++ found no core points')
            return []

        core_search = self._neighbor_search(points[cores], self._distance)
        components, count = self._connect_cores(points[cores], core_search)

        labels = []
        for point in points:
            nearest = core_search.search_nearest(point)
            labels.append(components[nearest.index] if nearest.distance <= self.epsilon else NOISE)

        logger.debug(f"DBSCAN++ found {count} clusters from {len(cores)} core points in {len(points)} points")
        return _build_clusters(points, labels, count)

    def _find_cores(self, points: np.ndarray) -> list[int]:
        size = len(points)
        # Rounded first so that e.g. 0.1 * 30 does not ceil to 4.
        candidates = self._sampling.sample(points, max(1, math.ceil(round(self.probability * size, 9))))
        search = self._neighbor_search(points, self._distance)
        return [
            index for index in sorted(candidates)
            if len(search.search_radius(points[index], self.epsilon)) >= self.min_points
        ]

    def _connect_cores(self, core_points: np.ndarray, core_search: NeighborSearch) -> tuple[list[int], int]:
        components = [UNDEFINED] * len(core_points)
        count = 0
        for start in range(len(core_points)):
            if components[start] != UNDEFINED:
                continue

            components[start] = count
            queue = deque([start])
            while queue:
                index = queue.popleft()
                for neighbor in core_search.search_radius(core_points[index], self.epsilon):
                    if components[neighbor.index] == UNDEFINED:
                        components[neighbor.index] = count
                        queue.append(neighbor.index)
            count += 1
        return components, count
