"""
Agglomerative single-linkage clustering.
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
from loguru import logger

from .cluster import Cluster
from .dendrogram import NO_CHILD, Dendrogram, Step
from .distance import DistanceFunction, checked, euclidean
from .distance_matrix import DistanceMatrix
from .errors import StateError, ensure, is_positive_integer
from .kdtree import KDTreeSearch
from .point import as_point_array
from .priority_queue import PriorityQueue
from .sampling import FarthestPointSampling


@dataclass(frozen=True, order=True)
class Pair:
    """Candidate merge of steps i and j."""
    distance: float
    i: int
    j: int


def _nearest_first(pair1: Pair, pair2: Pair) -> int:
    return (pair1 > pair2) - (pair1 < pair2)


class HierarchicalClustering:
    """
    Single-linkage clustering producing a dendrogram.

    Data items can be anything the distance function accepts, points or
    plain scalars.

    Args:
        distance_function: Distance between two data items
    """

    def __init__(self, distance_function: DistanceFunction = euclidean):
        self._distance = checked(distance_function)

    def fit(self, data: Sequence) -> Dendrogram:
        """
        Build the complete merge history of the data.

        Returns:
            A dendrogram of 2n - 1 steps, the n leaves first

        Raises:
            StateError: If fewer than 2 items are given
        """
        items = list(data)
        size = len(items)
        if size < 2:
            raise StateError(f"The size of the data({size}) is less than 2")

        capacity = size * 2 - 1
        matrix = DistanceMatrix(capacity)
        dendrogram = Dendrogram(capacity)
        queue = PriorityQueue(_nearest_first)

        for i in range(size):
            dendrogram.push(Step(label=i, child_index1=NO_CHILD, child_index2=NO_CHILD, distance=0.0, size=1))
            for j in range(i + 1, size):
                distance = self._distance(items[i], items[j])
                matrix.set(i, j, distance)
                queue.push(Pair(distance, i, j))

        active = set(range(size))
        label = size
        while len(active) > 1:
            pair = queue.pop()
            if pair.i not in active or pair.j not in active:
                continue

            merged_size = dendrogram.step_at(pair.i).size + dendrogram.step_at(pair.j).size
            dendrogram.push(Step(
                label=label,
                child_index1=pair.i,
                child_index2=pair.j,
                distance=pair.distance,
                size=merged_size,
            ))
            active.discard(pair.i)
            active.discard(pair.j)

            for other in sorted(active):
                # Single linkage: the new cluster is as close as its closest child.
                distance = min(matrix.get(pair.i, other), matrix.get(pair.j, other))
                matrix.set(label, other, distance)
                queue.push(Pair(distance, other, label))
            matrix.set(label, pair.i, math.inf)
            matrix.set(label, pair.j, math.inf)

            active.add(label)
            label += 1

        logger.debug(f"Hierarchical clustering merged {size} items in {size - 1} steps")
        return dendrogram


class DendrogramClustering:
    """
    Flat clustering by cutting a single-linkage dendrogram.

    Memory grows with the square of the clustered point count. When
    max_points is set and exceeded, only that many representatives chosen
    by farthest-point sampling are clustered; every other point then joins
    the cluster of its nearest representative.

    Args:
        n_clusters: Number of clusters to cut into, lowered to the point count when larger
        distance_function: Distance between two points
        max_points: Maximum number of points fed to the dendrogram, unbounded when None
    """

    def __init__(
        self,
        n_clusters: int,
        distance_function: DistanceFunction = euclidean,
        max_points: Optional[int] = None,
    ):
        ensure(is_positive_integer(n_clusters), f"The number of clusters({n_clusters}) must be a positive integer")
        ensure(
            max_points is None or (is_positive_integer(max_points) and max_points >= 2),
            f"The max points({max_points}) must be an integer >= 2",
        )
        self.n_clusters = int(n_clusters)
        self.max_points = None if max_points is None else int(max_points)
        self._distance = checked(distance_function)
        self._hierarchical = HierarchicalClustering(self._distance)

    def fit(self, points) -> list[Cluster]:
        points = as_point_array(points)
        if len(points) == 0:
            return []

        if self.max_points is not None and len(points) > self.max_points:
            labels = self._label_through_representatives(points)
        else:
            labels = self._label(points)

        clusters = [Cluster(np.zeros(points.shape[1])) for _ in range(max(labels) + 1)]
        for index, label in enumerate(labels):
            clusters[label].add_member(index, points[index])
        return [cluster for cluster in clusters if not cluster.is_empty]

    def _label(self, points: np.ndarray) -> list[int]:
        if len(points) == 1:
            return [0]
        dendrogram = self._hierarchical.fit(points)
        return dendrogram.partition(min(self.n_clusters, len(points)))

    def _label_through_representatives(self, points: np.ndarray) -> list[int]:
        sampling = FarthestPointSampling(self._distance)
        representatives = sorted(sampling.sample(points, self.max_points))
        representative_labels = self._label(points[representatives])
        logger.debug(f"Clustered {len(representatives)} representatives of {len(points)} points")

        search = KDTreeSearch.build(points[representatives], self._distance)
        return [representative_labels[search.search_nearest(point).index] for point in points]
