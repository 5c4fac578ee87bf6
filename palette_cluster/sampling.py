"""
Sampling strategies that reduce a point set to a subset of its indices.
"""

from typing import Optional, Protocol

import numpy as np
from loguru import logger

from .distance import DistanceFunction, checked, euclidean
from .errors import ValidationError, ensure, is_positive_integer
from .point import as_point_array


class RandomSource(Protocol):
    """Anything with random() returning a uniform float in [0, 1)."""

    def random(self) -> float:
        ...


class SamplingStrategy(Protocol):

    def sample(self, points, n: int) -> set[int]:
        """Return the indices of n points (all of them when n >= len(points))."""
        ...


def _check_sample_size(n) -> int:
    ensure(is_positive_integer(n), f"The number of data points to sample({n}) must be greater than 0")
    return int(n)


class RandomSampling:
    """
    Uniform sampling without replacement.

    Args:
        random_source: Source of uniform [0, 1) values, a fresh numpy Generator by default
    """

    def __init__(self, random_source: Optional[RandomSource] = None):
        self._random = random_source if random_source is not None else np.random.default_rng()

    def sample(self, points, n: int) -> set[int]:
        n = _check_sample_size(n)
        size = len(points)
        if n >= size:
            return set(range(size))

        # Partial Fisher-Yates: the first n slots end up holding the sample.
        indices = list(range(size))
        for i in range(n):
            j = i + min(int(self._random.random() * (size - i)), size - i - 1)
            indices[i], indices[j] = indices[j], indices[i]
        return set(indices[:n])


class FarthestPointSampling:
    """
    Greedy farthest-point sampling.

    Starts from index 0 and repeatedly adds the point whose distance to the
    nearest already-selected point is the largest. Ties go to the lowest
    index, so the result is deterministic.

    Args:
        distance_function: Distance between two points
    """

    def __init__(self, distance_function: DistanceFunction = euclidean):
        self._distance = checked(distance_function)

    def sample(self, points, n: int) -> set[int]:
        n = _check_sample_size(n)
        array = as_point_array(points)
        size = len(array)
        if n >= size:
            return set(range(size))

        initial = self._initial_index(size)
        selected = [initial]
        distances = self._distances_from(array, initial)
        distances[initial] = 0.0

        while len(selected) < n:
            scores = self._score(distances)
            scores[selected] = -np.inf
            farthest = int(np.argmax(scores))
            selected.append(farthest)
            distances = np.minimum(distances, self._distances_from(array, farthest))
            distances[farthest] = 0.0

        logger.debug(f"Sampled {len(selected)} of {size} points")
        return set(selected)

    def _initial_index(self, size: int) -> int:
        return 0

    def _score(self, distances: np.ndarray) -> np.ndarray:
        return distances.copy()

    def _distances_from(self, points: np.ndarray, index: int) -> np.ndarray:
        origin = points[index]
        return np.array([self._distance(origin, point) for point in points], dtype=np.float64)


class WeightedFarthestPointSampling(FarthestPointSampling):
    """
    Farthest-point sampling biased by per-point weights.

    The score of a candidate is its distance to the selected set times its
    weight, and sampling starts from the heaviest point.

    Args:
        weights: One non-negative finite weight per point
        distance_function: Distance between two points
    """

    def __init__(self, weights, distance_function: DistanceFunction = euclidean):
        super().__init__(distance_function)
        weights = np.array(weights, dtype=np.float64)
        ensure(weights.ndim == 1, 'The weights must be a flat sequence')
        ensure(
            bool(np.isfinite(weights).all() and (weights >= 0.0).all()),
            'The weights must be finite non-negative numbers',
        )
        self._weights = weights

    def sample(self, points, n: int) -> set[int]:
        if len(points) != len(self._weights):
            raise ValidationError(
                f"The number of points({len(points)}) and weights({len(self._weights)}) must be the same"
            )
        return super().sample(points, n)

    def _initial_index(self, size: int) -> int:
        return int(np.argmax(self._weights))

    def _score(self, distances: np.ndarray) -> np.ndarray:
        return distances * self._weights
