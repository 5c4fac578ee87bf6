"""
Nearest-neighbor search contract shared by the k-d tree and linear search.
"""

from dataclasses import dataclass
from typing import Callable, Protocol

import numpy as np

from .distance import DistanceFunction
from .errors import ensure, is_positive_integer


@dataclass(frozen=True, order=True)
class Neighbor:
    """A search hit; ordering is by (distance, index)."""
    distance: float
    index: int


class NeighborSearch(Protocol):
    """Search over a fixed point set."""

    def search(self, query, k: int) -> list[Neighbor]:
        """Return up to k nearest neighbors sorted by ascending distance."""
        ...

    def search_nearest(self, query) -> Neighbor:
        """Return the single nearest neighbor."""
        ...

    def search_radius(self, query, radius: float) -> list[Neighbor]:
        """Return every neighbor within radius (inclusive), sorted by ascending distance."""
        ...


# Builds a search structure from a (n, dimension) array and a distance function.
NeighborSearchFactory = Callable[[np.ndarray, DistanceFunction], NeighborSearch]


def check_k(k) -> int:
    ensure(is_positive_integer(k), f"The number of neighbors({k}) must be a positive integer")
    return int(k)


def check_radius(radius) -> float:
    ensure(radius is not None and float(radius) >= 0.0, f"The radius({radius}) must be a non-negative number")
    return float(radius)


def check_query(query, dimension: int) -> np.ndarray:
    array = np.asarray(query, dtype=np.float64)
    ensure(
        array.shape == (dimension,),
        f"The query dimension({array.shape}) does not match the point dimension({dimension})",
    )
    return array
