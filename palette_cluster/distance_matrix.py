"""
Packed symmetric distance matrix.

Only the upper triangle (diagonal included) is stored, n * (n + 1) / 2
cells in a flat float64 array. Unknown or inactive cells hold +inf.
"""

import math
import numbers

import numpy as np

from .errors import IndexOutOfBoundsError, ensure, is_positive_integer


class DistanceMatrix:
    """Symmetric n x n matrix where get(i, j) == get(j, i) by construction."""

    def __init__(self, n: int, initial_value: float = math.inf):
        ensure(is_positive_integer(n), f"The n({n}) must be a positive integer")
        self._n = int(n)
        capacity = self._n * (self._n + 1) // 2
        self._components = np.full(capacity, initial_value, dtype=np.float64)

    @property
    def n(self) -> int:
        return self._n

    @property
    def size(self) -> int:
        """Number of logical cells (n * n)."""
        return self._n * self._n

    @property
    def dimensions(self) -> tuple[int, int]:
        return (self._n, self._n)

    @property
    def capacity(self) -> int:
        """Number of stored cells."""
        return len(self._components)

    def get(self, i: int, j: int) -> float:
        return float(self._components[self._index(i, j)])

    def set(self, i: int, j: int, value: float) -> None:
        self._components[self._index(i, j)] = value

    def _index(self, i: int, j: int) -> int:
        self._check(i, 'row')
        self._check(j, 'column')
        low, high = (i, j) if i <= j else (j, i)
        # Row `low` starts after the rows 0..low-1, which hold n, n-1, ... cells.
        return low * self._n - low * (low - 1) // 2 + (high - low)

    def _check(self, index, name: str) -> None:
        if isinstance(index, bool) or not isinstance(index, numbers.Integral) or not 0 <= index < self._n:
            raise IndexOutOfBoundsError(f"The {name}({index}) must be an integer in [0, {self._n})")
