"""
Point and Vector model.

A Point is an immutable tuple of finite floats. Point sets are handled as
2-D float64 numpy arrays of shape (n, dimension), validated once at the
boundary of each structure. Vector is the mutable accumulator used for
running centroids.
"""

import math
from typing import Callable, Iterable, Sequence, Union

import numpy as np

from .distance import euclidean
from .errors import ValidationError

Point = tuple[float, ...]
PointLike = Union[Sequence[float], np.ndarray]


def to_point(values: PointLike) -> Point:
    """
    Convert a sequence of numbers to a validated Point.

    Raises:
        ValidationError: If the sequence is empty or holds a NaN/infinite component
    """
    components = tuple(float(value) for value in values)
    if not components:
        raise ValidationError('A point needs at least one component')
    for index, value in enumerate(components):
        if not math.isfinite(value):
            raise ValidationError(f"The point contains a non-finite number ({value}) at {index}")
    return components


def as_point_array(points: Iterable[PointLike], allow_empty: bool = True) -> np.ndarray:
    """
    Convert a collection of points to a (n, dimension) float64 array.

    Every point must have the same dimension and only finite components.

    Args:
        points: Sequence of points or an array of shape (n, dimension)
        allow_empty: Whether an empty collection is accepted

    Returns:
        A new float64 array; the caller's data is never aliased

    Raises:
        ValidationError: On ragged input, non-finite values or (when not
            allowed) an empty collection
    """
    if isinstance(points, np.ndarray):
        array = np.array(points, dtype=np.float64)
    else:
        rows = [tuple(point) for point in points]
        if not rows:
            array = np.empty((0, 0), dtype=np.float64)
        else:
            dimension = len(rows[0])
            if any(len(row) != dimension for row in rows):
                raise ValidationError('All points must have the same dimension')
            try:
                array = np.array(rows, dtype=np.float64)
            except (TypeError, ValueError) as e:
                raise ValidationError(f"Points must be numeric: {e}")

    if len(array) == 0:
        if not allow_empty:
            raise ValidationError('The points array is empty')
        return array.reshape(0, array.shape[1] if array.ndim == 2 else 0)

    if array.ndim != 2 or array.shape[1] == 0:
        raise ValidationError(f"Points must form a 2-D array, got shape {array.shape}")
    if not np.isfinite(array).all():
        row = int(np.argwhere(~np.isfinite(array))[0][0])
        raise ValidationError(f"The point at {row} contains a non-finite number")
    return array


class Vector:
    """
    Mutable vector wrapping the components of a point.

    Used as an accruing centroid: add() and scale() update in place and
    return self so calls can be chained.
    """

    def __init__(self, source: Union[PointLike, 'Vector']):
        if isinstance(source, Vector):
            self._components = source._components.copy()
        else:
            self._components = np.array(to_point(source), dtype=np.float64)

    @property
    def dimension(self) -> int:
        return len(self._components)

    def __repr__(self) -> str:
        return f"Vector({', '.join(str(value) for value in self._components)})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        return np.array_equal(self._components, other._components)

    def clone(self) -> 'Vector':
        return Vector(self)

    def to_point(self) -> Point:
        return tuple(float(value) for value in self._components)

    def set_zero(self) -> 'Vector':
        self._components[:] = 0.0
        return self

    def add(self, other: Union[PointLike, 'Vector']) -> 'Vector':
        """Add another vector or point component-wise."""
        components = other._components if isinstance(other, Vector) else np.asarray(other, dtype=np.float64)
        if components.shape != self._components.shape:
            raise ValidationError(
                f"Dimension mismatch: {len(components)} != {self.dimension}"
            )
        if not np.isfinite(components).all():
            raise ValidationError('Cannot add a vector with non-finite components')
        self._components += components
        return self

    def scale(self, scalar: float) -> 'Vector':
        if not math.isfinite(scalar):
            raise ValidationError(f"Scalar({scalar}) is not a finite number")
        self._components *= scalar
        return self

    def distance_to(
        self,
        other: Union[PointLike, 'Vector'],
        distance_function: Callable[[PointLike, PointLike], float] = None,
    ) -> float:
        """Distance to another vector or point, Euclidean unless a function is given."""
        components = other._components if isinstance(other, Vector) else np.asarray(other, dtype=np.float64)
        return (distance_function or euclidean)(self._components, components)
