"""
Distance functions.

A distance function takes two points and returns a finite, non-negative
float. Every clustering and search structure receives one by injection;
perceptual color differences (CIE76, CIEDE2000, ...) plug in the same way.
"""

import functools
import math
from typing import Any, Callable

import numpy as np

from .errors import ValidationError

DistanceFunction = Callable[[Any, Any], float]


def is_distance(value) -> bool:
    """Check whether a value is a finite, non-negative number."""
    try:
        return math.isfinite(value) and value >= 0.0
    except TypeError:
        return False


def to_distance(value) -> float:
    """
    Validate a distance value.

    Raises:
        ValidationError: If the value is NaN, infinite, negative or not a number
    """
    if not is_distance(value):
        raise ValidationError(f"The given value({value}) is not a valid distance")
    return float(value)


def checked(distance_function: DistanceFunction) -> DistanceFunction:
    """Wrap a distance function so that every result is validated with to_distance()."""
    if getattr(distance_function, '__checked__', False):
        return distance_function

    @functools.wraps(distance_function)
    def measure(point1, point2) -> float:
        return to_distance(distance_function(point1, point2))

    measure.__checked__ = True
    return measure


def squared_euclidean(point1, point2) -> float:
    """Squared Euclidean distance between two points of equal dimension."""
    a = np.asarray(point1, dtype=np.float64)
    b = np.asarray(point2, dtype=np.float64)
    if a.shape != b.shape:
        raise ValidationError(f"Dimension mismatch: {a.shape} != {b.shape}")
    delta = b - a
    distance = float(np.dot(delta, delta))
    if not math.isfinite(distance):
        raise ValidationError('Either point1 or point2 contains a non-finite number')
    return distance


def euclidean(point1, point2) -> float:
    """Euclidean distance between two points of equal dimension."""
    return math.sqrt(squared_euclidean(point1, point2))


def absolute(value1: float, value2: float) -> float:
    """Absolute difference of two scalars, the 1-D Euclidean distance."""
    distance = abs(float(value2) - float(value1))
    if not math.isfinite(distance):
        raise ValidationError('Either value contains a non-finite number')
    return distance
