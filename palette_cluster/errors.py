"""
Error taxonomy for the clustering core.

Bad parameters raise ValidationError, bad or insufficient data raises
StateError. Absence (an empty queue, a cache miss) is never an error and is
reported as None by the caller-facing methods.
"""


class PaletteClusterError(Exception):
    """Base class for every error raised by palette_cluster."""


class ValidationError(PaletteClusterError, ValueError):
    """A parameter or input value is out of its valid domain."""


class StateError(PaletteClusterError, RuntimeError):
    """The data cannot support the requested operation (empty input, too few leaves)."""


class IndexOutOfBoundsError(PaletteClusterError, IndexError):
    """A row or column index is outside of a matrix."""


def ensure(condition: bool, message: str) -> None:
    """Raise ValidationError with the given message unless condition holds."""
    if not condition:
        raise ValidationError(message)


def is_positive_integer(value) -> bool:
    """Return True for int-like values greater than zero (bool excluded)."""
    if isinstance(value, bool):
        return False
    try:
        return int(value) == value and value > 0
    except (TypeError, ValueError, OverflowError):
        return False
