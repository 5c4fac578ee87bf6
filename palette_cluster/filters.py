"""
Pixel filters.

A filter takes an (n, 4) RGBA uint8 array and returns a boolean mask of
the pixels to keep.
"""

import math
import numbers
from typing import Callable

import numpy as np

from .color import relative_luminance
from .errors import ensure

PixelFilter = Callable[[np.ndarray], np.ndarray]

# Luminance bounds from "Colorgorical: Creating discriminable and preferable
# color palettes for information visualization".
DEFAULT_MIN_LUMINANCE = 0.25
DEFAULT_MAX_LUMINANCE = 0.85


def _check_threshold(name: str, value: float) -> float:
    ensure(
        isinstance(value, numbers.Real) and math.isfinite(value) and 0.0 <= value <= 1.0,
        f"The {name}({value}) must be in [0.0, 1.0]",
    )
    return float(value)


def opacity_filter(threshold: float = 1.0) -> PixelFilter:
    """Keep pixels whose alpha / 255 is at least threshold."""
    threshold = _check_threshold('threshold', threshold)

    def keep(rgba: np.ndarray) -> np.ndarray:
        return rgba[:, 3].astype(np.float64) / 255.0 >= threshold

    return keep


def luminance_filter(
    min_threshold: float = DEFAULT_MIN_LUMINANCE,
    max_threshold: float = DEFAULT_MAX_LUMINANCE,
) -> PixelFilter:
    """Keep pixels whose WCAG relative luminance lies in [min_threshold, max_threshold]."""
    min_threshold = _check_threshold('min threshold', min_threshold)
    max_threshold = _check_threshold('max threshold', max_threshold)
    ensure(
        min_threshold <= max_threshold,
        f"The min threshold({min_threshold}) must be less than or equal to max threshold({max_threshold})",
    )

    def keep(rgba: np.ndarray) -> np.ndarray:
        luminance = relative_luminance(rgba)
        return (luminance >= min_threshold) & (luminance <= max_threshold)

    return keep


def compose_filters(*filters: PixelFilter) -> PixelFilter:
    """Keep pixels that pass every filter; no filters keeps everything."""

    def keep(rgba: np.ndarray) -> np.ndarray:
        mask = np.ones(len(rgba), dtype=bool)
        for pixel_filter in filters:
            mask &= pixel_filter(rgba)
        return mask

    return keep
