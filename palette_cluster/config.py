"""
Extraction settings with environment variable overrides.
"""

import math
import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional

from .errors import ValidationError, ensure, is_positive_integer

ALGORITHMS = ('dbscan', 'dbscanpp', 'kmeans', 'hierarchical')
LOG_LEVELS = ('TRACE', 'DEBUG', 'INFO', 'SUCCESS', 'WARNING', 'ERROR', 'CRITICAL')

ENV_PREFIX = 'PALETTE_'


@dataclass(frozen=True)
class ExtractionConfig:
    """Settings for extract_palette()."""
    algorithm: str = 'dbscan'
    sampling_rate: float = 1.0  # fraction of pixels read, stride = floor(1 / rate)

    # K-means / hierarchical (k clusters)
    k: int = 16
    max_iterations: int = 10
    tolerance: float = 1e-4
    max_hierarchical_points: int = 256  # representatives fed to the dendrogram

    # DBSCAN / DBSCAN++ (epsilon in the normalized 5-D space)
    min_points: int = 16
    epsilon: float = 0.016
    probability: float = 0.1

    # Swatches closer than this in LAB are merged
    color_difference_threshold: float = 2.5

    # Pixel filters
    opacity_threshold: float = 1.0
    filter_luminance: bool = False
    min_luminance: float = 0.25
    max_luminance: float = 0.85

    max_image_pixels: int = 50_000_000
    max_image_dimension: int = 10_000

    seed: Optional[int] = None
    log_level: str = 'INFO'

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> 'ExtractionConfig':
        """
        Build a config from PALETTE_* variables, e.g. PALETTE_ALGORITHM=kmeans, PALETTE_K=8.

        Keyword overrides win over the environment. The result is validated.
        """
        environ = os.environ if environ is None else environ
        values = {}
        for field in fields(cls):
            raw = environ.get(ENV_PREFIX + field.name.upper())
            if raw is None or raw == '':
                continue
            values[field.name] = _parse(field.name, field.default, raw)
        values.update(overrides)
        config = cls(**values)
        config.validate()
        return config

    def validate(self) -> None:
        """
        Raises:
            ValidationError: If any setting is out of range
        """
        ensure(self.algorithm in ALGORITHMS, f"Unknown algorithm: {self.algorithm} (expected one of {ALGORITHMS})")
        ensure(0.0 < self.sampling_rate <= 1.0, f"The sampling rate({self.sampling_rate}) must be in (0, 1]")
        for name in (
            'k', 'max_iterations', 'max_hierarchical_points', 'min_points', 'max_image_pixels', 'max_image_dimension',
        ):
            value = getattr(self, name)
            ensure(is_positive_integer(value), f"The {name}({value}) must be a positive integer")
        ensure(
            self.max_hierarchical_points >= 2,
            f"The max_hierarchical_points({self.max_hierarchical_points}) must be at least 2",
        )
        for name in ('tolerance', 'epsilon', 'color_difference_threshold'):
            value = getattr(self, name)
            ensure(math.isfinite(value) and value >= 0.0, f"The {name}({value}) must be a finite number >= 0")
        ensure(0.0 < self.probability <= 1.0, f"The probability({self.probability}) must be in (0, 1]")
        for name in ('opacity_threshold', 'min_luminance', 'max_luminance'):
            value = getattr(self, name)
            ensure(0.0 <= value <= 1.0, f"The {name}({value}) must be in [0, 1]")
        ensure(
            self.min_luminance <= self.max_luminance,
            f"The min luminance({self.min_luminance}) must not exceed the max luminance({self.max_luminance})",
        )
        ensure(self.log_level.upper() in LOG_LEVELS, f"Unknown log level: {self.log_level}")


def _parse(name: str, default, raw: str):
    try:
        if isinstance(default, bool):
            return bool(int(raw))
        if isinstance(default, int):
            return int(raw)
        if isinstance(default, float):
            return float(raw)
        if name == 'seed':
            return int(raw)
    except ValueError as e:
        raise ValidationError(f"Invalid value for {ENV_PREFIX}{name.upper()}: {raw!r}") from e
    return raw
