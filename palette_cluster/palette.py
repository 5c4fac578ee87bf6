"""
Palette of extracted swatches and selection of a few representative ones.
"""

from typing import Iterator, Optional

import numpy as np
from loguru import logger

from .distance import euclidean
from .errors import ensure, is_positive_integer
from .kdtree import KDTreeSearch
from .pipeline import PaletteSwatch
from .sampling import WeightedFarthestPointSampling

# LAB distance under which two swatches count as the same hue
SIMILAR_COLOR_THRESHOLD = 20.0

# Score multiplier for a swatch already near an earlier pick
REDUCED_SCORE_COEFFICIENT = 0.25


class Palette:
    """
    Swatches sorted by population, largest first.

    Args:
        swatches: Palette swatches in any order
    """

    def __init__(self, swatches: list[PaletteSwatch]):
        self._swatches = sorted(swatches, key=lambda swatch: swatch.population, reverse=True)

    def __len__(self) -> int:
        return len(self._swatches)

    def __iter__(self) -> Iterator[PaletteSwatch]:
        return iter(self._swatches)

    @property
    def is_empty(self) -> bool:
        return not self._swatches

    @property
    def swatches(self) -> list[PaletteSwatch]:
        return list(self._swatches)

    @property
    def dominant_swatch(self) -> Optional[PaletteSwatch]:
        """The most populous swatch, None for an empty palette."""
        return self._swatches[0] if self._swatches else None

    def find_swatches(self, n: int) -> list[PaletteSwatch]:
        """
        Pick n swatches that are both populous and far apart in LAB.

        Candidate colors come from farthest-point sampling weighted by
        population. Each candidate is then replaced by the best scoring
        swatch within SIMILAR_COLOR_THRESHOLD of it, where swatches near an
        earlier candidate score lower.

        Args:
            n: Number of swatches to pick

        Returns:
            n distinct swatches, ordered by population; the whole palette
            when n is at least its size

        Raises:
            ValidationError: If n is not a positive integer
        """
        ensure(is_positive_integer(n), f"The number of swatches to find({n}) must be a positive integer")
        if n >= len(self._swatches):
            return list(self._swatches)

        colors = np.array([swatch.lab for swatch in self._swatches], dtype=np.float64)
        weights = np.array([swatch.population for swatch in self._swatches], dtype=np.float64)
        if weights[0] > 0:
            weights /= weights[0]

        sampling = WeightedFarthestPointSampling(weights, euclidean)
        search = KDTreeSearch.build(colors, euclidean)

        chosen: list[int] = []
        marked: set[int] = set()
        for index in sorted(sampling.sample(colors, n)):
            neighbors = search.search_radius(colors[index], SIMILAR_COLOR_THRESHOLD)
            best = self._best_neighbor([neighbor.index for neighbor in neighbors], weights, marked, chosen)
            if best is not None:
                chosen.append(best)
            marked.update(neighbor.index for neighbor in neighbors)

        # Neighborhoods can collapse onto the same swatch; top up by population.
        for index in range(len(self._swatches)):
            if len(chosen) >= n:
                break
            if index not in chosen:
                chosen.append(index)

        logger.debug(f"Selected swatches {sorted(chosen)} of {len(self._swatches)}")
        return [self._swatches[index] for index in sorted(chosen)]

    @staticmethod
    def _best_neighbor(candidates: list[int], weights: np.ndarray, marked: set[int], chosen: list[int]) -> Optional[int]:
        best, best_score = None, -1.0
        for index in candidates:
            if index in chosen:
                continue
            score = weights[index] * (REDUCED_SCORE_COEFFICIENT if index in marked else 1.0)
            if score > best_score:
                best, best_score = index, score
        return best
