"""
Image to palette pipeline.

Four stages: Read → Points → Cluster → Merge

Pixels are read with a fixed stride, filtered, converted to LAB and placed
in a normalized 5-D space (L, a, b, x, y) so clusters are compact in both
color and position. Swatches whose colors end up closer than the
configured LAB difference are merged into one.
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np
from loguru import logger

from .cluster import ClusteringAlgorithm
from .color import LAB_MAX, LAB_MIN, denormalize, lab_to_hex, lab_to_rgb, normalize, rgb_to_lab
from .config import ExtractionConfig
from .dbscan import DBSCAN, DBSCANPlusPlus
from .distance import euclidean
from .extractor import Position, Swatch, SwatchExtractor
from .filters import PixelFilter, compose_filters, luminance_filter, opacity_filter
from .hierarchical import DendrogramClustering
from .image import ImageData, ImageSource, read_image
from .kmeans import KMeans


@dataclass(frozen=True)
class PaletteSwatch:
    """A palette entry in image terms."""
    lab: tuple[float, float, float]
    rgb: tuple[int, int, int]
    hex: str
    population: int  # pixels (after sampling and filtering) represented
    position: Position  # pixel coordinates of a representative location


# =============================================================================
# Stage 1-2: Pixels to points
# =============================================================================

def build_filter(config: ExtractionConfig) -> PixelFilter:
    filters = [opacity_filter(config.opacity_threshold)]
    if config.filter_luminance:
        filters.append(luminance_filter(config.min_luminance, config.max_luminance))
    return compose_filters(*filters)


def image_to_points(data: ImageData, sampling_rate: float, pixel_filter: PixelFilter) -> np.ndarray:
    """
    Convert sampled, filtered pixels to normalized (L, a, b, x, y) points.

    Returns:
        Array of shape (n, 5), every component in [0, 1]
    """
    flat = data.pixels.reshape(-1, 4)
    stride = max(1, math.floor(1.0 / sampling_rate))
    indices = np.arange(0, len(flat), stride)
    rgba = flat[indices]

    keep = pixel_filter(rgba)
    indices = indices[keep]
    if len(indices) == 0:
        return np.empty((0, 5))

    lab = rgb_to_lab(rgba[keep])
    x = (indices % data.width) / data.width
    y = (indices // data.width) / data.height
    return np.column_stack([normalize(lab, LAB_MIN, LAB_MAX), x, y])


# =============================================================================
# Stage 3: Clustering
# =============================================================================

def build_algorithm(config: ExtractionConfig) -> ClusteringAlgorithm:
    """Construct the clustering algorithm named by config.algorithm."""
    rng = np.random.default_rng(config.seed)
    if config.algorithm == 'dbscan':
        return DBSCAN(config.min_points, config.epsilon, euclidean)
    if config.algorithm == 'dbscanpp':
        return DBSCANPlusPlus(
            config.probability, config.min_points, config.epsilon, euclidean, random_source=rng,
        )
    if config.algorithm == 'kmeans':
        return KMeans(config.k, config.max_iterations, config.tolerance, euclidean, random_source=rng)
    # Dendrogram memory grows quadratically, so it only sees a bounded set of representatives.
    return DendrogramClustering(config.k, euclidean, max_points=config.max_hierarchical_points)


# =============================================================================
# Stage 4: Merge similar swatches
# =============================================================================

def merge_swatches(swatches: list[Swatch], threshold: float) -> list[tuple[np.ndarray, int, Position]]:
    """
    Merge swatches whose LAB colors lie within threshold of each other.

    The merged color is the population-weighted mean, the position is that
    of the most populous member.

    Returns:
        (lab, population, normalized position) per merged swatch
    """
    if not swatches:
        return []

    labs = denormalize(np.array([swatch.color for swatch in swatches]), LAB_MIN, LAB_MAX)
    groups = DBSCAN(1, threshold, euclidean).fit(labs)

    merged = []
    for group in groups:
        members = sorted(group.memberships)
        populations = np.array([swatches[i].population for i in members], dtype=np.float64)
        lab = (labs[members] * populations[:, np.newaxis]).sum(axis=0) / populations.sum()
        representative = swatches[members[int(np.argmax(populations))]]
        merged.append((lab, int(populations.sum()), representative.position))
    return merged


def _to_palette_swatch(lab: np.ndarray, population: int, position: Position, data: ImageData) -> PaletteSwatch:
    rgb = lab_to_rgb(lab)[0]
    return PaletteSwatch(
        lab=tuple(float(value) for value in lab),
        rgb=tuple(int(value) for value in rgb),
        hex=lab_to_hex(lab),
        population=population,
        position=Position(
            x=min(math.floor(position.x * data.width), data.width - 1),
            y=min(math.floor(position.y * data.height), data.height - 1),
        ),
    )


# =============================================================================
# Pipeline
# =============================================================================

def extract_palette(
    source: ImageSource,
    config: Optional[ExtractionConfig] = None,
    algorithm: Optional[ClusteringAlgorithm] = None,
) -> list[PaletteSwatch]:
    """
    Extract a palette from an image.

    Args:
        source: ArrayImage, PillowImage or RawImage
        config: Settings, defaults when omitted
        algorithm: Clustering algorithm overriding config.algorithm

    Returns:
        Palette swatches sorted by population, largest first

    Raises:
        ValidationError: If the config is invalid or the image exceeds the size limits
    """
    config = config or ExtractionConfig()
    config.validate()

    data = read_image(source, config.max_image_pixels, config.max_image_dimension)
    points = image_to_points(data, config.sampling_rate, build_filter(config))
    logger.info(f"Read {data.width}x{data.height} image, {len(points):,} pixels kept")

    extractor = SwatchExtractor(algorithm or build_algorithm(config))
    swatches = extractor.extract(points)
    merged = merge_swatches(swatches, config.color_difference_threshold)

    palette = [_to_palette_swatch(lab, population, position, data) for lab, population, position in merged]
    palette.sort(key=lambda swatch: swatch.population, reverse=True)
    logger.info(f"Extracted {len(palette)} swatches ({len(swatches)} before merging)")
    return palette
