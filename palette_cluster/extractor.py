"""
Swatch extraction from clustered color+position points.
"""

from dataclasses import dataclass

from loguru import logger

from .cluster import Cluster, ClusteringAlgorithm
from .errors import ensure, is_positive_integer
from .point import Point, as_point_array


@dataclass(frozen=True)
class Position:
    x: float
    y: float


@dataclass(frozen=True)
class Swatch:
    """A representative color of a point set."""
    color: Point            # leading color components of the cluster centroid
    population: int         # number of member points, always > 0
    position: Position      # trailing two (spatial) components of the centroid


class SwatchExtractor:
    """
    Turns clusters of points into swatches.

    Each point holds color_dimension color components followed by two
    spatial components, e.g. (L, a, b, x, y).

    Args:
        algorithm: Clustering algorithm with fit(points) -> list[Cluster]
        color_dimension: Number of leading color components per point
    """

    def __init__(self, algorithm: ClusteringAlgorithm, color_dimension: int = 3):
        ensure(
            is_positive_integer(color_dimension),
            f"The color dimension({color_dimension}) must be a positive integer",
        )
        self._algorithm = algorithm
        self.color_dimension = int(color_dimension)

    def extract(self, points) -> list[Swatch]:
        """
        Cluster the points and describe each cluster as a swatch.

        Returns:
            One swatch per non-empty cluster, in the algorithm's cluster order;
            empty without calling the algorithm when there are no points

        Raises:
            ValidationError: If the points are too short to hold a color and a position
        """
        points = as_point_array(points)
        if len(points) == 0:
            return []

        dimension = points.shape[1]
        ensure(
            dimension >= self.color_dimension + 2,
            f"The point dimension({dimension}) must hold {self.color_dimension} color and 2 position components",
        )
        clusters = self._algorithm.fit(points)
        swatches = [self._to_swatch(cluster) for cluster in clusters if not cluster.is_empty]
        logger.debug(f"Extracted {len(swatches)} swatches from {len(points)} points")
        return swatches

    def _to_swatch(self, cluster: Cluster) -> Swatch:
        centroid = cluster.centroid
        return Swatch(
            color=centroid[:self.color_dimension],
            population=cluster.size,
            position=Position(x=centroid[-2], y=centroid[-1]),
        )
