"""
Cluster model and the clustering algorithm contract.
"""

from typing import Protocol, Union

from .errors import ValidationError
from .point import Point, PointLike, Vector


class Cluster:
    """
    A centroid plus the indices of its member points.

    Indices refer to a point array owned by the caller; the cluster never
    stores point data. The centroid is the running mean of every point
    passed to add_member().

    Args:
        initial_centroid: Starting centroid, replaced by the mean once members are added
    """

    def __init__(self, initial_centroid: Union[PointLike, Vector]):
        self._centroid = Vector(initial_centroid)
        self._memberships: set[int] = set()

    def __repr__(self) -> str:
        return f"Cluster(centroid={self.centroid}, size={self.size})"

    @property
    def centroid(self) -> Point:
        return self._centroid.to_point()

    @property
    def memberships(self) -> set[int]:
        """A copy of the member indices."""
        return set(self._memberships)

    @property
    def size(self) -> int:
        return len(self._memberships)

    @property
    def is_empty(self) -> bool:
        return not self._memberships

    def add_member(self, index: int, point: PointLike) -> None:
        """
        Add a point by index and fold it into the centroid.

        Adding an index that is already a member does nothing.

        Raises:
            ValidationError: If index is negative or the point has another dimension
        """
        if index < 0:
            raise ValidationError(f"The index({index}) must not be negative")
        if index in self._memberships:
            return

        member = Vector(point)
        if member.dimension != self._centroid.dimension:
            raise ValidationError(f"Dimension mismatch: {member.dimension} != {self._centroid.dimension}")
        size = len(self._memberships)
        self._centroid.scale(size).add(member).scale(1.0 / (size + 1))
        self._memberships.add(int(index))

    def clear(self) -> None:
        self._centroid.set_zero()
        self._memberships.clear()


class ClusteringAlgorithm(Protocol):

    def fit(self, points) -> list[Cluster]:
        """Cluster the points and return the non-empty clusters."""
        ...
