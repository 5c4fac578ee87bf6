"""
Unit tests for swatch extraction from clustered points.
"""

import pytest

from palette_cluster import DBSCAN, Cluster, KMeans, Position, Swatch, SwatchExtractor, ValidationError


class RecordingAlgorithm:
    """Clustering stub returning fixed clusters and counting fit() calls."""

    def __init__(self, clusters):
        self.clusters = clusters
        self.calls = 0

    def fit(self, points):
        self.calls += 1
        return self.clusters


def make_cluster(members):
    cluster = Cluster([0.0] * 5)
    for index, point in members:
        cluster.add_member(index, point)
    return cluster


class TestSwatchExtractor:
    """Test cluster to swatch mapping"""

    def test_empty_points_skip_algorithm(self):
        algorithm = RecordingAlgorithm([])
        assert SwatchExtractor(algorithm).extract([]) == []
        assert algorithm.calls == 0

    def test_maps_clusters_to_swatches(self):
        cluster = make_cluster([
            (0, [0.5, 0.2, 0.4, 0.1, 0.3]),
            (1, [0.7, 0.4, 0.6, 0.3, 0.5]),
        ])
        algorithm = RecordingAlgorithm([cluster])
        swatches = SwatchExtractor(algorithm).extract([[0.5, 0.2, 0.4, 0.1, 0.3], [0.7, 0.4, 0.6, 0.3, 0.5]])

        assert algorithm.calls == 1
        assert len(swatches) == 1
        swatch = swatches[0]
        assert isinstance(swatch, Swatch)
        assert swatch.population == 2
        assert swatch.color == pytest.approx((0.6, 0.3, 0.5))
        assert swatch.position == Position(x=pytest.approx(0.2), y=pytest.approx(0.4))

    def test_skips_empty_clusters(self):
        algorithm = RecordingAlgorithm([Cluster([0.0] * 5), make_cluster([(0, [0.1] * 5)])])
        swatches = SwatchExtractor(algorithm).extract([[0.1] * 5])
        assert [swatch.population for swatch in swatches] == [1]

    def test_with_dbscan(self):
        points = [
            [0.2, 0.5, 0.5, 0.10, 0.10],
            [0.2, 0.5, 0.5, 0.11, 0.10],
            [0.2, 0.5, 0.5, 0.10, 0.11],
            [0.8, 0.5, 0.5, 0.90, 0.90],
            [0.8, 0.5, 0.5, 0.91, 0.90],
        ]
        swatches = SwatchExtractor(DBSCAN(2, 0.05)).extract(points)
        assert [swatch.population for swatch in swatches] == [3, 2]
        assert swatches[0].color == pytest.approx((0.2, 0.5, 0.5))
        assert swatches[1].position.x == pytest.approx(0.905)

    def test_populations_cover_all_points_with_kmeans(self, rng):
        points = rng.random((60, 5))
        swatches = SwatchExtractor(KMeans(4, random_source=rng)).extract(points)
        assert sum(swatch.population for swatch in swatches) == 60
        assert all(swatch.population > 0 for swatch in swatches)

    def test_rejects_points_without_position(self):
        with pytest.raises(ValidationError):
            SwatchExtractor(RecordingAlgorithm([])).extract([[0.1, 0.2, 0.3]])

    def test_custom_color_dimension(self):
        cluster = make_cluster([(0, [0.5, 0.2, 0.4, 0.1, 0.3])])
        swatches = SwatchExtractor(RecordingAlgorithm([cluster]), color_dimension=1).extract(
            [[0.5, 0.2, 0.4, 0.1, 0.3]]
        )
        assert swatches[0].color == pytest.approx((0.5,))
        assert swatches[0].position.y == pytest.approx(0.3)
