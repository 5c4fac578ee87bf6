"""
Unit tests for DBSCAN and DBSCAN++.

sklearn's DBSCAN serves as the reference for noise and core-point grouping.
"""

import numpy as np
import pytest
from sklearn.cluster import DBSCAN as SklearnDBSCAN

from palette_cluster import DBSCAN, DBSCANPlusPlus, KDTreeSearch, LinearSearch, ValidationError, squared_euclidean

EXPECTED_GROUPS = [
    ({0, 1, 4, 5, 6, 9, 10}, (1.0, 1.0)),
    ({2, 3, 7, 8}, (0.5, 7.5)),
    ({11, 12, 13, 14, 15}, (4.4, 3.8)),
]


def assert_disjoint(clusters, size):
    members = [index for cluster in clusters for index in cluster.memberships]
    assert len(members) == len(set(members))
    assert all(0 <= index < size for index in members)


class TestDBSCAN:
    """Test density-based clustering"""

    def test_fit_groups_and_outlier(self, density_points):
        clusters = DBSCAN(4, 2.0).fit(density_points)

        assert [cluster.size for cluster in clusters] == [7, 4, 5]
        for cluster, (memberships, centroid) in zip(clusters, EXPECTED_GROUPS):
            assert cluster.memberships == memberships
            assert cluster.centroid == pytest.approx(centroid)
        assert all(16 not in cluster.memberships for cluster in clusters)

    @pytest.mark.parametrize('factory', [KDTreeSearch.build, LinearSearch.build])
    def test_neighbor_search_is_injectable(self, density_points, factory):
        clusters = DBSCAN(4, 2.0, neighbor_search=factory).fit(density_points)
        assert [cluster.memberships for cluster in clusters] == [groups for groups, _ in EXPECTED_GROUPS]

    def test_squared_euclidean_radius(self, density_points):
        clusters = DBSCAN(4, 4.0, squared_euclidean).fit(density_points)
        assert [cluster.size for cluster in clusters] == [7, 4, 5]

    def test_empty_points(self):
        assert DBSCAN(4, 2.0).fit([]) == []

    def test_all_noise(self, density_points):
        assert DBSCAN(20, 1.0).fit(density_points) == []

    def test_min_points_one_clusters_everything(self, density_points):
        clusters = DBSCAN(1, 0.5).fit(density_points)
        assert len(clusters) == len(density_points)

    def test_border_point_joins_first_cluster(self):
        # The point at 11.0 is reachable from both groups but has only 3 neighbors itself.
        points = [[0.0], [1.0], [2.0], [3.0], [11.0], [19.0], [20.0], [21.0], [22.0]]
        clusters = DBSCAN(4, 8.0).fit(points)
        assert [cluster.memberships for cluster in clusters] == [{0, 1, 2, 3, 4}, {5, 6, 7, 8}]

    @pytest.mark.parametrize('min_points, epsilon', [(0, 1.0), (1.5, 1.0), (2, -0.5), (2, float('nan'))])
    def test_invalid_parameters(self, min_points, epsilon):
        with pytest.raises(ValidationError):
            DBSCAN(min_points, epsilon)

    def test_accepts_numpy_scalars(self, density_points):
        clusters = DBSCAN(np.int64(4), np.float32(2.0)).fit(density_points)
        assert [cluster.size for cluster in clusters] == [7, 4, 5]

    @pytest.mark.parametrize('min_points, epsilon', [(3, 0.8), (5, 1.2), (10, 1.5)])
    def test_matches_sklearn(self, rng, min_points, epsilon):
        points = np.concatenate([
            rng.normal(loc=(0.0, 0.0), scale=0.6, size=(60, 2)),
            rng.normal(loc=(5.0, 5.0), scale=0.8, size=(60, 2)),
            rng.uniform(-3.0, 8.0, size=(20, 2)),
        ])
        clusters = DBSCAN(min_points, epsilon).fit(points)
        reference = SklearnDBSCAN(eps=epsilon, min_samples=min_points).fit(points)

        clustered = set().union(*(cluster.memberships for cluster in clusters)) if clusters else set()
        expected_noise = set(np.flatnonzero(reference.labels_ == -1).tolist())
        assert set(range(len(points))) - clustered == expected_noise

        cores = set(reference.core_sample_indices_.tolist())
        actual_core_groups = {frozenset(cluster.memberships & cores) for cluster in clusters}
        expected_core_groups = {
            frozenset(index for index in cores if reference.labels_[index] == label)
            for label in set(reference.labels_.tolist()) - {-1}
        }
        assert actual_core_groups == expected_core_groups
        assert_disjoint(clusters, len(points))


class TestDBSCANPlusPlus:
    """Test DBSCAN with sampled core points"""

    SHUFFLED = [
        [0, 0], [0, 8], [1, 0], [4, 3], [5, 4], [1, 1], [5, 3], [2, 2], [4, 5],
        [1, 2], [1, 7], [1, 8], [0, 7], [2, 1], [9, 8], [4, 4], [0, 1],
    ]

    def test_full_probability_matches_dbscan(self, density_points):
        clusters = DBSCANPlusPlus(1.0, 4, 2.0).fit(density_points)
        assert [cluster.memberships for cluster in clusters] == [groups for groups, _ in EXPECTED_GROUPS]
        for cluster, (_, centroid) in zip(clusters, EXPECTED_GROUPS):
            assert cluster.centroid == pytest.approx(centroid)

    def test_sampled_cores(self, zero_random):
        # A zero random source samples the first ceil(0.5 * 17) = 9 points as candidates.
        clusters = DBSCANPlusPlus(0.5, 2, 2.0, random_source=zero_random).fit(self.SHUFFLED)
        assert [cluster.memberships for cluster in clusters] == [
            {0, 2, 5, 7, 9, 13, 16},
            {1, 10, 11, 12},
            {3, 4, 6, 8, 15},
        ]
        assert clusters[1].centroid == pytest.approx((0.5, 7.5))

    def test_points_far_from_sampled_cores_are_noise(self, zero_random):
        # Candidates are points 0..3; points 7, 8, 9 and 14 lie farther than epsilon from all of them.
        clusters = DBSCANPlusPlus(0.2, 3, 1.5, random_source=zero_random).fit(self.SHUFFLED)
        assert [cluster.memberships for cluster in clusters] == [
            {0, 2, 5, 13, 16},
            {1, 10, 11, 12},
            {3, 4, 6, 15},
        ]

    def test_seeded_runs_are_reproducible(self, random_points):
        first = DBSCANPlusPlus(0.3, 5, 1.5, random_source=np.random.default_rng(9)).fit(random_points)
        second = DBSCANPlusPlus(0.3, 5, 1.5, random_source=np.random.default_rng(9)).fit(random_points)
        assert [cluster.memberships for cluster in first] == [cluster.memberships for cluster in second]
        assert_disjoint(first, len(random_points))

    def test_accepts_numpy_scalars(self, density_points):
        clusters = DBSCANPlusPlus(np.float64(1.0), np.int32(4), np.float32(2.0)).fit(density_points)
        assert [cluster.size for cluster in clusters] == [7, 4, 5]

    def test_no_core_points(self, density_points):
        assert DBSCANPlusPlus(1.0, 30, 1.0).fit(density_points) == []

    def test_empty_points(self):
        assert DBSCANPlusPlus(0.25, 2, 2.0).fit([]) == []

    @pytest.mark.parametrize('arguments', [
        (0.0, 10, 2.5),
        (1.1, 10, 2.5),
        (0.25, 0, 2.5),
        (0.25, 10, -0.1),
    ])
    def test_invalid_parameters(self, arguments):
        with pytest.raises(ValidationError):
            DBSCANPlusPlus(*arguments)
