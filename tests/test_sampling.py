"""
Unit tests for sampling strategies.
"""

import numpy as np
import pytest

from palette_cluster import (
    FarthestPointSampling, RandomSampling, ValidationError, WeightedFarthestPointSampling,
)

LINE = [[0.0], [1.0], [2.0], [10.0]]


class TestRandomSampling:
    """Test uniform sampling without replacement"""

    def test_returns_requested_number_of_distinct_indices(self, random_points):
        sampled = RandomSampling(np.random.default_rng(0)).sample(random_points, 25)
        assert len(sampled) == 25
        assert all(0 <= index < len(random_points) for index in sampled)

    def test_clamps_to_point_count(self):
        assert RandomSampling().sample(LINE, 10) == {0, 1, 2, 3}

    def test_same_seed_same_sample(self, random_points):
        first = RandomSampling(np.random.default_rng(7)).sample(random_points, 10)
        second = RandomSampling(np.random.default_rng(7)).sample(random_points, 10)
        assert first == second

    def test_custom_random_source(self, zero_random):
        assert RandomSampling(zero_random).sample(LINE, 2) == {0, 1}

    @pytest.mark.parametrize('n', [0, -3, 1.5])
    def test_invalid_size(self, n):
        with pytest.raises(ValidationError):
            RandomSampling().sample(LINE, n)


class TestFarthestPointSampling:
    """Test greedy farthest-point sampling"""

    def test_starts_at_index_zero(self, random_points):
        assert 0 in FarthestPointSampling().sample(random_points, 5)

    def test_picks_farthest_points(self):
        assert FarthestPointSampling().sample(LINE, 2) == {0, 3}
        assert FarthestPointSampling().sample(LINE, 3) == {0, 2, 3}

    def test_is_deterministic(self, random_points):
        sampling = FarthestPointSampling()
        assert sampling.sample(random_points, 20) == sampling.sample(random_points, 20)

    @pytest.mark.parametrize('n', [4, 5, 100])
    def test_returns_all_indices(self, n):
        assert FarthestPointSampling().sample(LINE, n) == {0, 1, 2, 3}

    def test_duplicate_points(self):
        assert len(FarthestPointSampling().sample([[1.0, 1.0]] * 6, 3)) == 3

    def test_invalid_size(self):
        with pytest.raises(ValidationError):
            FarthestPointSampling().sample(LINE, 0)


class TestWeightedFarthestPointSampling:
    """Test weight-biased farthest-point sampling"""

    def test_starts_at_heaviest_point(self):
        assert WeightedFarthestPointSampling([1, 1, 100, 1]).sample(LINE, 1) == {2}

    def test_weights_bias_selection(self):
        assert WeightedFarthestPointSampling([1, 1, 100, 1]).sample(LINE, 2) == {2, 3}
        assert WeightedFarthestPointSampling([1, 1, 100, 0.1]).sample(LINE, 2) == {0, 2}

    def test_returns_all_indices(self):
        assert WeightedFarthestPointSampling([1, 2, 3, 4]).sample(LINE, 4) == {0, 1, 2, 3}

    def test_weights_length_mismatch(self):
        with pytest.raises(ValidationError, match='must be the same'):
            WeightedFarthestPointSampling([1, 2]).sample(LINE, 2)

    @pytest.mark.parametrize('weights', [[1, -1, 1, 1], [1, np.nan, 1, 1]])
    def test_invalid_weights(self, weights):
        with pytest.raises(ValidationError):
            WeightedFarthestPointSampling(weights)
