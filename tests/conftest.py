"""
Shared fixtures for palette_cluster tests.
"""
import numpy as np
import pytest
from loguru import logger


@pytest.fixture
def kd_points():
    """14 3-D points with known nearest-neighbor answers."""
    return [
        [1, 2, 3],
        [5, 1, 2],
        [9, 3, 4],
        [3, 9, 1],
        [4, 8, 3],
        [9, 1, 1],
        [5, 0, 0],
        [1, 1, 1],
        [7, 2, 2],
        [5, 9, 1],
        [1, 1, 9],
        [9, 8, 7],
        [2, 3, 4],
        [4, 5, 4],
    ]


@pytest.fixture
def density_points():
    """Three dense 2-D groups plus one outlier at (9, 8)."""
    return [
        [0, 0],  # 0
        [0, 1],  # 0
        [0, 7],  # 1
        [0, 8],  # 1
        [1, 0],  # 0
        [1, 1],  # 0
        [1, 2],  # 0
        [1, 7],  # 1
        [1, 8],  # 1
        [2, 1],  # 0
        [2, 2],  # 0
        [4, 3],  # 2
        [4, 4],  # 2
        [4, 5],  # 2
        [5, 3],  # 2
        [5, 4],  # 2
        [9, 8],  # outlier
    ]


@pytest.fixture
def kmeans_points():
    return [
        [0, 0, 0],
        [0, 0, 1],
        [1, 0, 0],
        [2, 2, 2],
        [2, 1, 2],
        [4, 4, 4],
        [4, 4, 5],
        [3, 4, 5],
    ]


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def random_points(rng):
    """300 continuous 3-D points, free of distance ties."""
    return rng.random((300, 3)) * 10


@pytest.fixture
def two_color_image():
    """20x20 RGB image: left half red, right half blue."""
    pixels = np.zeros((20, 20, 3), dtype=np.uint8)
    pixels[:, :10] = (255, 0, 0)
    pixels[:, 10:] = (0, 0, 255)
    return pixels


@pytest.fixture
def log_messages():
    """Capture package log messages; logging is switched off again afterwards."""
    from palette_cluster import configure_logging

    messages = []
    handler_id = configure_logging('DEBUG', sink=messages.append)
    yield messages
    logger.remove(handler_id)
    logger.disable('palette_cluster')


class ZeroRandom:
    """Random source that always returns 0.0."""

    def random(self):
        return 0.0


@pytest.fixture
def zero_random():
    return ZeroRandom()
