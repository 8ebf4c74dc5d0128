"""Pytest fixtures for autopalette tests."""

from collections.abc import Iterator

import numpy as np
import pytest

from autopalette.config import get_settings

# Two dense blobs and a sparse one; DBSCAN(min_points=4, epsilon=2.0) finds 7 + 5 points
BLOB_POINTS = [
    [0.0, 0.0],
    [0.0, 1.0],
    [0.0, 7.0],
    [0.0, 8.0],
    [1.0, 0.0],
    [1.0, 1.0],
    [1.0, 2.0],
    [1.0, 7.0],
    [1.0, 8.0],
    [2.0, 1.0],
    [2.0, 2.0],
    [4.0, 3.0],
    [4.0, 4.0],
    [4.0, 5.0],
    [5.0, 3.0],
    [5.0, 4.0],
]

# Three small groups in 3-D
KMEANS_POINTS = [
    [0.0, 0.0, 0.0],
    [0.0, 0.0, 1.0],
    [1.0, 0.0, 0.0],
    [2.0, 2.0, 2.0],
    [2.0, 1.0, 2.0],
    [4.0, 4.0, 4.0],
    [4.0, 4.0, 5.0],
    [3.0, 4.0, 5.0],
]

MST_POINTS = [[0.0, 0.0], [8.0, 4.0], [1.0, 2.0], [4.0, 2.0]]


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Iterator[None]:
    """Reset cached settings so environment changes never leak between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def blob_points() -> list[list[float]]:
    """Return the 16-point two-blob fixture."""
    return [list(point) for point in BLOB_POINTS]


@pytest.fixture
def kmeans_points() -> list[list[float]]:
    """Return the 8-point 3-D fixture."""
    return [list(point) for point in KMEANS_POINTS]


@pytest.fixture
def mst_points() -> list[list[float]]:
    """Return the 4-point spanning tree fixture."""
    return [list(point) for point in MST_POINTS]


@pytest.fixture
def random_points() -> np.ndarray:
    """Return 200 uniformly distributed 3-D points."""
    rng = np.random.default_rng(7)
    return rng.uniform(0.0, 100.0, size=(200, 3))


@pytest.fixture
def gaussian_blobs() -> tuple[np.ndarray, np.ndarray]:
    """Return three well separated 2-D Gaussian blobs and their true labels."""
    rng = np.random.default_rng(42)
    centers = np.array([[0.0, 0.0], [20.0, 20.0], [0.0, 40.0]])
    points = np.concatenate([center + rng.normal(scale=1.0, size=(40, 2)) for center in centers])
    labels = np.repeat(np.arange(3), 40)
    return points, labels
