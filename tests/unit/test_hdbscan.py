"""Tests for HDBSCAN."""

import numpy as np
import pytest
from sklearn.cluster import HDBSCAN as SklearnHDBSCAN
from sklearn.neighbors import NearestNeighbors

from autopalette.clustering import HDBSCAN, NOISE, Clusterer
from autopalette.distance import euclidean
from autopalette.exceptions import InvalidParameterError


def _partition(labels: np.ndarray) -> set[frozenset[int]]:
    return {frozenset(np.flatnonzero(labels == label).tolist()) for label in set(labels.tolist()) - {NOISE}}


class TestHDBSCANInitialization:
    """Test HDBSCAN parameter validation."""

    def test_valid_parameters(self) -> None:
        """Test construction with valid parameters."""
        hdbscan = HDBSCAN(4, 5, allow_single_cluster=True)
        assert hdbscan.min_points == 4
        assert hdbscan.min_cluster_size == 5
        assert hdbscan.allow_single_cluster is True
        assert isinstance(hdbscan, Clusterer)

    @pytest.mark.parametrize(("min_points", "min_cluster_size"), [(0, 5), (4, 1), (4, 0)])
    def test_invalid_parameters(self, min_points: int, min_cluster_size: int) -> None:
        """Test that invalid parameters are rejected at construction."""
        with pytest.raises(InvalidParameterError):
            HDBSCAN(min_points, min_cluster_size)


class TestHDBSCANCoreDistances:
    """Test core and mutual reachability distances."""

    @pytest.mark.parametrize(
        ("min_points", "expected"),
        [(1, [0.0, 0.0, 0.0, 0.0]), (2, [1.0, 1.0, 2.0, 4.0]), (3, [3.0, 2.0, 3.0, 6.0]), (9, [7.0, 6.0, 4.0, 7.0])],
    )
    def test_core_distances(self, min_points: int, expected: list[float]) -> None:
        """Test that the core distance counts the point itself as its first neighbor."""
        points = np.array([[0.0], [1.0], [3.0], [7.0]])
        np.testing.assert_allclose(HDBSCAN(min_points, 2).core_distances(points), expected)

    def test_core_distances_match_sklearn_neighbors(self, random_points: np.ndarray) -> None:
        """Test that the core distance is the last of the k nearest training neighbors in sklearn."""
        min_points = 5
        distances, _ = NearestNeighbors(n_neighbors=min_points).fit(random_points).kneighbors(random_points)

        np.testing.assert_allclose(HDBSCAN(min_points, 2).core_distances(random_points), distances[:, -1])

    def test_spanning_tree_uses_mutual_reachability(self) -> None:
        """Test that edge weights are the max of distance and both core distances."""
        points = np.array([[0.0], [1.0], [3.0], [7.0]])
        hdbscan = HDBSCAN(2, 2)
        core = hdbscan.core_distances(points)

        tree = hdbscan.spanning_tree(points)

        for edge in tree:
            distance = euclidean.measure(points[edge.u], points[edge.v])
            assert edge.weight == max(distance, core[edge.u], core[edge.v])
        assert tree.weight == pytest.approx(1.0 + 2.0 + 4.0)


class TestHDBSCANFit:
    """Test HDBSCAN clustering."""

    def test_separated_blobs(self, gaussian_blobs: tuple[np.ndarray, np.ndarray]) -> None:
        """Test that three blobs give three clusters, one per blob."""
        points, truth = gaussian_blobs

        labels = HDBSCAN(5, 15).fit_predict(points)

        assert len(set(labels.tolist()) - {NOISE}) == 3
        for label in range(3):
            assert len(set(labels[truth == label].tolist()) - {NOISE}) == 1

    def test_matches_sklearn(self, gaussian_blobs: tuple[np.ndarray, np.ndarray]) -> None:
        """Test against sklearn HDBSCAN, whose min_samples also counts the point itself."""
        points, _ = gaussian_blobs

        labels = HDBSCAN(5, 15).fit_predict(points)
        expected = SklearnHDBSCAN(min_cluster_size=15, min_samples=5).fit_predict(points)

        assert _partition(labels) == _partition(expected)

    def test_cluster_centroids(self, gaussian_blobs: tuple[np.ndarray, np.ndarray]) -> None:
        """Test that each cluster's centroid is the mean of its members."""
        points, _ = gaussian_blobs
        for cluster in HDBSCAN(5, 15).fit(points):
            assert cluster.size >= 10
            np.testing.assert_allclose(cluster.centroid, points[list(cluster.members)].mean(axis=0))

    def test_single_cluster(self) -> None:
        """Test that one dense blob is only a cluster when a single cluster is allowed."""
        points = np.random.default_rng(4).normal(size=(30, 2))

        assert len(HDBSCAN(5, 25, allow_single_cluster=True).fit(points)) == 1
        assert HDBSCAN(5, 25).fit(points) == []

    @pytest.mark.parametrize("points", [[], [[1.0, 2.0]]])
    def test_fewer_than_two_points(self, points: list[list[float]]) -> None:
        """Test that fewer than two points yield no clusters."""
        assert HDBSCAN(4, 5).fit(points) == []
