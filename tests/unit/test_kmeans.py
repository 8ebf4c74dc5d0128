"""Tests for Kmeans."""

import numpy as np
import pytest

from autopalette.clustering import Clusterer, Kmeans, KmeansPlusPlusInitializer, RandomInitializer
from autopalette.distance import euclidean
from autopalette.exceptions import InvalidParameterError


def _seeded(k: int, seed: int = 42, **kwargs: object) -> Kmeans:
    return Kmeans(k, initializer=KmeansPlusPlusInitializer(random_state=seed), **kwargs)


class TestKmeansInitialization:
    """Test Kmeans parameter validation."""

    def test_valid_parameters(self) -> None:
        """Test construction with explicit parameters."""
        kmeans = Kmeans(15, max_iterations=10, tolerance=1e-6)
        assert kmeans.k == 15
        assert kmeans.max_iterations == 10
        assert kmeans.tolerance == 1e-6
        assert isinstance(kmeans, Clusterer)

    def test_defaults_come_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that unset parameters fall back to the environment settings."""
        monkeypatch.setenv("AUTOPALETTE_MAX_ITERATIONS", "7")
        monkeypatch.setenv("AUTOPALETTE_TOLERANCE", "0.5")

        kmeans = Kmeans(3)

        assert kmeans.max_iterations == 7
        assert kmeans.tolerance == 0.5

    @pytest.mark.parametrize(
        ("k", "max_iterations", "tolerance"),
        [
            (float("nan"), 10, 0.01),
            (0, 10, 0.01),
            (10, float("nan"), 0.01),
            (10, 0, 0.01),
            (10, 10, float("nan")),
            (10, 10, -1.0),
        ],
    )
    def test_invalid_parameters(self, k: object, max_iterations: object, tolerance: object) -> None:
        """Test that invalid parameters are rejected at construction."""
        with pytest.raises(InvalidParameterError):
            Kmeans(k, max_iterations=max_iterations, tolerance=tolerance)


class TestKmeansFit:
    """Test Kmeans clustering."""

    @pytest.mark.parametrize(("k", "expected"), [(1, 1), (3, 3), (8, 8), (10, 8)])
    def test_number_of_clusters(self, kmeans_points: list[list[float]], k: int, expected: int) -> None:
        """Test that fit returns min(k, n) clusters."""
        clusters = _seeded(k, max_iterations=10, tolerance=0.01).fit(kmeans_points)
        assert len(clusters) == expected

    def test_every_point_assigned_once(self, kmeans_points: list[list[float]]) -> None:
        """Test that clusters partition the input."""
        clusters = _seeded(3).fit(kmeans_points)

        members = sorted(index for cluster in clusters for index in cluster.members)

        assert members == list(range(len(kmeans_points)))
        assert [cluster.cluster_id for cluster in clusters] == list(range(len(clusters)))

    def test_centroid_is_member_mean(self, kmeans_points: list[list[float]]) -> None:
        """Test that every centroid is the mean of its members."""
        points = np.array(kmeans_points)
        for cluster in _seeded(3).fit(points):
            np.testing.assert_allclose(cluster.centroid, points[list(cluster.members)].mean(axis=0))

    def test_points_fewer_than_k(self) -> None:
        """Test that n <= k gives one singleton cluster per point."""
        points = [[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]]

        clusters = Kmeans(5).fit(points)

        assert [cluster.members for cluster in clusters] == [(0,), (1,), (2,)]
        assert [cluster.centroid for cluster in clusters] == [(1.0, 2.0), (3.0, 4.0), (5.0, 6.0)]

    def test_empty_points(self) -> None:
        """Test that an empty point set yields no clusters."""
        assert Kmeans(3).fit([]) == []

    def test_seeded_runs_are_deterministic(self, gaussian_blobs: tuple[np.ndarray, np.ndarray]) -> None:
        """Test that a fixed seed gives identical assignments."""
        points, _ = gaussian_blobs

        first = _seeded(4, seed=9).fit_predict(points)
        second = _seeded(4, seed=9).fit_predict(points)

        np.testing.assert_array_equal(first, second)

    def test_rerun_on_centroids_is_idempotent(self, gaussian_blobs: tuple[np.ndarray, np.ndarray]) -> None:
        """Test that clustering the centroids with k == len(centroids) returns them unchanged."""
        points, _ = gaussian_blobs
        centroids = [cluster.centroid for cluster in _seeded(3).fit(points)]

        rerun = _seeded(len(centroids)).fit(centroids)

        assert sorted(cluster.centroid for cluster in rerun) == sorted(centroids)

    def test_fit_predict_matches_truth(self, gaussian_blobs: tuple[np.ndarray, np.ndarray]) -> None:
        """Test that well separated blobs are recovered up to relabeling."""
        points, truth = gaussian_blobs

        labels = _seeded(3).fit_predict(points)

        for label in range(3):
            assert len(set(labels[truth == label].tolist())) == 1
        assert len(set(labels.tolist())) == 3

    def test_random_initializer_and_euclidean(self, gaussian_blobs: tuple[np.ndarray, np.ndarray]) -> None:
        """Test Kmeans with injected initializer and distance measure."""
        points, _ = gaussian_blobs
        kmeans = Kmeans(3, distance_measure=euclidean, initializer=RandomInitializer(random_state=1))

        clusters = kmeans.fit(points)

        assert 1 <= len(clusters) <= 3
        assert sum(cluster.size for cluster in clusters) == len(points)
