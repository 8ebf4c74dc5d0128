"""K-means clustering."""

from __future__ import annotations

import logging

import numpy as np
import numpy.typing as npt

from autopalette.clustering._cluster import Cluster, labels_from_clusters
from autopalette.clustering._initializer import CenterInitializer, KmeansPlusPlusInitializer
from autopalette.clustering._params import KmeansParams, validate_params
from autopalette.config import get_settings
from autopalette.distance import DistanceMeasure, squared_euclidean
from autopalette.neighbors import KDTreeSearch
from autopalette.points import PointArray, PointsLike, as_point_array

logger = logging.getLogger(__name__)


class Kmeans:
    """K-means clustering with pluggable center initialization.

    Each round builds a KD-tree over the current centroids, assigns every
    point to its nearest centroid and moves each centroid to the mean of its
    members, until no centroid moves by ``tolerance`` or more.

    Example:
        >>> kmeans = Kmeans(k=3, initializer=KmeansPlusPlusInitializer(random_state=42))
        >>> clusters = kmeans.fit(points)

    See: https://en.wikipedia.org/wiki/K-means_clustering
    """

    def __init__(
        self,
        k: int,
        max_iterations: int | None = None,
        tolerance: float | None = None,
        distance_measure: DistanceMeasure = squared_euclidean,
        initializer: CenterInitializer | None = None,
        leaf_size: int | None = None,
    ) -> None:
        """Initialize Kmeans.

        Args:
            k: Number of clusters
            max_iterations: Maximum number of rounds (default: settings.max_iterations)
            tolerance: Convergence threshold on centroid movement (default: settings.tolerance)
            distance_measure: Measure used for assignment and convergence
            initializer: Center initializer (default: Kmeans++ with the same measure)
            leaf_size: Leaf size of the centroid KD-tree (default: settings.leaf_size)

        Raises:
            InvalidParameterError: If k or max_iterations is not a positive
                integer, or tolerance is negative or not finite
        """
        settings = get_settings()
        params = validate_params(
            KmeansParams,
            k=k,
            max_iterations=settings.max_iterations if max_iterations is None else max_iterations,
            tolerance=settings.tolerance if tolerance is None else tolerance,
        )
        self.k = params.k
        self.max_iterations = params.max_iterations
        self.tolerance = params.tolerance
        self.distance_measure = distance_measure
        self.initializer = initializer or KmeansPlusPlusInitializer(distance_measure)
        self.leaf_size = leaf_size

    def fit(self, points: PointsLike) -> list[Cluster]:
        """Cluster the points into at most k non-empty clusters.

        Args:
            points: Points of shape (n, d)

        Returns:
            Non-empty clusters; one singleton cluster per point when n <= k
        """
        array = as_point_array(points)
        n = array.shape[0]
        if n == 0:
            return []

        if n <= self.k:
            return [Cluster.from_members(index, array, [index]) for index in range(n)]

        centroids = np.asarray(self.initializer.initialize(array, self.k), dtype=np.float64)
        assignments = np.zeros(n, dtype=np.intp)
        for iteration in range(1, self.max_iterations + 1):
            assignments = self._assign(array, centroids)
            updated = self._update(array, centroids, assignments)
            movement = max(
                float(self.distance_measure.measure(old, new))
                for old, new in zip(centroids, updated)
            )
            centroids = updated
            logger.debug(f"Kmeans iteration {iteration}: max centroid movement {movement:.6g}")
            if movement < self.tolerance:
                break

        # Final assignment against the converged centroids.
        assignments = self._assign(array, centroids)
        clusters = []
        for label in range(centroids.shape[0]):
            members = np.flatnonzero(assignments == label)
            if members.size == 0:
                continue
            clusters.append(Cluster.from_members(len(clusters), array, members.tolist()))

        logger.info(f"Kmeans clustered {n} points into {len(clusters)} clusters (k={self.k})")
        return clusters

    def fit_predict(self, points: PointsLike) -> npt.NDArray[np.intp]:
        array = as_point_array(points)
        return labels_from_clusters(self.fit(array), array.shape[0])

    def _assign(self, points: PointArray, centroids: PointArray) -> npt.NDArray[np.intp]:
        search = KDTreeSearch.build(centroids, self.leaf_size, self.distance_measure)
        return np.fromiter(
            (search.search_nearest(point).index for point in points),
            dtype=np.intp,
            count=points.shape[0],
        )

    @staticmethod
    def _update(
        points: PointArray, centroids: PointArray, assignments: npt.NDArray[np.intp]
    ) -> PointArray:
        """Move each centroid to its members' mean; empty clusters stay put."""
        k, dimension = centroids.shape
        totals = np.zeros((k, dimension), dtype=np.float64)
        np.add.at(totals, assignments, points)
        counts = np.bincount(assignments, minlength=k)
        updated = centroids.copy()
        occupied = counts > 0
        updated[occupied] = totals[occupied] / counts[occupied, np.newaxis]
        return updated

    def __repr__(self) -> str:
        return (
            f"Kmeans(k={self.k}, max_iterations={self.max_iterations}, "
            f"tolerance={self.tolerance}, initializer={self.initializer!r})"
        )
