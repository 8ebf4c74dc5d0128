"""DBSCAN++: DBSCAN with sampled core point detection."""

from __future__ import annotations

import logging
import math
from typing import Literal

import numpy as np
import numpy.typing as npt

from autopalette.clustering._cluster import NOISE, Cluster, labels_from_clusters
from autopalette.clustering._dbscan import label_density_clusters, region_query, search_radius
from autopalette.clustering._initializer import RandomState, make_rng
from autopalette.clustering._params import DBSCANppParams, validate_params
from autopalette.distance import DistanceMeasure, euclidean
from autopalette.neighbors import KDTreeSearch
from autopalette.points import PointArray, PointsLike, as_point_array

logger = logging.getLogger(__name__)


class DBSCANpp:
    """Approximate DBSCAN that only tests a subsample for core points.

    Only a ``probability`` share of the points is examined as core point
    candidates. DBSCAN then runs over the core points alone with the same
    ``min_points`` and ``epsilon``; a core point with too few core neighbors
    that no cluster reaches is an outlier. Finally every point joins the
    cluster of its nearest core point when that core point lies within
    ``epsilon`` and is not an outlier.

    See: Jang & Jiang, "DBSCAN++: Towards fast and scalable density clustering" (ICML 2019)
    """

    def __init__(
        self,
        probability: float,
        min_points: int,
        epsilon: float,
        distance_measure: DistanceMeasure = euclidean,
        sampling: Literal["stride", "random"] = "stride",
        random_state: RandomState = None,
        leaf_size: int | None = None,
    ) -> None:
        """Initialize DBSCAN++.

        Args:
            probability: Fraction of points examined as candidates, in (0, 1]
            min_points: Neighbors (the point itself excluded) required for a core point
            epsilon: Neighborhood radius in the units of the distance measure
            distance_measure: Measure used for neighborhood queries
            sampling: "stride" takes every round(1/probability)-th point,
                "random" draws ceil(probability * n) points
            random_state: Seed or generator for "random" sampling
            leaf_size: Leaf size of both KD-trees (default: settings.leaf_size)

        Raises:
            InvalidParameterError: If probability is outside (0, 1], min_points < 1,
                epsilon < 0 or sampling is unknown
        """
        params = validate_params(
            DBSCANppParams,
            probability=probability,
            min_points=min_points,
            epsilon=epsilon,
            sampling=sampling,
        )
        self.probability = params.probability
        self.min_points = params.min_points
        self.epsilon = params.epsilon
        self.sampling = params.sampling
        self.distance_measure = distance_measure
        self.random_state = random_state
        self.leaf_size = leaf_size

    @property
    def stride(self) -> int:
        """Step between stride-sampled candidates: 1/probability, halves rounding up."""
        return max(1, math.floor(1.0 / self.probability + 0.5))

    def fit(self, points: PointsLike) -> list[Cluster]:
        array = as_point_array(points)
        n = array.shape[0]
        if n == 0:
            return []

        radius = search_radius(self.epsilon)
        search = KDTreeSearch.build(array, self.leaf_size, self.distance_measure)
        core_indices = self._find_core_points(array, search, radius)
        if not core_indices:
            logger.warning(
                f"DBSCAN++ found no core points among {n} points "
                f"(min_points={self.min_points}, epsilon={self.epsilon})"
            )
            return []

        core_points = array[core_indices]
        core_search = KDTreeSearch.build(core_points, self.leaf_size, self.distance_measure)
        core_labels = self._label_core_points(core_points, core_search, radius)
        clusters = self._assign(array, core_labels, core_search)

        logger.info(
            f"DBSCAN++ found {len(clusters)} clusters from {len(core_indices)} core points "
            f"in {n} points"
        )
        return clusters

    def fit_predict(self, points: PointsLike) -> npt.NDArray[np.intp]:
        array = as_point_array(points)
        return labels_from_clusters(self.fit(array), array.shape[0])

    def _candidates(self, n: int) -> list[int]:
        if self.sampling == "random":
            size = min(n, math.ceil(self.probability * n))
            rng = make_rng(self.random_state)
            return np.sort(rng.choice(n, size=size, replace=False)).tolist()
        return list(range(0, n, self.stride))

    def _find_core_points(
        self, points: PointArray, search: KDTreeSearch, radius: float
    ) -> list[int]:
        return [
            index
            for index in self._candidates(points.shape[0])
            if len(region_query(search, points, index, radius)) >= self.min_points
        ]

    def _label_core_points(
        self, core_points: PointArray, core_search: KDTreeSearch, radius: float
    ) -> npt.NDArray[np.intp]:
        """Run the DBSCAN labeling over the core points; outliers get NOISE."""
        labels, _ = label_density_clusters(core_points, core_search, radius, self.min_points)
        outliers = int(np.count_nonzero(labels == NOISE))
        if outliers:
            logger.debug(
                f"DBSCAN++ left {outliers} of {core_points.shape[0]} core points as outliers"
            )
        return labels

    def _assign(
        self,
        points: PointArray,
        core_labels: npt.NDArray[np.intp],
        core_search: KDTreeSearch,
    ) -> list[Cluster]:
        members: dict[int, list[int]] = {}
        for index in range(points.shape[0]):
            nearest = core_search.search_nearest(points[index])
            label = int(core_labels[nearest.index])
            if nearest.distance > self.epsilon or label == NOISE:
                continue
            members.setdefault(label, []).append(index)

        return [
            Cluster.from_members(cluster_id, points, indices)
            for cluster_id, (_, indices) in enumerate(sorted(members.items()))
        ]

    def __repr__(self) -> str:
        return (
            f"DBSCANpp(probability={self.probability}, min_points={self.min_points}, "
            f"epsilon={self.epsilon}, sampling={self.sampling!r})"
        )
