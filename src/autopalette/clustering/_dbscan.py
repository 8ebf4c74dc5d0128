"""DBSCAN clustering."""

from __future__ import annotations

import logging
from collections import deque

import numpy as np
import numpy.typing as npt

from autopalette.clustering._cluster import NOISE, Cluster, labels_from_clusters
from autopalette.clustering._params import DBSCANParams, validate_params
from autopalette.distance import DistanceMeasure, euclidean
from autopalette.neighbors import KDTreeSearch, NeighborSearch
from autopalette.points import PointArray, PointsLike, as_point_array

logger = logging.getLogger(__name__)

UNDEFINED = -2

# Smallest positive radius; with epsilon == 0 only exact duplicates are neighbors.
_MIN_RADIUS = float(np.nextafter(0.0, 1.0))


def search_radius(epsilon: float) -> float:
    """Map a validated epsilon (>= 0) to a radius accepted by the indexes."""
    return epsilon if epsilon > 0.0 else _MIN_RADIUS


def region_query(
    search: NeighborSearch, points: PointArray, index: int, radius: float
) -> list[int]:
    """Return the indices within the radius of points[index], the point itself excluded."""
    return [
        neighbor.index
        for neighbor in search.search_radius(points[index], radius)
        if neighbor.index != index
    ]


def label_density_clusters(
    points: PointArray, search: NeighborSearch, radius: float, min_points: int
) -> tuple[npt.NDArray[np.intp], list[list[int]]]:
    """Run the DBSCAN labeling pass over indexed points.

    Args:
        points: The points held by the search index, in index order
        search: Neighbor index over the points
        radius: Neighborhood radius accepted by the index
        min_points: Neighbors (the point itself excluded) required for a core point

    Returns:
        The label of every point (NOISE when no cluster reached it) and the
        members of each cluster in expansion order
    """
    n = points.shape[0]
    labels = np.full(n, UNDEFINED, dtype=np.intp)
    groups: list[list[int]] = []
    for index in range(n):
        if labels[index] != UNDEFINED:
            continue

        neighbors = region_query(search, points, index, radius)
        if len(neighbors) < min_points:
            # Provisional: a later cluster may claim it as a border point.
            labels[index] = NOISE
            continue

        groups.append(
            _expand(index, neighbors, len(groups), labels, points, search, radius, min_points)
        )
    return labels, groups


def _expand(
    seed: int,
    neighbors: list[int],
    label: int,
    labels: npt.NDArray[np.intp],
    points: PointArray,
    search: NeighborSearch,
    radius: float,
    min_points: int,
) -> list[int]:
    labels[seed] = label
    members = [seed]
    queue = deque(neighbors)
    while queue:
        index = queue.popleft()
        if labels[index] == NOISE:
            labels[index] = label
            members.append(index)
            continue
        if labels[index] != UNDEFINED:
            continue

        labels[index] = label
        members.append(index)
        expansion = region_query(search, points, index, radius)
        if len(expansion) >= min_points:
            queue.extend(other for other in expansion if labels[other] < 0)
    return members


class DBSCAN:
    """Density-based spatial clustering of applications with noise.

    A point with at least ``min_points`` other points within ``epsilon`` is a
    core point. Clusters grow breadth-first from core points; non-core points
    reached by a cluster become its border points, everything else is noise
    and is left out of the result.

    The point itself is not counted, so ``min_points=k`` here matches
    ``min_samples=k + 1`` in scikit-learn.

    A border point reachable from two clusters joins whichever cluster's
    expansion reaches it first, so the result depends on point order.

    See: https://en.wikipedia.org/wiki/DBSCAN
    """

    def __init__(
        self,
        min_points: int,
        epsilon: float,
        distance_measure: DistanceMeasure = euclidean,
        leaf_size: int | None = None,
    ) -> None:
        """Initialize DBSCAN.

        Args:
            min_points: Neighbors (the point itself excluded) required for a core point
            epsilon: Neighborhood radius in the units of the distance measure
            distance_measure: Measure used for neighborhood queries
            leaf_size: Leaf size of the KD-tree (default: settings.leaf_size)

        Raises:
            InvalidParameterError: If min_points < 1 or epsilon < 0
        """
        params = validate_params(DBSCANParams, min_points=min_points, epsilon=epsilon)
        self.min_points = params.min_points
        self.epsilon = params.epsilon
        self.distance_measure = distance_measure
        self.leaf_size = leaf_size

    def fit(self, points: PointsLike) -> list[Cluster]:
        """Cluster the points.

        Returns:
            Clusters in discovery order; members in expansion order
        """
        array = as_point_array(points)
        n = array.shape[0]
        if n == 0:
            return []

        search = KDTreeSearch.build(array, self.leaf_size, self.distance_measure)
        labels, groups = label_density_clusters(
            array, search, search_radius(self.epsilon), self.min_points
        )
        clusters = [
            Cluster.from_members(label, array, members) for label, members in enumerate(groups)
        ]

        noise = int(np.count_nonzero(labels == NOISE))
        logger.info(f"DBSCAN found {len(clusters)} clusters and {noise} noise points in {n} points")
        return clusters

    def fit_predict(self, points: PointsLike) -> npt.NDArray[np.intp]:
        array = as_point_array(points)
        return labels_from_clusters(self.fit(array), array.shape[0])

    def __repr__(self) -> str:
        return f"DBSCAN(min_points={self.min_points}, epsilon={self.epsilon})"
