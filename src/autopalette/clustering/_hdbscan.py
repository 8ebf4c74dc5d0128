"""HDBSCAN clustering."""

from __future__ import annotations

import logging

import numpy as np
import numpy.typing as npt

from autopalette.clustering._cluster import Cluster, labels_from_clusters
from autopalette.clustering._hierarchy import (
    CondensedNode,
    assign_points,
    compute_stability,
    condense_tree,
    select_clusters,
    single_linkage,
)
from autopalette.clustering._params import HDBSCANParams, validate_params
from autopalette.distance import DistanceMeasure, euclidean
from autopalette.graph import MinimumSpanningTree
from autopalette.neighbors import KDTreeSearch
from autopalette.points import PointArray, PointsLike, as_point_array

logger = logging.getLogger(__name__)


class HDBSCAN:
    """Hierarchical density-based clustering.

    Builds a minimum spanning tree under the mutual reachability distance
    ``max(d(a, b), core(a), core(b))``, condenses its single-linkage
    hierarchy to branches of at least ``min_cluster_size`` points and keeps
    the most stable branches. Points outside every kept branch are noise.

    Example:
        >>> hdbscan = HDBSCAN(min_points=4, min_cluster_size=5)
        >>> labels = hdbscan.fit_predict(points)

    See: https://hdbscan.readthedocs.io/en/latest/how_hdbscan_works.html
    """

    def __init__(
        self,
        min_points: int,
        min_cluster_size: int,
        distance_measure: DistanceMeasure = euclidean,
        allow_single_cluster: bool = False,
        leaf_size: int | None = None,
    ) -> None:
        """Initialize HDBSCAN.

        Args:
            min_points: Neighbor rank, the point itself included, defining the core distance
            min_cluster_size: Smallest branch of the hierarchy that counts as a cluster
            distance_measure: Measure used for core and mutual reachability distances
            allow_single_cluster: Whether every point may end up in one cluster
            leaf_size: Leaf size of the KD-tree (default: settings.leaf_size)

        Raises:
            InvalidParameterError: If min_points < 1 or min_cluster_size < 2
        """
        params = validate_params(
            HDBSCANParams,
            min_points=min_points,
            min_cluster_size=min_cluster_size,
            allow_single_cluster=allow_single_cluster,
        )
        self.min_points = params.min_points
        self.min_cluster_size = params.min_cluster_size
        self.allow_single_cluster = params.allow_single_cluster
        self.distance_measure = distance_measure
        self.leaf_size = leaf_size

    def core_distances(self, points: PointArray) -> npt.NDArray[np.float64]:
        """Return each point's distance to its min_points-th nearest neighbor.

        The point itself is its own first neighbor, as with ``min_samples`` in
        scikit-learn, so min_points=1 gives zero everywhere. Counting only other
        points would shift every core distance one rank further out.
        """
        search = KDTreeSearch.build(points, self.leaf_size, self.distance_measure)
        k = min(points.shape[0], self.min_points)
        return np.array([float(search.search(point, k)[-1].distance) for point in points])

    def spanning_tree(self, points: PointArray) -> MinimumSpanningTree:
        """Build the minimum spanning tree under the mutual reachability distance."""
        core = self.core_distances(points)
        measure = self.distance_measure

        def mutual_reachability(u: int, targets: npt.NDArray[np.intp]) -> npt.NDArray[np.float64]:
            distances = measure.measure_many(points[u], points[targets])
            return np.maximum(np.maximum(distances, core[u]), core[targets])

        return MinimumSpanningTree.prim_rows(points.shape[0], mutual_reachability)

    def condensed_tree(self, points: PointsLike) -> list[CondensedNode]:
        """Return the condensed cluster hierarchy of the points."""
        array = as_point_array(points)
        n = array.shape[0]
        if n < 2:
            return []
        linkage = single_linkage(self.spanning_tree(array), n)
        return condense_tree(linkage, n, self.min_cluster_size)

    def fit(self, points: PointsLike) -> list[Cluster]:
        array = as_point_array(points)
        n = array.shape[0]
        if n < 2:
            logger.debug(f"HDBSCAN needs at least two points, got {n}")
            return []

        condensed = self.condensed_tree(array)
        stability = compute_stability(condensed)
        selected = select_clusters(condensed, stability, self.allow_single_cluster)
        labels = assign_points(condensed, selected, n)
        logger.debug(
            f"HDBSCAN condensed tree has {len(stability)} clusters, selected {len(selected)}"
        )

        clusters = [
            Cluster.from_members(cluster_id, array, np.flatnonzero(labels == cluster_id).tolist())
            for cluster_id in range(len(selected))
        ]
        noise = n - sum(cluster.size for cluster in clusters)
        logger.info(f"HDBSCAN found {len(clusters)} clusters and {noise} noise points in {n} points")
        return clusters

    def fit_predict(self, points: PointsLike) -> npt.NDArray[np.intp]:
        array = as_point_array(points)
        return labels_from_clusters(self.fit(array), array.shape[0])

    def __repr__(self) -> str:
        return (
            f"HDBSCAN(min_points={self.min_points}, min_cluster_size={self.min_cluster_size}, "
            f"allow_single_cluster={self.allow_single_cluster})"
        )
