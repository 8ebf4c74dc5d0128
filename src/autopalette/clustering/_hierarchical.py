"""Single-linkage hierarchical clustering cut at a fixed number of clusters."""

from __future__ import annotations

import logging

import numpy as np
import numpy.typing as npt

from autopalette.clustering._cluster import Cluster, labels_from_clusters
from autopalette.clustering._params import HierarchicalParams, validate_params
from autopalette.distance import DistanceMeasure, euclidean
from autopalette.graph import MinimumSpanningTree, UnionFind
from autopalette.points import PointsLike, as_point_array

logger = logging.getLogger(__name__)


class HierarchicalClustering:
    """Single-linkage clustering into k clusters.

    Merges points along the minimum spanning tree in ascending edge order and
    stops before the ``k - 1`` heaviest merges. Clusters are ordered by their
    smallest member index.
    """

    def __init__(self, k: int, distance_measure: DistanceMeasure = euclidean) -> None:
        params = validate_params(HierarchicalParams, k=k)
        self.k = params.k
        self.distance_measure = distance_measure

    def fit(self, points: PointsLike) -> list[Cluster]:
        array = as_point_array(points)
        n = array.shape[0]
        if n == 0:
            return []
        if n <= self.k:
            return [Cluster.from_members(index, array, [index]) for index in range(n)]

        measure = self.distance_measure
        tree = MinimumSpanningTree.prim_rows(
            n, lambda u, targets: measure.measure_many(array[u], array[targets])
        )
        union_find = UnionFind(n)
        for edge in sorted(tree, key=lambda edge: edge.weight)[: n - self.k]:
            union_find.union(edge.u, edge.v)

        clusters = [
            Cluster.from_members(cluster_id, array, members)
            for cluster_id, members in enumerate(union_find.components().values())
        ]
        logger.info(f"Single linkage clustered {n} points into {len(clusters)} clusters")
        return clusters

    def fit_predict(self, points: PointsLike) -> npt.NDArray[np.intp]:
        array = as_point_array(points)
        return labels_from_clusters(self.fit(array), array.shape[0])

    def __repr__(self) -> str:
        return f"HierarchicalClustering(k={self.k})"
