"""Quality metrics for a finished clustering."""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
from pydantic import BaseModel, ConfigDict, Field
from sklearn.metrics import silhouette_score

from autopalette.clustering._cluster import NOISE, Cluster, labels_from_clusters
from autopalette.points import PointsLike, as_point_array

logger = logging.getLogger(__name__)


class ClusterMetrics(BaseModel):
    """Summary of one clustering result.

    Attributes:
        n_clusters: Number of clusters
        n_points: Number of input points
        n_noise: Points assigned to no cluster
        cluster_sizes: Size of each cluster, in cluster order
        silhouette: Mean silhouette coefficient of the clustered points, or
            None when fewer than two clusters (or too few points) exist
    """

    model_config = ConfigDict(frozen=True)

    n_clusters: int = Field(ge=0)
    n_points: int = Field(ge=0)
    n_noise: int = Field(ge=0)
    cluster_sizes: list[int] = Field(default_factory=list)
    silhouette: float | None = None

    @property
    def noise_ratio(self) -> float:
        return self.n_noise / self.n_points if self.n_points else 0.0


def compute_cluster_metrics(
    points: PointsLike, clusters: Sequence[Cluster], metric: str = "euclidean"
) -> ClusterMetrics:
    """Compute cluster counts and the silhouette score of a clustering.

    Args:
        points: The clustered points
        clusters: Clusters whose members index into points
        metric: Metric passed to sklearn.metrics.silhouette_score

    Returns:
        The metrics; noise points are left out of the silhouette score
    """
    array = as_point_array(points)
    n = array.shape[0]
    labels = labels_from_clusters(clusters, n)
    clustered = labels != NOISE
    n_clustered = int(np.count_nonzero(clustered))
    n_labels = len(np.unique(labels[clustered]))

    silhouette = None
    if 2 <= n_labels <= n_clustered - 1:
        silhouette = float(silhouette_score(array[clustered], labels[clustered], metric=metric))
    else:
        logger.debug(
            f"Skipping silhouette score: {n_labels} clusters over {n_clustered} clustered points"
        )

    return ClusterMetrics(
        n_clusters=len(clusters),
        n_points=n,
        n_noise=n - n_clustered,
        cluster_sizes=[cluster.size for cluster in clusters],
        silhouette=silhouette,
    )
