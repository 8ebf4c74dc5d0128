"""Clustering algorithms for autopalette."""

from autopalette.clustering._base import Clusterer
from autopalette.clustering._cluster import NOISE, Cluster, labels_from_clusters
from autopalette.clustering._dbscan import DBSCAN
from autopalette.clustering._dbscanpp import DBSCANpp
from autopalette.clustering._hdbscan import HDBSCAN
from autopalette.clustering._hierarchical import HierarchicalClustering
from autopalette.clustering._hierarchy import (
    CondensedNode,
    LinkageNode,
    assign_points,
    compute_stability,
    condense_tree,
    lambda_ceiling,
    select_clusters,
    single_linkage,
)
from autopalette.clustering._initializer import (
    CenterInitializer,
    KmeansPlusPlusInitializer,
    RandomInitializer,
)
from autopalette.clustering._kmeans import Kmeans
from autopalette.clustering._metrics import ClusterMetrics, compute_cluster_metrics
from autopalette.clustering._params import (
    DBSCANParams,
    DBSCANppParams,
    HDBSCANParams,
    HierarchicalParams,
    KmeansParams,
)

__all__ = [
    # Protocol
    "Clusterer",
    # Results
    "Cluster",
    "NOISE",
    "labels_from_clusters",
    # Clusterers
    "Kmeans",
    "DBSCAN",
    "DBSCANpp",
    "HDBSCAN",
    "HierarchicalClustering",
    # Initializers
    "CenterInitializer",
    "KmeansPlusPlusInitializer",
    "RandomInitializer",
    # Hierarchy
    "LinkageNode",
    "CondensedNode",
    "single_linkage",
    "lambda_ceiling",
    "condense_tree",
    "compute_stability",
    "select_clusters",
    "assign_points",
    # Parameters
    "KmeansParams",
    "DBSCANParams",
    "DBSCANppParams",
    "HDBSCANParams",
    "HierarchicalParams",
    # Metrics
    "ClusterMetrics",
    "compute_cluster_metrics",
]
