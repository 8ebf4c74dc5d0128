"""
Point clustering engine for palette extraction.

Clusters n-dimensional points (color coordinates, optionally with pixel
positions) into groups representing the dominant regions of an image.

Classes
-------
KDTreeSearch, LinearSearch
    Nearest neighbor indexes with k-nearest, nearest and radius queries.

UnionFind, LabelingUnionFind, MinimumSpanningTree
    Graph building blocks used by the hierarchical algorithms.

Kmeans, DBSCAN, DBSCANpp, HDBSCAN, HierarchicalClustering
    Clustering algorithms. Each returns a list of ``Cluster`` objects from
    ``fit()`` and a label array from ``fit_predict()``.

Exceptions
----------
AutoPaletteError
    Base exception for all autopalette errors.

InvalidParameterError
    Raised when an algorithm or index parameter is out of range.

Example
-------
    >>> from autopalette import DBSCAN
    >>> clusters = DBSCAN(min_points=4, epsilon=2.0).fit(points)
    >>> [cluster.size for cluster in clusters]
    [7, 5]
"""

from autopalette.clustering import (
    DBSCAN,
    HDBSCAN,
    NOISE,
    Cluster,
    ClusterMetrics,
    Clusterer,
    DBSCANpp,
    HierarchicalClustering,
    Kmeans,
    KmeansPlusPlusInitializer,
    RandomInitializer,
    compute_cluster_metrics,
)
from autopalette.config import ClusteringSettings, get_settings
from autopalette.distance import (
    Distance,
    DistanceMeasure,
    EuclideanDistance,
    SquaredEuclideanDistance,
    euclidean,
    squared_euclidean,
)
from autopalette.exceptions import (
    AutoPaletteError,
    EmptyPointsError,
    InvalidDistanceError,
    InvalidParameterError,
    InvalidPointsError,
    InvalidWeightError,
)
from autopalette.graph import LabelingUnionFind, MinimumSpanningTree, UnionFind, WeightedEdge
from autopalette.neighbors import KDTreeSearch, LinearSearch, Neighbor, NeighborSearch

__version__ = "0.1.0"

__all__ = [
    # Clustering
    "Clusterer",
    "Cluster",
    "NOISE",
    "Kmeans",
    "KmeansPlusPlusInitializer",
    "RandomInitializer",
    "DBSCAN",
    "DBSCANpp",
    "HDBSCAN",
    "HierarchicalClustering",
    "ClusterMetrics",
    "compute_cluster_metrics",
    # Neighbor search
    "NeighborSearch",
    "Neighbor",
    "KDTreeSearch",
    "LinearSearch",
    # Graph
    "UnionFind",
    "LabelingUnionFind",
    "MinimumSpanningTree",
    "WeightedEdge",
    # Distance
    "Distance",
    "DistanceMeasure",
    "EuclideanDistance",
    "SquaredEuclideanDistance",
    "euclidean",
    "squared_euclidean",
    # Configuration
    "ClusteringSettings",
    "get_settings",
    # Exceptions
    "AutoPaletteError",
    "InvalidParameterError",
    "InvalidDistanceError",
    "InvalidWeightError",
    "InvalidPointsError",
    "EmptyPointsError",
]
