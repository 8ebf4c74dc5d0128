"""Cluster value object."""

from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np
import numpy.typing as npt

from autopalette.exceptions import InvalidParameterError
from autopalette.points import Point, PointArray, to_point

NOISE = -1


class Cluster:
    """A group of points identified by their positions in the input array.

    The centroid is the arithmetic mean of the members and is kept up to
    date incrementally as members are added.

    Example:
        >>> cluster = Cluster(0, [0.0, 0.0])
        >>> cluster.add_member(1, [1.0, 2.0])
        >>> cluster.add_member(2, [2.0, 3.0])
        >>> cluster.centroid
        (1.5, 2.5)
    """

    __slots__ = ("cluster_id", "_centroid", "_members")

    def __init__(self, cluster_id: int, initial_centroid: npt.ArrayLike) -> None:
        """Create an empty cluster.

        Args:
            cluster_id: Identifier unique within one clustering result
            initial_centroid: Centroid reported until the first member is added
        """
        self.cluster_id = cluster_id
        self._centroid = np.array(initial_centroid, dtype=np.float64)
        # dict keeps insertion order and gives O(1) membership checks
        self._members: dict[int, None] = {}

    @classmethod
    def from_members(
        cls, cluster_id: int, points: PointArray, indices: Iterable[int]
    ) -> "Cluster":
        """Create a cluster whose centroid is the mean of the indexed points."""
        cluster = cls(cluster_id, np.zeros(points.shape[1], dtype=np.float64))
        members = list(dict.fromkeys(int(index) for index in indices))
        if members:
            if min(members) < 0:
                raise InvalidParameterError(f"Member indices must be non-negative: {min(members)}")
            cluster._members = dict.fromkeys(members)
            cluster._centroid = points[members].mean(axis=0)
        return cluster

    @property
    def size(self) -> int:
        return len(self._members)

    @property
    def is_empty(self) -> bool:
        return not self._members

    @property
    def members(self) -> tuple[int, ...]:
        """Member point indices in insertion order."""
        return tuple(self._members)

    @property
    def centroid(self) -> Point:
        return to_point(self._centroid)

    def centroid_array(self) -> npt.NDArray[np.float64]:
        """Return a copy of the centroid as an array."""
        return self._centroid.copy()

    def add_member(self, index: int, point: npt.ArrayLike) -> None:
        """Add a point and update the centroid; adding an index twice is a no-op.

        Raises:
            InvalidParameterError: If the index is negative
        """
        if index < 0:
            raise InvalidParameterError(f"The index({index}) is less than 0")
        if index in self._members:
            return

        size = len(self._members)
        self._centroid = (self._centroid * size + np.asarray(point, dtype=np.float64)) / (size + 1)
        self._members[index] = None

    def clear(self) -> None:
        """Remove every member and reset the centroid to the origin."""
        self._centroid = np.zeros_like(self._centroid)
        self._members.clear()

    def __len__(self) -> int:
        return len(self._members)

    def __repr__(self) -> str:
        centroid = ", ".join(f"{value:.4g}" for value in self._centroid)
        return f"Cluster(cluster_id={self.cluster_id}, size={self.size}, centroid=({centroid}))"


def labels_from_clusters(clusters: Sequence[Cluster], n_points: int) -> npt.NDArray[np.intp]:
    """Return one label per point: the position of its cluster, or -1 for noise."""
    labels = np.full(n_points, NOISE, dtype=np.intp)
    for label, cluster in enumerate(clusters):
        if cluster.members:
            labels[list(cluster.members)] = label
    return labels
