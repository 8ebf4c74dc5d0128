"""Clusterer protocol shared by every clustering algorithm."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np
import numpy.typing as npt

from autopalette.clustering._cluster import Cluster
from autopalette.points import PointsLike


@runtime_checkable
class Clusterer(Protocol):
    """Protocol for clustering algorithms.

    Parameters are validated when the algorithm is constructed. Afterwards
    the object holds no state between calls, so one instance can be shared
    across threads or handed to a worker pool.
    """

    def fit(self, points: PointsLike) -> list[Cluster]:
        """Cluster the points; an empty point set yields an empty list."""
        ...

    def fit_predict(self, points: PointsLike) -> npt.NDArray[np.intp]:
        """Cluster the points and return one label per point (-1 for noise)."""
        ...
