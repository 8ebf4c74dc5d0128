"""Brute-force nearest neighbor search."""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from autopalette.distance import Distance, DistanceMeasure, euclidean
from autopalette.exceptions import EmptyPointsError, InvalidPointsError
from autopalette.neighbors._base import Neighbor, validate_k, validate_radius
from autopalette.points import PointArray, PointsLike, as_point_array


class LinearSearch:
    """Nearest neighbor search by scanning every point.

    Shares the KDTreeSearch interface and tie-break order, which makes it a
    reference implementation for tests and a cheap index for tiny point sets.
    """

    def __init__(self, points: PointsLike, distance_measure: DistanceMeasure = euclidean) -> None:
        """Create a linear index.

        Args:
            points: Points of shape (n, d) to index
            distance_measure: Measure used for every query

        Raises:
            EmptyPointsError: If the point set is empty
        """
        array = as_point_array(points)
        if array.shape[0] == 0:
            raise EmptyPointsError("The given points array is empty")
        array.setflags(write=False)
        self._points: PointArray = array
        self._measure = distance_measure

    def __len__(self) -> int:
        return self._points.shape[0]

    @property
    def points(self) -> PointArray:
        return self._points

    def _distances(self, query: npt.ArrayLike) -> npt.NDArray[np.float64]:
        query = np.asarray(query, dtype=np.float64)
        if query.shape != (self._points.shape[1],):
            raise InvalidPointsError(
                f"The query shape {query.shape} does not match the dimension {self._points.shape[1]}"
            )
        return self._measure.measure_many(query, self._points)

    def search(self, query: npt.ArrayLike, k: int) -> list[Neighbor]:
        validate_k(k)
        distances = self._distances(query)
        ranked = np.lexsort((np.arange(distances.shape[0]), distances))[:k]
        return [Neighbor(int(index), Distance(distances[index])) for index in ranked]

    def search_nearest(self, query: npt.ArrayLike) -> Neighbor:
        distances = self._distances(query)
        index = int(np.argmin(distances))
        return Neighbor(index, Distance(distances[index]))

    def search_radius(self, query: npt.ArrayLike, radius: float) -> list[Neighbor]:
        validate_radius(radius)
        distances = self._distances(query)
        within = np.flatnonzero(distances <= radius)
        ranked = within[np.lexsort((within, distances[within]))]
        return [Neighbor(int(index), Distance(distances[index])) for index in ranked]

    def __repr__(self) -> str:
        return f"LinearSearch(n_points={len(self)}, measure={self._measure!r})"
