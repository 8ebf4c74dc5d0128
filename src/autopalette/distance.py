"""Distance type and distance measures.

A ``Distance`` is a validated, finite and non-negative ``float``. Distance
measures are symmetric and respect the triangle inequality (or, for the
squared Euclidean measure, a monotone transform of it), which is what the
KD-tree relies on when it prunes subtrees through ``axis_distance``.
"""

from __future__ import annotations

import math
from typing import Any, Protocol, runtime_checkable

import numpy as np
import numpy.typing as npt

from autopalette.exceptions import InvalidDistanceError


class Distance(float):
    """A finite, non-negative distance value.

    Raises:
        InvalidDistanceError: If the value is NaN, infinite or negative
    """

    __slots__ = ()

    def __new__(cls, value: Any) -> "Distance":
        try:
            number = float(value)
        except (TypeError, ValueError) as e:
            raise InvalidDistanceError(f"The value({value!r}) is not a valid distance") from e
        if not math.isfinite(number) or number < 0.0:
            raise InvalidDistanceError(f"The value({value!r}) is not a valid distance")
        return super().__new__(cls, number)

    def __repr__(self) -> str:
        return f"Distance({float(self)!r})"


def is_distance(value: Any) -> bool:
    """Check whether the given value is a valid distance without raising."""
    if isinstance(value, bool) or not isinstance(value, (int, float, np.floating, np.integer)):
        return False
    return math.isfinite(value) and value >= 0.0


def to_distance(value: float) -> Distance:
    """Convert the given value to a distance.

    Raises:
        InvalidDistanceError: If the value is not a valid distance
    """
    if isinstance(value, Distance):
        return value
    return Distance(value)


@runtime_checkable
class DistanceMeasure(Protocol):
    """Protocol for distance measures used by the spatial indexes."""

    def measure(self, point1: npt.ArrayLike, point2: npt.ArrayLike) -> Distance:
        """Return the distance between two points."""
        ...

    def measure_many(
        self, query: npt.ArrayLike, points: npt.NDArray[np.float64]
    ) -> npt.NDArray[np.float64]:
        """Return the distances from the query to every row of points."""
        ...

    def axis_distance(self, delta: float) -> float:
        """Return the smallest distance implied by a gap along one axis."""
        ...


def _check_finite(distances: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    if not np.all(np.isfinite(distances)):
        raise InvalidDistanceError("Either point contains a non-finite coordinate")
    return distances


class SquaredEuclideanDistance:
    """Squared Euclidean distance, for ranking-only comparisons."""

    def measure(self, point1: npt.ArrayLike, point2: npt.ArrayLike) -> Distance:
        delta = np.asarray(point2, dtype=np.float64) - np.asarray(point1, dtype=np.float64)
        total = float(np.dot(delta, delta))
        if not math.isfinite(total):
            raise InvalidDistanceError("Either point contains a non-finite coordinate")
        return Distance(total)

    def measure_many(
        self, query: npt.ArrayLike, points: npt.NDArray[np.float64]
    ) -> npt.NDArray[np.float64]:
        delta = points - np.asarray(query, dtype=np.float64)
        return _check_finite(np.einsum("ij,ij->i", delta, delta))

    def axis_distance(self, delta: float) -> float:
        return delta * delta

    def __repr__(self) -> str:
        return "SquaredEuclideanDistance()"


class EuclideanDistance:
    """Euclidean (L2) distance."""

    def measure(self, point1: npt.ArrayLike, point2: npt.ArrayLike) -> Distance:
        delta = np.asarray(point2, dtype=np.float64) - np.asarray(point1, dtype=np.float64)
        total = float(np.dot(delta, delta))
        if not math.isfinite(total):
            raise InvalidDistanceError("Either point contains a non-finite coordinate")
        return Distance(math.sqrt(total))

    def measure_many(
        self, query: npt.ArrayLike, points: npt.NDArray[np.float64]
    ) -> npt.NDArray[np.float64]:
        delta = points - np.asarray(query, dtype=np.float64)
        return np.sqrt(_check_finite(np.einsum("ij,ij->i", delta, delta)))

    def axis_distance(self, delta: float) -> float:
        return abs(delta)

    def __repr__(self) -> str:
        return "EuclideanDistance()"


euclidean = EuclideanDistance()
squared_euclidean = SquaredEuclideanDistance()
