"""Point type aliases and conversion of point sets to arrays."""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np
import numpy.typing as npt

from autopalette.exceptions import InvalidPointsError

Point = tuple[float, ...]
Point2 = tuple[float, float]
Point3 = tuple[float, float, float]
# Normalized LAB color (3) followed by a normalized pixel coordinate (2).
Point5 = tuple[float, float, float, float, float]

PointArray = npt.NDArray[np.float64]
PointsLike = Union[Sequence[Sequence[float]], npt.ArrayLike]


def as_point_array(points: PointsLike) -> PointArray:
    """Convert a point set into a float64 array of shape (n, d).

    Args:
        points: Sequence of same-length coordinate sequences or a 2-D array

    Returns:
        A new array; an empty input yields an array of shape (0, 0)

    Raises:
        InvalidPointsError: If the points are ragged or not two-dimensional
    """
    if isinstance(points, np.ndarray):
        array = np.array(points, dtype=np.float64, copy=True)
    else:
        points = list(points)
        if not points:
            return np.empty((0, 0), dtype=np.float64)
        try:
            array = np.array(points, dtype=np.float64)
        except ValueError as e:
            raise InvalidPointsError(f"Points must have the same dimension: {e}") from e

    if array.size == 0:
        return np.empty((0, 0), dtype=np.float64)
    if array.ndim != 2:
        raise InvalidPointsError(
            f"Points must form a 2-D array of shape (n, d), got shape {array.shape}"
        )
    return array


def to_point(vector: npt.ArrayLike) -> Point:
    """Convert a coordinate vector to an immutable point tuple."""
    return tuple(float(value) for value in np.asarray(vector, dtype=np.float64))
