"""Neighbor search protocol."""

from __future__ import annotations

import math
from typing import NamedTuple, Protocol, runtime_checkable

import numpy as np
import numpy.typing as npt

from autopalette.distance import Distance
from autopalette.exceptions import InvalidParameterError


class Neighbor(NamedTuple):
    """A query result referencing the indexed points by position."""

    index: int
    distance: Distance


@runtime_checkable
class NeighborSearch(Protocol):
    """Protocol for nearest neighbor indexes.

    Implementations hold a snapshot of the points they were built from and
    are read-only afterwards.
    """

    def __len__(self) -> int:
        """Number of indexed points."""
        ...

    def search(self, query: npt.ArrayLike, k: int) -> list[Neighbor]:
        """Return the k nearest neighbors sorted by ascending distance."""
        ...

    def search_nearest(self, query: npt.ArrayLike) -> Neighbor:
        """Return the nearest neighbor."""
        ...

    def search_radius(self, query: npt.ArrayLike, radius: float) -> list[Neighbor]:
        """Return every neighbor within the radius sorted by ascending distance."""
        ...


def validate_k(k: int) -> None:
    """Reject a neighbor count below 1."""
    if isinstance(k, bool) or not isinstance(k, (int, np.integer)) or k < 1:
        raise InvalidParameterError(
            f"The number of neighbors to be searched({k}) must be an integer >= 1"
        )


def validate_radius(radius: float) -> None:
    """Reject a non-positive or non-finite radius."""
    if not math.isfinite(radius) or radius <= 0.0:
        raise InvalidParameterError(f"The radius({radius}) must be a finite number > 0.0")
