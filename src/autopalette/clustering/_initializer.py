"""Center initialization strategies for Kmeans."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

import numpy as np

from autopalette.config import get_settings
from autopalette.distance import DistanceMeasure, squared_euclidean
from autopalette.exceptions import InvalidParameterError
from autopalette.points import PointArray

logger = logging.getLogger(__name__)

RandomState = int | np.random.Generator | None


def make_rng(random_state: RandomState) -> np.random.Generator:
    """Return a generator for the given seed, generator or None (settings seed)."""
    if isinstance(random_state, np.random.Generator):
        return random_state
    if random_state is None:
        random_state = get_settings().random_seed
    return np.random.default_rng(random_state)


def _validate_k(k: int) -> None:
    if isinstance(k, bool) or not isinstance(k, (int, np.integer)) or k <= 0:
        raise InvalidParameterError(f"The k({k}) must be a positive integer")


@runtime_checkable
class CenterInitializer(Protocol):
    """Protocol for choosing the initial Kmeans centers."""

    def initialize(self, points: PointArray, k: int) -> PointArray:
        """Return min(k, n) initial centers of shape (k, d)."""
        ...


class KmeansPlusPlusInitializer:
    """Kmeans++ seeding.

    The first center is drawn uniformly; every further center is drawn with
    probability proportional to its distance to the nearest chosen center.
    With the default squared Euclidean measure this is the classic D^2
    weighting.

    See: Arthur & Vassilvitskii, "k-means++: The Advantages of Careful Seeding" (2007)
    """

    def __init__(
        self,
        distance_measure: DistanceMeasure = squared_euclidean,
        random_state: RandomState = None,
    ) -> None:
        """Initialize the seeding strategy.

        Args:
            distance_measure: Measure used to weight candidate centers
            random_state: Seed or generator; None falls back to settings.random_seed
        """
        self.distance_measure = distance_measure
        self.random_state = random_state

    def initialize(self, points: PointArray, k: int) -> PointArray:
        _validate_k(k)
        n = points.shape[0]
        if n <= k:
            return points.copy()

        rng = make_rng(self.random_state)
        selected = [int(rng.integers(n))]
        is_selected = np.zeros(n, dtype=bool)
        is_selected[selected[0]] = True
        nearest = self.distance_measure.measure_many(points[selected[0]], points)

        while len(selected) < k:
            weights = np.where(is_selected, 0.0, nearest)
            cumulative = np.cumsum(weights)
            total = cumulative[-1]
            if total > 0.0:
                target = rng.random() * total
                index = int(np.searchsorted(cumulative, target, side="right"))
                # Guard against rounding at the end of the wheel.
                index = min(index, n - 1)
                while is_selected[index]:
                    index -= 1
            else:
                # Every remaining point coincides with a chosen center.
                index = int(rng.choice(np.flatnonzero(~is_selected)))

            selected.append(index)
            is_selected[index] = True
            nearest = np.minimum(nearest, self.distance_measure.measure_many(points[index], points))

        logger.debug(f"Kmeans++ selected initial centers {selected}")
        return points[selected].copy()

    def __repr__(self) -> str:
        return f"KmeansPlusPlusInitializer(distance_measure={self.distance_measure!r})"


class RandomInitializer:
    """Pick k distinct points uniformly at random."""

    def __init__(self, random_state: RandomState = None) -> None:
        self.random_state = random_state

    def initialize(self, points: PointArray, k: int) -> PointArray:
        _validate_k(k)
        n = points.shape[0]
        if n <= k:
            return points.copy()
        rng = make_rng(self.random_state)
        indices = rng.choice(n, size=k, replace=False)
        return points[np.sort(indices)].copy()

    def __repr__(self) -> str:
        return "RandomInitializer()"
