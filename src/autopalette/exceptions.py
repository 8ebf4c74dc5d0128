"""Exception types raised by the clustering engine."""


class AutoPaletteError(Exception):
    """Base error type for all clustering engine failures."""


class InvalidParameterError(AutoPaletteError, ValueError):
    """Raised when an algorithm or query parameter is out of range."""


class InvalidDistanceError(AutoPaletteError, ValueError):
    """Raised when a distance is NaN, infinite or negative."""


class InvalidWeightError(AutoPaletteError, ValueError):
    """Raised when a graph edge weight is not a finite number."""


class InvalidPointsError(AutoPaletteError, ValueError):
    """Raised when a point set is ragged or not two-dimensional."""


class EmptyPointsError(AutoPaletteError, ValueError):
    """Raised when a spatial index is built from an empty point set."""
