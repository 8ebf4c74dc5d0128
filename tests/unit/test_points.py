"""Tests for point set conversion."""

import numpy as np
import pytest

from autopalette.exceptions import InvalidPointsError
from autopalette.points import as_point_array, to_point


class TestAsPointArray:
    """Test as_point_array."""

    def test_converts_sequences(self) -> None:
        """Test that nested sequences become a float64 (n, d) array."""
        array = as_point_array([(0, 1), (2, 3), (4, 5)])
        assert array.shape == (3, 2)
        assert array.dtype == np.float64

    def test_copies_arrays(self) -> None:
        """Test that the input array is never aliased."""
        source = np.zeros((2, 3))
        array = as_point_array(source)
        array[0, 0] = 1.0
        assert source[0, 0] == 0.0

    @pytest.mark.parametrize("points", [[], np.empty((0, 3))])
    def test_empty_input(self, points: object) -> None:
        """Test that empty input yields a (0, 0) array."""
        assert as_point_array(points).shape == (0, 0)

    def test_rejects_ragged_points(self) -> None:
        """Test that points of mixed dimension are rejected."""
        with pytest.raises(InvalidPointsError):
            as_point_array([[0.0, 1.0], [2.0]])

    def test_rejects_one_dimensional_input(self) -> None:
        """Test that a flat vector is not a point set."""
        with pytest.raises(InvalidPointsError):
            as_point_array(np.array([1.0, 2.0, 3.0]))


class TestToPoint:
    """Test to_point."""

    def test_returns_float_tuple(self) -> None:
        """Test conversion of an array row to a tuple of floats."""
        point = to_point(np.array([1, 2, 3]))
        assert point == (1.0, 2.0, 3.0)
        assert all(isinstance(value, float) for value in point)
