"""Tests for validated algorithm parameters."""

import pytest
from pydantic import ValidationError

from autopalette.clustering import DBSCANppParams, HDBSCANParams, KmeansParams
from autopalette.clustering._params import validate_params
from autopalette.exceptions import AutoPaletteError, InvalidParameterError


class TestValidateParams:
    """Test validate_params."""

    def test_returns_model(self) -> None:
        """Test that valid values build the model."""
        params = validate_params(KmeansParams, k=3, max_iterations=10, tolerance=0.0)
        assert params.k == 3

    def test_wraps_validation_error(self) -> None:
        """Test that validation failures surface as InvalidParameterError."""
        with pytest.raises(InvalidParameterError) as exc_info:
            validate_params(KmeansParams, k=-1, max_iterations=10, tolerance=0.0)

        assert "k=-1" in str(exc_info.value)
        assert isinstance(exc_info.value, AutoPaletteError)
        assert isinstance(exc_info.value, ValueError)
        assert isinstance(exc_info.value.__cause__, ValidationError)

    def test_strict_types(self) -> None:
        """Test that numeric strings are not coerced."""
        with pytest.raises(InvalidParameterError):
            validate_params(HDBSCANParams, min_points="4", min_cluster_size=5)

    def test_ints_accepted_for_floats(self) -> None:
        """Test that integer epsilon and probability values are accepted."""
        params = validate_params(DBSCANppParams, min_points=4, epsilon=2, probability=1)
        assert params.epsilon == 2.0
        assert params.probability == 1.0

    def test_models_are_frozen(self) -> None:
        """Test that parameter models cannot be modified."""
        params = validate_params(HDBSCANParams, min_points=4, min_cluster_size=5)
        with pytest.raises(ValidationError):
            params.min_points = 10
