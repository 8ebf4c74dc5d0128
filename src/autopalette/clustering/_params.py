"""Validated algorithm parameters.

Each clustering algorithm validates its parameters through one of these
frozen models at construction time, so invalid values are rejected before
any computation starts.
"""

from __future__ import annotations

from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from autopalette.exceptions import InvalidParameterError

ParamsT = TypeVar("ParamsT", bound=BaseModel)


class _Params(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True, extra="forbid")


class KmeansParams(_Params):
    """Parameters of Kmeans.

    Attributes:
        k: Number of clusters
        max_iterations: Maximum number of assignment/update rounds
        tolerance: Largest centroid movement considered converged
    """

    k: int = Field(gt=0)
    max_iterations: int = Field(gt=0)
    tolerance: float = Field(ge=0.0, allow_inf_nan=False)


class DBSCANParams(_Params):
    """Parameters of DBSCAN.

    Attributes:
        min_points: Neighbors (excluding the point itself) required for a core point
        epsilon: Neighborhood radius
    """

    min_points: int = Field(ge=1)
    epsilon: float = Field(ge=0.0, allow_inf_nan=False)


class DBSCANppParams(DBSCANParams):
    """Parameters of DBSCAN++.

    Attributes:
        probability: Fraction of points examined as core point candidates
        sampling: "stride" for every round(1/probability)-th point, "random" for a seeded subset
    """

    probability: float = Field(gt=0.0, le=1.0, allow_inf_nan=False)
    sampling: Literal["stride", "random"] = "stride"


class HDBSCANParams(_Params):
    """Parameters of HDBSCAN.

    Attributes:
        min_points: Neighbor rank (the point itself included) defining the core distance
        min_cluster_size: Smallest branch of the hierarchy that counts as a cluster
        allow_single_cluster: Whether the root may be selected as the only cluster
    """

    min_points: int = Field(ge=1)
    min_cluster_size: int = Field(ge=2)
    allow_single_cluster: bool = False


class HierarchicalParams(_Params):
    """Parameters of single-linkage hierarchical clustering."""

    k: int = Field(gt=0)


def validate_params(model: type[ParamsT], **values: Any) -> ParamsT:
    """Build a parameter model, re-raising validation failures.

    Raises:
        InvalidParameterError: If any value is out of range or of the wrong type
    """
    try:
        return model(**values)
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}={error.get('input')!r}: {error['msg']}"
            for error in e.errors()
        )
        raise InvalidParameterError(f"Invalid {model.__name__}: {details}") from e
