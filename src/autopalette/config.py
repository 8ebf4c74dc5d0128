"""Clustering engine configuration settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Constants
DEFAULT_LEAF_SIZE = 10
DEFAULT_MAX_ITERATIONS = 100
DEFAULT_TOLERANCE = 1e-4


class ClusteringSettings(BaseSettings):
    """Default values shared by the spatial index and clustering algorithms.

    Every value can be overridden with an ``AUTOPALETTE_``-prefixed
    environment variable, e.g. ``AUTOPALETTE_LEAF_SIZE=16``. Explicit
    constructor arguments always take precedence over these defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="AUTOPALETTE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    leaf_size: int = Field(
        default=DEFAULT_LEAF_SIZE,
        ge=1,
        description="Maximum number of points stored in a KD-tree leaf bucket",
    )
    random_seed: int | None = Field(
        default=None,
        description="Seed for center initialization and random sampling (unset = nondeterministic)",
    )
    max_iterations: int = Field(
        default=DEFAULT_MAX_ITERATIONS,
        ge=1,
        description="Default iteration cap for Kmeans",
    )
    tolerance: float = Field(
        default=DEFAULT_TOLERANCE,
        ge=0.0,
        allow_inf_nan=False,
        description="Default centroid movement below which Kmeans stops",
    )


@lru_cache(maxsize=1)
def get_settings() -> ClusteringSettings:
    """Return the cached settings loaded from the environment.

    Call ``get_settings.cache_clear()`` after changing the environment.
    """
    return ClusteringSettings()
