"""Nearest neighbor search indexes."""

from autopalette.neighbors._base import Neighbor, NeighborSearch
from autopalette.neighbors._kdtree import KDTreeSearch
from autopalette.neighbors._linear import LinearSearch

__all__ = [
    # Protocol
    "NeighborSearch",
    "Neighbor",
    # Indexes
    "KDTreeSearch",
    "LinearSearch",
]
