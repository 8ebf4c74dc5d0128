"""Graph building blocks: disjoint sets and spanning trees."""

from autopalette.graph._mst import (
    MinimumSpanningTree,
    RowWeightFunction,
    WeightedEdge,
    WeightFunction,
)
from autopalette.graph._union_find import LabelingUnionFind, UnionFind

__all__ = [
    "UnionFind",
    "LabelingUnionFind",
    "MinimumSpanningTree",
    "WeightedEdge",
    "WeightFunction",
    "RowWeightFunction",
]
