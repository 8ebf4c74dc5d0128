"""Minimum spanning tree construction."""

from __future__ import annotations

import logging
import math
from typing import Callable, Iterator, NamedTuple, Sequence

import numpy as np
import numpy.typing as npt

from autopalette.exceptions import InvalidWeightError

logger = logging.getLogger(__name__)

WeightFunction = Callable[[int, int], float]
# Weights of the edges from one vertex to each of the given vertex positions
RowWeightFunction = Callable[[int, npt.NDArray[np.intp]], npt.ArrayLike]


class WeightedEdge(NamedTuple):
    """An edge between two vertex positions of a caller-supplied vertex array."""

    u: int
    v: int
    weight: float


class MinimumSpanningTree:
    """Minimum spanning tree over a complete graph.

    See: https://en.wikipedia.org/wiki/Minimum_spanning_tree
    """

    def __init__(self, edges: Sequence[WeightedEdge]) -> None:
        self._edges = list(edges)
        self._weight = math.fsum(edge.weight for edge in self._edges)

    @property
    def edges(self) -> list[WeightedEdge]:
        """Edges in the order they were attached."""
        return list(self._edges)

    @property
    def weight(self) -> float:
        """Total weight of the tree."""
        return self._weight

    @property
    def is_empty(self) -> bool:
        return not self._edges

    def __len__(self) -> int:
        return len(self._edges)

    def __iter__(self) -> Iterator[WeightedEdge]:
        return iter(self._edges)

    @classmethod
    def prim(cls, vertices: Sequence[object], weight_function: WeightFunction) -> "MinimumSpanningTree":
        """Build the tree with Prim's algorithm from a pairwise weight function.

        Args:
            vertices: The vertices; only their count and positions are used
            weight_function: Weight of the edge between two vertex positions

        Returns:
            The tree; empty for fewer than two vertices

        Raises:
            InvalidWeightError: If the weight function returns a non-finite value
        """

        def row_weights(u: int, targets: npt.NDArray[np.intp]) -> list[float]:
            return [float(weight_function(u, int(v))) for v in targets]

        return cls.prim_rows(len(vertices), row_weights)

    @classmethod
    def prim_rows(cls, count: int, row_weights: RowWeightFunction) -> "MinimumSpanningTree":
        """Build the tree with Prim's algorithm, one weight row per attached vertex.

        Starts at the last vertex. Each unattached vertex keeps the cheapest
        edge seen so far into the attached set; after a vertex is attached,
        only the edges from it to the unattached vertices are weighted. Memory
        is O(V) and the work O(V^2), done a row at a time so that
        ``row_weights`` can compute a whole row with numpy.

        Ties keep the earlier attached endpoint and then the lower vertex
        position.

        Args:
            count: Number of vertices
            row_weights: Weights of the edges from one vertex to the given
                vertex positions, in the same order

        Returns:
            The tree; empty for fewer than two vertices

        Raises:
            InvalidWeightError: If a weight is not finite

        See: https://en.wikipedia.org/wiki/Prim%27s_algorithm
        """
        if count <= 1:
            return cls([])

        attached = np.zeros(count, dtype=bool)
        best = np.full(count, np.inf)
        source = np.full(count, -1, dtype=np.intp)
        edges: list[WeightedEdge] = []

        current = count - 1
        attached[current] = True
        for _ in range(count - 1):
            targets = np.flatnonzero(~attached)
            weights = np.asarray(row_weights(current, targets), dtype=np.float64)
            finite = np.isfinite(weights)
            if not finite.all():
                position = int(np.argmin(finite))
                raise InvalidWeightError(
                    f"The weight of the edge ({current}, {targets[position]}) "
                    f"is not finite: {weights[position]}"
                )

            closer = weights < best[targets]
            best[targets[closer]] = weights[closer]
            source[targets[closer]] = current

            nearest = int(targets[np.argmin(best[targets])])
            edges.append(WeightedEdge(int(source[nearest]), nearest, float(best[nearest])))
            attached[nearest] = True
            current = nearest

        logger.debug(f"Built minimum spanning tree over {count} vertices ({len(edges)} edges)")
        return cls(edges)
