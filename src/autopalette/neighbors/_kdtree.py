"""KD-tree nearest neighbor search.

Nodes live in flat arrays addressed by integer node ids. An internal node
stores the index of its split point; a leaf stores a contiguous slice of the
permuted index array (its bucket). Building and querying both run on an
explicit work stack, so degenerate inputs (e.g. identical coordinates) cannot
exhaust the interpreter stack.
"""

from __future__ import annotations

import heapq
import logging

import numpy as np
import numpy.typing as npt

from autopalette.config import get_settings
from autopalette.distance import Distance, DistanceMeasure, euclidean
from autopalette.exceptions import EmptyPointsError, InvalidParameterError, InvalidPointsError
from autopalette.neighbors._base import Neighbor, validate_k, validate_radius
from autopalette.points import PointArray, PointsLike, as_point_array

logger = logging.getLogger(__name__)

NO_NODE = -1
ROOT = 0


class KDTreeSearch:
    """Nearest neighbor search over a KD-tree.

    The tree is built once from a snapshot of the given points and is
    read-only afterwards; rebuild it when the points change.

    Example:
        >>> tree = KDTreeSearch.build([[0, 0], [1, 1], [5, 5]], leaf_size=1)
        >>> tree.search_nearest([0.9, 0.8]).index
        1
    """

    def __init__(
        self,
        points: PointsLike,
        leaf_size: int | None = None,
        distance_measure: DistanceMeasure = euclidean,
    ) -> None:
        """Build a KD-tree.

        Args:
            points: Points of shape (n, d) to index
            leaf_size: Maximum bucket size of a leaf (default: settings.leaf_size)
            distance_measure: Measure used for every query

        Raises:
            EmptyPointsError: If the point set is empty
            InvalidParameterError: If leaf_size is less than 1
        """
        if leaf_size is None:
            leaf_size = get_settings().leaf_size
        if isinstance(leaf_size, bool) or not isinstance(leaf_size, (int, np.integer)) or leaf_size < 1:
            raise InvalidParameterError(f"The leaf size({leaf_size}) must be an integer >= 1")

        array = as_point_array(points)
        if array.shape[0] == 0:
            raise EmptyPointsError("The given points array is empty")
        array.setflags(write=False)

        self._points: PointArray = array
        self._leaf_size = int(leaf_size)
        self._measure = distance_measure

        self._order = np.arange(array.shape[0], dtype=np.intp)
        self._axes: list[int] = []
        self._splits: list[int] = []
        self._lefts: list[int] = []
        self._rights: list[int] = []
        self._starts: list[int] = []
        self._ends: list[int] = []
        self._depth = 0
        self._build()

        logger.debug(
            f"Built KD-tree over {len(self)} points: {self.node_count} nodes, depth {self._depth}"
        )

    @classmethod
    def build(
        cls,
        points: PointsLike,
        leaf_size: int | None = None,
        distance_measure: DistanceMeasure = euclidean,
    ) -> "KDTreeSearch":
        """Build a KD-tree over the given points (see ``__init__``)."""
        return cls(points, leaf_size=leaf_size, distance_measure=distance_measure)

    def __len__(self) -> int:
        return self._points.shape[0]

    @property
    def points(self) -> PointArray:
        """Read-only snapshot of the indexed points."""
        return self._points

    @property
    def dimension(self) -> int:
        return self._points.shape[1]

    @property
    def leaf_size(self) -> int:
        return self._leaf_size

    @property
    def node_count(self) -> int:
        return len(self._axes)

    @property
    def depth(self) -> int:
        """Depth of the deepest node (the root has depth 0)."""
        return self._depth

    @property
    def distance_measure(self) -> DistanceMeasure:
        return self._measure

    def _new_node(self) -> int:
        self._axes.append(0)
        self._splits.append(NO_NODE)
        self._lefts.append(NO_NODE)
        self._rights.append(NO_NODE)
        self._starts.append(0)
        self._ends.append(0)
        return len(self._axes) - 1

    def _build(self) -> None:
        points = self._points
        order = self._order
        dimension = points.shape[1]

        root = self._new_node()
        stack = [(root, 0, points.shape[0], 0)]
        while stack:
            node, start, end, depth = stack.pop()
            self._depth = max(self._depth, depth)
            axis = depth % dimension
            self._axes[node] = axis

            count = end - start
            if count <= self._leaf_size:
                self._starts[node] = start
                self._ends[node] = end
                continue

            segment = order[start:end]
            order[start:end] = segment[np.argsort(points[segment, axis], kind="stable")]
            median = start + count // 2
            self._splits[node] = int(order[median])

            if median > start:
                left = self._new_node()
                self._lefts[node] = left
                stack.append((left, start, median, depth + 1))
            if end > median + 1:
                right = self._new_node()
                self._rights[node] = right
                stack.append((right, median + 1, end, depth + 1))

    def _as_query(self, query: npt.ArrayLike) -> npt.NDArray[np.float64]:
        array = np.asarray(query, dtype=np.float64)
        if array.shape != (self.dimension,):
            raise InvalidPointsError(
                f"The query shape {array.shape} does not match the dimension {self.dimension}"
            )
        return array

    def _bucket(self, node: int) -> npt.NDArray[np.intp]:
        return self._order[self._starts[node] : self._ends[node]]

    def _children(self, node: int, query: npt.NDArray[np.float64]) -> tuple[int, int, float]:
        """Return the (near, far) children and the far side's axis lower bound."""
        axis = self._axes[node]
        delta = float(query[axis] - self._points[self._splits[node], axis])
        if delta < 0.0:
            return self._lefts[node], self._rights[node], self._measure.axis_distance(delta)
        return self._rights[node], self._lefts[node], self._measure.axis_distance(delta)

    def search(self, query: npt.ArrayLike, k: int) -> list[Neighbor]:
        """Search for the k nearest neighbors of the query.

        Args:
            query: The query point
            k: Number of neighbors to return

        Returns:
            Up to k neighbors sorted by ascending (distance, index)

        Raises:
            InvalidParameterError: If k is less than 1
        """
        validate_k(k)
        query = self._as_query(query)

        # Max-heap of the best candidates, keyed on (-distance, -index).
        heap: list[tuple[float, int]] = []

        def offer(index: int, distance: float) -> None:
            entry = (-distance, -index)
            if len(heap) < k:
                heapq.heappush(heap, entry)
            elif entry > heap[0]:
                heapq.heapreplace(heap, entry)

        stack = [(ROOT, 0.0)]
        while stack:
            node, bound = stack.pop()
            if len(heap) == k and bound > -heap[0][0]:
                continue

            split = self._splits[node]
            if split == NO_NODE:
                bucket = self._bucket(node)
                distances = self._measure.measure_many(query, self._points[bucket])
                for index, distance in zip(bucket.tolist(), distances.tolist()):
                    offer(index, distance)
                continue

            offer(split, float(self._measure.measure(query, self._points[split])))
            near, far, far_bound = self._children(node, query)
            if far != NO_NODE:
                stack.append((far, max(bound, far_bound)))
            if near != NO_NODE:
                stack.append((near, bound))

        ranked = sorted((-distance, -index) for distance, index in heap)
        return [Neighbor(index, Distance(distance)) for distance, index in ranked]

    def search_nearest(self, query: npt.ArrayLike) -> Neighbor:
        """Search for the single nearest neighbor of the query."""
        return self.search(query, 1)[0]

    def search_radius(self, query: npt.ArrayLike, radius: float) -> list[Neighbor]:
        """Search for every point within the radius of the query.

        Args:
            query: The query point
            radius: Inclusive search radius, in the units of the distance measure

        Returns:
            Neighbors with distance <= radius sorted by ascending (distance, index)

        Raises:
            InvalidParameterError: If the radius is not a finite number > 0
        """
        validate_radius(radius)
        query = self._as_query(query)

        found: list[tuple[float, int]] = []
        stack = [(ROOT, 0.0)]
        while stack:
            node, bound = stack.pop()
            if bound > radius:
                continue

            split = self._splits[node]
            if split == NO_NODE:
                bucket = self._bucket(node)
                distances = self._measure.measure_many(query, self._points[bucket])
                within = distances <= radius
                found.extend(zip(distances[within].tolist(), bucket[within].tolist()))
                continue

            distance = float(self._measure.measure(query, self._points[split]))
            if distance <= radius:
                found.append((distance, split))
            near, far, far_bound = self._children(node, query)
            if far != NO_NODE:
                stack.append((far, max(bound, far_bound)))
            if near != NO_NODE:
                stack.append((near, bound))

        found.sort()
        return [Neighbor(index, Distance(distance)) for distance, index in found]

    def __repr__(self) -> str:
        return (
            f"KDTreeSearch(n_points={len(self)}, dimension={self.dimension}, "
            f"leaf_size={self._leaf_size}, measure={self._measure!r})"
        )
