"""Disjoint-set forests.

``UnionFind`` is the classic structure with path compression and union by
size. ``LabelingUnionFind`` never reuses a root: every union attaches both
roots to a freshly allocated label, so the merge history forms a binary tree
over ``2n - 1`` labels (points are ``0..n-1``, the i-th merge is ``n + i``).
"""

from __future__ import annotations

from collections import defaultdict

from autopalette.exceptions import InvalidParameterError


def _validate_count(n: int) -> None:
    if isinstance(n, bool) or not isinstance(n, int) or n < 1:
        raise InvalidParameterError(f"The number of elements({n}) must be an integer >= 1")


class UnionFind:
    """Disjoint-set forest with path compression and union by size.

    Examples:
        >>> uf = UnionFind(4)
        >>> uf.union(0, 1)
        2
        >>> uf.connected(0, 1), uf.connected(1, 2)
        (True, False)
    """

    __slots__ = ("_parents", "_sizes")

    def __init__(self, n: int) -> None:
        """Create n singleton sets.

        Raises:
            InvalidParameterError: If n is less than 1
        """
        _validate_count(n)
        self._parents = list(range(n))
        self._sizes = [1] * n

    def __len__(self) -> int:
        return len(self._parents)

    def _check(self, x: int) -> None:
        if not 0 <= x < len(self._parents):
            raise IndexError(f"The element({x}) is out of range [0, {len(self._parents)})")

    def find(self, x: int) -> int:
        """Return the root of the set containing x, compressing the path."""
        self._check(x)
        parents = self._parents
        root = x
        while parents[root] != root:
            root = parents[root]
        while parents[x] != root:
            parents[x], x = root, parents[x]
        return root

    def union(self, x: int, y: int) -> int:
        """Merge the sets containing x and y.

        Returns:
            The size of the merged set
        """
        root_x = self.find(x)
        root_y = self.find(y)
        if root_x == root_y:
            return self._sizes[root_x]

        if self._sizes[root_x] < self._sizes[root_y]:
            root_x, root_y = root_y, root_x
        self._parents[root_y] = root_x
        self._sizes[root_x] += self._sizes[root_y]
        return self._sizes[root_x]

    def connected(self, x: int, y: int) -> bool:
        return self.find(x) == self.find(y)

    def size(self, x: int) -> int:
        """Return the size of the set containing x."""
        return self._sizes[self.find(x)]

    def components(self) -> dict[int, list[int]]:
        """Group every element by its root, members in ascending order."""
        groups: dict[int, list[int]] = defaultdict(list)
        for x in range(len(self._parents)):
            groups[self.find(x)].append(x)
        return dict(groups)


class LabelingUnionFind:
    """Union-find that allocates a new label for every merge.

    Used by single linkage: the label returned by ``next_label`` before a
    union is the dendrogram node created by that union.
    """

    __slots__ = ("_n", "_parents", "_sizes", "_next_label")

    def __init__(self, n: int) -> None:
        _validate_count(n)
        self._n = n
        self._parents = list(range(2 * n - 1))
        self._sizes = [1] * n + [0] * (n - 1)
        self._next_label = n

    @property
    def n(self) -> int:
        """Number of original elements."""
        return self._n

    @property
    def next_label(self) -> int:
        """Label the next successful union will allocate."""
        return self._next_label

    def find(self, x: int) -> int:
        if not 0 <= x < self._next_label:
            raise IndexError(f"The label({x}) is out of range [0, {self._next_label})")
        parents = self._parents
        root = x
        while parents[root] != root:
            root = parents[root]
        while parents[x] != root:
            parents[x], x = root, parents[x]
        return root

    def union(self, x: int, y: int) -> int:
        """Attach the roots of x and y to a new label.

        Returns:
            The size of the merged set; nothing is allocated when x and y are
            already connected

        Raises:
            IndexError: If every label has already been allocated
        """
        root_x = self.find(x)
        root_y = self.find(y)
        if root_x == root_y:
            return self._sizes[root_x]
        if self._next_label >= len(self._parents):
            raise IndexError("Every label of this union-find has already been allocated")

        label = self._next_label
        self._next_label += 1
        self._parents[root_x] = label
        self._parents[root_y] = label
        self._sizes[label] = self._sizes[root_x] + self._sizes[root_y]
        return self._sizes[label]

    def size(self, label: int) -> int:
        """Return the number of original elements under the given label."""
        if not 0 <= label < self._next_label:
            raise IndexError(f"The label({label}) is out of range [0, {self._next_label})")
        return self._sizes[label]
