"""Cluster hierarchy stages shared by HDBSCAN and single-linkage clustering.

The pipeline is:

1. ``single_linkage``: turn spanning tree edges into a dendrogram of ``n - 1``
   merges (labels ``n..2n-2``, points are ``0..n-1``).
2. ``condense_tree``: walk the dendrogram from the root and keep only the
   splits where both sides have at least ``min_cluster_size`` points.
3. ``compute_stability``: score each condensed cluster by how long its points
   persist as lambda (1 / distance) grows.
4. ``select_clusters``: excess-of-mass selection over the condensed tree.
5. ``assign_points``: label every point with its governing selected cluster.

See: Campello, Moulavi & Sander, "Density-Based Clustering Based on
Hierarchical Density Estimates" (PAKDD 2013)
"""

from __future__ import annotations

import math
from collections import defaultdict, deque
from typing import Iterable, NamedTuple, Sequence

import numpy as np
import numpy.typing as npt

from autopalette.clustering._cluster import NOISE
from autopalette.graph import LabelingUnionFind, WeightedEdge


def to_lambda(weight: float) -> float:
    """Return 1 / weight; a zero weight maps to infinity."""
    return 1.0 / weight if weight > 0.0 else math.inf


class LinkageNode(NamedTuple):
    """One merge of the dendrogram."""

    left: int
    right: int
    weight: float
    size: int

    @property
    def lambda_(self) -> float:
        return to_lambda(self.weight)


def lambda_ceiling(linkage: Sequence[LinkageNode]) -> float:
    """Return the finite lambda that stands in for zero-weight merges.

    Twice the largest finite lambda of the dendrogram (1.0 when every merge
    has zero weight), so duplicate points are denser than anything else
    while stabilities stay finite.
    """
    finite = [link.lambda_ for link in linkage if link.weight > 0.0]
    return 2.0 * max(finite) if finite else 1.0


class CondensedNode(NamedTuple):
    """An edge of the condensed tree.

    ``child`` is a cluster label (>= n) when a cluster splits off, or a point
    index (< n, size 1) when a point falls out of ``parent``.
    """

    parent: int
    child: int
    lambda_: float
    size: int


def single_linkage(edges: Iterable[WeightedEdge], n: int) -> list[LinkageNode]:
    """Build the single-linkage dendrogram from spanning tree edges.

    Edges are merged in ascending weight order; equal weights keep their
    input order.

    Args:
        edges: Spanning tree edges over n vertices
        n: Number of points

    Returns:
        The merges; the i-th merge carries label n + i
    """
    union_find = LabelingUnionFind(n)
    linkage: list[LinkageNode] = []
    for edge in sorted(edges, key=lambda edge: edge.weight):
        left = union_find.find(edge.u)
        right = union_find.find(edge.v)
        if left == right:
            continue
        size = union_find.union(left, right)
        linkage.append(LinkageNode(left, right, edge.weight, size))
    return linkage


def _node_size(linkage: Sequence[LinkageNode], n: int, label: int) -> int:
    return 1 if label < n else linkage[label - n].size


def _leaves(linkage: Sequence[LinkageNode], n: int, label: int) -> list[int]:
    """Return the points under a dendrogram label, left to right."""
    leaves = []
    stack = [label]
    while stack:
        node = stack.pop()
        if node < n:
            leaves.append(node)
            continue
        link = linkage[node - n]
        stack.append(link.right)
        stack.append(link.left)
    return leaves


def condense_tree(
    linkage: Sequence[LinkageNode], n: int, min_cluster_size: int
) -> list[CondensedNode]:
    """Condense the dendrogram to splits between clusters of a minimum size.

    At each merge, taken top-down:

    - both sides have ``min_cluster_size`` points: each side becomes a new
      condensed cluster;
    - one side does: it continues the parent's cluster and the points of the
      other side fall out of the parent at this lambda;
    - neither does: every point falls out of the parent at this lambda.

    Zero-weight merges take the finite ``lambda_ceiling`` of the dendrogram.

    Args:
        linkage: Dendrogram with exactly n - 1 merges
        n: Number of points
        min_cluster_size: Smallest branch that counts as a cluster

    Returns:
        Condensed edges in breadth-first order; the root cluster is labeled n
        and every child cluster has a larger label than its parent
    """
    if n < 2 or not linkage:
        return []

    root = len(linkage) + n - 1
    ceiling = lambda_ceiling(linkage)
    relabel = {root: n}
    next_label = n + 1
    condensed: list[CondensedNode] = []

    queue = deque([root])
    while queue:
        node = queue.popleft()
        link = linkage[node - n]
        parent = relabel[node]
        lambda_ = min(link.lambda_, ceiling)
        left_size = _node_size(linkage, n, link.left)
        right_size = _node_size(linkage, n, link.right)
        left_ok = left_size >= min_cluster_size
        right_ok = right_size >= min_cluster_size

        if left_ok and right_ok:
            for child, size in ((link.left, left_size), (link.right, right_size)):
                relabel[child] = next_label
                condensed.append(CondensedNode(parent, next_label, lambda_, size))
                next_label += 1
                queue.append(child)
        elif left_ok or right_ok:
            kept, dropped = (link.left, link.right) if left_ok else (link.right, link.left)
            relabel[kept] = parent
            queue.append(kept)
            for point in _leaves(linkage, n, dropped):
                condensed.append(CondensedNode(parent, point, lambda_, 1))
        else:
            for child in (link.left, link.right):
                for point in _leaves(linkage, n, child):
                    condensed.append(CondensedNode(parent, point, lambda_, 1))

    return condensed


def _root(condensed: Sequence[CondensedNode]) -> int:
    return min(node.parent for node in condensed)


def compute_stability(condensed: Sequence[CondensedNode]) -> dict[int, float]:
    """Return the stability of every condensed cluster.

    ``stability(C) = sum((lambda_child - lambda_birth(C)) * child_size)`` over
    the edges leaving C, where the birth of C is the lambda of the split that
    created it (0 for the root). Lambdas never decrease down the tree, so
    every stability is non-negative.
    """
    if not condensed:
        return {}

    births = {_root(condensed): 0.0}
    for node in condensed:
        if node.size > 1:
            births[node.child] = node.lambda_

    stability = dict.fromkeys(births, 0.0)
    for node in condensed:
        stability[node.parent] += (node.lambda_ - births[node.parent]) * node.size
    return stability


def _child_clusters(condensed: Sequence[CondensedNode]) -> dict[int, list[int]]:
    children: dict[int, list[int]] = defaultdict(list)
    for node in condensed:
        if node.size > 1:
            children[node.parent].append(node.child)
    return children


def select_clusters(
    condensed: Sequence[CondensedNode],
    stability: dict[int, float],
    allow_single_cluster: bool = False,
) -> list[int]:
    """Select clusters by excess of mass.

    Clusters are visited bottom-up. A cluster is selected when its own
    stability is at least the summed stability of its selected descendants,
    which are then deselected; otherwise it passes that sum up to its parent.

    Args:
        condensed: Condensed tree
        stability: Stability per condensed cluster
        allow_single_cluster: Whether the root may be selected

    Returns:
        Selected cluster labels in ascending order
    """
    if not condensed:
        return []

    root = _root(condensed)
    children = _child_clusters(condensed)
    subtree_stability: dict[int, float] = {}
    selected: set[int] = set()

    # Child labels are always larger than their parent's.
    for label in sorted(stability, reverse=True):
        if label == root and not allow_single_cluster:
            continue
        below = sum(subtree_stability[child] for child in children.get(label, ()))
        if children.get(label) and below > stability[label]:
            subtree_stability[label] = below
            continue

        subtree_stability[label] = stability[label]
        selected.add(label)
        descendants = deque(children.get(label, ()))
        while descendants:
            descendant = descendants.popleft()
            selected.discard(descendant)
            descendants.extend(children.get(descendant, ()))

    return sorted(selected)


def assign_points(
    condensed: Sequence[CondensedNode], selected: Sequence[int], n: int
) -> npt.NDArray[np.intp]:
    """Label each point with the position of its governing selected cluster.

    A point is governed by the nearest selected cluster on its way up the
    condensed tree; points under no selected cluster are labeled -1.
    """
    labels = np.full(n, NOISE, dtype=np.intp)
    if not condensed or not selected:
        return labels

    positions = {label: position for position, label in enumerate(selected)}
    parents = {node.child: node.parent for node in condensed}
    root = _root(condensed)

    # Parents precede children in label order, so one ascending pass resolves
    # every cluster's governing selection.
    governing = {root: positions.get(root, NOISE)}
    for label in sorted(child for child in parents if child >= n):
        governing[label] = positions.get(label, governing[parents[label]])

    for point in range(n):
        parent = parents.get(point)
        if parent is not None:
            labels[point] = governing[parent]
    return labels
