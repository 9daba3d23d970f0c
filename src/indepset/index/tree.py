"""Segment tree maintaining the best non-adjacent subset sum under point updates."""

from __future__ import annotations

import operator
from typing import Sequence

import numpy as np

from indepset.index.errors import (
    ArithmeticOverflow,
    IndexOutOfRange,
    InvalidSize,
    InvariantViolation,
)
from indepset.index.node import Node, merge

_INT64 = np.iinfo(np.int64)


class NonAdjacentSumTree:
    """Array-backed segment tree over a mutable weight array.

    Every node stores the four boundary-flagged aggregates of
    :class:`~indepset.index.node.Node` for the range it covers.  Nodes live
    in one flat ``(4n + 1, 4)`` int64 arena using the 1-indexed implicit
    layout: the root is slot 1 and the children of slot *i* are ``2i`` and
    ``2i + 1``.  Slot 0 is unused.

    Supports O(log n) point update, O(1) whole-array query and O(log n)
    sub-range query.
    """

    def __init__(self, weights: Sequence[int]) -> None:
        self.n = len(weights)
        if self.n <= 0:
            raise InvalidSize("Cannot build an index over an empty weight array")
        self.build(weights)

    # ── public API ────────────────────────────────────────────────────────

    def build(self, weights: Sequence[int]) -> None:
        """(Re)initialise every node from *weights* in O(n).

        The length must match the size the tree was created with.  Weights
        and nodes are built into fresh arrays and swapped in only once every
        weight and aggregate has been checked, so a failed rebuild leaves
        the previous state intact.
        """
        if len(weights) != self.n:
            raise InvalidSize(f"Expected {self.n} weights, got {len(weights)}")
        new_weights = np.array([_check_weight(value) for value in weights], dtype=np.int64)
        arena = np.zeros((4 * self.n + 1, 4), dtype=np.int64)
        self._build(arena, new_weights, 1, 0, self.n - 1)
        self._weights = new_weights
        self._tree = arena

    def update(self, pos: int, value: int) -> None:
        """Set weight *pos* to *value* and re-merge its ancestors.

        The new leaf-to-root aggregates are computed and checked first;
        nothing is written if any of them overflows.
        """
        pos = self._check_pos(pos)
        value = _check_weight(value)

        path = self._path(pos)
        changes = [(path[-1], Node.leaf(value))]
        for idx in reversed(path[:-1]):
            child, node = changes[-1]
            sibling = self.node(child ^ 1)
            if child % 2 == 0:
                changes.append((idx, merge(node, sibling)))
            else:
                changes.append((idx, merge(sibling, node)))
        for idx, node in changes:
            _check_node(idx, node)

        self._weights[pos] = value
        for idx, node in changes:
            self._tree[idx] = node

    def query(self) -> int:
        """Best sum of a non-adjacent subset over the whole array."""
        return int(self._tree[1, 3])

    def query_range(self, lo: int, hi: int) -> int:
        """Best non-adjacent subset sum restricted to positions ``lo..hi``."""
        lo = self._check_pos(lo)
        hi = self._check_pos(hi)
        if lo > hi:
            raise ValueError(f"Empty range: lo={lo} > hi={hi}")
        parts: list[Node] = []
        self._collect(1, 0, self.n - 1, lo, hi, parts)
        acc = parts[0]
        for part in parts[1:]:
            acc = merge(acc, part)
        return acc.best

    def node(self, idx: int) -> Node:
        """Return the aggregate stored at arena slot *idx*."""
        return Node(*(int(v) for v in self._tree[idx]))

    @property
    def root(self) -> Node:
        return self.node(1)

    @property
    def weights(self) -> list[int]:
        """Current weight array."""
        return [int(v) for v in self._weights]

    def copy(self) -> NonAdjacentSumTree:
        """Independent snapshot; later updates to either tree do not affect the other."""
        clone = object.__new__(NonAdjacentSumTree)
        clone.n = self.n
        clone._weights = self._weights.copy()
        clone._tree = self._tree.copy()
        return clone

    def check_invariants(self) -> None:
        """Raise :class:`InvariantViolation` if any node breaks the ordering."""
        t = self._tree
        bad = (
            (t[:, 0] < 0)
            | (t[:, 0] > t[:, 1])
            | (t[:, 0] > t[:, 2])
            | (t[:, 1] > t[:, 3])
            | (t[:, 2] > t[:, 3])
        )
        if bad.any():
            idx = int(np.flatnonzero(bad)[0])
            raise InvariantViolation(f"Node {idx} violates ordering: {self.node(idx)}")

    def __len__(self) -> int:
        return self.n

    def __getitem__(self, pos: int) -> int:
        return int(self._weights[self._check_pos(pos)])

    def __repr__(self) -> str:
        return f"{type(self).__name__}(n={self.n}, best={self.query()})"

    # ── internals ─────────────────────────────────────────────────────────

    def _check_pos(self, pos: int) -> int:
        if isinstance(pos, bool):
            raise TypeError("Position must be an integer, not bool")
        pos = operator.index(pos)
        # No negative wrap-around: -1 is an error, not the last element.
        if not 0 <= pos < self.n:
            raise IndexOutOfRange(pos, self.n)
        return pos

    def _path(self, pos: int) -> list[int]:
        """Arena slots from the root down to the leaf holding *pos*."""
        idx, left, right = 1, 0, self.n - 1
        path = [idx]
        while left != right:
            mid = (left + right) // 2
            if pos <= mid:
                idx, right = 2 * idx, mid
            else:
                idx, left = 2 * idx + 1, mid + 1
            path.append(idx)
        return path

    def _build(self, arena: np.ndarray, weights: np.ndarray, idx: int, left: int, right: int) -> Node:
        """Fill *arena* for the range ``[left, right]`` rooted at slot *idx*."""
        if left == right:
            node = Node.leaf(weights[left])
        else:
            mid = (left + right) // 2
            node = merge(
                self._build(arena, weights, 2 * idx, left, mid),
                self._build(arena, weights, 2 * idx + 1, mid + 1, right),
            )
        _check_node(idx, node)
        arena[idx] = node
        return node

    def _collect(
        self, idx: int, left: int, right: int, lo: int, hi: int, out: list[Node]
    ) -> None:
        """Append the maximal nodes covering ``[lo, hi]`` in left-to-right order."""
        if hi < left or right < lo:
            return
        if lo <= left and right <= hi:
            out.append(self.node(idx))
            return
        mid = (left + right) // 2
        self._collect(2 * idx, left, mid, lo, hi, out)
        self._collect(2 * idx + 1, mid + 1, right, lo, hi, out)


def _check_weight(value: int) -> int:
    value = operator.index(value)
    if not _INT64.min <= value <= _INT64.max:
        raise ArithmeticOverflow(f"Weight {value} does not fit a signed 64-bit integer")
    return value


def _check_node(idx: int, node: Node) -> None:
    # v11 is the largest field, so it bounds the other three.
    if node.v11 > _INT64.max:
        raise ArithmeticOverflow(f"Aggregate {node.v11} at node {idx} exceeds int64")


def build(weights: Sequence[int]) -> NonAdjacentSumTree:
    """Build an index over *weights* (``InvalidSize`` if empty)."""
    return NonAdjacentSumTree(weights)
