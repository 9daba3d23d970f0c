"""Four-state range aggregate and its merge law."""

from __future__ import annotations

from typing import NamedTuple


class Node(NamedTuple):
    """Best non-adjacent sums over a contiguous range ``[l, r]``.

    The two digits of each field are boundary flags for the left and the
    right end of the range: ``0`` means that end element is forced
    excluded, ``1`` means it is free (may or may not be chosen).

    * ``v00`` — both ends excluded
    * ``v01`` — left end excluded, right end free
    * ``v10`` — left end free, right end excluded
    * ``v11`` — both ends free; the unconstrained best sum

    Every node satisfies ``0 <= v00 <= v01 <= v11`` and
    ``0 <= v00 <= v10 <= v11`` (the empty selection is always allowed).
    """

    v00: int = 0
    v01: int = 0
    v10: int = 0
    v11: int = 0

    @classmethod
    def leaf(cls, value: int) -> Node:
        """Aggregate for a single element holding *value*."""
        return cls(0, 0, 0, max(int(value), 0))

    @property
    def best(self) -> int:
        return self.v11

    def is_valid(self) -> bool:
        """Check the ordering and non-negativity invariant."""
        return 0 <= self.v00 <= min(self.v01, self.v10) and max(self.v01, self.v10) <= self.v11


def merge(left: Node, right: Node) -> Node:
    """Combine the aggregates of two adjacent ranges.

    The last element of *left* and the first element of *right* are
    neighbours, so at most one of them may be chosen: each field takes the
    better of "left's right end excluded" and "right's left end excluded".
    """
    return Node(
        max(left.v00 + right.v10, left.v01 + right.v00),
        max(left.v00 + right.v11, left.v01 + right.v01),
        max(left.v10 + right.v10, left.v11 + right.v00),
        max(left.v10 + right.v11, left.v11 + right.v01),
    )
