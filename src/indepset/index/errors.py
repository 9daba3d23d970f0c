"""Exceptions raised by the non-adjacent sum index."""

from __future__ import annotations


class SegmentTreeError(Exception):
    """Base class for every error raised by the index."""


class InvalidSize(SegmentTreeError, ValueError):
    """The index was built from an empty weight array."""


class IndexOutOfRange(SegmentTreeError, IndexError):
    """A position lies outside ``[0, n - 1]``."""

    def __init__(self, pos: int, size: int) -> None:
        super().__init__(f"Position {pos} out of range for index of size {size} (valid: 0..{size - 1})")
        self.pos = pos
        self.size = size


class ArithmeticOverflow(SegmentTreeError, OverflowError):
    """A weight or aggregate does not fit a signed 64-bit slot."""


class InvariantViolation(SegmentTreeError, AssertionError):
    """A node's aggregates break ``0 <= v00 <= v01, v10 <= v11``."""
