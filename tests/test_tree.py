"""Tests for the non-adjacent sum segment tree."""

from __future__ import annotations

import numpy as np
import pytest

from indepset.index.errors import (
    ArithmeticOverflow,
    IndexOutOfRange,
    InvalidSize,
    InvariantViolation,
)
from indepset.index.node import Node
from indepset.index.reference import brute_force_nonadjacent_sum, max_nonadjacent_sum
from indepset.index.tree import NonAdjacentSumTree, build


def _random_weights(rng: np.random.Generator, n: int, bound: int = 20) -> list[int]:
    return rng.integers(-bound, bound, size=n, endpoint=True).tolist()


# ── construction ──────────────────────────────────────────────────────────


def test_build_small_array() -> None:
    tree = build([1, 2, 3, 4])
    assert tree.query() == 6
    assert len(tree) == 4
    assert tree.weights == [1, 2, 3, 4]


def test_build_empty_raises_invalid_size() -> None:
    with pytest.raises(InvalidSize):
        NonAdjacentSumTree([])
    # Also catchable as a plain ValueError
    with pytest.raises(ValueError):
        build([])


def test_rebuild_with_wrong_length_raises() -> None:
    tree = build([1, 2, 3])
    with pytest.raises(InvalidSize):
        tree.build([1, 2])


def test_rebuild_replaces_all_weights() -> None:
    tree = build([1, 2, 3])
    tree.build([10, -1, 10])
    assert tree.query() == 20


def test_build_matches_brute_force() -> None:
    rng = np.random.default_rng(7)
    for n in range(1, 17):
        for _ in range(5):
            weights = _random_weights(rng, n)
            tree = build(weights)
            assert tree.query() == brute_force_nonadjacent_sum(weights)


def test_build_accepts_numpy_array() -> None:
    tree = build(np.array([4, 1, 1, 4], dtype=np.int32))
    assert tree.query() == 8


def test_leaves_follow_single_element_rule() -> None:
    tree = build([-4, 9])
    # root=1, leaves at slots 2 and 3
    assert tree.node(2) == Node(0, 0, 0, 0)
    assert tree.node(3) == Node(0, 0, 0, 9)


# ── single element ────────────────────────────────────────────────────────


def test_single_positive_element() -> None:
    assert build([7]).query() == 7


def test_single_negative_element() -> None:
    assert build([-5]).query() == 0


def test_single_element_updated_to_negative() -> None:
    tree = build([7])
    tree.update(0, -3)
    assert tree.query() == 0
    assert tree[0] == -3


# ── updates ───────────────────────────────────────────────────────────────


def test_update_sequence_scenario() -> None:
    tree = build([1, 2, 3, 4])
    tree.update(1, 5)
    assert tree.query() == 9
    tree.update(0, 2)
    assert tree.query() == 9
    tree.update(3, 6)
    assert tree.query() == 11
    assert tree.weights == [2, 5, 3, 6]


def test_update_matches_reference() -> None:
    rng = np.random.default_rng(11)
    for n in (1, 2, 3, 5, 8, 13, 16, 33):
        weights = _random_weights(rng, n)
        tree = build(weights)
        for _ in range(30):
            pos = int(rng.integers(0, n))
            value = int(rng.integers(-20, 21))
            tree.update(pos, value)
            weights[pos] = value
            assert tree.query() == max_nonadjacent_sum(weights)
            assert tree.weights == weights


def test_update_only_changes_target_weight() -> None:
    weights = [3, -1, 4, 1, -5, 9, 2, 6]
    tree = build(weights)
    tree.update(4, 7)
    expected = list(weights)
    expected[4] = 7
    assert tree.weights == expected


def test_repeated_identical_update_is_idempotent() -> None:
    tree = build([5, 1, 2, 8, 3])
    tree.update(2, 10)
    once = tree.copy()
    tree.update(2, 10)
    assert np.array_equal(tree._tree, once._tree)
    assert tree.query() == once.query()


def test_increasing_a_weight_never_decreases_answer() -> None:
    rng = np.random.default_rng(3)
    weights = _random_weights(rng, 12)
    tree = build(weights)
    for _ in range(100):
        pos = int(rng.integers(0, 12))
        before = tree.query()
        tree.update(pos, tree[pos] + int(rng.integers(0, 10)))
        assert tree.query() >= before


def test_query_is_never_negative() -> None:
    tree = build([-1, -2, -3])
    assert tree.query() == 0
    tree.update(1, -100)
    assert tree.query() == 0


# ── errors ────────────────────────────────────────────────────────────────


def test_update_out_of_range_raises() -> None:
    tree = build([1, 2, 3, 4])
    with pytest.raises(IndexOutOfRange) as excinfo:
        tree.update(4, 1)
    assert excinfo.value.pos == 4
    assert excinfo.value.size == 4
    # Also a plain IndexError for callers that only know builtins
    with pytest.raises(IndexError):
        tree.update(100, 1)


def test_negative_position_does_not_wrap() -> None:
    tree = build([1, 2, 3, 4])
    with pytest.raises(IndexOutOfRange):
        tree.update(-1, 100)
    assert tree.weights == [1, 2, 3, 4]
    assert tree.query() == 6


def test_failed_update_leaves_tree_unchanged() -> None:
    tree = build([1, 2, 3, 4])
    snapshot = tree.copy()
    with pytest.raises(IndexOutOfRange):
        tree.update(9, 50)
    assert np.array_equal(tree._tree, snapshot._tree)


def test_non_integer_value_rejected() -> None:
    tree = build([1, 2])
    with pytest.raises(TypeError):
        tree.update(0, 1.5)


def test_weight_outside_int64_raises_overflow() -> None:
    with pytest.raises(ArithmeticOverflow):
        build([2**63])
    tree = build([1])
    with pytest.raises(OverflowError):
        tree.update(0, -(2**63) - 1)


def test_aggregate_overflow_is_reported() -> None:
    with pytest.raises(ArithmeticOverflow):
        build([2**62, 0, 2**62])


def test_overflowing_update_leaves_tree_unchanged() -> None:
    tree = build([2**62, 0, 0])
    snapshot = tree.copy()
    with pytest.raises(ArithmeticOverflow):
        tree.update(2, 2**62)
    assert tree.weights == [2**62, 0, 0]
    assert np.array_equal(tree._tree, snapshot._tree)
    assert tree.query() == 2**62
    # still usable afterwards
    tree.update(2, 5)
    assert tree.query() == 2**62 + 5


def test_rebuild_with_bad_weight_keeps_previous_state() -> None:
    tree = build([1, 2, 3])
    with pytest.raises(ArithmeticOverflow):
        tree.build([10, 10, 2**64])
    assert tree.weights == [1, 2, 3]
    assert tree.query() == max_nonadjacent_sum(tree.weights) == 4


def test_rebuild_with_overflowing_aggregate_keeps_previous_state() -> None:
    tree = build([1, 2, 3])
    snapshot = tree.copy()
    with pytest.raises(ArithmeticOverflow):
        tree.build([2**62, 0, 2**62])
    assert tree.weights == [1, 2, 3]
    assert np.array_equal(tree._tree, snapshot._tree)


def test_bool_position_rejected() -> None:
    tree = build([1, 2, 3])
    with pytest.raises(TypeError):
        tree.update(True, 5)
    with pytest.raises(TypeError):
        tree.query_range(False, 2)
    assert tree.weights == [1, 2, 3]


def test_large_weights_are_not_truncated() -> None:
    big = 10**12
    tree = build([big] * 9)
    assert tree.query() == 5 * big


# ── invariants ────────────────────────────────────────────────────────────


def test_invariants_hold_after_random_updates() -> None:
    rng = np.random.default_rng(5)
    tree = build(_random_weights(rng, 40, bound=1000))
    tree.check_invariants()
    for _ in range(200):
        tree.update(int(rng.integers(0, 40)), int(rng.integers(-1000, 1001)))
        assert tree.root.is_valid()
    tree.check_invariants()


def test_check_invariants_detects_corruption() -> None:
    tree = build([1, 2, 3])
    tree._tree[1] = [5, 0, 0, 0]
    with pytest.raises(InvariantViolation):
        tree.check_invariants()


# ── range queries ─────────────────────────────────────────────────────────


def test_query_range_matches_reference() -> None:
    rng = np.random.default_rng(9)
    n = 21
    weights = _random_weights(rng, n)
    tree = build(weights)
    for lo in range(n):
        for hi in range(lo, n):
            assert tree.query_range(lo, hi) == max_nonadjacent_sum(weights[lo : hi + 1])


def test_query_range_full_equals_query() -> None:
    tree = build([2, 7, 9, 3, 1])
    assert tree.query_range(0, 4) == tree.query() == 12


def test_query_range_after_update() -> None:
    tree = build([2, 7, 9, 3, 1])
    tree.update(2, 0)
    assert tree.query_range(1, 3) == 10


def test_query_range_errors() -> None:
    tree = build([1, 2, 3])
    with pytest.raises(ValueError):
        tree.query_range(2, 1)
    with pytest.raises(IndexOutOfRange):
        tree.query_range(0, 3)
    with pytest.raises(IndexOutOfRange):
        tree.query_range(-1, 1)


# ── snapshots ─────────────────────────────────────────────────────────────


def test_copy_is_independent() -> None:
    tree = build([1, 2, 3, 4])
    snapshot = tree.copy()
    tree.update(1, 100)
    assert tree.query() == 104
    assert snapshot.query() == 6
    assert snapshot.weights == [1, 2, 3, 4]


def test_getitem_and_repr() -> None:
    tree = build([4, -2, 6])
    assert tree[1] == -2
    assert repr(tree) == "NonAdjacentSumTree(n=3, best=10)"
    with pytest.raises(IndexOutOfRange):
        tree[3]
