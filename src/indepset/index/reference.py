"""Straightforward oracles for the best non-adjacent subset sum."""

from __future__ import annotations

from itertools import combinations
from typing import Sequence

MAX_BRUTE_FORCE_SIZE = 20


def max_nonadjacent_sum(weights: Sequence[int]) -> int:
    """Linear take/skip DP over *weights*; the empty selection scores 0."""
    take, skip = 0, 0
    for w in weights:
        take, skip = skip + int(w), max(take, skip)
    return max(take, skip)


def brute_force_nonadjacent_sum(weights: Sequence[int]) -> int:
    """Enumerate every non-adjacent subset (exponential; small inputs only)."""
    n = len(weights)
    if n > MAX_BRUTE_FORCE_SIZE:
        raise ValueError(f"Brute force limited to {MAX_BRUTE_FORCE_SIZE} elements, got {n}")
    best = 0
    for k in range(1, (n + 1) // 2 + 1):
        for chosen in combinations(range(n), k):
            if any(b - a == 1 for a, b in zip(chosen, chosen[1:])):
                continue
            best = max(best, sum(int(weights[i]) for i in chosen))
    return best
