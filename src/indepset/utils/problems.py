"""Weight arrays and update streams: loading from YAML and random generation."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import numpy as np

from indepset.utils.config import load_yaml


@dataclass
class Problem:
    """An initial weight array plus an ordered list of ``(pos, value)`` updates."""

    weights: list[int]
    updates: list[tuple[int, int]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.weights = [int(w) for w in self.weights]
        self.updates = [_as_update(u) for u in self.updates]


def _as_update(update: Any) -> tuple[int, int]:
    if len(update) != 2:
        raise ValueError(f"Update must be a [pos, value] pair, got: {update!r}")
    pos, value = update
    return int(pos), int(value)


def load_problem(path: str | Path) -> Problem:
    """Read a problem file with ``weights: [...]`` and ``updates: [[pos, value], ...]``."""
    data = load_yaml(path)
    if "weights" not in data:
        raise ValueError(f"Problem file {path} has no 'weights' key")
    return Problem(weights=data["weights"], updates=data.get("updates") or [])


def generate_problem(
    n: int,
    num_updates: int,
    low: int = -100_000,
    high: int = 100_000,
    seed: int | None = None,
) -> Problem:
    """Draw weights and update values uniformly from ``[low, high]``.

    Update positions are uniform over ``[0, n - 1]``, so every generated
    update is valid.
    """
    rng = np.random.default_rng(seed)
    weights = rng.integers(low, high, size=n, endpoint=True)
    positions = rng.integers(0, n, size=num_updates)
    values = rng.integers(low, high, size=num_updates, endpoint=True)
    return Problem(
        weights=weights.tolist(),
        updates=list(zip(positions.tolist(), values.tolist())),
    )


def problem_from_config(config: dict[str, Any]) -> Problem:
    """Generate a problem from the ``problem`` section and top-level ``seed``."""
    cfg = config["problem"]
    return generate_problem(
        n=cfg["n"],
        num_updates=cfg["num_updates"],
        low=cfg.get("low", -100_000),
        high=cfg.get("high", 100_000),
        seed=config.get("seed"),
    )
