"""Driver loop: apply point updates in order and accumulate the answers."""

from __future__ import annotations

import operator
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from tqdm import tqdm

from indepset.index.errors import InvariantViolation
from indepset.index.reference import max_nonadjacent_sum
from indepset.index.tree import NonAdjacentSumTree
from indepset.utils.logging import ExperimentLogger
from indepset.utils.problems import Problem

DEFAULT_MODULUS = 1_000_000_007


def _check_modulus(modulus: int) -> int:
    """Accept any positive integer, including numpy integer scalars."""
    message = f"modulus must be a positive integer, got: {modulus!r}"
    if isinstance(modulus, bool):
        raise ValueError(message)
    try:
        value = operator.index(modulus)
    except TypeError:
        raise ValueError(message) from None
    if value <= 0:
        raise ValueError(message)
    return value


@dataclass
class DriverResult:
    """Running total (mod ``modulus``) plus the raw answer after every update."""

    total: int
    answers: list[int] = field(default_factory=list)
    modulus: int = DEFAULT_MODULUS


def run(
    weights: Sequence[int],
    updates: Iterable[tuple[int, int]],
    modulus: int = DEFAULT_MODULUS,
) -> int:
    """Sum of the per-update best sums, reduced modulo *modulus*.

    Aborts with :class:`~indepset.index.errors.IndexOutOfRange` on the
    first update whose position is invalid; no partial total is returned.
    """
    return run_detailed(weights, updates, modulus).total


def run_detailed(
    weights: Sequence[int],
    updates: Iterable[tuple[int, int]],
    modulus: int = DEFAULT_MODULUS,
    *,
    verify: bool = False,
    progress: bool = False,
    logger: ExperimentLogger | None = None,
) -> DriverResult:
    """Like :func:`run` but keeps every answer.

    With *verify* each answer is recomputed by the linear DP over a shadow
    copy of the weights (O(n) per step).
    """
    modulus = _check_modulus(modulus)

    tree = NonAdjacentSumTree(weights)
    shadow = tree.weights if verify else None

    answers: list[int] = []
    total = 0
    for step, (pos, value) in enumerate(
        tqdm(updates, desc="Updates", disable=not progress), start=1
    ):
        tree.update(pos, value)
        answer = tree.query()

        if shadow is not None:
            shadow[pos] = value
            expected = max_nonadjacent_sum(shadow)
            if answer != expected:
                raise InvariantViolation(
                    f"Step {step}: tree answered {answer}, reference DP gives {expected}"
                )

        answers.append(answer)
        # Only the running total is reduced; node aggregates stay exact.
        total = (total + answer) % modulus

    if logger is not None:
        logger.log_answers(answers)
        logger.log_metric("run/total", float(total))
    return DriverResult(total=total, answers=answers, modulus=modulus)


def run_from_config(problem: Problem, config: dict[str, Any]) -> DriverResult:
    """Run *problem* with the ``driver`` and ``mlflow`` settings of *config*."""
    driver_cfg = config.get("driver", {})
    logger = ExperimentLogger.from_config(config)
    if logger is not None:
        logger.log_params(config)
        logger.log_params(
            {"n": len(problem.weights), "num_updates": len(problem.updates)},
            prefix="run",
        )
    try:
        return run_detailed(
            problem.weights,
            problem.updates,
            modulus=driver_cfg.get("modulus", DEFAULT_MODULUS),
            verify=driver_cfg.get("verify", False),
            progress=driver_cfg.get("progress", False),
            logger=logger,
        )
    finally:
        if logger is not None:
            logger.end()
