"""YAML config loading with layered merging and CLI overrides."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


def load_yaml(path: str | Path) -> dict[str, Any]:
    """Load a YAML file and return its contents as a dict."""
    with open(path) as f:
        return yaml.safe_load(f) or {}


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (returns a new dict)."""
    merged = base.copy()
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def apply_overrides(config: dict, overrides: list[str]) -> dict:
    """Apply dot-notation CLI overrides like ``driver.modulus=998244353``.

    Values are parsed as YAML scalars so ``"true"`` becomes ``True``,
    ``"42"`` becomes ``42``, etc.
    """
    for override in overrides:
        if "=" not in override:
            raise ValueError(f"Override must be key=value, got: {override!r}")
        key_path, raw_value = override.split("=", 1)
        value = yaml.safe_load(raw_value)
        keys = key_path.split(".")
        node = config
        for k in keys[:-1]:
            node = node.setdefault(k, {})
        node[keys[-1]] = value
    return config


def load_config(
    default_path: str | Path = "configs/default.yaml",
    preset_path: str | Path | None = None,
    overrides: list[str] | None = None,
) -> dict[str, Any]:
    """Build a validated config by merging: default → preset → CLI overrides."""
    config = load_yaml(default_path)
    if preset_path:
        config = deep_merge(config, load_yaml(preset_path))
    if overrides:
        config = apply_overrides(config, overrides)
    return validate_config(config)


def validate_config(config: dict[str, Any]) -> dict[str, Any]:
    """Check the driver and generated-problem sections; returns *config*.

    Raises ``ValueError`` naming the offending key.
    """
    modulus = config.get("driver", {}).get("modulus")
    if not isinstance(modulus, int) or isinstance(modulus, bool) or modulus <= 0:
        raise ValueError(f"driver.modulus must be a positive integer, got: {modulus!r}")

    problem = config.get("problem", {})
    for key in ("n", "num_updates", "low", "high"):
        if key in problem and not isinstance(problem[key], int):
            raise ValueError(f"problem.{key} must be an integer, got: {problem[key]!r}")
    if problem.get("n", 1) < 1:
        raise ValueError(f"problem.n must be at least 1, got: {problem['n']}")
    if problem.get("num_updates", 0) < 0:
        raise ValueError(f"problem.num_updates must be non-negative, got: {problem['num_updates']}")
    if "low" in problem and "high" in problem and problem["low"] > problem["high"]:
        raise ValueError(f"problem.low ({problem['low']}) exceeds problem.high ({problem['high']})")
    return config
