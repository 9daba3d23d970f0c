"""MLFlow tracking for driver runs."""

from __future__ import annotations

from typing import Any, Sequence

import mlflow


class ExperimentLogger:
    """Thin wrapper around MLFlow for recording driver runs."""

    def __init__(
        self,
        experiment_name: str,
        tracking_uri: str = "mlruns",
        run_name: str | None = None,
    ):
        mlflow.set_tracking_uri(tracking_uri)
        mlflow.set_experiment(experiment_name)
        self.run = mlflow.start_run(run_name=run_name)

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> ExperimentLogger | None:
        """Create a logger from the ``mlflow`` section, or ``None`` if disabled."""
        cfg = config.get("mlflow", {})
        if not cfg.get("enabled", False):
            return None
        return cls(
            experiment_name=cfg.get("experiment_name", "indepset"),
            tracking_uri=cfg.get("tracking_uri", "mlruns"),
            run_name=cfg.get("run_name"),
        )

    def log_params(self, params: dict[str, Any], prefix: str = "") -> None:
        """Log a (possibly nested) dict of parameters."""
        flat = self._flatten(params, prefix)
        # MLFlow has a 100-param batch limit
        items = list(flat.items())
        for i in range(0, len(items), 100):
            mlflow.log_params(dict(items[i : i + 100]))

    def log_metric(self, key: str, value: float, step: int | None = None) -> None:
        mlflow.log_metric(key, value, step=step)

    def log_answers(self, answers: Sequence[int], key: str = "query/answer") -> None:
        """Log one metric point per update step (1-based)."""
        for step, answer in enumerate(answers, start=1):
            mlflow.log_metric(key, float(answer), step=step)

    def end(self) -> None:
        mlflow.end_run()

    @staticmethod
    def _flatten(d: dict, prefix: str = "") -> dict[str, str]:
        """Flatten a nested dict into dot-separated keys with string values."""
        items: dict[str, str] = {}
        for k, v in d.items():
            key = f"{prefix}.{k}" if prefix else k
            if isinstance(v, dict):
                items.update(ExperimentLogger._flatten(v, key))
            else:
                items[key] = str(v)
        return items
