from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from harness.contracts.launcher import NOT_STARTED_RUN_ID, LaunchResult

try:
    import mlflow as _mlflow
except Exception:  # pragma: no cover - handled via runtime error
    _mlflow = None

_ENV_MANAGERS = ("local", "virtualenv", "uv", "conda")

logger = logging.getLogger("ner_harness.launching")


def _require_mlflow() -> Any:
    if _mlflow is None:
        raise RuntimeError(
            "mlflow is not installed. Install mlflow or provide a fake module for tests."
        )
    return _mlflow


class MlflowProjectLauncher:
    """
    RunLauncher backed by ``mlflow.projects.run``.

    Each launch executes one MLproject entry point to completion. The
    experiment is created by MLflow if it does not exist yet.
    """

    def __init__(
        self,
        project_uri: str = ".",
        *,
        tracking_uri: str | None = None,
        experiment_name: str | None = None,
        env_manager: str = "local",
    ) -> None:
        if env_manager not in _ENV_MANAGERS:
            raise ValueError(
                f"env_manager must be one of {', '.join(_ENV_MANAGERS)}, got '{env_manager}'"
            )

        self._mlflow = _require_mlflow()
        self._project_uri = project_uri
        self._experiment_name = experiment_name
        self._env_manager = env_manager

        if tracking_uri is not None:
            self._mlflow.set_tracking_uri(tracking_uri)

    def launch(self, entry_point: str, parameters: Mapping[str, Any]) -> LaunchResult:
        """Run the entry point and wait for it to finish."""
        try:
            submitted = self._mlflow.projects.run(
                self._project_uri,
                entry_point=entry_point,
                parameters=dict(parameters),
                experiment_name=self._experiment_name,
                env_manager=self._env_manager,
                synchronous=False,
            )
        except self._mlflow.exceptions.ExecutionException as exc:
            # missing entry point, bad parameter types, env build errors
            logger.error("Entry point %s was not started: %s", entry_point, exc)
            return LaunchResult(
                run_id=NOT_STARTED_RUN_ID,
                status="failed",
                entry_point=entry_point,
                parameters=dict(parameters),
                message=str(exc),
            )
        succeeded = submitted.wait()
        status = "ok" if succeeded else "failed"
        logger.info(
            "Entry point %s finished with status %s (run %s)",
            entry_point,
            status,
            submitted.run_id,
        )
        return LaunchResult(
            run_id=submitted.run_id,
            status=status,
            entry_point=entry_point,
            parameters=dict(parameters),
        )
