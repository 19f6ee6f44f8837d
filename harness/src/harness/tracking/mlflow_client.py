from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from harness.contracts.run_result import RunStatus

try:
    import mlflow as _mlflow
except Exception:  # pragma: no cover - handled via runtime error
    _mlflow = None

logger = logging.getLogger("ner_harness.tracking")

DEFAULT_EXPERIMENT_ID = "0"

_TERMINAL_STATUS: dict[str, str] = {"ok": "FINISHED", "failed": "FAILED"}


def _require_mlflow() -> Any:
    if _mlflow is None:
        raise RuntimeError(
            "mlflow is not installed. Install mlflow or provide a fake module for tests."
        )
    return _mlflow


class MlflowTrackingClient:
    """
    Tracking facade over ``mlflow.MlflowClient``.

    Every call names its run explicitly instead of relying on mlflow's
    process-global active run. Passing ``run_id`` (``mlflow run`` exports it
    as ``MLFLOW_RUN_ID``) makes ``start_run`` adopt that pre-created run
    instead of creating one; the experiment is then the run's own.
    """

    def __init__(
        self,
        *,
        tracking_uri: str | None = None,
        experiment_name: str | None = None,
        run_id: str | None = None,
        client: Any | None = None,
    ) -> None:
        self._client = client or _require_mlflow().MlflowClient(tracking_uri=tracking_uri)
        self._experiment_name = experiment_name
        self._attach_run_id = run_id
        self._run_id: str | None = None
        self._artifact_uri: str | None = None

    @property
    def active_run_id(self) -> str | None:
        return self._run_id

    def start_run(self, *, run_name: str, tags: Mapping[str, str]) -> str:
        if self._run_id is not None:
            raise RuntimeError(f"MLflow run {self._run_id} is still open; end it first.")

        if self._attach_run_id is not None:
            run = self._client.get_run(self._attach_run_id)
            for key, value in tags.items():
                self._client.set_tag(run.info.run_id, key, value)
            self._attach_run_id = None
        else:
            run = self._client.create_run(
                self._experiment_id(), run_name=run_name, tags=dict(tags)
            )

        self._run_id = run.info.run_id
        self._artifact_uri = run.info.artifact_uri
        logger.info("Tracking to MLflow run %s", self._run_id)
        return self._run_id

    def end_run(self, *, status: RunStatus) -> None:
        run_id = self._open_run_id()
        self._client.set_terminated(run_id, status=_TERMINAL_STATUS[status])
        self._run_id = None
        self._artifact_uri = None

    def log_param(self, key: str, value: Any) -> None:
        self._client.log_param(self._open_run_id(), key, value)

    def log_metric(self, key: str, value: float, *, step: int | None = None) -> None:
        self._client.log_metric(self._open_run_id(), key, value, step=step)

    def log_artifact(self, local_path: str, *, artifact_path: str | None = None) -> None:
        self._client.log_artifact(self._open_run_id(), local_path, artifact_path=artifact_path)

    def get_artifact_uri(self) -> str | None:
        return self._artifact_uri

    def _experiment_id(self) -> str:
        if self._experiment_name is None:
            return DEFAULT_EXPERIMENT_ID
        experiment = self._client.get_experiment_by_name(self._experiment_name)
        if experiment is not None:
            return experiment.experiment_id
        logger.info("Creating MLflow experiment '%s'", self._experiment_name)
        return self._client.create_experiment(self._experiment_name)

    def _open_run_id(self) -> str:
        if self._run_id is None:
            raise RuntimeError("No active MLflow run. Call start_run first.")
        return self._run_id
