from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from harness.contracts.run_result import RunStatus
from harness.contracts.tracking import RunRecord


class FakeTrackingClient:
    """
    In-memory run store standing in for a tracking server in tests.

    Every run ever started stays in ``runs`` (keyed by id) after it ends, so
    tests assert on what the run holds rather than on which calls were made.
    """

    def __init__(self, *, base_artifact_uri: str | None = None) -> None:
        self._base_artifact_uri = base_artifact_uri
        self._runs: dict[str, RunRecord] = {}
        self._active: RunRecord | None = None

    @property
    def active_run_id(self) -> str | None:
        return None if self._active is None else self._active.run_id

    @property
    def runs(self) -> dict[str, RunRecord]:
        return dict(self._runs)

    @property
    def last_run(self) -> RunRecord:
        if not self._runs:
            raise LookupError("No run has been started.")
        return next(reversed(self._runs.values()))

    def run(self, run_id: str) -> RunRecord:
        try:
            return self._runs[run_id]
        except KeyError:
            raise LookupError(f"Unknown run id '{run_id}'") from None

    def start_run(self, *, run_name: str, tags: Mapping[str, str]) -> str:
        if self._active is not None:
            raise RuntimeError("A run is already active.")
        record = RunRecord(f"run_{len(self._runs) + 1}", run_name=run_name, tags=tags)
        self._runs[record.run_id] = record
        self._active = record
        return record.run_id

    def end_run(self, *, status: RunStatus) -> None:
        record = self._require_active()
        record.status = status
        self._active = None

    def log_param(self, key: str, value: Any) -> None:
        self._require_active().add_param(key, value)

    def log_metric(self, key: str, value: float, *, step: int | None = None) -> None:
        self._require_active().add_metric(key, value, step=step)

    def log_artifact(self, local_path: str, *, artifact_path: str | None = None) -> None:
        self._require_active().add_artifact(local_path, artifact_path=artifact_path)

    def get_artifact_uri(self) -> str | None:
        if self._active is None or self._base_artifact_uri is None:
            return None
        return f"{self._base_artifact_uri}/{self._active.run_id}"

    def _require_active(self) -> RunRecord:
        if self._active is None:
            raise RuntimeError("No active run. Call start_run first.")
        return self._active
