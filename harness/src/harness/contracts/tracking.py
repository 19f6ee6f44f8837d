from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal, Protocol, runtime_checkable

from harness.contracts.run_result import RunStatus

RecordKind = Literal["param", "metric", "artifact"]


@dataclass(frozen=True, slots=True)
class MetricPoint:
    step: int
    value: float


@dataclass(frozen=True, slots=True)
class ArtifactEntry:
    local_path: str
    artifact_path: str | None


class RunRecord:
    """
    Append-only record of one run, as a tracking backend stores it.

    The run id cannot be reassigned. Params are written once (re-logging the
    same value is a no-op). Each metric is an ordered series of
    ``(step, value)`` points whose steps never decrease.
    """

    __slots__ = ("_run_id", "run_name", "tags", "params", "metrics", "artifacts", "order", "status")

    def __init__(self, run_id: str, *, run_name: str, tags: Mapping[str, str]) -> None:
        self._run_id = run_id
        self.run_name = run_name
        self.tags: dict[str, str] = dict(tags)
        self.params: dict[str, Any] = {}
        self.metrics: dict[str, list[MetricPoint]] = {}
        self.artifacts: list[ArtifactEntry] = []
        # (kind, key) in the order records were appended
        self.order: list[tuple[RecordKind, str]] = []
        self.status: RunStatus | None = None

    @property
    def run_id(self) -> str:
        return self._run_id

    @property
    def is_open(self) -> bool:
        return self.status is None

    def add_param(self, key: str, value: Any) -> None:
        if key in self.params and self.params[key] != value:
            raise ValueError(
                f"Param '{key}' already logged as {self.params[key]!r}; cannot change to {value!r}"
            )
        self.params[key] = value
        self.order.append(("param", key))

    def add_metric(self, key: str, value: float, *, step: int | None = None) -> None:
        series = self.metrics.setdefault(key, [])
        last_step = series[-1].step if series else 0
        resolved = last_step if step is None else step
        if resolved < last_step:
            raise ValueError(
                f"Metric '{key}' step {resolved} is lower than the last logged step {last_step}"
            )
        series.append(MetricPoint(step=resolved, value=float(value)))
        self.order.append(("metric", key))

    def add_artifact(self, local_path: str, *, artifact_path: str | None = None) -> None:
        self.artifacts.append(ArtifactEntry(local_path=local_path, artifact_path=artifact_path))
        self.order.append(("artifact", artifact_path or local_path))

    def metric_steps(self, key: str) -> list[int]:
        return [point.step for point in self.metrics.get(key, [])]

    def kinds(self) -> list[RecordKind]:
        return [kind for kind, _ in self.order]


@runtime_checkable
class TrackingClient(Protocol):
    """
    What training code may do to the run it is reporting to.

    Exactly one run is active between ``start_run`` and ``end_run``; every
    ``log_*`` call appends to that run and fails when no run is active.
    """

    @property
    def active_run_id(self) -> str | None: ...

    def start_run(self, *, run_name: str, tags: Mapping[str, str]) -> str:
        """Open a run (or attach to a pre-created one) and return its id."""
        ...

    def end_run(self, *, status: RunStatus) -> None: ...

    def log_param(self, key: str, value: Any) -> None: ...

    def log_metric(self, key: str, value: float, *, step: int | None = None) -> None: ...

    def log_artifact(self, local_path: str, *, artifact_path: str | None = None) -> None:
        """Upload a local file under ``artifact_path`` of the active run."""
        ...

    def get_artifact_uri(self) -> str | None:
        """Root URI of the active run's artifacts, or None outside a run."""
        ...
