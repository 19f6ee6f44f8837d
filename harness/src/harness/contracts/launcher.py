from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal, Protocol, runtime_checkable

LaunchStatus = Literal["ok", "failed"]

NOT_STARTED_RUN_ID = "not-started"


@dataclass(frozen=True, slots=True)
class LaunchResult:
    run_id: str
    status: LaunchStatus
    entry_point: str
    parameters: Mapping[str, Any] = field(default_factory=dict)
    # Set when the runner refused the launch before a run existed
    message: str | None = None


@runtime_checkable
class RunLauncher(Protocol):
    """
    Facade contract for project runners that execute named entry points.
    """

    def launch(self, entry_point: str, parameters: Mapping[str, Any]) -> LaunchResult:
        """
        Run the entry point to completion and report its run id and status.

        Launches the runner rejects up front (bad parameters, environment
        build errors) come back as ``failed`` with ``run_id`` set to
        ``NOT_STARTED_RUN_ID``.
        """
        ...
