from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

RunStatus = Literal["ok", "failed"]


@dataclass(frozen=True, slots=True)
class RunResult:
    """Local outcome of one tracked run."""

    run_id: str
    status: RunStatus

    started_at_utc: str
    ended_at_utc: str
    duration_s: float

    # artifact_dir, plus artifact_uri when the tracker exposes one
    outputs: Mapping[str, Any] = field(default_factory=dict)
