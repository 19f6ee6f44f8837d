from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from harness.contracts.tracking import TrackingClient


@dataclass(frozen=True, slots=True)
class RunContext:
    """
    Runtime context handed to a training callable for one tracked run.

    Keep this stable: training code should only depend on these fields.
    """

    run_id: str
    tracking: TrackingClient
    artifact_dir: Path
    logger: logging.Logger
