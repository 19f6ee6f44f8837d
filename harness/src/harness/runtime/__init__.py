"""Runtime helpers for tracked runs and sweeps."""

from harness.runtime.artifacts import (
    build_run_artifact_dir,
    build_sweep_artifact_dir,
    resolve_artifact_root,
)

__all__ = ["build_run_artifact_dir", "build_sweep_artifact_dir", "resolve_artifact_root"]
