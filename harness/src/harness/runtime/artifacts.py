from __future__ import annotations

import os
import tempfile
from pathlib import Path

_ENV_ARTIFACT_ROOT = "HARNESS_ARTIFACT_ROOT"
_LOCAL_ARTIFACT_DIRNAME = ".artifacts"
_TEMP_ARTIFACT_DIRNAME = "ner-harness-artifacts"


def resolve_artifact_root() -> Path:
    """Return the first writable artifact root: env override, ./.artifacts, then tmp."""
    for candidate in _artifact_root_candidates():
        if _is_writable_dir(candidate):
            return candidate

    raise RuntimeError("Unable to resolve a writable artifact root directory.")


def build_run_artifact_dir(run_id: str, *, artifact_root: Path | None = None) -> Path:
    """Create and return ``<root>/runs/<run_id>``."""
    return _make_child_dir(artifact_root, "runs", run_id)


def build_sweep_artifact_dir(sweep_id: str, *, artifact_root: Path | None = None) -> Path:
    """Create and return ``<root>/sweeps/<sweep_id>``."""
    return _make_child_dir(artifact_root, "sweeps", sweep_id)


def _make_child_dir(artifact_root: Path | None, kind: str, name: str) -> Path:
    if not name or "/" in name or name in (".", ".."):
        raise ValueError(f"Invalid {kind} directory name: {name!r}")
    root = artifact_root if artifact_root is not None else resolve_artifact_root()
    path = root / kind / name
    path.mkdir(parents=True, exist_ok=True)
    return path


def _artifact_root_candidates() -> list[Path]:
    candidates: list[Path] = []
    env_value = os.environ.get(_ENV_ARTIFACT_ROOT)
    if env_value:
        candidates.append(Path(env_value).expanduser())
    candidates.append(Path.cwd() / _LOCAL_ARTIFACT_DIRNAME)
    candidates.append(Path(tempfile.gettempdir()) / _TEMP_ARTIFACT_DIRNAME)
    return candidates


def _is_writable_dir(path: Path) -> bool:
    try:
        path.mkdir(parents=True, exist_ok=True)
        probe = path / ".write_test"
        probe.write_text("ok", encoding="utf-8")
        probe.unlink(missing_ok=True)
    except OSError:
        return False
    return True
