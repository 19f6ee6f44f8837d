from __future__ import annotations

import json
import logging
import uuid
from collections.abc import Callable, Mapping
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Generic, TypeVar

from harness.configuration import (
    apply_dotpath_overrides,
    expand_grid_overrides,
    load_launch_config,
    load_sweep_config,
    resolve_env_vars,
    validate_model,
    variant_id_from_overrides,
)
from harness.contracts import (
    LaunchConfig,
    LaunchResult,
    RunContext,
    RunLauncher,
    RunResult,
    RunStatus,
    SweepResult,
    SweepVariantFailure,
    TrackingClient,
)
from harness.runtime.artifacts import build_run_artifact_dir, build_sweep_artifact_dir
from harness.tracking import FakeTrackingClient

T = TypeVar("T")

logger = logging.getLogger("ner_harness.api")


@dataclass(frozen=True, slots=True)
class TrackedRun(Generic[T]):
    result: RunResult
    value: T


def run_tracked(
    train: Callable[[RunContext], T],
    *,
    run_name: str,
    tags: Mapping[str, str] | None = None,
    tracking: TrackingClient | None = None,
    artifact_root: Path | None = None,
) -> TrackedRun[T]:
    """
    Run ``train`` inside a tracked run.

    The run is ended with status ``ok`` when ``train`` returns and ``failed``
    when it raises; the exception is re-raised unchanged.
    """
    tracking_client = tracking or FakeTrackingClient()
    start = datetime.now(UTC)
    run_id = tracking_client.start_run(run_name=run_name, tags=dict(tags or {}))

    end_status: RunStatus = "failed"
    try:
        artifact_dir = build_run_artifact_dir(run_id, artifact_root=artifact_root)
        context = RunContext(
            run_id=run_id,
            tracking=tracking_client,
            artifact_dir=artifact_dir,
            logger=logging.getLogger(f"ner_harness.run.{run_id}"),
        )
        try:
            value = train(context)
        except Exception:
            context.logger.exception("Training failed for run %s", run_id)
            raise

        end = datetime.now(UTC)
        outputs: dict[str, object] = {"artifact_dir": str(artifact_dir)}
        artifact_uri = tracking_client.get_artifact_uri()
        if artifact_uri is not None:
            outputs["artifact_uri"] = artifact_uri
        result = RunResult(
            run_id=run_id,
            status="ok",
            started_at_utc=start.isoformat(),
            ended_at_utc=end.isoformat(),
            duration_s=(end - start).total_seconds(),
            outputs=outputs,
        )
        end_status = "ok"
    finally:
        tracking_client.end_run(status=end_status)

    logger.info("Run %s finished in %.3fs", run_id, result.duration_s)
    return TrackedRun(result=result, value=value)


def launch_from_yaml(
    base_yaml: str | Path,
    *,
    launcher: RunLauncher,
) -> LaunchResult:
    config = load_launch_config(base_yaml)
    return launcher.launch(config.entry_point, config.params)


def launch_sweep_from_yaml(
    base_yaml: str | Path,
    sweep_yaml: str | Path,
    *,
    launcher: RunLauncher,
    artifact_root: Path | None = None,
) -> SweepResult:
    base_config = load_launch_config(base_yaml)
    sweep_config = load_sweep_config(sweep_yaml)
    base_payload = base_config.model_dump(mode="python")

    sweep_id = f"sweep-{datetime.now(UTC).strftime('%Y%m%dT%H%M%S')}-{uuid.uuid4().hex[:8]}"
    started = datetime.now(UTC)
    results: list[LaunchResult] = []
    failures: list[SweepVariantFailure] = []
    variants_total = 0

    for override_values in expand_grid_overrides(sweep_config.sweep.overrides):
        variants_total += 1
        variant_id = variant_id_from_overrides(override_values)
        try:
            variant_payload = apply_dotpath_overrides(base_payload, override_values)
            variant_config = validate_model(
                LaunchConfig, resolve_env_vars(variant_payload), prefix="launch"
            )
            result = launcher.launch(variant_config.entry_point, variant_config.params)
        except Exception as exc:
            logger.warning("Sweep variant %s failed to launch: %s", variant_id, exc)
            failures.append(
                SweepVariantFailure(
                    variant_id=variant_id,
                    overrides=dict(override_values),
                    error=str(exc),
                )
            )
            continue

        if result.status == "ok":
            results.append(result)
        else:
            failures.append(
                SweepVariantFailure(
                    variant_id=variant_id,
                    overrides=dict(override_values),
                    error=result.message
                    or f"run {result.run_id} finished with status {result.status}",
                )
            )

    ended = datetime.now(UTC)
    summary = {
        "sweep_id": sweep_id,
        "started_at_utc": started.isoformat(),
        "ended_at_utc": ended.isoformat(),
        "duration_s": (ended - started).total_seconds(),
        "variant_count": variants_total,
        "success_count": len(results),
        "failed_count": len(failures),
        "results": [asdict(item) for item in results],
        "failures": [asdict(item) for item in failures],
    }
    sweep_summary_path = (
        build_sweep_artifact_dir(sweep_id, artifact_root=artifact_root) / "sweep_summary.json"
    )
    _write_json(sweep_summary_path, summary)

    return SweepResult(
        sweep_id=sweep_id,
        started_at_utc=started.isoformat(),
        ended_at_utc=ended.isoformat(),
        duration_s=(ended - started).total_seconds(),
        results=results,
        failures=failures,
        metadata={
            "variant_count": variants_total,
            "sweep_summary_path": str(sweep_summary_path),
        },
    )


def _write_json(path: Path, payload: Mapping[str, Any]) -> None:
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2, sort_keys=True, default=str)
