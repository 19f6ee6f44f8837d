from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Sequence
from pathlib import Path

from harness.api import launch_from_yaml, launch_sweep_from_yaml
from harness.contracts import RunLauncher
from harness.launching import MlflowProjectLauncher

logger = logging.getLogger("ner_harness.apps.launch_runs")

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _resolve_tracking_uri() -> str:
    tracking_uri = os.environ.get("MLFLOW_TRACKING_URI")
    return tracking_uri or "http://localhost:5000"


def _resolve_experiment_name() -> str:
    return os.environ.get("MLFLOW_EXPERIMENT", "ner-harness-dev")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Launch MLproject entry points from YAML config.")
    parser.add_argument("base_yaml", type=Path, help="Path to base launch YAML")
    parser.add_argument(
        "--sweep",
        dest="sweep_yaml",
        type=Path,
        default=None,
        help="Optional sweep YAML path for grid expansion",
    )
    parser.add_argument(
        "--project-uri",
        default=".",
        help="MLproject directory or git URI (default: current directory)",
    )
    parser.add_argument(
        "--env-manager",
        default="local",
        choices=["local", "virtualenv", "uv", "conda"],
        help="Environment manager used by mlflow to run the entry point",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None, *, launcher: RunLauncher | None = None) -> int:
    """Launch one run or a sweep; exit status is 1 when any launched run did not finish ok."""
    args = parse_args(argv)
    if launcher is None:
        launcher = MlflowProjectLauncher(
            args.project_uri,
            tracking_uri=_resolve_tracking_uri(),
            experiment_name=_resolve_experiment_name(),
            env_manager=args.env_manager,
        )

    if args.sweep_yaml is None:
        result = launch_from_yaml(args.base_yaml, launcher=launcher)
        print(result)
        if result.status != "ok":
            logger.error("Run %s finished with status %s", result.run_id, result.status)
            return 1
        return 0

    sweep_result = launch_sweep_from_yaml(args.base_yaml, args.sweep_yaml, launcher=launcher)
    print(sweep_result)
    if sweep_result.failures:
        logger.error(
            "%d of %d sweep variants failed",
            len(sweep_result.failures),
            sweep_result.metadata["variant_count"],
        )
        return 1
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format=_LOG_FORMAT)
    sys.exit(main())
