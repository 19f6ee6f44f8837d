from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Sequence

from harness.configuration import ConfigError
from harness.contracts import TrackingClient
from harness.tracking import MlflowTrackingClient
from ner_training import TrainParams, parse_params, run_ner_training

logger = logging.getLogger("ner_harness.apps.train_ner")

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _resolve_tracking_uri() -> str:
    tracking_uri = os.environ.get("MLFLOW_TRACKING_URI")
    return tracking_uri or "http://localhost:5000"


def _resolve_experiment_name() -> str:
    return os.environ.get("MLFLOW_EXPERIMENT", "ner-harness-dev")


def parse_args(argv: Sequence[str] | None = None) -> TrainParams:
    parser = argparse.ArgumentParser(description="Train the NER tagger and track the run.")
    parser.add_argument(
        "--drop-rate",
        dest="drop_rate",
        type=float,
        required=True,
        help="Feature dropout rate, in (0, 0.9]",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        required=True,
        help="Number of training iterations (0 or more)",
    )
    args = parser.parse_args(argv)
    try:
        return parse_params({"drop_rate": args.drop_rate, "iterations": args.iterations})
    except ConfigError as exc:
        parser.error(str(exc))


def main(argv: Sequence[str] | None = None, *, tracking: TrackingClient | None = None) -> int:
    params = parse_args(argv)
    if tracking is None:
        tracking = MlflowTrackingClient(
            tracking_uri=_resolve_tracking_uri(),
            experiment_name=_resolve_experiment_name(),
            # set by `mlflow run`; the launched run is adopted instead of created
            run_id=os.environ.get("MLFLOW_RUN_ID") or None,
        )

    try:
        tracked = run_ner_training(params, tracking=tracking)
    except Exception as exc:
        logger.error("NER training failed: %s", exc)
        return 1

    print(tracked.result)
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format=_LOG_FORMAT)
    sys.exit(main())
