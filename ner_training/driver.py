from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

import numpy as np

from harness.api import TrackedRun, run_tracked
from harness.contracts import RunContext, TrackingClient

from .artifacts import write_model
from .config import ModelConfig, TrainParams
from .data import TaggedSentence, build_sentences
from .train import NerTagger, build_tagger

LOSS_METRIC = "loss"
MODEL_ARTIFACT_PATH = "model"
RUN_NAME = "ner:train"

logger = logging.getLogger("ner_harness.ner_training")


def train_ner(
    params: TrainParams,
    *,
    tracking: TrackingClient,
    artifact_dir: Path,
    sentences: Sequence[TaggedSentence] | None = None,
    model_config: ModelConfig | None = None,
) -> NerTagger:
    """
    Train the tagger and report it to the active run.

    Records, in order: the two run parameters, one ``loss`` metric per
    iteration (step = zero-based iteration index), then the serialized model
    as a single artifact. Errors from a training step are not caught.
    """
    config = model_config or ModelConfig()
    train_sentences = list(sentences) if sentences is not None else build_sentences()

    tracking.log_param("drop_rate", params.drop_rate)
    tracking.log_param("iterations", params.iterations)

    tagger = build_tagger(train_sentences, config=config)
    rng = np.random.default_rng(config.seed)
    for step in range(params.iterations):
        loss = tagger.update(train_sentences, drop=params.drop_rate, rng=rng)
        logger.debug("iteration %d loss=%.6f", step, loss)
        tracking.log_metric(LOSS_METRIC, loss, step=step)

    model_path = write_model(artifact_dir, tagger)
    tracking.log_artifact(str(model_path), artifact_path=MODEL_ARTIFACT_PATH)
    return tagger


def run_ner_training(
    params: TrainParams,
    *,
    tracking: TrackingClient | None = None,
    model_config: ModelConfig | None = None,
    artifact_root: Path | None = None,
) -> TrackedRun[NerTagger]:
    config = model_config or ModelConfig()

    def _train(context: RunContext) -> NerTagger:
        context.logger.info(
            "Training NER tagger: drop_rate=%s iterations=%d",
            params.drop_rate,
            params.iterations,
        )
        return train_ner(
            params,
            tracking=context.tracking,
            artifact_dir=context.artifact_dir,
            model_config=config,
        )

    return run_tracked(
        _train,
        run_name=RUN_NAME,
        tags={"task": "ner", "model_seed": str(config.seed)},
        tracking=tracking,
        artifact_root=artifact_root,
    )
