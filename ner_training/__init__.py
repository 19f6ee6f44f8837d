"""NER training run driver reporting to an experiment tracker."""

from .config import ModelConfig, TrainParams, default_params, parse_params
from .driver import run_ner_training, train_ner
from .train import NerTagger

__all__ = [
    "ModelConfig",
    "NerTagger",
    "TrainParams",
    "default_params",
    "parse_params",
    "run_ner_training",
    "train_ner",
]
