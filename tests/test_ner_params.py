from __future__ import annotations

import pytest

from harness.configuration import ConfigError
from ner_training.config import TrainParams, default_params, parse_params


def test_default_params_contains_both_run_parameters() -> None:
    assert default_params() == {"drop_rate": 0.2, "iterations": 10}


@pytest.mark.parametrize("drop_rate", [0.01, 0.25, 0.9])
def test_parse_params_accepts_drop_rate_in_range(drop_rate: float) -> None:
    params = parse_params({"drop_rate": drop_rate, "iterations": 3})
    assert params == TrainParams(drop_rate=drop_rate, iterations=3)


@pytest.mark.parametrize("drop_rate", [-0.1, 0.0, 0.91, 1.5])
def test_parse_params_rejects_drop_rate_out_of_range(drop_rate: float) -> None:
    with pytest.raises(ConfigError, match="params.drop_rate"):
        parse_params({"drop_rate": drop_rate, "iterations": 3})


def test_parse_params_accepts_zero_iterations() -> None:
    assert parse_params({"drop_rate": 0.5, "iterations": 0}).iterations == 0


@pytest.mark.parametrize("iterations", [-1, 2.5, "many"])
def test_parse_params_rejects_invalid_iterations(iterations: object) -> None:
    with pytest.raises(ConfigError, match="params.iterations"):
        parse_params({"drop_rate": 0.5, "iterations": iterations})


def test_parse_params_rejects_unknown_keys() -> None:
    with pytest.raises(ConfigError, match="params.seed"):
        parse_params({"drop_rate": 0.5, "iterations": 1, "seed": 3})
