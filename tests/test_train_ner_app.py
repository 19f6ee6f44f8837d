from __future__ import annotations

from types import SimpleNamespace

import pytest

from apps import train_ner
from harness.tracking.fakes import FakeTrackingClient
from ner_training import NerTagger


def test_main_trains_and_returns_zero(tmp_path, monkeypatch, capsys) -> None:
    monkeypatch.setenv("HARNESS_ARTIFACT_ROOT", str(tmp_path))
    tracking = FakeTrackingClient()

    exit_code = train_ner.main(["--drop-rate", "0.25", "--iterations", "3"], tracking=tracking)

    assert exit_code == 0
    assert tracking.last_run.params == {"drop_rate": 0.25, "iterations": 3}
    assert tracking.last_run.metric_steps("loss") == [0, 1, 2]
    assert len(tracking.last_run.artifacts) == 1
    assert "status='ok'" in capsys.readouterr().out


@pytest.mark.parametrize(
    "argv",
    [
        [],
        ["--drop-rate", "0.25"],
        ["--iterations", "3"],
        ["--drop-rate", "abc", "--iterations", "3"],
        ["--drop-rate", "0.25", "--iterations", "3.5"],
        ["--drop-rate", "1.2", "--iterations", "3"],
        ["--drop-rate", "0", "--iterations", "3"],
        ["--drop-rate", "nan", "--iterations", "3"],
        ["--drop-rate", "inf", "--iterations", "3"],
        ["--drop-rate", "-inf", "--iterations", "3"],
        ["--drop-rate", "0.25", "--iterations", "-1"],
        ["--drop-rate", "0.25", "--iterations", "3", "--seed", "1"],
    ],
)
def test_main_rejects_bad_arguments_before_tracking(argv, capsys) -> None:
    tracking = FakeTrackingClient()

    with pytest.raises(SystemExit) as excinfo:
        train_ner.main(argv, tracking=tracking)

    assert excinfo.value.code == 2
    assert tracking.runs == {}
    assert "usage:" in capsys.readouterr().err


def test_main_returns_one_when_training_fails(tmp_path, monkeypatch, caplog) -> None:
    def _explode(self, sentences, *, drop, rng):
        raise RuntimeError("step failed")

    monkeypatch.setenv("HARNESS_ARTIFACT_ROOT", str(tmp_path))
    monkeypatch.setattr(NerTagger, "update", _explode)
    tracking = FakeTrackingClient()

    exit_code = train_ner.main(["--drop-rate", "0.25", "--iterations", "2"], tracking=tracking)

    assert exit_code == 1
    assert tracking.last_run.status == "failed"
    assert "NER training failed: step failed" in caplog.text


def test_main_adopts_launched_run_from_environment(monkeypatch) -> None:
    built: dict[str, object] = {}

    class _RecordingClient(FakeTrackingClient):
        def __init__(self, **kwargs) -> None:
            super().__init__()
            built.update(kwargs)

    monkeypatch.setenv("MLFLOW_TRACKING_URI", "http://mlflow:5000")
    monkeypatch.setenv("MLFLOW_EXPERIMENT", "custom")
    monkeypatch.setenv("MLFLOW_RUN_ID", "abc123")
    monkeypatch.setattr(train_ner, "MlflowTrackingClient", _RecordingClient)
    monkeypatch.setattr(
        train_ner, "run_ner_training", lambda params, *, tracking: SimpleNamespace(result="ok")
    )

    assert train_ner.main(["--drop-rate", "0.25", "--iterations", "1"]) == 0
    assert built == {
        "tracking_uri": "http://mlflow:5000",
        "experiment_name": "custom",
        "run_id": "abc123",
    }
