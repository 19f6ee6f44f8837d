import importlib
import sys
from types import SimpleNamespace

import pytest

from harness.contracts import TrackingClient
from harness.tracking import mlflow_client
from harness.tracking.mlflow_client import MlflowTrackingClient


class RecordingMlflowClient:
    """Stands in for ``mlflow.MlflowClient``; keeps what each run received."""

    def __init__(self, tracking_uri=None, *, experiments=None) -> None:
        self.tracking_uri = tracking_uri
        self.experiments: dict[str, str] = dict(experiments or {})
        self.created_experiments: list[str] = []
        self.runs: dict[str, dict] = {}

    def get_experiment_by_name(self, name):
        if name not in self.experiments:
            return None
        return SimpleNamespace(experiment_id=self.experiments[name])

    def create_experiment(self, name):
        experiment_id = str(100 + len(self.experiments))
        self.experiments[name] = experiment_id
        self.created_experiments.append(name)
        return experiment_id

    def create_run(self, experiment_id, *, run_name, tags):
        run_id = f"mlrun-{len(self.runs) + 1}"
        self.runs[run_id] = self._new_run(experiment_id, run_name, tags)
        return self.get_run(run_id)

    def get_run(self, run_id):
        return SimpleNamespace(
            info=SimpleNamespace(run_id=run_id, artifact_uri=f"mlflow-artifacts:/{run_id}")
        )

    def set_tag(self, run_id, key, value):
        self.runs[run_id]["tags"][key] = value

    def set_terminated(self, run_id, *, status):
        self.runs[run_id]["status"] = status

    def log_param(self, run_id, key, value):
        self.runs[run_id]["params"][key] = value

    def log_metric(self, run_id, key, value, *, step=None):
        self.runs[run_id]["metrics"].setdefault(key, []).append((step, value))

    def log_artifact(self, run_id, local_path, *, artifact_path=None):
        self.runs[run_id]["artifacts"].append((artifact_path, local_path))

    @staticmethod
    def _new_run(experiment_id, run_name, tags):
        return {
            "experiment_id": experiment_id,
            "run_name": run_name,
            "tags": dict(tags),
            "params": {},
            "metrics": {},
            "artifacts": [],
            "status": "RUNNING",
        }


def test_ner_training_calls_land_on_the_created_run():
    backend = RecordingMlflowClient(experiments={"ner-demo": "7"})
    client = MlflowTrackingClient(experiment_name="ner-demo", client=backend)

    run_id = client.start_run(run_name="ner:train", tags={"task": "ner"})
    client.log_param("drop_rate", 0.25)
    client.log_param("iterations", 3)
    for step, loss in enumerate([1.1, 0.8, 0.6]):
        client.log_metric("loss", loss, step=step)
    client.log_artifact("/tmp/models/ner_model.joblib", artifact_path="model")

    assert client.get_artifact_uri() == f"mlflow-artifacts:/{run_id}"
    client.end_run(status="ok")

    run = backend.runs[run_id]
    assert run["experiment_id"] == "7"
    assert run["run_name"] == "ner:train"
    assert run["params"] == {"drop_rate": 0.25, "iterations": 3}
    assert run["metrics"] == {"loss": [(0, 1.1), (1, 0.8), (2, 0.6)]}
    assert run["artifacts"] == [("model", "/tmp/models/ner_model.joblib")]
    assert run["status"] == "FINISHED"
    assert backend.created_experiments == []
    assert client.active_run_id is None
    assert client.get_artifact_uri() is None


def test_missing_experiment_is_created_once():
    backend = RecordingMlflowClient()
    client = MlflowTrackingClient(experiment_name="ner-new", client=backend)

    first = client.start_run(run_name="ner:train", tags={})
    client.end_run(status="ok")
    second = client.start_run(run_name="ner:train", tags={})

    assert backend.created_experiments == ["ner-new"]
    assert backend.runs[first]["experiment_id"] == backend.runs[second]["experiment_id"]


def test_without_experiment_name_runs_go_to_default_experiment():
    backend = RecordingMlflowClient()
    client = MlflowTrackingClient(client=backend)

    run_id = client.start_run(run_name="ner:train", tags={})

    assert backend.runs[run_id]["experiment_id"] == mlflow_client.DEFAULT_EXPERIMENT_ID


def test_launched_run_is_adopted_instead_of_created():
    backend = RecordingMlflowClient()
    backend.runs["launched-42"] = RecordingMlflowClient._new_run("3", "main", {})
    client = MlflowTrackingClient(experiment_name="ignored", run_id="launched-42", client=backend)

    run_id = client.start_run(run_name="ner:train", tags={"task": "ner"})
    client.log_param("drop_rate", 0.5)
    client.end_run(status="failed")

    assert run_id == "launched-42"
    assert list(backend.runs) == ["launched-42"]
    assert backend.runs[run_id]["tags"] == {"task": "ner"}
    assert backend.runs[run_id]["params"] == {"drop_rate": 0.5}
    assert backend.runs[run_id]["status"] == "FAILED"
    assert backend.created_experiments == []


def test_strict_lifecycle():
    client = MlflowTrackingClient(client=RecordingMlflowClient())

    with pytest.raises(RuntimeError, match="No active MLflow run"):
        client.log_metric("loss", 1.0, step=0)

    client.start_run(run_name="ner:train", tags={})

    with pytest.raises(RuntimeError, match="still open"):
        client.start_run(run_name="dup", tags={})

    client.end_run(status="ok")

    with pytest.raises(RuntimeError, match="No active MLflow run"):
        client.end_run(status="failed")


def test_satisfies_tracking_protocol():
    assert isinstance(MlflowTrackingClient(client=RecordingMlflowClient()), TrackingClient)


@pytest.fixture
def fake_mlflow(monkeypatch):
    fake = SimpleNamespace(MlflowClient=RecordingMlflowClient)
    monkeypatch.setitem(sys.modules, "mlflow", fake)
    yield fake
    monkeypatch.undo()
    importlib.reload(mlflow_client)


def test_default_client_is_built_from_mlflow_module(fake_mlflow):
    module = importlib.reload(mlflow_client)

    client = module.MlflowTrackingClient(tracking_uri="http://mlflow:5000")

    assert isinstance(client._client, RecordingMlflowClient)
    assert client._client.tracking_uri == "http://mlflow:5000"
