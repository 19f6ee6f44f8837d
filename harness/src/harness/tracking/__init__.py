from .fakes import FakeTrackingClient
from .mlflow_client import MlflowTrackingClient

__all__ = [
    "FakeTrackingClient",
    "MlflowTrackingClient",
]
