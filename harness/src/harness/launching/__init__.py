from .fakes import FakeRunLauncher
from .mlflow_projects import MlflowProjectLauncher

__all__ = [
    "FakeRunLauncher",
    "MlflowProjectLauncher",
]
