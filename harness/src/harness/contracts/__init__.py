from .launch_config import LaunchConfig, SweepConfig, SweepDefinition
from .launcher import LaunchResult, LaunchStatus, RunLauncher
from .run_context import RunContext
from .run_result import RunResult, RunStatus
from .sweep_result import SweepResult, SweepVariantFailure
from .tracking import ArtifactEntry, MetricPoint, RecordKind, RunRecord, TrackingClient

__all__ = [
    "ArtifactEntry",
    "LaunchConfig",
    "LaunchResult",
    "LaunchStatus",
    "MetricPoint",
    "RecordKind",
    "RunContext",
    "RunLauncher",
    "RunRecord",
    "RunResult",
    "RunStatus",
    "SweepConfig",
    "SweepDefinition",
    "SweepResult",
    "SweepVariantFailure",
    "TrackingClient",
]
