from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from harness.contracts.launcher import LaunchResult, LaunchStatus


class FakeRunLauncher:
    """
    In-memory RunLauncher for unit tests.

    ``status_for`` decides the outcome of each launch from its parameters;
    every launch succeeds by default.
    """

    def __init__(
        self,
        *,
        status_for: Callable[[Mapping[str, Any]], LaunchStatus] | None = None,
    ) -> None:
        self._status_for = status_for
        self._launches: list[LaunchResult] = []

    @property
    def launches(self) -> list[LaunchResult]:
        """Return the recorded launches in order."""
        return list(self._launches)

    def launch(self, entry_point: str, parameters: Mapping[str, Any]) -> LaunchResult:
        status: LaunchStatus = "ok"
        if self._status_for is not None:
            status = self._status_for(parameters)
        result = LaunchResult(
            run_id=f"launched_{len(self._launches) + 1}",
            status=status,
            entry_point=entry_point,
            parameters=dict(parameters),
        )
        self._launches.append(result)
        return result
