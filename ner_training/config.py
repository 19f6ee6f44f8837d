from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from harness.configuration import validate_model

MAX_DROP_RATE = 0.9


class TrainParams(BaseModel):
    """Run parameters recorded against every training run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    drop_rate: float = Field(default=0.2, gt=0.0, le=MAX_DROP_RATE)
    iterations: int = Field(default=10, ge=0)


class ModelConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    alpha: float = Field(default=1e-4, gt=0.0)
    seed: int = Field(default=0, ge=0)


def default_params() -> dict[str, Any]:
    return TrainParams().model_dump(mode="python")


def parse_params(params: Mapping[str, Any] | None) -> TrainParams:
    return validate_model(TrainParams, dict(params or {}), prefix="params")
