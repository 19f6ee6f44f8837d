from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

ChoiceList = Annotated[list[Any], Field(min_length=1)]


class LaunchConfig(BaseModel):
    """One entry-point launch: which entry point, with which parameters."""

    model_config = ConfigDict(extra="forbid")

    entry_point: str = Field(default="main", min_length=1)
    params: dict[str, Any] = Field(default_factory=dict)


class SweepDefinition(BaseModel):
    model_config = ConfigDict(extra="forbid")

    mode: Literal["grid"] = "grid"
    overrides: dict[str, ChoiceList] = Field(min_length=1)

    @field_validator("overrides")
    @classmethod
    def _keys_are_dotpaths(cls, value: dict[str, list[Any]]) -> dict[str, list[Any]]:
        flat = sorted(key for key in value if "." not in key)
        if flat:
            raise ValueError(f"override keys must be dot-paths like 'params.drop_rate': {flat}")
        return value


class SweepConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    sweep: SweepDefinition
