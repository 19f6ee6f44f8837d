"""YAML launch/sweep configuration: loading, validation, env expansion and grid variants."""

from __future__ import annotations

import hashlib
import itertools
import json
import os
from collections.abc import Iterator, Mapping
from copy import deepcopy
from pathlib import Path
from string import Template
from typing import Any, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from harness.contracts import LaunchConfig, SweepConfig

ModelT = TypeVar("ModelT", bound=BaseModel)

VARIANT_ID_PREFIX = "v-"


class ConfigError(ValueError):
    pass


def load_yaml(path: str | Path) -> dict[str, Any]:
    text = Path(path).read_text(encoding="utf-8")
    payload = yaml.safe_load(text)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        kind = type(payload).__name__
        raise ConfigError(f"{path}: expected a mapping at the top level, got {kind}")
    return payload


def load_launch_config(path: str | Path) -> LaunchConfig:
    return validate_model(LaunchConfig, resolve_env_vars(load_yaml(path)), prefix="launch")


def load_sweep_config(path: str | Path) -> SweepConfig:
    return validate_model(SweepConfig, resolve_env_vars(load_yaml(path)), prefix="sweep")


def validate_model(model_type: type[ModelT], payload: Any, *, prefix: str) -> ModelT:
    """Validate ``payload`` against a pydantic model, raising ConfigError on failure."""
    try:
        return model_type.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(format_validation_error(prefix, exc)) from exc


def format_validation_error(prefix: str, exc: ValidationError) -> str:
    """Flatten pydantic errors into ``prefix.field: message`` entries joined by ``; ``."""
    return "; ".join(
        f"{'.'.join(map(str, (prefix, *error['loc'])))}: {error['msg']}"
        for error in exc.errors(include_url=False)
    )


def resolve_env_vars(payload: Any, *, path: str = "$") -> Any:
    """
    Expand ``${NAME}`` references in every string of a YAML payload.

    Only the braced form is meaningful in configs; a referenced variable that
    is not set is an error naming where it was used.
    """
    if isinstance(payload, Mapping):
        return {str(k): resolve_env_vars(v, path=f"{path}.{k}") for k, v in payload.items()}
    if isinstance(payload, list):
        return [resolve_env_vars(v, path=f"{path}[{i}]") for i, v in enumerate(payload)]
    if not isinstance(payload, str) or "${" not in payload:
        return payload
    try:
        return Template(payload).substitute(os.environ)
    except KeyError as exc:
        raise ConfigError(f"{path}: environment variable {exc.args[0]!r} is not set") from None
    except ValueError as exc:
        raise ConfigError(f"{path}: {exc}") from None


def apply_dotpath_overrides(
    base: Mapping[str, Any],
    overrides: Mapping[str, Any],
) -> dict[str, Any]:
    """Return a deep copy of ``base`` with each ``a.b.c`` key in ``overrides`` assigned."""
    merged = deepcopy(dict(base))
    for dotpath, value in overrides.items():
        *parents, leaf = _split_dotpath(dotpath)
        node = merged
        for depth, key in enumerate(parents):
            child = node.setdefault(key, {})
            if child is None:
                child = node[key] = {}
            if not isinstance(child, dict):
                walked = ".".join(parents[: depth + 1])
                kind = type(child).__name__
                raise ConfigError(f"{dotpath}: '{walked}' holds a {kind}, not a mapping")
            node = child
        node[leaf] = value
    return merged


def _split_dotpath(dotpath: str) -> list[str]:
    keys = dotpath.split(".")
    if "" in keys:
        raise ConfigError(f"{dotpath!r} is not a valid override path")
    return keys


def expand_grid_overrides(overrides: Mapping[str, list[Any]]) -> Iterator[dict[str, Any]]:
    """Yield every combination of override choices, keys in sorted order."""
    keys = sorted(overrides)
    for combo in itertools.product(*(overrides[key] for key in keys)):
        yield dict(zip(keys, combo, strict=True))


def variant_id_from_overrides(overrides: Mapping[str, Any]) -> str:
    canonical = json.dumps(dict(overrides), sort_keys=True, default=str)
    digest = hashlib.blake2s(canonical.encode("utf-8"), digest_size=5).hexdigest()
    return VARIANT_ID_PREFIX + digest
