from __future__ import annotations
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Literal, Mapping, Tuple, Union

import yaml

from .averager import SlidingAverager
from .types import InvalidConfigurationError


# ---------- dataclass for averager config ----------

MethodStr = Literal["arithmetic", "weighted_arithmetic"]


@dataclass(frozen=True)
class AveragerConfig:
    method: MethodStr = "arithmetic"
    period: int = 1
    delay: int = 0
    # empty -> uniform weights of 1 for the whole period
    weights: Tuple[Union[int, float], ...] = ()


def averager_config_from_dict(raw: Mapping[str, Any]) -> AveragerConfig:
    known = {f.name for f in fields(AveragerConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise InvalidConfigurationError(f"unknown averager setting(s): {unknown}")

    data = dict(raw)
    if data.get("weights") is not None:
        data["weights"] = tuple(data["weights"])
    else:
        data.pop("weights", None)
    return AveragerConfig(**data)


def _load_yaml(path: str | Path) -> Dict[str, Any]:
    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"YAML at {p} must contain a mapping/object.")
    return data


def load_averager_config(path: str | Path) -> AveragerConfig:
    raw = _load_yaml(path)
    section = raw.get("averager", raw)
    if not isinstance(section, dict):
        raise ValueError(f"'averager' section in {path} must be a mapping/object.")
    return averager_config_from_dict(section)


def build_averager(config: AveragerConfig) -> SlidingAverager:
    averager = SlidingAverager(config.method)
    averager.set_period(config.period).set_delay(config.delay)
    if config.weights:
        averager.set_weights(config.weights)
    averager.assert_valid_settings()
    return averager
