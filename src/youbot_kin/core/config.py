"""Robot configuration: DH table, joint limits and IK options.

A YAML file is deep-merged onto the built-in youBot defaults, then
``YOUBOT_KIN_IK_<FIELD>`` environment variables override single
``IKOptions`` fields. Angles in the file are degrees.
"""

from __future__ import annotations

import copy
import logging
import math
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from youbot_kin.model.dh_params import (
    YOUBOT_LIMITS_DEG,
    DHParamsNum,
    JointLimits,
    make_dh_num,
    make_limits,
)
from youbot_kin.solvers.ik_solver import IKOptions

logger = logging.getLogger(__name__)

ENV_PREFIX = "YOUBOT_KIN_IK_"

DEFAULT_CONFIG: dict[str, Any] = {
    "name": "youbot",
    "dh": {
        "a": [33.0, 155.0, 135.0, 0.0, 0.0],
        "alpha_deg": [90.0, 0.0, 0.0, 90.0, 0.0],
        "d": [147.0, 0.0, 0.0, 0.0, 217.5],
        "theta_offset_deg": [0.0, 90.0, 0.0, 90.0, 0.0],
    },
    "limits_deg": {"lower": list(YOUBOT_LIMITS_DEG[0]), "upper": list(YOUBOT_LIMITS_DEG[1])},
    "ik": {},
    "geometric": True,
}


@dataclass(frozen=True)
class RobotConfig:
    name: str
    dh: DHParamsNum
    limits: JointLimits
    ik: IKOptions
    geometric: bool = True


def _deep_merge(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _ik_options(raw: Mapping[str, Any], environ: Mapping[str, str]) -> IKOptions:
    values: dict[str, Any] = {}
    for field, default in IKOptions._field_defaults.items():
        value = raw.get(field, default)
        env_value = environ.get(ENV_PREFIX + field.upper())
        if env_value is not None:
            logger.debug("IK option %s overridden from environment: %s", field, env_value)
            value = env_value
        try:
            values[field] = type(default)(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"invalid value for IK option {field!r}: {value!r}") from exc
    unknown = set(raw) - set(IKOptions._fields)
    if unknown:
        raise ValueError(f"unknown IK option(s): {', '.join(sorted(unknown))}")
    return IKOptions(**values)


def config_from_dict(data: Mapping[str, Any], environ: Mapping[str, str] | None = None) -> RobotConfig:
    """Build a ``RobotConfig`` from a (partial) mapping merged onto the defaults."""
    merged = _deep_merge(DEFAULT_CONFIG, data)
    env = os.environ if environ is None else environ
    try:
        dh_raw = merged["dh"]
        dh = make_dh_num(
            a=[float(v) for v in dh_raw["a"]],
            alpha=[math.radians(float(v)) for v in dh_raw["alpha_deg"]],
            d=[float(v) for v in dh_raw["d"]],
            theta_offset=[math.radians(float(v)) for v in dh_raw["theta_offset_deg"]],
        )
        lim_raw = merged["limits_deg"]
        limits = make_limits(
            [math.radians(float(v)) for v in lim_raw["lower"]],
            [math.radians(float(v)) for v in lim_raw["upper"]],
        )
    except (KeyError, TypeError) as exc:
        raise ValueError(f"malformed robot configuration: {exc}") from exc
    if limits.lower.shape != (dh.dof,):
        raise ValueError(f"joint limits cover {limits.lower.size} joints, DH table has {dh.dof}")

    return RobotConfig(
        name=str(merged["name"]),
        dh=dh,
        limits=limits,
        ik=_ik_options(merged["ik"], env),
        geometric=bool(merged["geometric"]),
    )


def default_config() -> RobotConfig:
    return config_from_dict({})


def load_config(path: str | Path, environ: Mapping[str, str] | None = None) -> RobotConfig:
    """Load a YAML robot configuration file."""
    config_path = Path(path)
    try:
        with config_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as exc:
        raise ValueError(f"configuration file not found: {config_path}") from exc
    except yaml.YAMLError as exc:
        raise ValueError(f"invalid YAML in {config_path}: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"{config_path}: top-level YAML value must be a mapping")
    logger.info("Robot configuration loaded from: %s", config_path)
    return config_from_dict(data, environ)


__all__ = [
    "DEFAULT_CONFIG",
    "ENV_PREFIX",
    "RobotConfig",
    "config_from_dict",
    "default_config",
    "load_config",
]
