"""Shared helpers for CLI modules."""

from __future__ import annotations

import argparse
import math
from collections.abc import Sequence

import sympy as sp

from youbot_kin.core.config import RobotConfig, default_config, load_config


def pprint_matrix(matrix: sp.Matrix) -> None:
    sp.pprint(matrix, use_unicode=True)  # type: ignore[operator]


def robot_config(args: argparse.Namespace) -> RobotConfig:
    path = getattr(args, "config", None)
    try:
        return load_config(path) if path else default_config()
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc


def to_radians(values: Sequence[float], deg: bool) -> list[float]:
    return [math.radians(v) for v in values] if deg else [float(v) for v in values]


def format_pose(pose: Sequence[float]) -> str:
    x, y, z, roll, pitch, yaw = (float(v) for v in pose)
    return (
        f"XYZ (mm): [{x:.3f}, {y:.3f}, {z:.3f}]\n"
        f"RPY (rad): [{roll:.6f}, {pitch:.6f}, {yaw:.6f}]\n"
        f"RPY (deg): [{math.degrees(roll):.3f}, {math.degrees(pitch):.3f}, {math.degrees(yaw):.3f}]"
    )
