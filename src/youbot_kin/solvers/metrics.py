"""Scalar error metrics between two TCP pose vectors."""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import TypeAlias

import numpy as np

from youbot_kin.core.orientation import near_gimbal_lock, pose_to_rotation
from youbot_kin.core.type_utils import Matrix33, Vector

PoseLike: TypeAlias = Sequence[float] | Vector


def wrap_to_pi(v: float) -> float:
    """Wrap an angle to [-pi, pi)."""
    return (v + math.pi) % (2 * math.pi) - math.pi


def angle_delta(a: Sequence[float] | np.ndarray, b: Sequence[float] | np.ndarray) -> np.ndarray:
    """Return elementwise wrapped angle difference a-b (rad)."""
    diff = np.asarray(a, dtype=float) - np.asarray(b, dtype=float)
    return np.array([wrap_to_pi(v) for v in diff], dtype=float)


def position_error(pose_a: PoseLike, pose_b: PoseLike) -> float:
    """Euclidean distance between the XYZ parts of two poses."""
    pa = np.asarray(pose_a, dtype=float)[:3]
    pb = np.asarray(pose_b, dtype=float)[:3]
    return float(np.linalg.norm(pa - pb))


def orientation_error(pose_a: PoseLike, pose_b: PoseLike) -> float:
    """Sum of absolute shortest angular differences in roll, pitch and yaw."""
    ra = np.asarray(pose_a, dtype=float)[3:6]
    rb = np.asarray(pose_b, dtype=float)[3:6]
    # |wrap(x)| is symmetric except at exactly -pi, where |-pi| == |pi| anyway.
    return float(np.sum(np.abs(angle_delta(ra, rb))))


def rotation_angle(RA: Matrix33, RB: Matrix33) -> float:
    """Angle between two rotations in radians."""
    R = RA.T @ RB
    s = 0.5 * math.hypot(R[2, 1] - R[1, 2], R[0, 2] - R[2, 0], R[1, 0] - R[0, 1])
    c = (float(np.trace(R)) - 1.0) * 0.5
    return math.atan2(s, c)


def pose_errors(actual: PoseLike, target: PoseLike) -> tuple[float, float]:
    """Return ``(position_error, orientation_error)`` of ``actual`` w.r.t. ``target``.

    At gimbal lock roll and yaw of the target are only defined up to their
    sum, so the orientation is compared on the rotation geodesic instead.
    """
    pos_err = position_error(actual, target)
    if near_gimbal_lock(target):
        Ra, _ = pose_to_rotation(actual)
        Rt, _ = pose_to_rotation(target)
        return pos_err, rotation_angle(Ra, Rt)
    return pos_err, orientation_error(actual, target)


__all__ = [
    "angle_delta",
    "orientation_error",
    "pose_errors",
    "position_error",
    "rotation_angle",
    "wrap_to_pi",
]
