"""Pose vector <-> rotation matrix conversion.

Convention
----------
Roll, pitch and yaw are intrinsic X -> Y' -> Z'' rotations (equivalent to
extrinsic Z -> Y -> X about the fixed base axes)::

    R = Rx(roll) * Ry(pitch) * Rz(yaw)

Element-to-angle mapping for that product (non-singular, |cos(pitch)| > 0)::

    pitch = atan2(r13, hypot(r11, r12))
    roll  = atan2(-r23, r33)
    yaw   = atan2(-r12, r11)

At gimbal lock (|cos(pitch)| = hypot(r11, r12) < GIMBAL_EPS) yaw is fixed to 0
and the remaining rotation is folded into roll. Poses whose |cos(pitch)| is
below GIMBAL_COMPARE_EPS are compared on the rotation matrix instead of their
angles; that band contains the folded one.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from typing import Literal, cast, overload

import numpy as np
import sympy as sp

from .type_utils import Matrix33, Matrix44, Num, Vector, Vector3

logger = logging.getLogger(__name__)

GIMBAL_EPS = 1e-9
GIMBAL_COMPARE_EPS = 1e-6


@overload
def rotation_xy_dash_z(roll: float, pitch: float, yaw: float, *, numeric: Literal[True]) -> Matrix33: ...


@overload
def rotation_xy_dash_z(roll: Num, pitch: Num, yaw: Num, *, numeric: Literal[False] = False) -> sp.Matrix: ...


def rotation_xy_dash_z(
    roll: Num | float,
    pitch: Num | float,
    yaw: Num | float,
    *,
    numeric: bool = False,
) -> sp.Matrix | Matrix33:
    """Return intrinsic XY'Z' rotation matrix with either SymPy or NumPy backend."""
    if numeric:
        a = float(roll)
        b = float(pitch)
        g = float(yaw)
        ca, sa = math.cos(a), math.sin(a)
        cb, sb = math.cos(b), math.sin(b)
        cg, sg = math.cos(g), math.sin(g)
        return np.array(
            [
                [cb * cg, -cb * sg, sb],
                [sa * sb * cg + ca * sg, ca * cg - sa * sb * sg, -sa * cb],
                [-ca * sb * cg + sa * sg, sa * cg + ca * sb * sg, ca * cb],
            ],
            dtype=float,
        )

    ca = cast(sp.Expr, sp.cos(roll))
    sa = cast(sp.Expr, sp.sin(roll))
    cb = cast(sp.Expr, sp.cos(pitch))
    sb = cast(sp.Expr, sp.sin(pitch))
    cg = cast(sp.Expr, sp.cos(yaw))
    sg = cast(sp.Expr, sp.sin(yaw))
    return sp.Matrix(
        [
            [cb * cg, -cb * sg, sb],
            [sa * sb * cg + ca * sg, ca * cg - sa * sb * sg, -sa * cb],
            [-ca * sb * cg + sa * sg, sa * cg + ca * sb * sg, ca * cb],
        ]
    )


def rotation_xy_dash_z_numeric(roll: float, pitch: float, yaw: float) -> Matrix33:
    """Helper wrapper for numeric rotation matrix."""
    return rotation_xy_dash_z(roll, pitch, yaw, numeric=True)


def rotation_xy_dash_z_symbolic(roll: Num, pitch: Num, yaw: Num) -> sp.Matrix:
    """Helper wrapper for symbolic rotation matrix."""
    return cast(sp.Matrix, rotation_xy_dash_z(roll, pitch, yaw, numeric=False))


def rot_to_euler_xy_dash_z(R: Matrix33, eps: float = GIMBAL_EPS) -> tuple[float, float, float]:
    """Numeric XY'Z' extraction with gimbal-lock handling.

    In the singular case |cos(pitch)| < eps (|r13| ~ 1) yaw is set to 0 and the
    rotation about the aligned axes is folded into roll via atan2 on
    (r21, r22).
    """
    r11, r12, r13 = float(R[0, 0]), float(R[0, 1]), float(R[0, 2])
    r21, r22, r23 = float(R[1, 0]), float(R[1, 1]), float(R[1, 2])
    r33 = float(R[2, 2])

    cos_pitch = math.hypot(r11, r12)
    if cos_pitch < eps or abs(r13) > 1.0:
        pitch = math.copysign(math.pi / 2, r13)
        yaw = 0.0
        # pitch = +pi/2: roll = atan2(r21, r22)
        # pitch = -pi/2: roll = atan2(-r21, r22)
        if r13 > 0:
            roll = math.atan2(r21, r22)
        else:
            roll = math.atan2(-r21, r22)
        return roll, pitch, yaw

    pitch = math.atan2(r13, cos_pitch)
    roll = math.atan2(-r23, r33)
    yaw = math.atan2(-r12, r11)
    return roll, pitch, yaw


def is_rotation(R: Matrix33, tol: float = 1e-6) -> bool:
    """Orthonormal with determinant +1 (within ``tol``)."""
    ortho = np.allclose(R.T @ R, np.eye(3), atol=tol)
    return bool(ortho and abs(float(np.linalg.det(R)) - 1.0) < tol)


def pose_to_rotation(pose: Sequence[float] | Vector) -> tuple[Matrix33, Vector3]:
    """Split a pose vector into its rotation matrix and translation."""
    x, y, z, roll, pitch, yaw = (float(v) for v in pose)
    return rotation_xy_dash_z_numeric(roll, pitch, yaw), np.array([x, y, z], dtype=float)


def pose_to_matrix(pose: Sequence[float] | Vector) -> Matrix44:
    """Build a homogeneous transform from (x, y, z, roll, pitch, yaw)."""
    R, p = pose_to_rotation(pose)
    T = np.eye(4, dtype=float)
    T[:3, :3] = R
    T[:3, 3] = p
    return T


def matrix_to_pose(T: Matrix44) -> Vector:
    """Reduce a homogeneous transform to (x, y, z, roll, pitch, yaw)."""
    R = T[:3, :3]
    if not is_rotation(R):
        logger.warning("rotation block is not orthonormal (det=%.6f)", float(np.linalg.det(R)))
    roll, pitch, yaw = rot_to_euler_xy_dash_z(R)
    return np.array([T[0, 3], T[1, 3], T[2, 3], roll, pitch, yaw], dtype=float)


def near_gimbal_lock(pose: Sequence[float] | Vector, tol: float = GIMBAL_COMPARE_EPS) -> bool:
    """True if roll and yaw of ``pose`` are too ill-conditioned to compare directly."""
    return abs(math.cos(float(pose[4]))) < tol


__all__ = [
    "GIMBAL_COMPARE_EPS",
    "GIMBAL_EPS",
    "is_rotation",
    "matrix_to_pose",
    "near_gimbal_lock",
    "pose_to_matrix",
    "pose_to_rotation",
    "rot_to_euler_xy_dash_z",
    "rotation_xy_dash_z",
    "rotation_xy_dash_z_numeric",
    "rotation_xy_dash_z_symbolic",
]
