"""Symbolic-vs-numeric consistency check of the roll/pitch/yaw extraction."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import cast

import numpy as np
import sympy as sp

from youbot_kin.core.orientation import rot_to_euler_xy_dash_z, rotation_xy_dash_z_symbolic


@dataclass(frozen=True)
class NumericCheckResult:
    roll: float
    pitch: float
    yaw: float
    err_F: float
    err_inf: float
    delta: sp.Matrix


def R3(M: sp.Matrix) -> sp.Matrix:
    """Ensure 3x3 rotation block."""
    return cast(sp.Matrix, M[:3, :3]) if M.shape == (4, 4) else M


def mat_to_np(M: sp.Matrix) -> np.ndarray:
    lst = M.tolist()  # type: ignore[no-untyped-call]
    return np.array(lst, dtype=np.float64)


def _chop_if_small(x: sp.Expr) -> sp.Expr | float:
    xf = float(x)
    if math.isfinite(xf) and abs(xf) < 1e-10:
        return 0.0
    return x


def check_numeric_once(T0n: sp.Matrix, subs_map: Mapping[sp.Symbol, float]) -> NumericCheckResult:
    """Evaluate ``T0n`` at ``subs_map``, extract RPY and rebuild the rotation.

    The reconstruction goes through the SymPy rotation so the two backends of
    ``rotation_xy_dash_z`` are checked against each other.
    """
    R_num = sp.N(R3(T0n).subs(subs_map), 15)  # type: ignore[no-untyped-call]
    R_np = mat_to_np(R_num)

    roll, pitch, yaw = rot_to_euler_xy_dash_z(R_np)
    Rrec_num = sp.N(rotation_xy_dash_z_symbolic(roll, pitch, yaw), 15)  # type: ignore[no-untyped-call]

    delta = sp.N(R_num - Rrec_num, 15)  # type: ignore[no-untyped-call]
    d_np = mat_to_np(delta)
    err_F = float(np.linalg.norm(d_np, ord="fro"))
    err_inf = float(np.max(np.abs(d_np)))
    return NumericCheckResult(roll, pitch, yaw, err_F, err_inf, delta.applyfunc(_chop_if_small))


__all__ = ["NumericCheckResult", "check_numeric_once", "mat_to_np"]
