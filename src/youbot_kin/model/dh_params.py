"""Denavit-Hartenberg parameter helpers for the youBot arm."""

from __future__ import annotations

import math
from typing import NamedTuple

import numpy as np
import sympy as sp

from youbot_kin.core.type_utils import HALF_PI, Num


class DHParams(NamedTuple):
    """Symbolic DH parameters and the joint symbols they depend on."""

    thetas: list[sp.Symbol]
    params: dict[str, list[Num]]


class DHParamsNum(NamedTuple):
    """Numeric DH parameter arrays for fast FK/IK use.

    ``a`` is the common normal length (often written ``r``). The angle fed to
    link ``i`` is ``q[i] + theta_offset[i]``.
    """

    a: np.ndarray
    alpha: np.ndarray
    d: np.ndarray
    theta_offset: np.ndarray

    @property
    def dof(self) -> int:
        return int(self.a.shape[0])

    def reach(self) -> float:
        """Upper bound on the distance from base to TCP."""
        return float(np.sum(np.abs(self.a)) + np.sum(np.abs(self.d)))


class JointLimits(NamedTuple):
    """Per-joint [lower, upper] bounds in radians."""

    lower: np.ndarray
    upper: np.ndarray

    def contains(self, q: np.ndarray, tol: float = 1e-9) -> bool:
        q = np.asarray(q, dtype=float)
        return bool(np.all(q >= self.lower - tol) and np.all(q <= self.upper + tol))

    def clip(self, q: np.ndarray) -> np.ndarray:
        return np.clip(q, self.lower, self.upper)


def make_dh_num(
    a: list[float], alpha: list[float], d: list[float], theta_offset: list[float]
) -> DHParamsNum:
    """Build a read-only ``DHParamsNum`` and validate that all columns agree."""
    arrays = [np.array(col, dtype=float) for col in (a, alpha, d, theta_offset)]
    n = arrays[0].shape[0]
    if n == 0 or any(arr.shape != (n,) for arr in arrays):
        raise ValueError("DH columns a, alpha, d, theta_offset must be 1-D and equally long")
    for arr in arrays:
        arr.setflags(write=False)
    return DHParamsNum(*arrays)


def make_limits(lower: list[float], upper: list[float]) -> JointLimits:
    lo = np.array(lower, dtype=float)
    hi = np.array(upper, dtype=float)
    if lo.shape != hi.shape or np.any(lo > hi):
        raise ValueError("joint limits need matching lengths and lower <= upper")
    lo.setflags(write=False)
    hi.setflags(write=False)
    return JointLimits(lo, hi)


def unlimited(dof: int) -> JointLimits:
    return make_limits([-math.pi] * dof, [math.pi] * dof)


def youbot_5R() -> DHParams:
    """Return symbolic DH data for the youBot 5-DoF arm."""
    th1, th2, th3, th4, th5 = sp.symbols("th1 th2 th3 th4 th5", real=True)

    a: list[Num] = [33, 155, 135, 0, 0]
    alpha: list[Num] = [HALF_PI, 0, 0, HALF_PI, 0]
    d: list[Num] = [147, 0, 0, 0, sp.Rational(435, 2)]
    theta: list[Num] = [th1, th2 + HALF_PI, th3, th4 + HALF_PI, th5]

    return DHParams(
        [th1, th2, th3, th4, th5],
        {"a": a, "alpha": alpha, "d": d, "theta": theta},
    )


def youbot_5R_num() -> DHParamsNum:
    """Return numeric DH arrays consistent with `youbot_5R`."""
    # Units: millimeters for a/d, radians for angles.
    return make_dh_num(
        a=[33.0, 155.0, 135.0, 0.0, 0.0],
        alpha=[math.pi / 2, 0.0, 0.0, math.pi / 2, 0.0],
        d=[147.0, 0.0, 0.0, 0.0, 217.5],
        theta_offset=[0.0, math.pi / 2, 0.0, math.pi / 2, 0.0],
    )


# Degrees, relative to the zero pose (arm pointing straight up).
YOUBOT_LIMITS_DEG: tuple[list[float], list[float]] = (
    [-169.0, -65.0, -151.0, -102.5, -167.5],
    [169.0, 90.0, 146.0, 102.5, 167.5],
)


def youbot_joint_limits() -> JointLimits:
    lower, upper = YOUBOT_LIMITS_DEG
    return make_limits([math.radians(v) for v in lower], [math.radians(v) for v in upper])


# Home TCP pose for q = 0: straight up, tool frame rotated by pi about Z.
YOUBOT_HOME_POSE: tuple[float, ...] = (33.0, 0.0, 654.5, 0.0, 0.0, math.pi)


def is_youbot_layout(dh: DHParamsNum, tol: float = 1e-9) -> bool:
    """True if the table has the joint geometry the closed-form IK assumes."""
    if dh.dof != 5:
        return False
    zero_a = abs(dh.a[3]) < tol and abs(dh.a[4]) < tol
    # The planar 2R law of cosines divides by a2 * a3.
    planar_links = abs(dh.a[1]) > tol and abs(dh.a[2]) > tol
    zero_d = all(abs(dh.d[i]) < tol for i in (1, 2, 3))
    expected_alpha = np.array([math.pi / 2, 0.0, 0.0, math.pi / 2, 0.0])
    return zero_a and planar_links and zero_d and bool(np.allclose(dh.alpha, expected_alpha, atol=tol))


__all__ = [
    "DHParams",
    "DHParamsNum",
    "JointLimits",
    "YOUBOT_HOME_POSE",
    "YOUBOT_LIMITS_DEG",
    "is_youbot_layout",
    "make_dh_num",
    "make_limits",
    "unlimited",
    "youbot_5R",
    "youbot_5R_num",
    "youbot_joint_limits",
]
