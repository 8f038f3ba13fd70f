"""
Forward kinematics from DH parameters.

Angles in radians, lengths in the unit of the DH table (mm for the youBot).
Functions:
- fk_standard(a, alpha, d, theta)   # symbolic SymPy chain
- fk_numeric(q, dh)                 # numeric T0n, raises on bad length
- forward(q, dh)                    # (ok, pose vector), never raises
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import cast

import numpy as np
import sympy as sp

from youbot_kin.core.orientation import matrix_to_pose
from youbot_kin.core.type_utils import Matrix44, Num, Vector
from youbot_kin.model.dh_params import DHParamsNum
from youbot_kin.model.jacobian import forward_chain_numeric
from youbot_kin.model.transforms import dh_link_symbolic

logger = logging.getLogger(__name__)


def simplify_T(T: sp.Matrix) -> sp.Matrix:
    # SymPy is untyped; cast result to Matrix for mypy.
    return cast(sp.Matrix, sp.simplify(T))  # type: ignore[no-untyped-call]


def fk_standard(
    a: Sequence[Num],
    alpha: Sequence[Num],
    d: Sequence[Num],
    theta: Sequence[Num],
    simplify: bool = True,
) -> sp.Matrix:
    assert len(a) == len(alpha) == len(d) == len(theta)
    T = cast(sp.Matrix, sp.eye(4))  # type: ignore[no-untyped-call]
    for ai, al, di, th in zip(a, alpha, d, theta):
        T = T * dh_link_symbolic(ai, al, di, th)
    return simplify_T(T) if simplify else T


def fk_numeric(q: Sequence[float] | np.ndarray, dh: DHParamsNum) -> Matrix44:
    """Compute T0n (4x4) numerically from joint angles q (rad)."""
    return forward_chain_numeric(dh, q)[-1]


def forward(q: Sequence[float] | np.ndarray, dh: DHParamsNum) -> tuple[bool, Vector | None]:
    """Evaluate the TCP pose vector for ``q``.

    Returns ``(False, None)`` when ``q`` does not have one finite value per
    link; forward kinematics is otherwise total.
    """
    try:
        q_arr = np.asarray(q, dtype=float)
    except (TypeError, ValueError):
        logger.debug("forward: joint angles are not a numeric vector: %r", q)
        return False, None
    if q_arr.shape != (dh.dof,):
        logger.debug("forward: expected %d joint angles, got shape %s", dh.dof, q_arr.shape)
        return False, None
    if not np.all(np.isfinite(q_arr)):
        logger.debug("forward: non-finite joint angles %s", q_arr)
        return False, None
    return True, matrix_to_pose(fk_numeric(q_arr, dh))


__all__ = ["fk_numeric", "fk_standard", "forward", "simplify_T"]
