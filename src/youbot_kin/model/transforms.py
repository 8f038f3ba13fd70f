"""Homogeneous transform primitives for standard DH chains.

The symbolic helpers build SymPy matrices and are used for the analytic
chain; ``dh_transform`` is the closed-form numeric link transform used by
every solver.
"""

from __future__ import annotations

import math
from typing import cast

import numpy as np
import sympy as sp

from youbot_kin.core.type_utils import Matrix44, Num


def Rx(alpha: Num) -> sp.Matrix:
    ca = cast(sp.Expr, sp.cos(alpha))
    sa = cast(sp.Expr, sp.sin(alpha))
    return sp.Matrix([[1, 0, 0, 0], [0, ca, -sa, 0], [0, sa, ca, 0], [0, 0, 0, 1]])


def Rz(theta: Num) -> sp.Matrix:
    ct = cast(sp.Expr, sp.cos(theta))
    st = cast(sp.Expr, sp.sin(theta))
    return sp.Matrix([[ct, -st, 0, 0], [st, ct, 0, 0], [0, 0, 1, 0], [0, 0, 0, 1]])


def Tx(a: Num) -> sp.Matrix:
    return sp.Matrix([[1, 0, 0, a], [0, 1, 0, 0], [0, 0, 1, 0], [0, 0, 0, 1]])


def Tz(d: Num) -> sp.Matrix:
    return sp.Matrix([[1, 0, 0, 0], [0, 1, 0, 0], [0, 0, 1, d], [0, 0, 0, 1]])


def dh_link_symbolic(a: Num, alpha: Num, d: Num, theta: Num) -> sp.Matrix:
    """Symbolic standard DH link transform ``Rz(theta) Tz(d) Tx(a) Rx(alpha)``."""
    return cast(sp.Matrix, Rz(theta) * Tz(d) * Tx(a) * Rx(alpha))


def dh_transform(a: float, alpha: float, d: float, theta: float) -> Matrix44:
    """Numeric standard DH link transform.

    Rotate about the previous Z by ``theta``, translate along it by ``d``,
    translate along the new X by ``a`` and rotate about that X by ``alpha``.
    """
    ca, sa = math.cos(alpha), math.sin(alpha)
    ct, st = math.cos(theta), math.sin(theta)
    return np.array(
        [
            [ct, -st * ca, st * sa, ct * a],
            [st, ct * ca, -ct * sa, st * a],
            [0.0, sa, ca, d],
            [0.0, 0.0, 0.0, 1.0],
        ],
        dtype=float,
    )


__all__ = ["Rx", "Rz", "Tx", "Tz", "dh_link_symbolic", "dh_transform"]
