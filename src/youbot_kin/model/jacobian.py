"""Forward chain and geometric Jacobian for standard DH arms."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
from numpy.typing import NDArray

from youbot_kin.core.type_utils import Matrix44

from .dh_params import DHParamsNum
from .transforms import dh_transform


def forward_chain_numeric(dh: DHParamsNum, joint_angles: Sequence[float] | np.ndarray) -> list[Matrix44]:
    """Return [T00, T01, ..., T0n] for the given joint angles (rad)."""
    theta = np.asarray(joint_angles, dtype=float)
    if theta.shape != (dh.dof,):
        msg = f"Expected {dh.dof} joint angles, received {theta.size}"
        raise ValueError(msg)
    theta_eff = theta + dh.theta_offset

    chain: list[Matrix44] = [np.eye(4, dtype=float)]
    T = chain[0]
    for ai, alpha_i, di, th_i in zip(dh.a, dh.alpha, dh.d, theta_eff):
        T = T @ dh_transform(float(ai), float(alpha_i), float(di), float(th_i))
        chain.append(T)
    return chain


def geometric_jacobian_numeric(
    joint_angles: Sequence[float] | np.ndarray, dh: DHParamsNum
) -> NDArray[np.float64]:
    """6xN geometric Jacobian in base frame coordinates.

    J = [ Jv; Jw ], where for revolute joint i:
        Jv_i = z_{i-1} x (o_n - o_{i-1})
        Jw_i = z_{i-1}
    """
    chain = forward_chain_numeric(dh, joint_angles)

    origins = [T[:3, 3] for T in chain]
    z_axes = [T[:3, 2] for T in chain]
    on = origins[-1]
    n_joints = dh.dof
    Jv = np.zeros((3, n_joints), dtype=float)
    Jw = np.zeros((3, n_joints), dtype=float)
    for i in range(n_joints):
        Jv[:, i] = np.cross(z_axes[i], on - origins[i])
        Jw[:, i] = z_axes[i]
    return np.vstack((Jv, Jw))


__all__ = ["forward_chain_numeric", "geometric_jacobian_numeric"]
