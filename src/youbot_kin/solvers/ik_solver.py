"""
Inverse kinematics (IK) for standard-DH arms, tuned for the youBot.

Design goals
------------
- Reuse the FK/DH setup from fk_solver.py (same DH + theta offsets)
- Pure functions; no I/O here (keep I/O in the CLI modules)
- Closed-form branch first, damped least squares (DLS) as the fallback

Strategy
--------
``solve_ik`` returns a tagged outcome instead of raising:

- ``GeometricSolution``  closed-form solution for the youBot layout
- ``NumericSolution``    DLS on the geometric Jacobian converged from a seed
- ``NoSolution``         neither branch met the tolerances; ``best_angles`` is
                         the lowest-error candidate and must not be trusted

The numeric search is deterministic: the seed list is fixed for a given
target and the random seeds come from ``numpy.random.default_rng(random_seed)``.
Every seed is bounded by ``IKOptions.max_iter`` iterations.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from typing import NamedTuple, TypeAlias

import numpy as np

from youbot_kin.core.orientation import pose_to_rotation
from youbot_kin.core.type_utils import Matrix33, Vector, Vector3
from youbot_kin.model.dh_params import DHParamsNum, JointLimits
from youbot_kin.model.jacobian import geometric_jacobian_numeric

from .fk_solver import fk_numeric, forward
from .geometric import geometric_ik
from .metrics import PoseLike, angle_delta, pose_errors, rotation_angle, wrap_to_pi

logger = logging.getLogger(__name__)


class IKOptions(NamedTuple):
    max_iter: int = 200
    lambda_dls: float = 1e-3  # damping factor for DLS
    w_pos: float = 1.0        # weight (mm)
    w_rot: float = 200.0      # weight (rad) → scale radians to ~mm
    tol_pos: float = 1e-2     # mm
    tol_rot: float = 1e-3     # rad
    step_clip: float = 0.5    # max |Δq| per iter (rad)
    extra_random_seeds: int = 4


class GeometricSolution(NamedTuple):
    angles: Vector
    branch: str


class NumericSolution(NamedTuple):
    angles: Vector
    iterations: int
    pos_err: float
    rot_err: float


class NoSolution(NamedTuple):
    reason: str
    best_angles: Vector | None
    pos_err: float
    rot_err: float


IKOutcome: TypeAlias = GeometricSolution | NumericSolution | NoSolution


class _Attempt(NamedTuple):
    q: Vector
    pos_err: float
    rot_err: float
    iters: int


def rotation_error_vee(R_cur: Matrix33, R_des: Matrix33) -> Vector3:
    """Return so(3) error vector e such that small e ≈ minimal rotation from R_cur→R_des.

    Uses the rotation logarithm to stay well-behaved near 180° differences.
    """
    R_err = R_des @ R_cur.T
    angle = rotation_angle(R_cur, R_des)
    if angle < 1e-12:
        return np.zeros(3, dtype=float)

    skew = R_err - R_err.T
    if abs(math.pi - angle) < 1e-3:
        eigvals, eigvecs = np.linalg.eig(R_err)
        idx = int(np.argmin(np.abs(eigvals - 1.0)))
        axis = np.real(eigvecs[:, idx])
        norm = float(np.linalg.norm(axis))
        if norm < 1e-9:
            axis = np.array([1.0, 0.0, 0.0], dtype=float)
        else:
            axis = axis / norm
        return axis * angle

    factor = angle / (2.0 * math.sin(angle))
    return factor * np.array([skew[2, 1], skew[0, 2], skew[1, 0]], dtype=float)


def _dls_step(
    q: np.ndarray,
    R_des: Matrix33,
    p_des: Vector3,
    dh: DHParamsNum,
    limits: JointLimits,
    opts: IKOptions,
) -> np.ndarray:
    """One damped least-squares update, wrapped and clipped to the joint limits."""
    T = fk_numeric(q, dh)
    e_pos = p_des - T[:3, 3]
    e_rot = rotation_error_vee(T[:3, :3], R_des)

    J = geometric_jacobian_numeric(q, dh)
    W = np.diag([opts.w_pos] * 3 + [opts.w_rot] * 3)
    JW = W @ J
    eW = W @ np.hstack((e_pos, e_rot))

    JT = JW.T
    H = JT @ JW + (opts.lambda_dls ** 2) * np.eye(dh.dof)
    g = JT @ eW
    try:
        dq = np.linalg.solve(H, g)
    except np.linalg.LinAlgError:
        dq = np.linalg.lstsq(H, g, rcond=None)[0]

    maxabs = float(np.max(np.abs(dq)))
    if maxabs > opts.step_clip:
        dq = dq * (opts.step_clip / maxabs)

    q_next = np.array([wrap_to_pi(v) for v in (q + dq)], dtype=float)
    return limits.clip(q_next)


def _ik_once_dls(
    target_pose: PoseLike,
    q0: Sequence[float] | np.ndarray,
    dh: DHParamsNum,
    limits: JointLimits,
    opts: IKOptions,
    history: list[tuple[float, float]] | None = None,
) -> _Attempt:
    """Run one DLS solve from seed q0, measuring convergence on pose vectors.

    ``history`` collects ``(pos_err, rot_err)`` of every evaluated iterate.
    """
    R_des, p_des = pose_to_rotation(target_pose)
    q = limits.clip(np.array([wrap_to_pi(float(v)) for v in q0], dtype=float))

    pos_err = rot_err = math.inf
    for it in range(1, opts.max_iter + 1):
        ok, pose = forward(q, dh)
        if not ok or pose is None:
            break
        pos_err, rot_err = pose_errors(pose, target_pose)
        if history is not None:
            history.append((pos_err, rot_err))
        if pos_err <= opts.tol_pos and rot_err <= opts.tol_rot:
            return _Attempt(q, pos_err, rot_err, it)

        q_next = _dls_step(q, R_des, p_des, dh, limits, opts)
        if float(np.max(np.abs(angle_delta(q_next, q)))) < 1e-12:
            # Stalled on a joint limit or a singular configuration.
            return _Attempt(q, pos_err, rot_err, it)
        q = q_next

    return _Attempt(q, pos_err, rot_err, opts.max_iter)


def _seed_from_pose(target_pose: PoseLike, dof: int) -> np.ndarray:
    """Crude seed: face the base toward the target XY, shoulder/elbow bent."""
    x, y, z = (float(v) for v in list(target_pose)[:3])
    q = np.zeros(dof, dtype=float)
    q[0] = math.atan2(y, x)
    if dof >= 3:
        # Aim shoulder toward target height
        q[1] = -math.pi / 4 if z < 0.0 else math.pi / 4
        q[2] = math.pi / 4
    return q


def default_seeds(
    target_pose: PoseLike,
    dh: DHParamsNum,
    limits: JointLimits,
    opts: IKOptions,
    seeds: Iterable[Sequence[float]] | None = None,
    random_seed: int | None = 0,
) -> list[np.ndarray]:
    """Deterministic seed list: caller seeds, pose-based, canonical postures, random."""
    n = dh.dof
    seed_list: list[np.ndarray] = []
    for seed in seeds or ():
        if len(seed) != n:
            raise ValueError(f"seed must have length {n}")
        seed_list.append(np.asarray(seed, dtype=float))

    seed_list.append(_seed_from_pose(target_pose, n))
    seed_list.append(np.zeros(n, dtype=float))
    for j, angle in ((0, math.pi / 2), (0, -math.pi / 2), (1, math.pi / 3), (1, -math.pi / 3)):
        if j < n:
            q = np.zeros(n, dtype=float)
            q[j] = angle
            seed_list.append(q)

    rng = np.random.default_rng(random_seed)
    for _ in range(opts.extra_random_seeds):
        seed_list.append(rng.uniform(limits.lower, limits.upper))

    unique_seeds: list[np.ndarray] = []
    for s_arr in seed_list:
        if not any(float(np.max(np.abs(angle_delta(s_arr, t)))) < 1e-3 for t in unique_seeds):
            unique_seeds.append(s_arr)
    return unique_seeds


def solve_numeric(
    target_pose: PoseLike,
    dh: DHParamsNum,
    limits: JointLimits,
    opts: IKOptions,
    seeds: Iterable[Sequence[float]] | None = None,
    random_seed: int | None = 0,
) -> NumericSolution | NoSolution:
    """DLS from every seed; the first converged seed wins."""
    attempts: list[_Attempt] = []
    for s_arr in default_seeds(target_pose, dh, limits, opts, seeds, random_seed):
        attempt = _ik_once_dls(target_pose, s_arr, dh, limits, opts)
        if attempt.pos_err <= opts.tol_pos and attempt.rot_err <= opts.tol_rot:
            logger.debug("numeric: converged in %d iterations from seed %s", attempt.iters, np.round(s_arr, 4))
            return NumericSolution(attempt.q, attempt.iters, attempt.pos_err, attempt.rot_err)
        attempts.append(attempt)

    best = min(attempts, key=lambda r: (r.pos_err, r.rot_err))
    logger.warning(
        "numeric IK exhausted %d seeds x %d iterations (best pos_err=%.3e, rot_err=%.3e)",
        len(attempts),
        opts.max_iter,
        best.pos_err,
        best.rot_err,
    )
    return NoSolution("not converged", best.q, best.pos_err, best.rot_err)


def solve_ik(
    target_pose: PoseLike,
    dh: DHParamsNum,
    limits: JointLimits,
    opts: IKOptions | None = None,
    geometric: bool = True,
    seeds: Iterable[Sequence[float]] | None = None,
    random_seed: int | None = 0,
) -> IKOutcome:
    """Geometric attempt first, then numeric fallback.

    ``target_pose`` is (x, y, z, roll, pitch, yaw). Never raises for a
    well-formed 6-vector; failure is reported as ``NoSolution``.
    """
    if opts is None:
        opts = IKOptions()
    target = np.asarray(target_pose, dtype=float)
    if target.shape != (6,) or not np.all(np.isfinite(target)):
        return NoSolution("malformed target pose", None, math.inf, math.inf)

    if geometric:
        found = geometric_ik(target, dh, limits, opts.tol_pos, opts.tol_rot)
        if found:
            logger.debug("geometric: %d valid branch(es), using %s", len(found), found[0].branch)
            return GeometricSolution(found[0].angles, found[0].branch)
        logger.debug("geometric: no valid closed-form solution, falling back to DLS")

    return solve_numeric(target, dh, limits, opts, seeds, random_seed)


__all__ = [
    "GeometricSolution",
    "IKOptions",
    "IKOutcome",
    "NoSolution",
    "NumericSolution",
    "default_seeds",
    "rotation_error_vee",
    "solve_ik",
    "solve_numeric",
]
