"""
Closed-form inverse kinematics for the youBot joint layout.

The arm is a rotating base (joint 1) carrying a planar 3R chain (joints 2-4,
parallel axes) and a tool roll (joint 5) about the approach axis. With the
standard DH table

    a     = [a1, a2, a3, 0, 0]
    alpha = [pi/2, 0, 0, pi/2, 0]
    d     = [d1, 0, 0, 0, d5]

the approach vector z5 always lies in the vertical plane through the base
axis at azimuth theta1. The decoupling is

1. wrist point  w = p - d5 * z5
2. theta1       = atan2(wy, wx)           (front)  or  + pi   (over the top)
3. theta2/3     planar 2R law of cosines on (r, h) measured from frame 1
                (elbow up and elbow down)
4. theta4       closes the planar angle sum onto the approach angle psi
5. theta5       residual rotation about z4:  R45 = R04^T R = Rz(theta5)

Angles above are DH angles; joint values are ``theta - theta_offset``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from typing import NamedTuple

import numpy as np

from youbot_kin.core.orientation import pose_to_rotation
from youbot_kin.core.type_utils import Vector
from youbot_kin.model.dh_params import DHParamsNum, JointLimits, is_youbot_layout
from youbot_kin.model.jacobian import forward_chain_numeric

from .fk_solver import forward
from .metrics import PoseLike, angle_delta, pose_errors, wrap_to_pi

logger = logging.getLogger(__name__)

# Wrist points closer than this to the base axis leave theta1 undetermined.
AXIS_EPS = 1e-9
# Slack on |cos(theta3)| <= 1 for targets on the workspace boundary.
REACH_EPS = 1e-9


class GeometricCandidate(NamedTuple):
    angles: Vector
    branch: str


def _wrap_all(q: np.ndarray) -> np.ndarray:
    return np.array([wrap_to_pi(float(v)) for v in q], dtype=float)


def _base_angles(w: np.ndarray, approach: np.ndarray) -> list[tuple[str, float]]:
    wx, wy = float(w[0]), float(w[1])
    if math.hypot(wx, wy) > AXIS_EPS:
        th1 = math.atan2(wy, wx)
    elif math.hypot(float(approach[0]), float(approach[1])) > AXIS_EPS:
        # Wrist on the base axis: face the arm plane along the approach.
        th1 = math.atan2(float(approach[1]), float(approach[0]))
    else:
        th1 = 0.0
    return [("front", th1), ("back", th1 + math.pi)]


def unique_solutions(solutions: Iterable[np.ndarray], tol: float = 1e-3) -> list[np.ndarray]:
    """Merge nearly identical angle sets (L_inf metric)."""
    uniq: list[np.ndarray] = []
    for q in solutions:
        if all(float(np.max(np.abs(angle_delta(q, u)))) > tol for u in uniq):
            uniq.append(q)
    return uniq


def geometric_candidates(target_pose: PoseLike, dh: DHParamsNum) -> list[GeometricCandidate]:
    """All real closed-form joint vectors for ``target_pose`` (unfiltered).

    Returns an empty list for tables without the youBot layout or targets
    whose wrist point lies outside the planar 2R annulus.
    """
    if not is_youbot_layout(dh):
        return []

    R, p = pose_to_rotation(target_pose)
    approach = R[:, 2]
    a1, a2, a3 = float(dh.a[0]), float(dh.a[1]), float(dh.a[2])
    d1, d5 = float(dh.d[0]), float(dh.d[4])
    off = dh.theta_offset

    w = p - d5 * approach
    out: list[GeometricCandidate] = []
    for base_branch, th1 in _base_angles(w, approach):
        c1, s1 = math.cos(th1), math.sin(th1)
        # Planar coordinates relative to the frame-1 origin.
        r = float(w[0]) * c1 + float(w[1]) * s1 - a1
        h = float(w[2]) - d1
        psi = math.atan2(float(approach[2]), float(approach[0]) * c1 + float(approach[1]) * s1)

        D = (r * r + h * h - a2 * a2 - a3 * a3) / (2.0 * a2 * a3)
        if abs(D) > 1.0 + REACH_EPS:
            logger.debug("geometric: %s branch out of reach (cos theta3 = %.6f)", base_branch, D)
            continue
        D = max(-1.0, min(1.0, D))
        sin3 = math.sqrt(1.0 - D * D)

        for elbow, s3 in (("up", sin3), ("down", -sin3)):
            th3 = math.atan2(s3, D)
            th2 = math.atan2(h, r) - math.atan2(a3 * s3, a2 + a3 * D)
            th4 = psi + math.pi / 2 - th2 - th3

            q = np.array([th1, th2, th3, th4, 0.0], dtype=float) - off
            q[4] = 0.0
            T04 = forward_chain_numeric(dh, q)[4]
            R45 = T04[:3, :3].T @ R
            th5 = math.atan2(float(R45[1, 0]), float(R45[0, 0]))
            q[4] = th5 - float(off[4])

            out.append(GeometricCandidate(_wrap_all(q), f"{base_branch}/elbow-{elbow}"))
            if sin3 == 0.0:
                # Stretched or folded arm: both elbows coincide.
                break
    return out


def geometric_ik(
    target_pose: PoseLike,
    dh: DHParamsNum,
    limits: JointLimits,
    tol_pos: float,
    tol_rot: float,
) -> list[GeometricCandidate]:
    """Closed-form candidates that respect ``limits`` and reproduce the target.

    Each candidate is checked through forward kinematics, which rejects
    orientations the 5-DoF arm cannot realise (approach out of the arm plane).
    """
    valid: list[GeometricCandidate] = []
    for cand in geometric_candidates(target_pose, dh):
        if not limits.contains(cand.angles):
            logger.debug("geometric: %s violates joint limits %s", cand.branch, np.round(cand.angles, 4))
            continue
        ok, pose = forward(cand.angles, dh)
        if not ok or pose is None:
            continue
        pos_err, rot_err = pose_errors(pose, target_pose)
        if pos_err <= tol_pos and rot_err <= tol_rot:
            valid.append(cand)
        else:
            logger.debug(
                "geometric: %s misses target (pos_err=%.3e, rot_err=%.3e)", cand.branch, pos_err, rot_err
            )
    uniq = unique_solutions(c.angles for c in valid)
    return [c for c in valid if any(c.angles is u for u in uniq)]


__all__ = ["GeometricCandidate", "geometric_candidates", "geometric_ik", "unique_solutions"]
