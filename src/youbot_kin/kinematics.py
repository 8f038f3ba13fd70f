"""Kinematics solver facade used by the driver/control layer.

Both operations take and return plain NumPy vectors and never raise:

- ``forward_transformation(angles) -> (ok, tcp)``
- ``inverse_transformation(tcp) -> (ok, angles)``

An instance only holds its immutable DH table, joint limits and IK options,
so separate instances can be used from separate threads.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from youbot_kin.core.config import RobotConfig
from youbot_kin.core.type_utils import Vector
from youbot_kin.model.dh_params import (
    DHParamsNum,
    JointLimits,
    is_youbot_layout,
    unlimited,
    youbot_5R_num,
    youbot_joint_limits,
)
from youbot_kin.solvers.fk_solver import forward
from youbot_kin.solvers.ik_solver import (
    GeometricSolution,
    IKOptions,
    IKOutcome,
    NoSolution,
    NumericSolution,
    solve_ik,
)

logger = logging.getLogger(__name__)


class KinematicsSolver:
    """Forward and inverse kinematics for one serial arm."""

    def __init__(
        self,
        dh: DHParamsNum | None = None,
        limits: JointLimits | None = None,
        options: IKOptions | None = None,
        geometric: bool | None = None,
    ) -> None:
        if dh is None:
            dh = youbot_5R_num()
            if limits is None:
                limits = youbot_joint_limits()
        if limits is None:
            limits = unlimited(dh.dof)
        if limits.lower.shape != (dh.dof,):
            raise ValueError(f"joint limits cover {limits.lower.size} joints, DH table has {dh.dof}")
        self.dh = dh
        self.limits = limits
        self.options = options if options is not None else IKOptions()
        self.geometric = is_youbot_layout(dh) if geometric is None else geometric

    @classmethod
    def from_config(cls, config: RobotConfig) -> "KinematicsSolver":
        return cls(config.dh, config.limits, config.ik, config.geometric)

    @property
    def dof(self) -> int:
        return self.dh.dof

    def forward_transformation(self, angles: Sequence[float] | Vector) -> tuple[bool, Vector | None]:
        """TCP pose vector (x, y, z, roll, pitch, yaw) for ``angles`` (rad)."""
        return forward(angles, self.dh)

    def solve(self, tcp: Sequence[float] | Vector, seed: Sequence[float] | None = None) -> IKOutcome:
        """Inverse kinematics with the tagged outcome."""
        seeds = [seed] if seed is not None else None
        try:
            if seed is not None and len(seed) != self.dof:
                raise ValueError(f"seed must have length {self.dof}")
            return solve_ik(tcp, self.dh, self.limits, self.options, self.geometric, seeds)
        except (TypeError, ValueError) as exc:
            logger.debug("inverse: rejected input: %s", exc)
            return NoSolution(str(exc), None, float("inf"), float("inf"))

    def inverse_transformation(
        self, tcp: Sequence[float] | Vector, seed: Sequence[float] | None = None
    ) -> tuple[bool, Vector | None]:
        """Joint angles (rad) that place the TCP at ``tcp``.

        On failure the second element is the best partial candidate (or
        ``None`` for malformed input) and must not be trusted.
        """
        outcome = self.solve(tcp, seed)
        if isinstance(outcome, (GeometricSolution, NumericSolution)):
            return True, np.array(outcome.angles, dtype=float)
        if outcome.best_angles is None:
            return False, None
        return False, np.array(outcome.best_angles, dtype=float)


__all__ = ["KinematicsSolver"]
