"""Lightweight data models shared by the solver facade and the CLI."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from .type_utils import Vector, Vector3


@dataclass(frozen=True)
class JointAngles:
    radians: tuple[float, ...]

    @classmethod
    def from_sequence(cls, values: Sequence[float], dof: int | None = None) -> "JointAngles":
        if dof is not None and len(values) != dof:
            raise ValueError(f"Expected {dof} joint angles, received {len(values)}")
        return cls(tuple(float(value) for value in values))

    @classmethod
    def from_degrees(cls, values: Sequence[float], dof: int | None = None) -> "JointAngles":
        return cls.from_sequence([math.radians(v) for v in values], dof)

    def as_list(self) -> list[float]:
        return list(self.radians)

    def as_array(self) -> Vector:
        return np.array(self.radians, dtype=float)

    def as_degrees(self) -> tuple[float, ...]:
        return tuple(math.degrees(value) for value in self.radians)


@dataclass(frozen=True)
class PoseVector:
    """TCP pose: position in DH length units, roll/pitch/yaw in radians."""

    x: float
    y: float
    z: float
    roll: float
    pitch: float
    yaw: float

    @classmethod
    def from_sequence(cls, values: Sequence[float] | Vector) -> "PoseVector":
        if len(values) != 6:
            raise ValueError("Expected 6 pose components: x y z roll pitch yaw")
        x, y, z, roll, pitch, yaw = (float(v) for v in values)
        return cls(x, y, z, roll, pitch, yaw)

    @property
    def position(self) -> Vector3:
        return np.array([self.x, self.y, self.z], dtype=float)

    @property
    def orientation(self) -> Vector3:
        return np.array([self.roll, self.pitch, self.yaw], dtype=float)

    def as_array(self) -> Vector:
        return np.array([self.x, self.y, self.z, self.roll, self.pitch, self.yaw], dtype=float)

    def orientation_degrees(self) -> tuple[float, float, float]:
        return (math.degrees(self.roll), math.degrees(self.pitch), math.degrees(self.yaw))


__all__ = ["JointAngles", "PoseVector"]
