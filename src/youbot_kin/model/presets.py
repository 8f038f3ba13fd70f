"""Shared joint angle presets used across CLI helpers."""

from __future__ import annotations

JointPreset = list[float]

# Degrees, all inside the youBot joint limits.
PRESETS_DEG: list[JointPreset] = [
    [0, 0, 0, 0, 0],
    [30, 20, 40, 30, 0],
    [-45, 35, 60, 45, 90],
    [90, -30, 100, -60, -45],
    [15, 15, 15, 15, 15],
]
