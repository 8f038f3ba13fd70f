import math

import numpy as np
import pytest

from youbot_kin.solvers.metrics import (
    angle_delta,
    orientation_error,
    pose_errors,
    position_error,
    rotation_angle,
    wrap_to_pi,
)
from youbot_kin.core.orientation import rotation_xy_dash_z_numeric

POSES = [
    (0.0, 0.0, 0.0, 0.0, 0.0, 0.0),
    (33.0, 0.0, 654.5, 0.0, 0.0, math.pi),
    (-120.0, 45.0, 10.0, 3.1, -1.2, -3.1),
    (5.0, 5.0, 5.0, -math.pi, 0.5, 2.0),
]


def test_position_error_is_euclidean():
    assert position_error((0, 0, 0, 0, 0, 0), (3, 4, 0, 1, 1, 1)) == pytest.approx(5.0)
    assert position_error((1, 2, 3, 0, 0, 0), (1, 2, 15, 0, 0, 0)) == pytest.approx(12.0)


def test_orientation_error_uses_shortest_angle():
    a = (0, 0, 0, 3.1, 0.0, 0.0)
    b = (0, 0, 0, -3.1, 0.0, 0.0)
    assert orientation_error(a, b) == pytest.approx(2 * math.pi - 6.2)
    assert orientation_error((0, 0, 0, math.pi, 0, 0), (0, 0, 0, -math.pi, 0, 0)) == pytest.approx(0.0, abs=1e-12)


def test_orientation_error_sums_components():
    a = (0, 0, 0, 0.1, -0.2, 0.3)
    b = (0, 0, 0, 0.0, 0.0, 0.0)
    assert orientation_error(a, b) == pytest.approx(0.6)


@pytest.mark.parametrize("a", POSES)
@pytest.mark.parametrize("b", POSES)
def test_metrics_are_symmetric(a, b):
    assert position_error(a, b) == pytest.approx(position_error(b, a))
    assert orientation_error(a, b) == pytest.approx(orientation_error(b, a))


@pytest.mark.parametrize("a", POSES)
def test_metrics_vanish_on_identical_poses(a):
    assert position_error(a, a) == 0.0
    assert orientation_error(a, a) == 0.0


def test_wrap_to_pi_range():
    for v in np.linspace(-10.0, 10.0, 101):
        w = wrap_to_pi(float(v))
        assert -math.pi <= w < math.pi
        assert math.isclose(math.cos(w), math.cos(v), abs_tol=1e-12)
    np.testing.assert_allclose(angle_delta([0.1, 3.0], [-0.1, -3.0]), [0.2, 6.0 - 2 * math.pi])


def test_rotation_angle():
    Ra = rotation_xy_dash_z_numeric(0.0, 0.0, 0.0)
    Rb = rotation_xy_dash_z_numeric(0.0, 0.0, 0.4)
    assert rotation_angle(Ra, Rb) == pytest.approx(0.4)
    assert rotation_angle(Rb, Rb) == pytest.approx(0.0, abs=1e-7)


def test_pose_errors_compare_rotations_at_gimbal_lock():
    # Same rotation, different roll/yaw split.
    target = (0.0, 0.0, 0.0, 0.5, math.pi / 2, 0.0)
    actual = (0.0, 0.0, 0.0, 0.2, math.pi / 2, 0.3)
    pos_err, rot_err = pose_errors(actual, target)
    assert pos_err == 0.0
    assert rot_err == pytest.approx(0.0, abs=1e-6)
    assert orientation_error(actual, target) > 0.5


def test_rotation_angle_resolves_tiny_rotations():
    Ra = rotation_xy_dash_z_numeric(0.2, -0.1, 0.3)
    Rb = Ra @ rotation_xy_dash_z_numeric(0.0, 0.0, 1e-8)
    assert rotation_angle(Ra, Rb) == pytest.approx(1e-8, rel=1e-6)


def test_pose_errors_near_but_outside_gimbal_band():
    target = (0.0, 0.0, 0.0, 0.3, math.pi / 2 - 2e-5, 0.4)
    actual = (0.0, 0.0, 0.0, 0.3, math.pi / 2 - 2e-5, 0.4 + 1e-4)
    _, rot_err = pose_errors(actual, target)
    assert rot_err == pytest.approx(1e-4)
