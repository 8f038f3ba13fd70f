import math

import numpy as np
import pytest

from youbot_kin.kinematics import KinematicsSolver
from youbot_kin.model.dh_params import youbot_5R_num, youbot_joint_limits

# Degrees, inside the youBot joint limits and away from gimbal lock.
REACHABLE_Q_DEG = [
    [0.0, 0.0, 0.0, 0.0, 0.0],
    [30.0, 20.0, 40.0, 30.0, 0.0],
    [-45.0, 35.0, 60.0, 45.0, 90.0],
    [90.0, -30.0, 100.0, -60.0, -45.0],
    [15.0, 15.0, 15.0, 15.0, 15.0],
    [120.0, 50.0, -40.0, 80.0, -120.0],
]


def deg(values):
    return np.array([math.radians(v) for v in values], dtype=float)


@pytest.fixture
def dh():
    return youbot_5R_num()


@pytest.fixture
def limits():
    return youbot_joint_limits()


@pytest.fixture
def solver():
    return KinematicsSolver()
