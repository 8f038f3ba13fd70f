import math
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from conftest import REACHABLE_Q_DEG, deg
from youbot_kin.core.config import default_config
from youbot_kin.kinematics import KinematicsSolver
from youbot_kin.model.dh_params import YOUBOT_HOME_POSE, make_dh_num, make_limits, unlimited
from youbot_kin.solvers.ik_solver import GeometricSolution, IKOptions, NoSolution
from youbot_kin.solvers.metrics import orientation_error, pose_errors, position_error


def test_forward_home_pose(solver):
    ok, tcp = solver.forward_transformation([0.0, 0.0, 0.0, 0.0, 0.0])
    assert ok
    assert position_error(tcp, YOUBOT_HOME_POSE) < 1e-9
    assert orientation_error(tcp, YOUBOT_HOME_POSE) < 1e-9


def test_forward_dimension_mismatch(solver):
    assert solver.forward_transformation([0.0, 0.0, 0.0]) == (False, None)


@pytest.mark.parametrize("q_deg", REACHABLE_Q_DEG)
def test_inverse_round_trip(solver, q_deg):
    ok, tcp = solver.forward_transformation(deg(q_deg))
    assert ok
    ok, angles = solver.inverse_transformation(tcp)
    assert ok
    assert angles.shape == (5,)
    ok, back = solver.forward_transformation(angles)
    assert ok
    pos_err, rot_err = pose_errors(back, tcp)
    assert pos_err <= solver.options.tol_pos
    assert rot_err <= solver.options.tol_rot


def test_inverse_unreachable_target():
    solver = KinematicsSolver(options=IKOptions(max_iter=50, extra_random_seeds=1))
    tcp = [10.0 * solver.dh.reach(), 0.0, 0.0, 0.0, 0.0, 0.0]
    ok, angles = solver.inverse_transformation(tcp)
    assert not ok
    assert angles is not None and angles.shape == (5,)


@pytest.mark.parametrize("tcp", [[0.0] * 5, [0.0] * 7, "not a pose", None])
def test_inverse_rejects_malformed_tcp(solver, tcp):
    assert solver.inverse_transformation(tcp) == (False, None)


def test_seed_length_is_checked_on_every_branch(solver):
    ok, tcp = solver.forward_transformation(deg([30.0, 20.0, 40.0, 30.0, 0.0]))
    assert ok
    for kin in (solver, KinematicsSolver(geometric=False)):
        outcome = kin.solve(tcp, seed=[0.0, 0.0])
        assert isinstance(outcome, NoSolution)
        assert outcome.best_angles is None
        assert kin.inverse_transformation(tcp, seed=[0.0, 0.0]) == (False, None)
    assert solver.inverse_transformation(tcp, seed=deg([30.0, 20.0, 40.0, 30.0, 0.0]))[0]


def test_solve_reports_geometric_branch(solver):
    _, tcp = solver.forward_transformation(deg([15.0, 15.0, 15.0, 15.0, 15.0]))
    outcome = solver.solve(tcp)
    assert isinstance(outcome, GeometricSolution)
    assert outcome.branch.startswith(("front", "back"))


def test_from_config_matches_default():
    solver = KinematicsSolver.from_config(default_config())
    reference = KinematicsSolver()
    np.testing.assert_allclose(solver.dh.alpha, reference.dh.alpha)
    np.testing.assert_allclose(solver.limits.upper, reference.limits.upper)
    assert solver.geometric and reference.geometric
    assert solver.dof == 5


def test_custom_table_uses_numeric_branch():
    planar = make_dh_num([100.0, 80.0, 60.0], [0.0] * 3, [0.0] * 3, [0.0] * 3)
    solver = KinematicsSolver(planar)
    assert not solver.geometric
    q = np.array([0.3, 0.4, -0.5])
    ok, tcp = solver.forward_transformation(q)
    assert ok
    ok, angles = solver.inverse_transformation(tcp, seed=q + 0.1)
    assert ok
    _, back = solver.forward_transformation(angles)
    assert position_error(back, tcp) <= solver.options.tol_pos


def test_limits_must_match_dof():
    with pytest.raises(ValueError):
        KinematicsSolver(limits=make_limits([-1.0, -1.0], [1.0, 1.0]))


def test_independent_instances_in_threads():
    targets = []
    reference = KinematicsSolver()
    for q_deg in REACHABLE_Q_DEG:
        _, tcp = reference.forward_transformation(deg(q_deg))
        targets.append(tcp)

    def run(tcp):
        return KinematicsSolver().inverse_transformation(tcp)

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(run, targets))
    for (ok, angles), tcp in zip(results, targets):
        assert ok
        _, back = reference.forward_transformation(angles)
        assert position_error(back, tcp) <= reference.options.tol_pos


def test_inverse_round_trip_just_off_gimbal_lock(solver):
    # Tool axis 2e-5 rad away from horizontal: pitch is near +-pi/2 but roll/yaw are still compared directly.
    q = np.array([0.0, 0.0, math.radians(-30.0), math.radians(-60.0) + 2e-5, 0.5])
    ok, tcp = solver.forward_transformation(q)
    assert ok
    assert abs(tcp[4]) == pytest.approx(math.pi / 2 - 2e-5, abs=1e-9)
    ok, angles = solver.inverse_transformation(tcp)
    assert ok
    _, back = solver.forward_transformation(angles)
    pos_err, rot_err = pose_errors(back, tcp)
    assert pos_err <= solver.options.tol_pos
    assert rot_err <= solver.options.tol_rot


@pytest.mark.parametrize("geometric", [None, True])
def test_zero_length_planar_link_does_not_raise(geometric):
    ref = KinematicsSolver().dh
    dh = make_dh_num([33.0, 155.0, 0.0, 0.0, 0.0], list(ref.alpha), list(ref.d), list(ref.theta_offset))
    solver = KinematicsSolver(dh, unlimited(5), IKOptions(max_iter=30, extra_random_seeds=0), geometric=geometric)
    ok, tcp = solver.forward_transformation([0.2, 0.3, 0.0, 0.4, 0.1])
    assert ok
    ok, angles = solver.inverse_transformation(tcp)
    assert isinstance(ok, bool)
    assert angles is not None and angles.shape == (5,)
