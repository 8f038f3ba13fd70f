import math
from pathlib import Path

import numpy as np
import pytest
import yaml

from youbot_kin.core.config import config_from_dict, default_config, load_config
from youbot_kin.model.dh_params import youbot_5R_num, youbot_joint_limits
from youbot_kin.solvers.ik_solver import IKOptions

EXAMPLE = Path(__file__).resolve().parents[1] / "configs" / "youbot.yaml"


def test_default_config_is_youbot():
    config = default_config()
    ref = youbot_5R_num()
    assert config.name == "youbot"
    for got, want in zip(config.dh, ref):
        np.testing.assert_allclose(got, want, atol=1e-12)
    np.testing.assert_allclose(config.limits.lower, youbot_joint_limits().lower)
    assert config.geometric


def test_example_file_loads():
    config = load_config(EXAMPLE, environ={})
    assert config.dh.dof == 5
    assert config.ik.max_iter == 200
    assert config.ik.tol_rot == pytest.approx(1e-3)
    np.testing.assert_allclose(config.limits.upper, youbot_joint_limits().upper)


def test_partial_file_is_merged_onto_defaults(tmp_path):
    path = tmp_path / "robot.yaml"
    path.write_text(yaml.safe_dump({"dh": {"d": [150.0, 0.0, 0.0, 0.0, 200.0]}, "ik": {"max_iter": 50}}))
    config = load_config(path, environ={})
    assert config.dh.d[0] == 150.0
    assert config.dh.a[1] == 155.0
    assert config.dh.alpha[0] == pytest.approx(math.pi / 2)
    assert config.ik.max_iter == 50
    assert config.ik.w_rot == IKOptions().w_rot


def test_environment_overrides_file():
    config = config_from_dict({"ik": {"max_iter": 50}}, environ={"YOUBOT_KIN_IK_MAX_ITER": "400", "YOUBOT_KIN_IK_TOL_POS": "0.5"})
    assert config.ik.max_iter == 400
    assert config.ik.tol_pos == 0.5


@pytest.mark.parametrize(
    "data",
    [
        {"ik": {"bogus": 1}},
        {"ik": {"max_iter": "many"}},
        {"dh": {"a": [1.0, 2.0]}},
        {"limits_deg": {"lower": [0.0], "upper": [1.0]}},
        {"dh": None},
    ],
)
def test_invalid_configuration_raises(data):
    with pytest.raises(ValueError):
        config_from_dict(data, environ={})


def test_missing_and_broken_files(tmp_path):
    with pytest.raises(ValueError, match="not found"):
        load_config(tmp_path / "missing.yaml")
    broken = tmp_path / "broken.yaml"
    broken.write_text("dh: {a: [1, 2\n")
    with pytest.raises(ValueError, match="invalid YAML"):
        load_config(broken)
    listing = tmp_path / "list.yaml"
    listing.write_text("- 1\n- 2\n")
    with pytest.raises(ValueError, match="mapping"):
        load_config(listing)


def test_empty_file_gives_defaults(tmp_path):
    empty = tmp_path / "empty.yaml"
    empty.write_text("")
    config = load_config(empty, environ={})
    assert config.name == "youbot"
    assert config.ik == IKOptions()
