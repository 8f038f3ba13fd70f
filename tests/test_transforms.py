import math

import numpy as np
import pytest
import sympy as sp

from youbot_kin.model.transforms import dh_link_symbolic, dh_transform


def test_zero_parameters_give_identity():
    np.testing.assert_allclose(dh_transform(0.0, 0.0, 0.0, 0.0), np.eye(4))


@pytest.mark.parametrize(
    "a, alpha, d, theta",
    [
        (33.0, math.pi / 2, 147.0, 0.3),
        (155.0, 0.0, 0.0, -1.2),
        (0.0, math.pi / 2, 0.0, 2.5),
        (12.5, -0.7, 217.5, math.pi),
    ],
)
def test_numeric_link_matches_symbolic(a, alpha, d, theta):
    T_sym = np.array(sp.N(dh_link_symbolic(a, alpha, d, theta), 15).tolist(), dtype=float)
    T_num = dh_transform(a, alpha, d, theta)
    np.testing.assert_allclose(T_num, T_sym, atol=1e-12)
    np.testing.assert_allclose(T_num[3], [0.0, 0.0, 0.0, 1.0])


def test_link_translation_follows_dh_order():
    # Rz(theta) Tz(d) Tx(a): origin sits at (a cos theta, a sin theta, d).
    T = dh_transform(10.0, 0.4, 5.0, math.pi / 2)
    np.testing.assert_allclose(T[:3, 3], [0.0, 10.0, 5.0], atol=1e-12)
    np.testing.assert_allclose(T[:3, :3].T @ T[:3, :3], np.eye(3), atol=1e-12)
