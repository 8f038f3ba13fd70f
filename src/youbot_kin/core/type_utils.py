import sympy as sp
from typing import TypeAlias, cast

import numpy as np
from numpy.typing import NDArray

Num: TypeAlias = int | float | sp.Expr

Matrix44 = NDArray[np.float64]
Matrix33 = NDArray[np.float64]
Vector3 = NDArray[np.float64]
Vector = NDArray[np.float64]

# Avoid direct division on sp.pi to keep mypy happy with SymPy stubs.
HALF_PI: sp.Expr = cast(sp.Expr, sp.Mul(sp.pi, sp.Rational(1, 2)))
