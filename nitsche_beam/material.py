from __future__ import annotations

import numpy as np

from .errors import InvalidConfiguration


def plane_stress_matrix(E: float, nu: float) -> np.ndarray:
    """Plane-stress elasticity matrix for Voigt strain [exx, eyy, gxy]."""
    if E <= 0:
        raise InvalidConfiguration("Young's modulus must be positive", E=E)
    if not -1.0 < nu < 0.5:
        raise InvalidConfiguration("Poisson's ratio must lie in (-1, 0.5)", nu=nu)
    coef = E / (1 - nu**2)
    C = coef * np.array([
        [1, nu, 0],
        [nu, 1, 0],
        [0, 0, (1 - nu) / 2],
    ], dtype=float)
    C.setflags(write=False)
    return C


def second_moment(half_height: float) -> float:
    """I = 2 c^3 / 3 for a unit-thickness section of depth 2c."""
    return 2.0 * half_height**3 / 3.0
