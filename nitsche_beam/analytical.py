"""Closed-form Timoshenko cantilever (plane stress, unit thickness).

Beam 0 <= x <= L, -c <= y <= c, clamped at x = 0 and loaded at x = L by a
parabolic shear traction with resultant P acting in -y.
"""
from __future__ import annotations

import numpy as np

from .material import second_moment


def displacement(x, y, P: float, E: float, nu: float, L: float, c: float):
    """Exact (ux, uy)."""
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    I0 = second_moment(c)
    D = 2.0 * c
    ux = P * y / (6 * E * I0) * ((6 * L - 3 * x) * x + (2 + nu) * (y**2 - c**2))
    uy = -P / (6 * E * I0) * (3 * nu * y**2 * (L - x) + (4 + 5 * nu) * D**2 * x / 4 + (3 * L - x) * x**2)
    return ux, uy


def stress(x, y, P: float, L: float, c: float):
    """Exact (sxx, syy, sxy)."""
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    I0 = second_moment(c)
    sxx = P * (L - x) * y / I0
    syy = np.zeros_like(sxx)
    sxy = -P / (2 * I0) * (c**2 - y**2)
    return sxx, syy, sxy


def midline_deflection(x, P: float, E: float, nu: float, L: float, c: float):
    """uy(x, 0)."""
    return displacement(x, 0.0 * np.asarray(x, dtype=float), P, E, nu, L, c)[1]
