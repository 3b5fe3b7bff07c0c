from __future__ import annotations

import numpy as np
from numpy.polynomial.legendre import leggauss


# ---- quadrature rules ----
def gauss_1d(n: int) -> tuple[np.ndarray, np.ndarray]:
    """n-point Gauss-Legendre rule on [-1, 1]. Returns (weights, points)."""
    if n < 1:
        raise ValueError(f"quadrature order must be >= 1, got {n}")
    points, weights = leggauss(n)
    return weights, points


def gauss_triangle(n: int = 2) -> tuple[np.ndarray, np.ndarray]:
    """n x n Gauss rule collapsed onto the reference triangle (0,0)-(1,0)-(0,1).

    Uses xi = (1+s)(1-t)/4, eta = (1+t)/2 on the square [-1,1]^2; weights sum
    to the reference area 1/2.
    """
    w1, q1 = gauss_1d(n)
    weights = np.zeros(n * n, dtype=float)
    locations = np.zeros((n * n, 2), dtype=float)
    k = 0
    for i in range(n):
        for j in range(n):
            s, t = q1[i], q1[j]
            locations[k] = [(1 + s) * (1 - t) / 4, (1 + t) / 2]
            weights[k] = w1[i] * w1[j] * (1 - t) / 8
            k += 1
    return weights, locations


# ---- shape functions ----
def shape_function_t3(xi: float, eta: float):
    shape = np.array([1 - xi - eta, xi, eta], dtype=float)
    natural = np.array([
        [-1.0, -1.0],
        [ 1.0,  0.0],
        [ 0.0,  1.0],
    ], dtype=float)
    return shape, natural


def shape_function_l2(xi: float):
    shape = np.array([(1 - xi) / 2, (1 + xi) / 2], dtype=float)
    natural = np.array([-0.5, 0.5], dtype=float)
    return shape, natural


def jacobian(node_xy: np.ndarray, natural_derivatives: np.ndarray):
    """Jacobian J = X^T dN/dxi and the physical gradients dN/dx."""
    J = node_xy.T @ natural_derivatives
    XY = natural_derivatives @ np.linalg.inv(J)
    return J, XY


def global_to_local_t3(x: np.ndarray, node_xy: np.ndarray) -> np.ndarray:
    """Invert the affine T3 map: local (xi, eta) of physical point x."""
    A = np.column_stack([node_xy[1] - node_xy[0], node_xy[2] - node_xy[0]])
    return np.linalg.solve(A, np.asarray(x, dtype=float) - node_xy[0])


def inside_t3(local: np.ndarray, tol: float) -> bool:
    xi, eta = float(local[0]), float(local[1])
    return min(1.0 - xi - eta, xi, eta) >= -tol
