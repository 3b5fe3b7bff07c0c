import numpy as np
import pytest

from nitsche_beam.quadrature import (
    gauss_1d,
    gauss_triangle,
    global_to_local_t3,
    inside_t3,
    jacobian,
    shape_function_l2,
    shape_function_t3,
)


def test_gauss_1d_integrates_polynomials_exactly() -> None:
    w, q = gauss_1d(2)
    assert np.isclose(np.sum(w * q**3), 0.0)
    assert np.isclose(np.sum(w * q**2), 2.0 / 3.0)
    w, q = gauss_1d(3)
    assert np.isclose(np.sum(w * q**4), 2.0 / 5.0)


def test_gauss_1d_rejects_zero_points() -> None:
    with pytest.raises(ValueError):
        gauss_1d(0)


def test_collapsed_triangle_rule_moments() -> None:
    w, q = gauss_triangle(2)
    assert len(w) == 4
    xi, eta = q[:, 0], q[:, 1]
    assert np.isclose(w.sum(), 0.5)
    assert np.isclose(np.sum(w * xi), 1.0 / 6.0)
    assert np.isclose(np.sum(w * eta), 1.0 / 6.0)
    assert np.isclose(np.sum(w * xi * eta), 1.0 / 24.0)
    assert np.isclose(np.sum(w * xi**2), 1.0 / 12.0)
    # all points strictly inside the reference triangle
    assert np.all(xi > 0) and np.all(eta > 0) and np.all(xi + eta < 1)


def test_t3_shape_functions_partition_of_unity() -> None:
    for xi, eta in [(0.2, 0.3), (0.0, 0.0), (1.0, 0.0), (0.25, 0.5)]:
        N, dN = shape_function_t3(xi, eta)
        assert np.isclose(N.sum(), 1.0)
        assert np.allclose(dN.sum(axis=0), 0.0)


def test_l2_shape_functions_at_ends() -> None:
    N, dN = shape_function_l2(-1.0)
    assert np.allclose(N, [1.0, 0.0])
    N, _ = shape_function_l2(1.0)
    assert np.allclose(N, [0.0, 1.0])
    assert np.isclose(dN.sum(), 0.0)


def test_jacobian_of_scaled_triangle() -> None:
    pts = np.array([[1.0, 1.0], [3.0, 1.0], [1.0, 2.0]])
    _, dN = shape_function_t3(0.3, 0.3)
    J, dNdx = jacobian(pts, dN)
    assert np.isclose(np.linalg.det(J), 2.0)
    assert np.allclose(dNdx[:, 0], [-0.5, 0.5, 0.0])
    assert np.allclose(dNdx[:, 1], [-1.0, 0.0, 1.0])


def test_global_to_local_inverts_affine_map() -> None:
    pts = np.array([[24.0, -3.0], [26.4, -3.0], [24.0, -2.25]])
    local = np.array([0.2, 0.7])
    N, _ = shape_function_t3(*local)
    x = N @ pts
    assert np.allclose(global_to_local_t3(x, pts), local)
    assert inside_t3(local, 1e-12)
    assert not inside_t3(np.array([0.6, 0.6]), 1e-12)
