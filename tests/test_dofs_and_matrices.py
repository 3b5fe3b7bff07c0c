import numpy as np
import pytest

from nitsche_beam.dofs import DofMap
from nitsche_beam.errors import InvalidMesh
from nitsche_beam.linalg import GlobalMatrix
from nitsche_beam.material import plane_stress_matrix
from nitsche_beam.matrices import assemble_stiffness, b_matrix, element_kinematics, element_stiffness
from nitsche_beam.meshing import structured_tri_mesh


C = plane_stress_matrix(30e6, 0.3)


def test_dofmap_block_layout() -> None:
    dm = DofMap((99, 45))
    assert dm.num_nodes == 144
    assert dm.num_dofs == 288
    assert dm.x_dofs(0, [3]).tolist() == [3]
    assert dm.x_dofs(1, [0]).tolist() == [99]
    assert (dm.y_dofs(1, [7]) - dm.x_dofs(1, [7])).tolist() == [144]
    assert dm.element_dofs(1, [0, 1, 2]).tolist() == [99, 100, 101, 243, 244, 245]


def test_dofmap_split_and_range_check() -> None:
    dm = DofMap((2, 3))
    U = np.arange(10.0)
    ux, uy = dm.split(U, 1)
    assert ux.tolist() == [2.0, 3.0, 4.0]
    assert uy.tolist() == [7.0, 8.0, 9.0]
    with pytest.raises(IndexError):
        dm.x_dofs(0, [2])


def test_plane_stress_matrix_values() -> None:
    assert np.isclose(C[0, 0], 30e6 / 0.91)
    assert np.isclose(C[0, 1], 0.3 * 30e6 / 0.91)
    assert np.isclose(C[2, 2], 0.35 * 30e6 / 0.91)
    assert np.allclose(C, C.T)


def test_b_matrix_layout() -> None:
    dN = np.array([[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]])
    B = b_matrix(dN)
    assert B[0].tolist() == [1, 3, 5, 0, 0, 0]
    assert B[1].tolist() == [0, 0, 0, 2, 4, 6]
    assert B[2].tolist() == [2, 4, 6, 1, 3, 5]


def test_element_stiffness_symmetric_with_rigid_body_null_space() -> None:
    pts = np.array([[0.0, 0.0], [2.4, 0.0], [0.0, 0.75]])
    Ke = element_stiffness(pts, C)
    assert np.allclose(Ke, Ke.T)
    tx = np.array([1, 1, 1, 0, 0, 0], dtype=float)
    ty = np.array([0, 0, 0, 1, 1, 1], dtype=float)
    rot = np.concatenate([-pts[:, 1], pts[:, 0]])
    scale = np.abs(Ke).max()
    for mode in (tx, ty, rot):
        assert np.allclose(Ke @ mode, 0.0, atol=1e-10 * scale)
    # constant strain: K = area * B^T C B
    _, B, _ = element_kinematics(pts, 0.2, 0.2)
    assert np.allclose(Ke, 0.9 * B.T @ C @ B)


def test_inverted_element_raises_invalid_mesh() -> None:
    pts = np.array([[0.0, 0.0], [0.0, 1.0], [1.0, 0.0]])
    with pytest.raises(InvalidMesh) as exc:
        element_stiffness(pts, C, element=7)
    assert exc.value.context["element"] == 7


def test_assembled_domain_stiffness_rigid_modes() -> None:
    mesh = structured_tri_mesh([0.0, -1.0], [4.0, 1.0], 4, 2)
    dm = DofMap.for_meshes(mesh)
    K = GlobalMatrix(dm.num_dofs)
    assemble_stiffness(K, mesh, C, dm, 0)
    K = K.finalize()
    assert np.allclose(K, K.T)
    rot = np.concatenate([-mesh.nodes[:, 1], mesh.nodes[:, 0]])
    assert np.allclose(K @ rot, 0.0, atol=1e-9 * np.abs(K).max())
