import numpy as np
import pytest

from nitsche_beam.errors import InvalidMesh
from nitsche_beam.meshing import (
    boundary_edges,
    check_orientation,
    edge_element,
    nodes_on_line,
    signed_areas,
    structured_tri_mesh,
)


def test_structured_mesh_counts_and_ordering() -> None:
    mesh = structured_tri_mesh([0.0, -3.0], [24.0, 3.0], 10, 8)
    assert mesh.num_nodes == 11 * 9
    assert mesh.num_elements == 2 * 10 * 8
    # row-major, x fastest
    assert np.allclose(mesh.nodes[0], [0.0, -3.0])
    assert np.allclose(mesh.nodes[10], [24.0, -3.0])
    assert np.allclose(mesh.nodes[11], [0.0, -2.25])
    assert np.allclose(mesh.nodes[-1], [24.0, 3.0])


def test_structured_mesh_elements_ccw_and_cover_box() -> None:
    mesh = structured_tri_mesh([1.0, 0.0], [3.0, 1.0], 4, 3)
    area = signed_areas(mesh.nodes, mesh.elements)
    assert np.all(area > 0.0)
    assert np.isclose(area.sum(), 2.0)


def test_first_elements_follow_node_patterns() -> None:
    mesh = structured_tri_mesh([0.0, 0.0], [2.0, 2.0], 2, 2)
    assert mesh.elements[0].tolist() == [0, 1, 3]
    assert mesh.elements[4].tolist() == [1, 4, 3]
    assert mesh.elements[3].tolist() == [4, 5, 7]


def test_mesh_arrays_are_read_only() -> None:
    mesh = structured_tri_mesh([0.0, 0.0], [1.0, 1.0], 1, 1)
    with pytest.raises(ValueError):
        mesh.nodes[0, 0] = 5.0


@pytest.mark.parametrize("nx, ny", [(0, 4), (3, 0), (-1, 2)])
def test_non_positive_subdivisions_rejected(nx: int, ny: int) -> None:
    with pytest.raises(InvalidMesh):
        structured_tri_mesh([0.0, 0.0], [1.0, 1.0], nx, ny)


def test_degenerate_box_rejected() -> None:
    with pytest.raises(InvalidMesh):
        structured_tri_mesh([0.0, 0.0], [0.0, 1.0], 2, 2)


def test_inverted_element_reported_with_index() -> None:
    nodes = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0], [1.0, 1.0]])
    elements = np.array([[0, 1, 2], [1, 2, 3]])  # second one is clockwise
    with pytest.raises(InvalidMesh) as exc:
        check_orientation(nodes, elements)
    assert exc.value.context["element"] == 1


def test_boundary_nodes_and_edges_sorted_by_y() -> None:
    mesh = structured_tri_mesh([0.0, -3.0], [24.0, 3.0], 10, 8)
    nodes = nodes_on_line(mesh, 0, 24.0)
    assert len(nodes) == 9
    assert np.all(np.diff(mesh.nodes[nodes, 1]) > 0)
    edges = boundary_edges(mesh, 0, 24.0)
    assert edges.shape == (8, 2)
    assert np.array_equal(edges[1:, 0], edges[:-1, 1])


def test_boundary_edges_need_nodes_on_the_line() -> None:
    mesh = structured_tri_mesh([0.0, 0.0], [1.0, 1.0], 2, 2)
    with pytest.raises(InvalidMesh):
        boundary_edges(mesh, 0, 0.3)


def test_edge_element_finds_owner_on_both_sides() -> None:
    mesh = structured_tri_mesh([0.0, 0.0], [2.0, 2.0], 2, 2)
    # right side edge (2, 5) belongs to the upper triangle of cell 1
    assert edge_element(mesh, (2, 5)) == 5
    # left side edge (0, 3) belongs to the lower triangle of cell 0
    assert edge_element(mesh, (0, 3)) == 0


def test_edge_element_rejects_interior_edge() -> None:
    mesh = structured_tri_mesh([0.0, 0.0], [2.0, 2.0], 2, 2)
    with pytest.raises(InvalidMesh):
        edge_element(mesh, (1, 3))
