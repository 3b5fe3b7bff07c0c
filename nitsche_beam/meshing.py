"""Structured T3 meshing of rectangular subdomains and boundary extraction.

Compatibility notes:
* Node ids are 0-based. Nodes are stored row-major, x varies fastest, so node
  (i, j) of an (nx+1) x (ny+1) grid has id ``j*(nx+1) + i``.
* Each cell is split in two triangles with the node patterns ``[0, 1, nnx]``
  and ``[1, nnx+1, nnx]``. All first-pattern triangles come first (one per
  cell, row-major), followed by all second-pattern triangles, so element
  ``e < nx*ny`` is the lower-left triangle of cell ``e``.
* Both patterns are counter-clockwise for a box given lower-left to upper-right.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from .errors import InvalidMesh

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Mesh:
    nodes: np.ndarray        # (n_node, 2): [x, y]
    elements: np.ndarray     # (n_elem, 3): node ids, CCW
    nx: int
    ny: int

    @property
    def num_nodes(self) -> int:
        return int(self.nodes.shape[0])

    @property
    def num_elements(self) -> int:
        return int(self.elements.shape[0])

    def element_coordinates(self, e: int) -> np.ndarray:
        return self.nodes[self.elements[e], :]


def square_node_array(corner_lo, corner_hi, nnx: int, nny: int) -> np.ndarray:
    """Row-major grid of nnx x nny nodes spanning the box."""
    x = np.linspace(float(corner_lo[0]), float(corner_hi[0]), nnx)
    y = np.linspace(float(corner_lo[1]), float(corner_hi[1]), nny)
    xx, yy = np.meshgrid(x, y)
    return np.column_stack([xx.ravel(), yy.ravel()])


def make_elem(node_pattern, nx: int, ny: int, inc_u: int, inc_v: int) -> np.ndarray:
    """Repeat a node pattern over an nx x ny grid of cells."""
    node_pattern = np.asarray(node_pattern, dtype=int)
    element = np.zeros((nx * ny, len(node_pattern)), dtype=int)
    e = 0
    for row in range(ny):
        for col in range(nx):
            element[e, :] = node_pattern + row * inc_v + col * inc_u
            e += 1
    return element


def signed_areas(nodes: np.ndarray, elements: np.ndarray) -> np.ndarray:
    p = nodes[elements]
    return 0.5 * ((p[:, 1, 0] - p[:, 0, 0]) * (p[:, 2, 1] - p[:, 0, 1])
                  - (p[:, 2, 0] - p[:, 0, 0]) * (p[:, 1, 1] - p[:, 0, 1]))


def check_orientation(nodes: np.ndarray, elements: np.ndarray) -> None:
    """Raise InvalidMesh on the first inverted or degenerate element."""
    area = signed_areas(nodes, elements)
    bad = np.flatnonzero(area <= 0.0)
    if bad.size:
        e = int(bad[0])
        raise InvalidMesh("inverted or degenerate element", element=e, area=float(area[e]))


def structured_tri_mesh(corner_lo, corner_hi, nx: int, ny: int) -> Mesh:
    """Triangulate the box [corner_lo, corner_hi] with nx x ny cells."""
    if int(nx) < 1 or int(ny) < 1:
        raise InvalidMesh("subdivision counts must be >= 1", nx=nx, ny=ny)
    nx, ny = int(nx), int(ny)
    lo = np.asarray(corner_lo, dtype=float)
    hi = np.asarray(corner_hi, dtype=float)
    if np.any(hi <= lo):
        raise InvalidMesh("box must have positive extent", corner_lo=lo.tolist(), corner_hi=hi.tolist())

    nnx, nny = nx + 1, ny + 1
    nodes = square_node_array(lo, hi, nnx, nny)
    node_pattern1 = [0, 1, nnx]
    node_pattern2 = [1, nnx + 1, nnx]
    inc_u = 1
    inc_v = nnx
    elements = np.vstack([
        make_elem(node_pattern1, nx, ny, inc_u, inc_v),
        make_elem(node_pattern2, nx, ny, inc_u, inc_v),
    ])
    check_orientation(nodes, elements)

    nodes.setflags(write=False)
    elements.setflags(write=False)
    log.debug("mesh [%s, %s] x [%s, %s]: %d nodes, %d elements",
              lo[0], hi[0], lo[1], hi[1], nodes.shape[0], elements.shape[0])
    return Mesh(nodes=nodes, elements=elements, nx=nx, ny=ny)


def nodes_on_line(mesh: Mesh, axis: int, value: float, tol: float = 1e-9) -> np.ndarray:
    """Nodes with coordinate[axis] == value, sorted along the other axis."""
    other = 1 - axis
    idx = np.flatnonzero(np.abs(mesh.nodes[:, axis] - value) <= tol)
    return idx[np.argsort(mesh.nodes[idx, other], kind="stable")]


def boundary_edges(mesh: Mesh, axis: int, value: float, tol: float = 1e-9) -> np.ndarray:
    """Consecutive node pairs along a grid line, ordered by increasing coordinate."""
    idx = nodes_on_line(mesh, axis, value, tol)
    if idx.size < 2:
        raise InvalidMesh("fewer than two nodes on boundary line", axis=axis, value=value)
    return np.column_stack([idx[:-1], idx[1:]])


def edge_element(mesh: Mesh, edge) -> int:
    """Index of the element owning both nodes of a boundary edge."""
    a, b = int(edge[0]), int(edge[1])
    owner = np.flatnonzero(np.any(mesh.elements == a, axis=1) & np.any(mesh.elements == b, axis=1))
    if owner.size == 0:
        raise InvalidMesh("no element owns boundary edge", edge=(a, b))
    if owner.size > 1:
        raise InvalidMesh("edge is interior, not on the boundary", edge=(a, b), elements=owner.tolist())
    return int(owner[0])
