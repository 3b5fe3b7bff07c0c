from __future__ import annotations

import logging

import numpy as np

from .dofs import DofMap
from .errors import InvalidMesh
from .linalg import GlobalMatrix
from .meshing import Mesh
from .quadrature import gauss_triangle, jacobian, shape_function_t3

log = logging.getLogger(__name__)


# ---- T3 utilities ----
def b_matrix(dN_xy: np.ndarray) -> np.ndarray:
    """Strain-displacement matrix, rows [exx, eyy, gxy], columns [x block, y block]."""
    nn = dN_xy.shape[0]
    B = np.zeros((3, 2 * nn), dtype=float)
    B[0, 0:nn] = dN_xy[:, 0]
    B[1, nn:2*nn] = dN_xy[:, 1]
    B[2, 0:nn] = dN_xy[:, 1]
    B[2, nn:2*nn] = dN_xy[:, 0]
    return B


def n_matrix(N: np.ndarray) -> np.ndarray:
    """Displacement interpolation matrix (2 x 2nn)."""
    nn = N.shape[0]
    Nm = np.zeros((2, 2 * nn), dtype=float)
    Nm[0, 0:nn] = N
    Nm[1, nn:2*nn] = N
    return Nm


def element_kinematics(node_xy: np.ndarray, xi: float, eta: float, element: int | None = None):
    """Shape values, B matrix and det(J) at a local point of a T3 element."""
    N, dN_nat = shape_function_t3(xi, eta)
    J = node_xy.T @ dN_nat
    detJ = float(np.linalg.det(J))
    if detJ <= 0.0:
        raise InvalidMesh("non-positive Jacobian determinant", element=element,
                          point=(float(xi), float(eta)), detJ=detJ)
    _, dN_xy = jacobian(node_xy, dN_nat)
    return N, b_matrix(dN_xy), detJ


def element_stiffness(node_xy: np.ndarray, C: np.ndarray, element: int | None = None) -> np.ndarray:
    weights, locations = gauss_triangle(2)
    nn = node_xy.shape[0]
    Ke = np.zeros((2 * nn, 2 * nn), dtype=float)
    for q, wt in enumerate(weights):
        xi, eta = locations[q]
        _, B, detJ = element_kinematics(node_xy, xi, eta, element)
        Ke += (B.T @ C @ B) * wt * detJ
    return Ke


def assemble_stiffness(K: GlobalMatrix, mesh: Mesh, C: np.ndarray, dofmap: DofMap, domain: int) -> None:
    """Add the bulk elasticity stiffness of one domain into K."""
    for e in range(mesh.num_elements):
        indice = mesh.elements[e]
        elementdof = dofmap.element_dofs(domain, indice)
        Ke = element_stiffness(mesh.nodes[indice, :], C, element=e)
        K.add(elementdof, elementdof, Ke)
    log.debug("domain %d: assembled %d element stiffness matrices", domain, mesh.num_elements)
