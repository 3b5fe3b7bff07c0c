"""Nitsche coupling of two non-matching meshes along a straight interface.

The interface table is built once: every quadrature point carries its local
coordinates in the owning element on both sides, the integration weight
(Gauss weight x edge Jacobian) and the unit normal pointing out of domain 1.
Domain-1 edges are traversed with domain 1 on their left (increasing y on the
right side of a left-to-right beam), so the outward normal is the tangent
rotated clockwise.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from .dofs import DofMap
from .errors import InvalidConfiguration, MeshMismatch
from .linalg import GlobalMatrix
from .matrices import element_kinematics, n_matrix
from .meshing import Mesh, boundary_edges, edge_element
from .quadrature import gauss_1d, global_to_local_t3, inside_t3, shape_function_l2

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class InterfaceTable:
    element1: np.ndarray   # (nq,) owning element in domain 1
    element2: np.ndarray   # (nq,) owning element in domain 2
    local1: np.ndarray     # (nq, 2) local coordinates in element1
    local2: np.ndarray     # (nq, 2) local coordinates in element2
    points: np.ndarray     # (nq, 2) physical coordinates
    weights: np.ndarray    # (nq,) Gauss weight x edge Jacobian
    normals: np.ndarray    # (nq, 2) unit normal, outward from domain 1
    segment: np.ndarray    # (nq,) matched segment id, contiguous

    @property
    def num_points(self) -> int:
        return int(self.weights.shape[0])

    @property
    def num_segments(self) -> int:
        return int(self.segment.max()) + 1 if self.segment.size else 0

    def segments(self):
        for s in range(self.num_segments):
            yield np.flatnonzero(self.segment == s)

    def length(self) -> float:
        return float(self.weights.sum())


def interface_edges(mesh: Mesh, side: str, tol: float = 1e-9) -> np.ndarray:
    """Boundary edges on the left (min x) or right (max x) side, by increasing y."""
    if side == "right":
        x = float(mesh.nodes[:, 0].max())
    elif side == "left":
        x = float(mesh.nodes[:, 0].min())
    else:
        raise ValueError(f"side must be 'left' or 'right', got {side!r}")
    return boundary_edges(mesh, 0, x, tol)


def _edge_frame(p1: np.ndarray, p2: np.ndarray):
    tangent = p2 - p1
    length = float(np.linalg.norm(tangent))
    return tangent / length, length


def _ratio_pairs(edges1: np.ndarray, edges2: np.ndarray):
    n1, n2 = len(edges1), len(edges2)
    if n1 % n2 != 0:
        raise InvalidConfiguration("ratio pairing needs ny1 to be an integer multiple of ny2", ny1=n1, ny2=n2)
    d = n1 // n2
    for i in range(n1):
        yield i, i // d, -1.0, 1.0


def _geometric_pairs(nodes1, edges1, nodes2, edges2, tol: float):
    """Overlap of every domain-1 edge with the domain-2 edges, in edge-1 parameter s in [-1, 1]."""
    for i, (a, b) in enumerate(edges1):
        p1, p2 = nodes1[a], nodes1[b]
        t, length = _edge_frame(p1, p2)
        covered = 0.0
        for j, (c, d) in enumerate(edges2):
            sc = 2.0 * float((nodes2[c] - p1) @ t) / length - 1.0
            sd = 2.0 * float((nodes2[d] - p1) @ t) / length - 1.0
            lo = max(-1.0, min(sc, sd))
            hi = min(1.0, max(sc, sd))
            if hi - lo > tol:
                covered += hi - lo
                yield i, j, lo, hi
        if abs(covered - 2.0) > 2.0 * tol * max(len(edges2), 1):
            raise MeshMismatch("interface edge is not covered by the other mesh",
                               edge=i, covered_fraction=covered / 2.0)


def build_interface_table(mesh1: Mesh, mesh2: Mesh, pairing: str = "geometric",
                          tol: float = 1e-9, order: int = 2) -> InterfaceTable:
    """Correspondence table between the right side of mesh1 and the left side of mesh2."""
    scale = max(float(np.abs(mesh1.nodes).max()), float(np.abs(mesh2.nodes).max()), 1.0)
    edges1 = interface_edges(mesh1, "right", tol * scale)
    edges2 = interface_edges(mesh2, "left", tol * scale)

    if pairing == "ratio":
        pairs = _ratio_pairs(edges1, edges2)
    elif pairing == "geometric":
        pairs = _geometric_pairs(mesh1.nodes, edges1, mesh2.nodes, edges2, tol)
    else:
        raise InvalidConfiguration("unknown interface pairing", pairing=pairing)

    owner1 = [edge_element(mesh1, edge) for edge in edges1]
    owner2 = [edge_element(mesh2, edge) for edge in edges2]
    W1, Q1 = gauss_1d(order)

    rows = []
    for seg, (i, j, lo, hi) in enumerate(pairs):
        sctrEdge = edges1[i]
        e1, e2 = owner1[i], owner2[j]
        pts1 = mesh1.element_coordinates(e1)
        pts2 = mesh2.element_coordinates(e2)
        t, length = _edge_frame(mesh1.nodes[sctrEdge[0]], mesh1.nodes[sctrEdge[1]])
        normal = np.array([t[1], -t[0]])
        half = (hi - lo) / 2.0
        for q in range(len(W1)):
            s = (hi + lo) / 2.0 + half * Q1[q]
            N, _ = shape_function_l2(s)
            x = N @ mesh1.nodes[sctrEdge, :]
            X1 = global_to_local_t3(x, pts1)
            X2 = global_to_local_t3(x, pts2)
            if not inside_t3(X1, tol):
                raise MeshMismatch("interface point outside its domain-1 element",
                                   edge=i, point=q, element=e1, x=x.tolist())
            if not inside_t3(X2, tol):
                raise MeshMismatch("interface point outside the matched domain-2 element",
                                   edge=i, point=q, element=e2, x=x.tolist())
            rows.append((e1, e2, X1, X2, x, W1[q] * half * length / 2.0, normal, seg))

    if not rows:
        raise MeshMismatch("no interface quadrature points", pairing=pairing)
    table = InterfaceTable(
        element1=np.array([r[0] for r in rows], dtype=int),
        element2=np.array([r[1] for r in rows], dtype=int),
        local1=np.array([r[2] for r in rows], dtype=float),
        local2=np.array([r[3] for r in rows], dtype=float),
        points=np.array([r[4] for r in rows], dtype=float),
        weights=np.array([r[5] for r in rows], dtype=float),
        normals=np.array([r[6] for r in rows], dtype=float),
        segment=np.array([r[7] for r in rows], dtype=int),
    )
    log.debug("interface table: %d segments, %d points, length %.6g",
              table.num_segments, table.num_points, table.length())
    return table


def traction_operator(normal: np.ndarray) -> np.ndarray:
    """Maps Voigt stress [sxx, syy, sxy] to the traction on a plane with this normal."""
    nx, ny = float(normal[0]), float(normal[1])
    return np.array([[nx, 0.0, ny],
                     [0.0, ny, nx]], dtype=float)


def assemble_nitsche(K: GlobalMatrix, table: InterfaceTable, mesh1: Mesh, mesh2: Mesh,
                     C: np.ndarray, dofmap: DofMap, alpha: float,
                     domain1: int = 0, domain2: int = 1) -> None:
    """Add the symmetric Nitsche interface terms (consistency + penalty) into K."""
    if not alpha > 0:
        raise InvalidConfiguration("Nitsche penalty must be positive", alpha=alpha)

    for idx in table.segments():
        e1 = int(table.element1[idx[0]])
        e2 = int(table.element2[idx[0]])
        sctr1 = mesh1.elements[e1]
        sctr2 = mesh2.elements[e2]
        sctrB1 = dofmap.element_dofs(domain1, sctr1)
        sctrB2 = dofmap.element_dofs(domain2, sctr2)
        pts1 = mesh1.nodes[sctr1, :]
        pts2 = mesh2.nodes[sctr2, :]

        n1, n2 = len(sctrB1), len(sctrB2)
        Kp11 = np.zeros((n1, n1))
        Kp12 = np.zeros((n1, n2))
        Kp22 = np.zeros((n2, n2))
        Kd11 = np.zeros((n1, n1))
        Kd12 = np.zeros((n1, n2))
        Kd21 = np.zeros((n2, n1))
        Kd22 = np.zeros((n2, n2))

        for q in idx:
            wt = table.weights[q]
            n = traction_operator(table.normals[q])
            N1, B1, _ = element_kinematics(pts1, *table.local1[q], element=e1)
            N2, B2, _ = element_kinematics(pts2, *table.local2[q], element=e2)
            Nm1 = n_matrix(N1)
            Nm2 = n_matrix(N2)

            Kp11 += alpha * (Nm1.T @ Nm1) * wt
            Kp12 += alpha * (Nm1.T @ Nm2) * wt
            Kp22 += alpha * (Nm2.T @ Nm2) * wt

            Kd11 += 0.5 * Nm1.T @ n @ C @ B1 * wt
            Kd12 += 0.5 * Nm1.T @ n @ C @ B2 * wt
            Kd21 += 0.5 * Nm2.T @ n @ C @ B1 * wt
            Kd22 += 0.5 * Nm2.T @ n @ C @ B2 * wt

        K.add(sctrB1, sctrB1, Kp11 - Kd11 - Kd11.T)
        K.add(sctrB1, sctrB2, -Kp12 - Kd12 + Kd21.T)
        K.add(sctrB2, sctrB1, -Kp12.T + Kd21 - Kd12.T)
        K.add(sctrB2, sctrB2, Kp22 + Kd22 + Kd22.T)
    log.debug("assembled Nitsche terms over %d segments (alpha=%g)", table.num_segments, alpha)
