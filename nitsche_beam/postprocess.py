"""Strain/stress recovery, interface diagnostics and comparison with the exact beam."""
from __future__ import annotations

import numpy as np

from . import analytical
from .interface import assemble_nitsche
from .linalg import GlobalMatrix
from .matrices import element_kinematics, n_matrix
from .meshing import Mesh
from .solver import Solution

CENTROID = (1.0 / 3.0, 1.0 / 3.0)


def element_stresses(solution: Solution, domain: int, local=CENTROID):
    """Stress [sxx, syy, sxy] per element at one local point, plus the physical points."""
    mesh = solution.meshes[domain]
    C = solution.system.C
    stress = np.zeros((mesh.num_elements, 3), dtype=float)
    points = np.zeros((mesh.num_elements, 2), dtype=float)
    for e in range(mesh.num_elements):
        sctr = mesh.elements[e]
        sctrB = solution.dofmap.element_dofs(domain, sctr)
        N, B, _ = element_kinematics(mesh.nodes[sctr, :], *local, element=e)
        strain = B @ solution.U[sctrB]
        stress[e] = C @ strain
        points[e] = N @ mesh.nodes[sctr, :]
    return stress, points


def locate(mesh: Mesh, point, tol: float = 1e-9):
    """(element, local coords) of the first element containing point."""
    p = mesh.nodes[mesh.elements]
    A = np.stack([p[:, 1] - p[:, 0], p[:, 2] - p[:, 0]], axis=2)
    rhs = np.asarray(point, dtype=float)[None, :] - p[:, 0]
    local = np.linalg.solve(A, rhs[..., None])[..., 0]
    bary = np.column_stack([1.0 - local.sum(axis=1), local])
    hit = np.flatnonzero(bary.min(axis=1) >= -tol)
    if hit.size == 0:
        raise ValueError(f"point {list(point)} lies outside the mesh")
    e = int(hit[0])
    return e, local[e]


def displacement_at(solution: Solution, domain: int, point) -> np.ndarray:
    mesh = solution.meshes[domain]
    e, local = locate(mesh, point)
    sctr = mesh.elements[e]
    N, _, _ = element_kinematics(mesh.nodes[sctr, :], *local, element=e)
    return n_matrix(N) @ solution.U[solution.dofmap.element_dofs(domain, sctr)]


def deflection_at(solution: Solution, x: float, y: float = 0.0, domain: int | None = None) -> float:
    """uy at (x, y); on the interface the domain-1 value is used unless domain is given."""
    if domain is None:
        domain = 0
        if len(solution.meshes) > 1 and x > solution.config.geometry.interface_x:
            domain = 1
    return float(displacement_at(solution, domain, (x, y))[1])


def midline_deflection(solution: Solution):
    """(x, uy) at the mesh nodes on y = 0, all domains, sorted by x."""
    xs, uys = [], []
    for d, mesh in enumerate(solution.meshes):
        idx = np.flatnonzero(np.abs(mesh.nodes[:, 1]) <= 1e-9 * solution.config.geometry.half_height)
        _, uy = solution.displacements(d)
        xs.append(mesh.nodes[idx, 0])
        uys.append(uy[idx])
    x = np.concatenate(xs)
    uy = np.concatenate(uys)
    order = np.argsort(x, kind="stable")
    return x[order], uy[order]


def exact_deflection(solution: Solution, x):
    m, g = solution.config.material, solution.config.geometry
    return analytical.midline_deflection(x, solution.config.load, m.E, m.nu, g.length, g.half_height)


def deflection_error(solution: Solution, x: float | None = None) -> float:
    """Relative error of the mid-line deflection at x (default: the interface)."""
    x = solution.config.geometry.interface_x if x is None else x
    exact = float(exact_deflection(solution, x))
    return abs(deflection_at(solution, x) - exact) / abs(exact)


def interface_jump(solution: Solution) -> np.ndarray:
    """u1 - u2 at every interface quadrature point, shape (nq, 2)."""
    table = solution.system.table
    if table is None:
        raise ValueError("solution has no interface")
    mesh1, mesh2 = solution.meshes
    jump = np.zeros((table.num_points, 2), dtype=float)
    for q in range(table.num_points):
        e1, e2 = int(table.element1[q]), int(table.element2[q])
        sctr1, sctr2 = mesh1.elements[e1], mesh2.elements[e2]
        N1, _, _ = element_kinematics(mesh1.nodes[sctr1, :], *table.local1[q], element=e1)
        N2, _, _ = element_kinematics(mesh2.nodes[sctr2, :], *table.local2[q], element=e2)
        u1 = n_matrix(N1) @ solution.U[solution.dofmap.element_dofs(0, sctr1)]
        u2 = n_matrix(N2) @ solution.U[solution.dofmap.element_dofs(1, sctr2)]
        jump[q] = u1 - u2
    return jump


def max_interface_jump(solution: Solution) -> float:
    return float(np.max(np.linalg.norm(interface_jump(solution), axis=1)))


def coupling_forces(solution: Solution, U: np.ndarray | None = None) -> np.ndarray:
    """Nodal forces produced by the interface terms alone, K_nitsche @ U."""
    system = solution.system
    mesh1, mesh2 = system.meshes
    Kc = GlobalMatrix(system.dofmap.num_dofs, solution.config.backend)
    assemble_nitsche(Kc, system.table, mesh1, mesh2, system.C, system.dofmap, solution.config.alpha)
    U = solution.U if U is None else U
    return np.asarray(Kc.finalize() @ U).ravel()
