from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import numpy as np
import scipy.sparse as sp

from . import analytical
from .boundary import apply_dirichlet
from .config import ProblemConfig
from .dofs import DofMap
from .interface import InterfaceTable, assemble_nitsche, build_interface_table
from .linalg import GlobalMatrix, solve_linear_system
from .loading import assemble_edge_traction, parabolic_shear
from .material import plane_stress_matrix
from .matrices import assemble_stiffness
from .meshing import Mesh, boundary_edges, nodes_on_line, structured_tri_mesh

log = logging.getLogger(__name__)


@dataclass
class AssembledSystem:
    meshes: tuple[Mesh, ...]
    dofmap: DofMap
    C: np.ndarray
    K: np.ndarray | sp.csr_matrix      # before boundary conditions
    f: np.ndarray
    table: InterfaceTable | None


@dataclass
class Solution:
    config: ProblemConfig
    system: AssembledSystem
    U: np.ndarray

    @property
    def meshes(self) -> tuple[Mesh, ...]:
        return self.system.meshes

    @property
    def dofmap(self) -> DofMap:
        return self.system.dofmap

    def displacements(self, domain: int) -> tuple[np.ndarray, np.ndarray]:
        return self.system.dofmap.split(self.U, domain)


class _Stopwatch:
    def __init__(self):
        self.t0 = time.perf_counter()

    def stage(self, msg: str) -> None:
        log.info("%8.3f s  %s", time.perf_counter() - self.t0, msg)


def build_meshes(config: ProblemConfig) -> tuple[Mesh, Mesh]:
    g = config.geometry
    c = g.half_height
    mesh1 = structured_tri_mesh([0.0, -c], [g.interface_x, c], config.domain1.nx, config.domain1.ny)
    mesh2 = structured_tri_mesh([g.interface_x, -c], [g.length, c], config.domain2.nx, config.domain2.ny)
    return mesh1, mesh2


def _geom_tol(config: ProblemConfig) -> float:
    return config.tolerance * max(config.geometry.length, 1.0)


def _assemble_load(f: np.ndarray, config: ProblemConfig, mesh: Mesh, dofmap: DofMap, domain: int) -> None:
    g = config.geometry
    right_edge = boundary_edges(mesh, 0, g.length, _geom_tol(config))
    assemble_edge_traction(f, mesh, right_edge, dofmap, domain, parabolic_shear(config.load, g.half_height))


def assemble_coupled_system(config: ProblemConfig) -> AssembledSystem:
    """Meshes, interface table, bulk + Nitsche stiffness and tip load (no boundary conditions)."""
    config.validate()
    clock = _Stopwatch()

    clock.stage("GENERATING MESH")
    mesh1, mesh2 = build_meshes(config)
    dofmap = DofMap.for_meshes(mesh1, mesh2)
    C = plane_stress_matrix(config.material.E, config.material.nu)

    clock.stage("BUILDING INTERFACE TABLE")
    table = build_interface_table(mesh1, mesh2, pairing=config.pairing, tol=config.tolerance)

    clock.stage("COMPUTING STIFFNESS MATRIX")
    K = GlobalMatrix(dofmap.num_dofs, config.backend)
    assemble_stiffness(K, mesh1, C, dofmap, 0)
    assemble_stiffness(K, mesh2, C, dofmap, 1)
    assemble_nitsche(K, table, mesh1, mesh2, C, dofmap, config.alpha)

    clock.stage("COMPUTING EXTERNAL FORCE")
    f = np.zeros(dofmap.num_dofs, dtype=float)
    _assemble_load(f, config, mesh2, dofmap, 1)

    return AssembledSystem(meshes=(mesh1, mesh2), dofmap=dofmap, C=C, K=K.finalize(), f=f, table=table)


def fixed_end_conditions(config: ProblemConfig, mesh: Mesh, dofmap: DofMap, domain: int = 0):
    """Prescribed exact displacements on the clamped edge x = 0."""
    fixedNode = nodes_on_line(mesh, 0, 0.0, _geom_tol(config))
    pts = mesh.nodes[fixedNode, :]
    m, g = config.material, config.geometry
    uFixed, vFixed = analytical.displacement(pts[:, 0], pts[:, 1], config.load, m.E, m.nu, g.length, g.half_height)
    dofs = np.concatenate([dofmap.x_dofs(domain, fixedNode), dofmap.y_dofs(domain, fixedNode)])
    values = np.concatenate([uFixed, vFixed])
    return dofs, values


def _solve(config: ProblemConfig, system: AssembledSystem) -> Solution:
    clock = _Stopwatch()
    clock.stage("APPLYING BOUNDARY CONDITIONS")
    dofs, values = fixed_end_conditions(config, system.meshes[0], system.dofmap, 0)
    K, f = apply_dirichlet(system.K, system.f, dofs, values)

    clock.stage("SOLVING SYSTEM")
    U = solve_linear_system(K, f)
    return Solution(config=config, system=system, U=U)


def solve_coupled_beam(config: ProblemConfig | None = None) -> Solution:
    """Two non-matching meshes joined by Nitsche coupling at x = interface_x."""
    config = config or ProblemConfig()
    system = assemble_coupled_system(config)
    return _solve(config, system)


def solve_conforming_beam(config: ProblemConfig | None = None, nx: int | None = None,
                          ny: int | None = None) -> Solution:
    """Single continuous mesh over the whole beam, the reference for coupled runs.

    Defaults to nx = nx1 + nx2 and ny = ny1, which makes the mesh coincide with
    both coupled meshes when their grids agree.
    """
    config = (config or ProblemConfig()).validate()
    nx = config.domain1.nx + config.domain2.nx if nx is None else nx
    ny = config.domain1.ny if ny is None else ny
    g = config.geometry
    clock = _Stopwatch()

    clock.stage("GENERATING MESH")
    mesh = structured_tri_mesh([0.0, -g.half_height], [g.length, g.half_height], nx, ny)
    dofmap = DofMap.for_meshes(mesh)
    C = plane_stress_matrix(config.material.E, config.material.nu)

    clock.stage("COMPUTING STIFFNESS MATRIX")
    K = GlobalMatrix(dofmap.num_dofs, config.backend)
    assemble_stiffness(K, mesh, C, dofmap, 0)

    clock.stage("COMPUTING EXTERNAL FORCE")
    f = np.zeros(dofmap.num_dofs, dtype=float)
    _assemble_load(f, config, mesh, dofmap, 0)

    system = AssembledSystem(meshes=(mesh,), dofmap=dofmap, C=C, K=K.finalize(), f=f, table=None)
    return _solve(config, system)
