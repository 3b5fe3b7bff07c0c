"""Timoshenko beam on two non-matching T3 meshes coupled with the Nitsche method.

Notes:
- Units are whatever the inputs use consistently (the default case is in psi/in).
- Global unknowns are ordered [x of domain 1][x of domain 2][y of domain 1][y of domain 2].
- Node and element ids are 0-based and local to their mesh.
"""
from __future__ import annotations

from .config import BeamGeometry, Grid, Material, ProblemConfig, heuristic_penalty, load_config
from .errors import InvalidConfiguration, InvalidMesh, MeshMismatch, NitscheBeamError, SingularSystem
from .solver import Solution, assemble_coupled_system, solve_conforming_beam, solve_coupled_beam

__all__ = [
    "BeamGeometry",
    "Grid",
    "Material",
    "ProblemConfig",
    "heuristic_penalty",
    "load_config",
    "NitscheBeamError",
    "InvalidMesh",
    "MeshMismatch",
    "SingularSystem",
    "InvalidConfiguration",
    "Solution",
    "assemble_coupled_system",
    "solve_coupled_beam",
    "solve_conforming_beam",
]
