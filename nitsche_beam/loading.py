from __future__ import annotations

import logging
from typing import Callable

import numpy as np

from .dofs import DofMap
from .meshing import Mesh
from .quadrature import gauss_1d, shape_function_l2

log = logging.getLogger(__name__)

Traction = Callable[[float, float], tuple[float, float]]


def assemble_edge_traction(f: np.ndarray, mesh: Mesh, edges: np.ndarray, dofmap: DofMap,
                           domain: int, traction: Traction, order: int = 3) -> None:
    """Integrate a traction t(x, y) -> (tx, ty) along L2 edges into f (in place)."""
    W, Q = gauss_1d(order)
    for e, sctr in enumerate(np.asarray(edges, dtype=int)):
        sctrx = dofmap.x_dofs(domain, sctr)
        sctry = dofmap.y_dofs(domain, sctr)
        for q in range(len(W)):
            N, dNdxi = shape_function_l2(Q[q])
            J0 = dNdxi @ mesh.nodes[sctr, :]
            detJ0 = float(np.linalg.norm(J0))
            x, y = N @ mesh.nodes[sctr, :]
            tx, ty = traction(x, y)
            f[sctrx] += N * tx * detJ0 * W[q]
            f[sctry] += N * ty * detJ0 * W[q]
    log.debug("domain %d: integrated traction over %d edges", domain, len(edges))


def parabolic_shear(load: float, half_height: float) -> Traction:
    """Tip shear traction ty = -P (c^2 - y^2) / (2 I) of the cantilever; integrates to -P."""
    I0 = 2.0 * half_height**3 / 3.0

    def traction(x: float, y: float) -> tuple[float, float]:
        return 0.0, -load * (half_height**2 - y**2) / (2.0 * I0)

    return traction
