from __future__ import annotations

import logging
import warnings

import numpy as np
import scipy.linalg as la
import scipy.sparse as sp
import scipy.sparse.linalg as spla

from .errors import SingularSystem

log = logging.getLogger(__name__)


class GlobalMatrix:
    """Additive accumulator for the global stiffness matrix.

    `add` is the only mutation; nothing reads the matrix until `finalize`.
    The dense backend scatters in place, the sparse backend collects COO
    triplets and sums duplicates on finalize.
    """

    def __init__(self, size: int, backend: str = "dense"):
        if backend not in ("dense", "sparse"):
            raise ValueError(f"unknown backend {backend!r}")
        self.size = int(size)
        self.backend = backend
        self._finalized = False
        if backend == "dense":
            self._K = np.zeros((self.size, self.size), dtype=float)
        else:
            self._rows: list[np.ndarray] = []
            self._cols: list[np.ndarray] = []
            self._vals: list[np.ndarray] = []

    def add(self, rows, cols, block: np.ndarray) -> None:
        if self._finalized:
            raise RuntimeError("matrix already finalized")
        rows = np.asarray(rows, dtype=int)
        cols = np.asarray(cols, dtype=int)
        block = np.asarray(block, dtype=float)
        if block.shape != (rows.size, cols.size):
            raise ValueError(f"block shape {block.shape} does not match scatter ({rows.size}, {cols.size})")
        if self.backend == "dense":
            self._K[np.ix_(rows, cols)] += block
        else:
            rr, cc = np.meshgrid(rows, cols, indexing="ij")
            self._rows.append(rr.ravel())
            self._cols.append(cc.ravel())
            self._vals.append(block.ravel())

    def finalize(self) -> np.ndarray | sp.csr_matrix:
        self._finalized = True
        if self.backend == "dense":
            return self._K
        if not self._vals:
            return sp.csr_matrix((self.size, self.size), dtype=float)
        K = sp.coo_matrix(
            (np.concatenate(self._vals), (np.concatenate(self._rows), np.concatenate(self._cols))),
            shape=(self.size, self.size),
        )
        return K.tocsr()


def solve_linear_system(A: sp.spmatrix | np.ndarray, b: np.ndarray) -> np.ndarray:
    """Solve A x = b with a direct solver.

    Sparse matrices go through spsolve, dense ones through LAPACK with the
    reciprocal condition estimate checked. Singular systems raise SingularSystem.
    """
    b = np.asarray(b, dtype=float)
    with warnings.catch_warnings():
        warnings.simplefilter("error", la.LinAlgWarning)
        warnings.simplefilter("error", spla.MatrixRankWarning)
        try:
            if sp.issparse(A):
                x = spla.spsolve(A.tocsc(), b)
            else:
                x = la.solve(np.asarray(A, dtype=float), b)
        except (la.LinAlgError, la.LinAlgWarning, spla.MatrixRankWarning, RuntimeError) as e:
            log.error("Linear solve failed: %s", e)
            raise SingularSystem("assembled system is singular or ill-conditioned",
                                 size=b.shape[0], reason=str(e)) from e
    x = np.asarray(x, dtype=float).ravel()
    if not np.all(np.isfinite(x)):
        raise SingularSystem("solution contains non-finite values", size=b.shape[0])
    return x


def is_symmetric(K: sp.spmatrix | np.ndarray, rtol: float = 1e-10) -> bool:
    """Symmetry check relative to the largest entry."""
    if sp.issparse(K):
        diff = abs(K - K.T).max()
        scale = abs(K).max()
    else:
        diff = np.max(np.abs(K - K.T))
        scale = np.max(np.abs(K))
    return bool(diff <= rtol * max(scale, 1e-300))
