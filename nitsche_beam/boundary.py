from __future__ import annotations

import logging

import numpy as np
import scipy.sparse as sp

from .errors import InvalidConfiguration

log = logging.getLogger(__name__)


def apply_dirichlet(K: sp.spmatrix | np.ndarray, f: np.ndarray, dofs, values
                    ) -> tuple[sp.spmatrix | np.ndarray, np.ndarray]:
    """Impose u[dofs] = values by row/column elimination with a scaled diagonal.

    The load is corrected by the fixed columns, the fixed rows and columns are
    zeroed and the diagonal is set to mean(diag(K)) so the conditioning of K
    is kept. Returns new (K, f); the inputs are left untouched.
    """
    dofs = np.asarray(dofs, dtype=int).ravel()
    values = np.asarray(values, dtype=float).ravel()
    if dofs.shape != values.shape:
        raise InvalidConfiguration("dofs and prescribed values differ in length",
                                   dofs=dofs.size, values=values.size)
    if np.unique(dofs).size != dofs.size:
        raise InvalidConfiguration("duplicate prescribed dofs")
    ndof = f.shape[0]
    if dofs.size and (dofs.min() < 0 or dofs.max() >= ndof):
        raise InvalidConfiguration("prescribed dof out of range", ndof=ndof)

    bcwt = float(np.mean(K.diagonal()))
    free = np.ones(ndof, dtype=bool)
    free[dofs] = False

    if sp.issparse(K):
        K = K.tocsr()
        f = f - np.asarray(K[:, dofs] @ values).ravel()
        keep = sp.diags(free.astype(float))
        K = (keep @ K @ keep + sp.diags(np.where(free, 0.0, bcwt))).tocsr()
    else:
        f = f - K[:, dofs] @ values
        K = np.array(K, dtype=float, copy=True)
        K[dofs, :] = 0.0
        K[:, dofs] = 0.0
        K[dofs, dofs] = bcwt
    f[dofs] = bcwt * values
    log.debug("imposed %d prescribed dofs (bcwt=%.6g)", dofs.size, bcwt)
    return K, f
