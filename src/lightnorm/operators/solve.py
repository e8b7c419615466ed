# operators/solve.py
from __future__ import annotations

import logging
from typing import Optional

import numpy as np
import scipy.linalg as sla
from scipy.linalg import lapack

from lightnorm.core.errors import ConfigurationError, SingularSystemError

logger = logging.getLogger(__name__)


def check_coarse_size(n_unknowns: int, max_unknowns: int) -> None:
    """Reject coarsest grids too large for a dense O(n^3) factorization."""
    if int(n_unknowns) > int(max_unknowns):
        raise ConfigurationError(
            f"Coarsest grid has {n_unknowns} unknowns, above max_coarse_unknowns="
            f"{max_unknowns}; increase n_grids."
        )


def solve_dense(A: np.ndarray, b: np.ndarray, rcond_min: Optional[float] = None) -> np.ndarray:
    """
    Solve A x = b by dense LU factorization with partial pivoting.

    Raises SingularSystemError if a pivot is exactly zero (info = its 1-based
    index, as LAPACK getrf reports it) or, when rcond_min is given, if the
    reciprocal 1-norm condition estimate falls below it.
    """
    A = np.asarray(A, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise ValueError(f"A must be square 2D; got shape {A.shape}")
    if b.shape[0] != A.shape[0]:
        raise ValueError(f"b has leading size {b.shape[0]}, expected {A.shape[0]}")

    lu, piv, info = lapack.dgetrf(A)
    if info < 0:
        raise ValueError(f"dgetrf: illegal value in argument {-info}")
    if info > 0:
        raise SingularSystemError(
            f"LU factorization failed: U[{info - 1},{info - 1}] is exactly zero "
            f"(dgetrf info={info}).",
            info=info,
        )

    if rcond_min is not None:
        anorm = float(np.linalg.norm(A, 1))
        rcond, cinfo = lapack.dgecon(lu, anorm, norm="1")
        if cinfo == 0 and rcond < float(rcond_min):
            raise SingularSystemError(
                f"Coarse system is ill-conditioned: rcond={rcond:.3e} < {float(rcond_min):.3e}.",
                info=0,
                rcond=float(rcond),
            )
        logger.debug("Dense solve n=%d rcond=%.3e", A.shape[0], rcond)

    return sla.lu_solve((lu, piv), b, check_finite=False)

