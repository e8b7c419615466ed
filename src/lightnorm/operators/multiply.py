# operators/multiply.py
from __future__ import annotations

import numpy as np

from lightnorm.core.grid import enforce_dirichlet, interior_slices, shifted_interior
from .assemble import CoefficientSet


def apply_operator(coefficients: CoefficientSet, x: np.ndarray) -> np.ndarray:
    """
    y = A x without forming A.

    Same stencil as build_matrix: on interior pixels
        y_p = x_p + lam * sum_k w_k(p) (x_p - x_{p+offset_k}),
    identity on the boundary.
    """
    if x.shape != coefficients.shape:
        raise ValueError(f"x has shape {x.shape}, expected {coefficients.shape}")

    y = np.array(x, dtype=np.float64, copy=True)
    si, sj = interior_slices(x.shape)
    xc = y[si, sj].copy()

    acc = np.zeros_like(xc)
    for k, (dr, dc) in enumerate(coefficients.offsets):
        acc += coefficients.weights[k, si, sj] * (xc - shifted_interior(x, dr, dc))

    y[si, sj] = xc + coefficients.lam * acc
    return y


def compute_residual(coefficients: CoefficientSet, x: np.ndarray, rhs: np.ndarray) -> np.ndarray:
    """
    r = rhs - A x on the interior; 0 on the boundary (error equation has zero BCs).
    """
    if rhs.shape != x.shape:
        raise ValueError(f"rhs has shape {rhs.shape}, expected {x.shape}")
    r = rhs - apply_operator(coefficients, x)
    return enforce_dirichlet(r)
