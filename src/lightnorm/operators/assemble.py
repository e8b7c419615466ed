# operators/assemble.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from lightnorm.core.config import DiffusionType
from lightnorm.core.grid import enforce_dirichlet, idx, interior_slices, shifted_interior

logger = logging.getLogger(__name__)

# Guards the Weber contrast against division by zero on black pixels.
WEBER_EPS = 1e-6

AXIAL_OFFSETS: Tuple[Tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
DIAGONAL_OFFSETS: Tuple[Tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
DIAGONAL_WEIGHT = 0.5


@dataclass(frozen=True)
class CoefficientSet:
    """
    Stencil of the operator (Id + lam * R) on one grid.

    offsets : K (drow, dcol) neighbour offsets
    weights : (K, height, width) coupling weights, zero on boundary pixels
    lam     : regularization weight
    """
    offsets: Tuple[Tuple[int, int], ...]
    weights: np.ndarray
    lam: float

    @property
    def shape(self) -> Tuple[int, int]:
        return self.weights.shape[1:]

    def diagonal(self) -> np.ndarray:
        """Diagonal of the operator; 1 on boundary pixels."""
        return 1.0 + self.lam * self.weights.sum(axis=0)


def weber_weights(b: np.ndarray, dr: int, dc: int, eps: float = WEBER_EPS) -> np.ndarray:
    """
    Anisotropic coupling between each interior pixel p and its neighbour p + (dr, dc):

        rho = 1 / (1 + |b_p - b_q| / (min(|b_p|, |b_q|) + eps))

    Symmetric in (p, q), in (0, 1], equal to 1 where intensities match.
    """
    si, sj = interior_slices(b.shape)
    bp = b[si, sj]
    bq = shifted_interior(b, dr, dc)
    contrast = np.abs(bp - bq) / (np.minimum(np.abs(bp), np.abs(bq)) + eps)
    return 1.0 / (1.0 + contrast)


def build_coefficients(rhs: np.ndarray, lam: float, diffusion: DiffusionType) -> CoefficientSet:
    """
    Local coupling weights for the regularizer of type `diffusion`.

    Data-dependent types read the right-hand side with its boundary set to the
    Dirichlet value 0, so pixels next to the border decouple from it wherever
    the image is far from 0.
    """
    if rhs.ndim != 2:
        raise ValueError(f"rhs must be 2D; got ndim={rhs.ndim}")
    diffusion = DiffusionType(int(diffusion))

    if diffusion == DiffusionType.ISOTROPIC_8:
        offsets = AXIAL_OFFSETS + DIAGONAL_OFFSETS
    else:
        offsets = AXIAL_OFFSETS

    b = enforce_dirichlet(np.array(rhs, dtype=np.float64, copy=True))
    weights = np.zeros((len(offsets),) + b.shape, dtype=np.float64)
    si, sj = interior_slices(b.shape)

    for k, (dr, dc) in enumerate(offsets):
        if diffusion == DiffusionType.ANISOTROPIC:
            weights[k, si, sj] = weber_weights(b, dr, dc)
        elif dr != 0 and dc != 0:
            weights[k, si, sj] = DIAGONAL_WEIGHT
        else:
            weights[k, si, sj] = 1.0

    return CoefficientSet(offsets=tuple(offsets), weights=weights, lam=float(lam))


def build_matrix(height: int, width: int, coefficients: CoefficientSet) -> np.ndarray:
    """
    Assemble the dense (height*width, height*width) system matrix.

    Interior row p:
        A[p, p] = 1 + lam * sum_k w_k(p)
        A[p, q] = -lam * w_k(p),   q = p + offset_k
    Boundary rows are identity (homogeneous Dirichlet).
    """
    if coefficients.shape != (height, width):
        raise ValueError(
            f"coefficients are for grid {coefficients.shape}, expected {(height, width)}"
        )

    N = height * width
    lam = coefficients.lam
    w = coefficients.weights
    diag = coefficients.diagonal()

    A = np.eye(N, dtype=np.float64)
    for i in range(1, height - 1):
        for j in range(1, width - 1):
            p = idx(i, j, width)
            A[p, p] = diag[i, j]
            for k, (dr, dc) in enumerate(coefficients.offsets):
                A[p, idx(i + dr, j + dc, width)] -= lam * w[k, i, j]

    logger.debug("Assembled dense operator %dx%d for grid %dx%d", N, N, height, width)
    return A
