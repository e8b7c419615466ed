from __future__ import annotations
import numpy as np


def coarse_positions(n_fine: int) -> np.ndarray:
    """
    Fine index of every coarse point along one axis (n_fine even, m = n_fine // 2).

    The first half sits on even fine indices from 0, the second half on odd
    fine indices ending at n_fine - 1, so both coarse boundary points lie on
    the fine boundary. Within each half the
    spacing is 2; the two halves meet with a gap of 3. For even m the layout
    is mirror-symmetric about the centre of the fine axis.
    """
    m = int(n_fine) // 2
    j = np.arange(m)
    half = (m + 1) // 2
    return np.where(j < half, 2 * j, 2 * j + 1)


def interpolation_matrix(n_fine: int) -> np.ndarray:
    """
    (n_fine, m) 1D linear interpolation from the coarse points onto every fine index.
    """
    pos = coarse_positions(n_fine)
    fine = np.arange(int(n_fine))
    eye = np.eye(pos.size)
    P = np.empty((fine.size, pos.size), dtype=np.float64)
    for j in range(pos.size):
        P[:, j] = np.interp(fine, pos, eye[j])
    return P


def restriction_matrix(n_fine: int) -> np.ndarray:
    """
    (m, n_fine) full weighting: transpose of the interpolation, rows scaled to sum to 1.

    Away from the boundary and the midpoint seam a row is (1/4, 1/2, 1/4)
    around its coarse point.
    """
    Pt = interpolation_matrix(n_fine).T
    return Pt / Pt.sum(axis=1, keepdims=True)


def _check_fine(fine: np.ndarray) -> None:
    if fine.ndim != 2:
        raise ValueError(f"fine field must be 2D; got ndim={fine.ndim}")
    h, w = fine.shape
    if h % 2 or w % 2:
        raise ValueError(f"fine grid {fine.shape} must have even dimensions.")


def restrict_full_weighting(fine: np.ndarray) -> np.ndarray:
    """
    Fine -> coarse by full weighting, coarse dims = fine dims / 2.

    coarse[i, j] averages the 3x3 fine neighbourhood around its fine point
    with weights 1/4 (centre), 1/8 (edges), 1/16 (corners); at the grid edge
    and at the midpoint seam the separable weights are renormalized to sum to 1.
    """
    _check_fine(fine)
    Uf = np.asarray(fine, dtype=np.float64)
    h, w = Uf.shape
    return restriction_matrix(h) @ Uf @ restriction_matrix(w).T


def prolong_bilinear(coarse: np.ndarray) -> np.ndarray:
    """
    Coarse -> fine bilinear prolongation, fine dims = coarse dims * 2.

    Coarse values are injected at coarse_positions on both axes, including
    the first and last row/column; every other fine point is a separable
    linear interpolation of its two bracketing coarse points per axis.
    """
    if coarse.ndim != 2:
        raise ValueError(f"coarse field must be 2D; got ndim={coarse.ndim}")
    Uc = np.asarray(coarse, dtype=np.float64)
    h, w = Uc.shape
    return interpolation_matrix(2 * h) @ Uc @ interpolation_matrix(2 * w).T
