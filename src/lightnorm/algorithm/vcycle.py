# algorithm/vcycle.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

import numpy as np

from lightnorm.core.config import VCycleConfig
from lightnorm.core.grid import check_grid_hierarchy, enforce_dirichlet
from lightnorm.operators.assemble import CoefficientSet, build_coefficients, build_matrix
from lightnorm.operators.multiply import compute_residual
from lightnorm.operators.smooth import gauss_seidel
from lightnorm.operators.solve import check_coarse_size, solve_dense

from .transfer import prolong_bilinear, restrict_full_weighting

logger = logging.getLogger(__name__)


@dataclass
class IlluminationSolve:
    light: np.ndarray
    rel_residuals: List[float] = field(default_factory=list)


def coarse_solve(rhs: np.ndarray, coefficients: CoefficientSet, cfg: VCycleConfig) -> np.ndarray:
    """
    Direct solve on the coarsest grid with homogeneous Dirichlet boundary.
    """
    height, width = rhs.shape
    check_coarse_size(height * width, cfg.max_coarse_unknowns)

    A = build_matrix(height, width, coefficients)
    b = enforce_dirichlet(np.array(rhs, dtype=np.float64, copy=True))
    x = solve_dense(A, b.reshape(-1), rcond_min=cfg.rcond_min).reshape(height, width)

    # identity rows already give 0; pin it exactly
    return enforce_dirichlet(x)


def mgv(
    guess: np.ndarray,
    rhs: np.ndarray,
    lam: float,
    level: int,
    cfg: VCycleConfig,
) -> np.ndarray:
    """
    One multigrid V-cycle for (Id + lam * R) x = rhs, starting at `level`.

    The grid size is read from `rhs` on every call and halved for the recursive
    call, so nothing is shared between frames. The coefficients are rebuilt
    from `rhs` here and used for the smoother, the residual and (at the
    coarsest level) the dense matrix alike.

    Returns a new field of rhs.shape with boundary pixels equal to 0.
    """
    if guess.shape != rhs.shape:
        raise ValueError(f"guess has shape {guess.shape}, expected {rhs.shape}")
    height, width = rhs.shape

    coeffs = build_coefficients(rhs, lam, cfg.diffusion)

    # coarsest grid: direct solve
    if level == cfg.n_grids - 1:
        logger.debug("Level %d: direct solve on %dx%d grid", level, height, width)
        return coarse_solve(rhs, coeffs, cfg)

    logger.debug("Level %d: smoothing on %dx%d grid", level, height, width)

    # 1. Pre-smooth
    x = gauss_seidel(guess, rhs, coeffs, cfg.pre_sweeps, cfg.smoother)

    # 2. Residual
    r = compute_residual(coeffs, x, rhs)

    # 3. Restrict
    r_c = restrict_full_weighting(r)

    # 4. Recursion (error equation, zero initial guess)
    e_c = mgv(np.zeros_like(r_c), r_c, lam, level + 1, cfg)

    # 5. Prolongate & correct
    x = enforce_dirichlet(x + prolong_bilinear(e_c))

    # 6. Post-smooth
    return gauss_seidel(x, rhs, coeffs, cfg.post_sweeps, cfg.smoother)


def solve_illumination(image: np.ndarray, cfg: VCycleConfig) -> IlluminationSolve:
    """
    Estimate the illumination field of `image` with cfg.n_cycles V-cycles.

    The first cycle starts from the image with its border set to 0
    (cfg.initial_guess="image") or from zeros ("zero").

    The grid hierarchy and the size of the coarsest dense system are checked
    before any relaxation is done.
    """
    b = np.asarray(image, dtype=np.float64)
    levels = check_grid_hierarchy(b.shape, cfg.n_grids)
    check_coarse_size(levels[-1].n_unknowns, cfg.max_coarse_unknowns)

    coeffs = build_coefficients(b, cfg.lam, cfg.diffusion)
    b_norm = float(np.linalg.norm(compute_residual(coeffs, np.zeros_like(b), b)))

    if cfg.initial_guess == "image":
        x = enforce_dirichlet(b.copy())
    else:
        x = np.zeros_like(b)
    out = IlluminationSolve(light=x)
    for k in range(int(cfg.n_cycles)):
        x = mgv(x, b, cfg.lam, 0, cfg)
        r = compute_residual(coeffs, x, b)
        rel = float(np.linalg.norm(r) / b_norm) if b_norm > 0 else 0.0
        out.rel_residuals.append(rel)
        logger.info("V-cycle %d/%d: rel residual %.3e", k + 1, cfg.n_cycles, rel)

    out.light = x
    return out
