# algorithm/pipeline.py
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Iterable, List

import numpy as np
from tqdm import tqdm

from lightnorm.core.config import VCycleConfig
from lightnorm.core.errors import InvalidImageError

from .normalize import normalize
from .vcycle import solve_illumination

logger = logging.getLogger(__name__)


@dataclass
class NormalizationResult:
    output: np.ndarray          # display-range image, same shape as the input
    light: np.ndarray           # illumination estimate, boundary = 0
    reflectance: np.ndarray     # image / light before clipping
    rel_residuals: List[float]  # one entry per V-cycle


def as_gray_image(image) -> np.ndarray:
    """
    Accept a (H, W) or (H, W, 1) real image; return (H, W) float64.
    """
    arr = np.asarray(image)

    if arr.ndim == 3:
        if arr.shape[2] != 1:
            raise InvalidImageError(
                f"Non gray level image: {arr.shape[2]} channels, expected 1."
            )
        arr = arr[:, :, 0]
    if arr.ndim != 2:
        raise InvalidImageError(f"Image must be 2D (H, W) or (H, W, 1); got ndim={arr.ndim}")
    if arr.size == 0:
        raise InvalidImageError(f"Image is empty; shape={arr.shape}")
    if arr.dtype == bool or not (np.issubdtype(arr.dtype, np.integer) or np.issubdtype(arr.dtype, np.floating)):
        raise InvalidImageError(f"Image must be real-valued; got dtype={arr.dtype}")

    out = arr.astype(np.float64)
    if not np.all(np.isfinite(out)):
        raise InvalidImageError("Image contains NaN or infinite values.")
    return out


def normalize_illumination(image, cfg: VCycleConfig = VCycleConfig()) -> NormalizationResult:
    """
    Illumination normalization of one gray-level image.

    Input checks, grid-hierarchy checks, V-cycle solve for the illumination,
    then reflectance / clipping / rescale into cfg.out_range.
    """
    I = as_gray_image(image)
    solved = solve_illumination(I, cfg)
    output, R = normalize(I, solved.light, cfg)
    return NormalizationResult(
        output=output,
        light=solved.light,
        reflectance=R,
        rel_residuals=solved.rel_residuals,
    )


def normalize_batch(
    images: Iterable,
    cfg: VCycleConfig = VCycleConfig(),
    *,
    progress: bool = True,
) -> List[NormalizationResult]:
    """
    Normalize every image independently. Each call owns its own fields.
    """
    images = list(images)
    results: List[NormalizationResult] = []
    t0 = time.perf_counter()
    for image in tqdm(images, desc="Normalizing", disable=not progress):
        results.append(normalize_illumination(image, cfg))
    tot = time.perf_counter() - t0
    logger.info(
        "Normalized %d images in %.2fs (n_grids=%d, lam=%g)",
        len(results), tot, cfg.n_grids, cfg.lam,
    )
    return results
