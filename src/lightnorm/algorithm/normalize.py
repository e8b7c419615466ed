# algorithm/normalize.py
from __future__ import annotations

import logging
from typing import Tuple

import numpy as np

from lightnorm.core.config import VCycleConfig
from lightnorm.core.grid import boundary_mask

logger = logging.getLogger(__name__)


def reflectance(image: np.ndarray, light: np.ndarray, eps: float = 0.01) -> np.ndarray:
    """
    R = I / L on interior pixels.

    R is 1 on the border and wherever |L| <= eps.
    """
    if image.shape != light.shape:
        raise ValueError(f"image {image.shape} and light {light.shape} must match")

    I = np.asarray(image, dtype=np.float64)
    L = np.asarray(light, dtype=np.float64)

    near_zero = np.isclose(L, 0.0, rtol=0.0, atol=eps)
    keep_one = near_zero | boundary_mask(L.shape)

    R = np.ones_like(I)
    np.divide(I, L, out=R, where=~keep_one)
    return R


def cut_extremum(data: np.ndarray, distribution_width: float = 4.0) -> np.ndarray:
    """
    Clamp values to [mean - k*std, mean + k*std] (sample std, ddof=1).
    """
    d = np.asarray(data, dtype=np.float64)
    if d.size < 2:
        return d.copy()
    mean = float(np.mean(d))
    std = float(np.std(d, ddof=1))
    k = float(distribution_width)
    return np.clip(d, mean - k * std, mean + k * std)


def rescale_gray(data: np.ndarray, out_min: float = 0.0, out_max: float = 255.0) -> np.ndarray:
    """
    Linear min-max map onto [out_min, out_max]. A flat field maps to out_min.
    """
    d = np.asarray(data, dtype=np.float64)
    lo = float(np.min(d))
    hi = float(np.max(d))
    if hi - lo <= 0.0:
        logger.warning("rescale_gray: flat field (value %.6g), output set to %.6g", lo, out_min)
        return np.full_like(d, out_min)
    out = out_min + (d - lo) * ((out_max - out_min) / (hi - lo))
    return np.clip(out, out_min, out_max)


def normalize(image: np.ndarray, light: np.ndarray, cfg: VCycleConfig = VCycleConfig()) -> Tuple[np.ndarray, np.ndarray]:
    """
    Reflectance, outlier clipping and display rescale, in that order.

    Returns (output, reflectance) where reflectance is before clipping.
    """
    R = reflectance(image, light, eps=cfg.light_eps)
    clipped = cut_extremum(R, cfg.distribution_width)
    out_min, out_max = cfg.out_range
    return rescale_gray(clipped, out_min, out_max), R


def to_uint8(output: np.ndarray, out_range: Tuple[float, float] = (0.0, 255.0)) -> np.ndarray:
    """
    Round a display field to uint8, clipping to out_range (which must lie within [0, 255]).
    """
    lo, hi = float(out_range[0]), float(out_range[1])
    if lo < 0.0 or hi > 255.0 or not lo < hi:
        raise ValueError(f"out_range {out_range} does not fit in uint8")
    return np.clip(np.rint(output), np.ceil(lo), np.floor(hi)).astype(np.uint8)
