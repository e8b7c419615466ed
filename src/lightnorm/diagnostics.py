# diagnostics.py
from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, TYPE_CHECKING

import numpy as np
import matplotlib.pyplot as plt

from lightnorm.operators.assemble import CoefficientSet
from lightnorm.operators.multiply import compute_residual

if TYPE_CHECKING:
    from lightnorm.algorithm.pipeline import NormalizationResult


# -----------------------------
# I/O helpers
# -----------------------------

def save_npz(path: Path, **arrays: np.ndarray) -> None:
    """Save compressed .npz (creates parent dirs)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    np.savez_compressed(path, **arrays)


# -----------------------------
# Residual diagnostics
# -----------------------------

def residual_norms(coefficients: CoefficientSet, x: np.ndarray, rhs: np.ndarray) -> Dict[str, float]:
    """
    Common residual diagnostics on the interior (boundary residual is 0 by construction).
    """
    r = compute_residual(coefficients, x, rhs)
    b = compute_residual(coefficients, np.zeros_like(x), rhs)
    bn = float(np.linalg.norm(b))
    rn = float(np.linalg.norm(r))
    return {
        "||r||2": rn,
        "||b||2": bn,
        "||r||2/||b||2": rn / bn if bn > 0 else np.nan,
        "||x||2": float(np.linalg.norm(x)),
        "||r||inf": float(np.max(np.abs(r))) if r.size else 0.0,
    }


# -----------------------------
# Plotting
# -----------------------------

def plot_field(
    field: np.ndarray,
    *,
    title: str = "",
    path: Optional[Path] = None,
    clip_quantile: float | None = None,
    vmin: float | None = None,
    vmax: float | None = None,
    cmap: str | None = "gray",
    show: bool = False,
    close: bool = True,
) -> None:
    """
    Plot a 2D field in image orientation (row 0 at the top).

    Parameters
    ----------
    path:
        If provided, saves the figure to this path (parent dirs created).
    clip_quantile:
        If set (and vmin/vmax are not), clip the colour range to the
        [1 - q, q] quantiles of the field.
    show:
        If True, calls plt.show() so notebooks display inline.
    close:
        If True, closes figure (avoid piling up in long notebook runs).
    """
    Z = np.asarray(field, dtype=np.float64)
    if Z.ndim != 2:
        raise ValueError("field must be 2D (H, W).")

    if vmin is None and vmax is None and clip_quantile is not None:
        vmin = float(np.quantile(Z, 1.0 - clip_quantile))
        vmax = float(np.quantile(Z, clip_quantile))

    fig, ax = plt.subplots()
    im = ax.imshow(Z, origin="upper", vmin=vmin, vmax=vmax, cmap=cmap)
    fig.colorbar(im, ax=ax)
    ax.set_title(title)
    ax.set_xlabel("col")
    ax.set_ylabel("row")
    fig.tight_layout()

    if path is not None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(path, dpi=200)

    if show:
        plt.show()

    if close:
        plt.close(fig)


def plot_decomposition(
    image: np.ndarray,
    result: "NormalizationResult",
    *,
    title: str = "",
    path: Optional[Path] = None,
    show: bool = False,
    close: bool = True,
) -> None:
    """
    Side by side: input image, illumination, reflectance, normalized output.
    """
    panels = [
        ("image", np.asarray(image, dtype=np.float64)),
        ("illumination", result.light),
        ("reflectance", result.reflectance),
        ("output", result.output),
    ]

    fig, axes = plt.subplots(1, len(panels), figsize=(4 * len(panels), 4))
    for ax, (name, Z) in zip(axes, panels):
        im = ax.imshow(Z, origin="upper", cmap="gray")
        fig.colorbar(im, ax=ax, fraction=0.046)
        ax.set_title(name)
        ax.set_axis_off()
    if title:
        fig.suptitle(title)
    fig.tight_layout()

    if path is not None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(path, dpi=200)

    if show:
        plt.show()

    if close:
        plt.close(fig)
