# core/config.py
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import IntEnum
from typing import Tuple

import numpy as np

from .errors import ConfigurationError


SMOOTHERS = ("lexicographic", "red_black")
INITIAL_GUESSES = ("image", "zero")


def _as_int(name: str, value) -> int:
    try:
        f = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be an integer; got {value!r}.") from None
    if not f.is_integer():
        raise ConfigurationError(f"{name} must be an integer; got {value!r}.")
    return int(f)


def _as_float(name: str, value) -> float:
    try:
        f = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be a number; got {value!r}.") from None
    if not np.isfinite(f):
        raise ConfigurationError(f"{name} must be finite; got {value!r}.")
    return f


class DiffusionType(IntEnum):
    """Coupling scheme of the regularizer."""
    ISOTROPIC = 0       # 4 neighbours, unit weights
    ANISOTROPIC = 1     # 4 neighbours, Weber-contrast weights
    ISOTROPIC_8 = 2     # 8 neighbours, diagonal weight 1/2


@dataclass(frozen=True)
class VCycleConfig:
    """
    Parameters of one illumination-normalization run.

    lam:
        weight of the smoothness term in (Id + lam * R) L = I
    n_grids:
        number of grid levels; 1 means a single direct solve
    diffusion:
        coupling scheme (DiffusionType or its integer value)
    smoother:
        "lexicographic" (classic Gauss-Seidel) or "red_black" (4-neighbour stencils only)
    initial_guess:
        start of the first V-cycle: "image" (the image with its border set to 0)
        or "zero"
    pre_sweeps, post_sweeps:
        Gauss-Seidel sweeps before/after the coarse-grid correction
    n_cycles:
        number of V-cycles run in sequence
    light_eps:
        illumination values within this distance of 0 give reflectance 1
    distribution_width:
        reflectance is clipped to mean +- distribution_width * std
    out_range:
        display range of the final output
    max_coarse_unknowns:
        cap on H*W at the coarsest grid (dense LU costs O(n^3))
    rcond_min:
        reciprocal condition estimate below which the coarse system is rejected
    """
    lam: float = 5.0
    n_grids: int = 1
    diffusion: DiffusionType = DiffusionType.ANISOTROPIC
    smoother: str = "lexicographic"
    initial_guess: str = "image"
    pre_sweeps: int = 2
    post_sweeps: int = 2
    n_cycles: int = 1
    light_eps: float = 0.01
    distribution_width: float = 4.0
    out_range: Tuple[float, float] = (0.0, 255.0)
    max_coarse_unknowns: int = 4096
    rcond_min: float = float(np.finfo(np.float64).eps)

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "diffusion", DiffusionType(int(self.diffusion)))
        except (TypeError, ValueError):
            raise ConfigurationError(
                f"Unknown diffusion type {self.diffusion!r}. "
                f"Available: {[int(t) for t in DiffusionType]}"
            ) from None

        for name in ("n_grids", "pre_sweeps", "post_sweeps", "n_cycles", "max_coarse_unknowns"):
            object.__setattr__(self, name, _as_int(name, getattr(self, name)))
        for name in ("lam", "light_eps", "distribution_width", "rcond_min"):
            object.__setattr__(self, name, _as_float(name, getattr(self, name)))
        try:
            lo, hi = self.out_range
        except (TypeError, ValueError):
            raise ConfigurationError(f"out_range must be a (min, max) pair; got {self.out_range!r}.") from None
        object.__setattr__(self, "out_range", (_as_float("out_range", lo), _as_float("out_range", hi)))

        if self.lam <= 0.0:
            raise ConfigurationError("lam must be a finite number > 0.")
        if self.smoother not in SMOOTHERS:
            raise ConfigurationError(f"Unknown smoother: {self.smoother!r}. Available: {SMOOTHERS}")
        if self.smoother == "red_black" and self.diffusion == DiffusionType.ISOTROPIC_8:
            raise ConfigurationError("red_black ordering requires a 4-neighbour diffusion type.")
        if self.initial_guess not in INITIAL_GUESSES:
            raise ConfigurationError(
                f"Unknown initial_guess: {self.initial_guess!r}. Available: {INITIAL_GUESSES}"
            )
        if self.n_grids < 1:
            raise ConfigurationError("n_grids must be >= 1.")
        if self.pre_sweeps < 0 or self.post_sweeps < 0:
            raise ConfigurationError("pre_sweeps and post_sweeps must be >= 0.")
        if self.n_cycles < 1:
            raise ConfigurationError("n_cycles must be >= 1.")
        if self.light_eps < 0.0:
            raise ConfigurationError("light_eps must be >= 0.")
        if self.distribution_width <= 0.0:
            raise ConfigurationError("distribution_width must be > 0.")
        lo, hi = self.out_range
        if not lo < hi:
            raise ConfigurationError(f"out_range must be increasing; got {self.out_range}.")
        if self.max_coarse_unknowns < 1:
            raise ConfigurationError("max_coarse_unknowns must be >= 1.")
        if self.rcond_min < 0.0:
            raise ConfigurationError("rcond_min must be >= 0.")

    def replace(self, **changes) -> "VCycleConfig":
        return dataclasses.replace(self, **changes)
