# core/grid.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from .errors import GridDimensionError


def idx(i: int, j: int, width: int) -> int:
    """Row-major pixel index used by the dense system matrix."""
    return i * width + j


@dataclass(frozen=True)
class GridLevel:
    """
    One level of the coarsening hierarchy.

    level 0 is the input resolution; level k has both dimensions divided by 2**k.
    """
    level: int
    height: int
    width: int

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.height, self.width)

    @property
    def n_unknowns(self) -> int:
        return self.height * self.width

    def coarser(self) -> "GridLevel":
        if self.height % 2 or self.width % 2:
            raise GridDimensionError(
                f"Level {self.level} grid {self.shape} cannot be halved."
            )
        return GridLevel(self.level + 1, self.height // 2, self.width // 2)


def check_grid_hierarchy(shape: Tuple[int, int], n_grids: int) -> List[GridLevel]:
    """
    Validate that `shape` can be halved n_grids-1 times and return all levels,
    finest first.
    """
    if len(shape) != 2:
        raise GridDimensionError(f"Expected a 2D shape; got {shape}.")
    height, width = int(shape[0]), int(shape[1])
    if height < 1 or width < 1:
        raise GridDimensionError(f"Empty grid {shape}.")

    factor = 2 ** (int(n_grids) - 1)
    if height % factor or width % factor:
        raise GridDimensionError(
            f"Image of size {height}x{width} is not divisible by {factor} "
            f"(required for n_grids={n_grids}); crop or pad the image, or lower n_grids."
        )

    levels = [GridLevel(0, height, width)]
    for _ in range(int(n_grids) - 1):
        levels.append(levels[-1].coarser())
    return levels


def boundary_mask(shape: Tuple[int, int]) -> np.ndarray:
    """True on the first/last row and first/last column."""
    mask = np.zeros(shape, dtype=bool)
    mask[0, :] = True
    mask[-1, :] = True
    mask[:, 0] = True
    mask[:, -1] = True
    return mask


def interior_slices(shape: Tuple[int, int]) -> Tuple[slice, slice]:
    return slice(1, shape[0] - 1), slice(1, shape[1] - 1)


def enforce_dirichlet(u: np.ndarray, value: float = 0.0) -> np.ndarray:
    """Set boundary pixels of u to `value` in place and return u."""
    u[0, :] = value
    u[-1, :] = value
    u[:, 0] = value
    u[:, -1] = value
    return u


def shifted_interior(a: np.ndarray, dr: int, dc: int) -> np.ndarray:
    """
    View of `a` aligned with its interior and shifted by (dr, dc), |dr|, |dc| <= 1.

    shifted_interior(a, dr, dc)[i-1, j-1] == a[i+dr, j+dc] for every interior (i, j).
    """
    h, w = a.shape
    return a[1 + dr:h - 1 + dr, 1 + dc:w - 1 + dc]
