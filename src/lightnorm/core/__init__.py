"""
Core: configuration, grid hierarchy bookkeeping and error types.
"""

from .config import DiffusionType, VCycleConfig
from .errors import (
    LightnormError,
    ConfigurationError,
    GridDimensionError,
    InvalidImageError,
    SingularSystemError,
)
from .grid import (
    GridLevel,
    boundary_mask,
    check_grid_hierarchy,
    enforce_dirichlet,
    idx,
    interior_slices,
    shifted_interior,
)

__all__ = [
    "DiffusionType",
    "VCycleConfig",
    "LightnormError",
    "ConfigurationError",
    "GridDimensionError",
    "InvalidImageError",
    "SingularSystemError",
    "GridLevel",
    "boundary_mask",
    "check_grid_hierarchy",
    "enforce_dirichlet",
    "idx",
    "interior_slices",
    "shifted_interior",
]
