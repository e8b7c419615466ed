"""
Illumination normalization by a multigrid diffusion solve.

We keep three sibling subpackages:
- core: configuration + grid hierarchy + errors
- operators: stencil coefficients, assembly, matrix-free products, smoother, direct solve
- algorithm: transfer operators, V-cycle, reflectance post-processing
"""

from .core import (
    ConfigurationError,
    DiffusionType,
    GridDimensionError,
    InvalidImageError,
    LightnormError,
    SingularSystemError,
    VCycleConfig,
)
from .algorithm import NormalizationResult, normalize_batch, normalize_illumination

__version__ = "0.1.0"

__all__ = [
    "core",
    "operators",
    "algorithm",
    "ConfigurationError",
    "DiffusionType",
    "GridDimensionError",
    "InvalidImageError",
    "LightnormError",
    "SingularSystemError",
    "VCycleConfig",
    "NormalizationResult",
    "normalize_batch",
    "normalize_illumination",
]
