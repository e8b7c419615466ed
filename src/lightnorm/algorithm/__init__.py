"""
Algorithms: transfer operators, the multigrid V-cycle, reflectance
post-processing and the image-level entry points.
"""

from .transfer import coarse_positions, prolong_bilinear, restrict_full_weighting

from .vcycle import IlluminationSolve, coarse_solve, mgv, solve_illumination

from .normalize import cut_extremum, normalize, reflectance, rescale_gray, to_uint8

from .pipeline import NormalizationResult, as_gray_image, normalize_batch, normalize_illumination

__all__ = [
    # transfer.py
    "coarse_positions",
    "prolong_bilinear",
    "restrict_full_weighting",
    # vcycle.py
    "IlluminationSolve",
    "coarse_solve",
    "mgv",
    "solve_illumination",
    # normalize.py
    "cut_extremum",
    "normalize",
    "reflectance",
    "rescale_gray",
    "to_uint8",
    # pipeline.py
    "NormalizationResult",
    "as_gray_image",
    "normalize_batch",
    "normalize_illumination",
]
