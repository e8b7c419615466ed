"""
Operators: stencil coefficients, dense assembly, matrix-free products,
Gauss-Seidel relaxation and the dense direct solve.

Public API:
- build_coefficients, build_matrix, CoefficientSet
- apply_operator, compute_residual
- gauss_seidel
- solve_dense, check_coarse_size
"""

# Assembly
from .assemble import CoefficientSet, build_coefficients, build_matrix, weber_weights

# Matrix-free products
from .multiply import apply_operator, compute_residual

# Relaxation
from .smooth import gauss_seidel

# Direct solve
from .solve import check_coarse_size, solve_dense

__all__ = [
    # Assembly
    "CoefficientSet",
    "build_coefficients",
    "build_matrix",
    "weber_weights",

    # Products
    "apply_operator",
    "compute_residual",

    # Relaxation
    "gauss_seidel",

    # Solves
    "check_coarse_size",
    "solve_dense",
]
