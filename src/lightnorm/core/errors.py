# core/errors.py
from __future__ import annotations

from typing import Optional


class LightnormError(Exception):
    """Base class for every error raised by lightnorm."""


class ConfigurationError(LightnormError, ValueError):
    """A solver parameter is out of range or inconsistent with the input."""


class GridDimensionError(ConfigurationError):
    """Image dimensions cannot be halved down to the coarsest grid."""


class InvalidImageError(LightnormError, ValueError):
    """Input is not a single-channel 2D real image."""


class SingularSystemError(LightnormError, ArithmeticError):
    """
    The coarsest-grid system could not be factorized.

    `info` follows the LAPACK getrf convention: the 1-based index of the first
    zero pivot, or 0 when the failure is an ill-conditioning estimate.
    """

    def __init__(self, message: str, info: int = 0, rcond: Optional[float] = None) -> None:
        super().__init__(message)
        self.info = int(info)
        self.rcond = rcond
