"""Reusable type definitions for the Poseidon specification."""

from .base import StrictBaseModel
from .exceptions import FieldArithmeticError, PoseidonError

__all__ = [
    "StrictBaseModel",
    # Exceptions
    "PoseidonError",
    "FieldArithmeticError",
]
