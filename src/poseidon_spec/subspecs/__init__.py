"""Subspecifications for the Poseidon Python specification."""

from .poseidon import Poseidon, PoseidonConfig
from .prime_field import Fe, Modulus

__all__ = [
    "Fe",
    "Modulus",
    "Poseidon",
    "PoseidonConfig",
]
