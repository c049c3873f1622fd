"""Specifications for the prime field backend."""

from .field import DEFAULT_BITS, Fe, Modulus, PrimeFieldArithmetic, is_probable_prime

__all__ = [
    "DEFAULT_BITS",
    "Fe",
    "Modulus",
    "PrimeFieldArithmetic",
    "is_probable_prime",
]
