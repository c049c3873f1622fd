"""
Core definition of a fixed-width prime field backend.

Unlike a field with a hard-coded prime, the modulus here is a value bound
at runtime. All arithmetic goes through the `Modulus`, which keeps every
result in canonical reduced form.
"""

import random
from typing import Protocol, Self

from pydantic import Field, model_validator

from poseidon_spec.types import FieldArithmeticError, StrictBaseModel

DEFAULT_BITS: int = 256
"""The bit width of the fixed-size integers used by the backend."""

_SMALL_PRIMES: tuple[int, ...] = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37)
"""
Fixed Miller-Rabin witnesses.

Together they decide primality exactly for every n < 3.3 * 10^24.
"""


class Fe(StrictBaseModel):
    """An element of a prime field, stored in canonical form."""

    value: int = Field(ge=0, description="Canonical representative in [0, p)")

    def __int__(self) -> int:
        """The canonical integer representative."""
        return self.value

    def hex(self, width: int = 0) -> str:
        """
        Render the element as a `0x`-prefixed hex string.

        Args:
            width: Minimum number of hex digits, zero-padded.

        Returns:
            The hex rendering of the canonical value.
        """
        return "0x" + format(self.value, "x").zfill(width)


class PrimeFieldArithmetic(Protocol):
    """
    The capability interface the permutation needs from a field backend.

    Any object offering these four operations can drive the round
    schedule, whatever its modulus size or internal representation.
    """

    def fe(self, value: int) -> Fe:
        """Lift a raw integer into a canonical field element."""
        ...

    def add(self, a: Fe, b: Fe) -> Fe:
        """Field addition."""
        ...

    def mul(self, a: Fe, b: Fe) -> Fe:
        """Field multiplication."""
        ...

    def pow(self, base: Fe, exponent: int | Fe) -> Fe:
        """Field exponentiation."""
        ...


class Modulus(StrictBaseModel):
    """
    An odd modulus bound to a fixed bit width.

    Use `Modulus.from_int` to construct one; it reports representation
    failures as `FieldArithmeticError`.
    """

    bits: int = Field(gt=1, description="Bit width of the backend integers.")
    value: int = Field(ge=3, description="The modulus p.")

    @model_validator(mode="after")
    def check_representable(self) -> Self:
        """Ensures the modulus is odd and fits the configured width."""
        if self.value.bit_length() > self.bits:
            raise ValueError(f"Modulus does not fit in {self.bits} bits.")
        if self.value % 2 == 0:
            raise ValueError("Modulus must be odd.")
        return self

    @classmethod
    def from_int(cls, value: int, bits: int = DEFAULT_BITS) -> Self:
        """
        Bind a modulus to a fixed-width backend.

        Args:
            value: The (prime) modulus.
            bits: The bit width of the backend integers.

        Returns:
            The bound modulus.

        Raises:
            FieldArithmeticError: If the value is wider than `bits`,
                smaller than 3, or even.
        """
        if value.bit_length() > bits:
            raise FieldArithmeticError(value, bits=bits, detail="modulus overflows the bit width")
        if value < 3:
            raise FieldArithmeticError(value, bits=bits, detail="modulus must be at least 3")
        if value % 2 == 0:
            raise FieldArithmeticError(value, bits=bits, detail="modulus must be odd")
        return cls(bits=bits, value=value)

    @property
    def hex_digits(self) -> int:
        """Number of hex digits needed for any canonical element."""
        return (self.value.bit_length() + 3) // 4

    def fe(self, value: int) -> Fe:
        """
        Lift a raw integer into a canonical field element.

        The integer must already be canonical, i.e. in `[0, p)`.

        Raises:
            FieldArithmeticError: If the integer is negative, wider than `bits`,
                or not below p.
        """
        if value < 0:
            raise FieldArithmeticError(value, bits=self.bits, detail="negative integer")
        if value.bit_length() > self.bits:
            raise FieldArithmeticError(
                value, bits=self.bits, detail="integer overflows the bit width"
            )
        if value >= self.value:
            raise FieldArithmeticError(value, bits=self.bits, detail="non-canonical value")
        return Fe(value=value)

    def zero(self) -> Fe:
        """The additive identity."""
        return Fe(value=0)

    def add(self, a: Fe, b: Fe) -> Fe:
        """Field addition."""
        return Fe(value=(a.value + b.value) % self.value)

    def mul(self, a: Fe, b: Fe) -> Fe:
        """Field multiplication."""
        return Fe(value=(a.value * b.value) % self.value)

    def pow(self, base: Fe, exponent: int | Fe) -> Fe:
        """
        Field exponentiation.

        The exponent is taken as a plain non-negative integer; an `Fe`
        exponent contributes its canonical value.
        """
        return Fe(value=pow(base.value, int(exponent), self.value))

    def inverse(self, a: Fe) -> Fe:
        """Computes the multiplicative inverse."""
        if a.value == 0:
            raise ZeroDivisionError("Cannot invert the zero element.")
        # a^(p-2) is the multiplicative inverse of a when p is prime
        return self.pow(a, self.value - 2)


def is_probable_prime(n: int, rounds: int) -> bool:
    """
    Miller-Rabin primality test.

    The fixed small witnesses settle every n below 3.3 * 10^24 exactly.
    Larger n are additionally tested against `rounds` witnesses drawn from
    a generator seeded by n itself, so the verdict is reproducible.

    Args:
        n: The candidate.
        rounds: Number of extra seeded witnesses.

    Returns:
        False if n is certainly composite, True if n is (probably) prime.
    """
    if n < 2:
        return False
    for p in _SMALL_PRIMES:
        if n % p == 0:
            return n == p

    # Write n - 1 = d * 2^s with d odd.
    d, s = n - 1, 0
    while d % 2 == 0:
        d //= 2
        s += 1

    def is_witness(a: int) -> bool:
        x = pow(a, d, n)
        if x in (1, n - 1):
            return False
        for _ in range(s - 1):
            x = x * x % n
            if x == n - 1:
                return False
        return True

    if any(is_witness(a) for a in _SMALL_PRIMES):
        return False

    rng = random.Random(n)
    return not any(is_witness(rng.randrange(2, n - 1)) for _ in range(rounds))
