"""
Deterministic generation of Poseidon round constants and MDS matrices.

The Poseidon paper (https://eprint.iacr.org/2019/458, Appendix F) derives
every instance's parameters from a Grain LFSR in self-shrinking mode. The
LFSR is seeded with an encoding of the instance itself, so the tables are
fixed by the choice of field, S-box, width and round numbers alone.

For a prime field the procedure is:

1.  **Round constants**: `t * (R_F + R_P)` values, each drawn as `n` bits
    (n = bit length of p) and rejected while `>= p`.
2.  **MDS matrix**: a Cauchy matrix `M[i][j] = 1 / (x_i + y_j)` built
    from `2t` further draws reduced mod p, redrawn until all of them are
    distinct and no denominator vanishes.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import List, Tuple

from pydantic import Field, model_validator

from poseidon_spec.types import StrictBaseModel

logger = logging.getLogger(__name__)

FIELD_PRIME: int = 1
"""Field tag for GF(p) in the LFSR seed (0 would be GF(2^n))."""

SBOX_POWER: int = 0
"""S-box tag for x -> x^alpha in the LFSR seed (1 would be x -> x^-1)."""

STATE_BITS: int = 80
"""Size of the Grain LFSR state."""

WARMUP_CLOCKS: int = 160
"""Number of output bits discarded right after seeding."""


def _to_bits(value: int, width: int) -> List[int]:
    """Big-endian bit decomposition of `value`, zero-padded to `width`."""
    if value >= 1 << width:
        raise ValueError(f"{value} does not fit in {width} bits of the LFSR seed")
    return [(value >> (width - 1 - i)) & 1 for i in range(width)]


class GrainLFSR:
    """
    The Grain LFSR used to sample Poseidon parameters.

    The 80-bit state is kept in a single integer whose bit `i` is the i-th
    oldest bit of the register, so one clock is a shift plus an xor of the
    taps.
    """

    def __init__(
        self,
        field: int,
        sbox: int,
        field_size: int,
        width: int,
        rounds_f: int,
        rounds_p: int,
    ) -> None:
        """
        Seeds the register with the instance encoding and warms it up.

        Args:
            field: Field tag (`FIELD_PRIME` for GF(p)).
            sbox: S-box tag (`SBOX_POWER` for x^alpha).
            field_size: Bit length `n` of the field elements.
            width: State width `t`.
            rounds_f: Number of full rounds.
            rounds_p: Number of partial rounds.
        """
        seed = (
            _to_bits(field, 2)
            + _to_bits(sbox, 4)
            + _to_bits(field_size, 12)
            + _to_bits(width, 12)
            + _to_bits(rounds_f, 10)
            + _to_bits(rounds_p, 10)
            + [1] * 30
        )
        assert len(seed) == STATE_BITS

        self._state = 0
        for i, bit in enumerate(seed):
            self._state |= bit << i

        for _ in range(WARMUP_CLOCKS):
            self._clock()

    def _clock(self) -> int:
        """Advances the register by one step and returns the new bit."""
        state = self._state
        # Taps 62, 51, 38, 23, 13 and 0, counted from the oldest bit.
        new_bit = (
            (state >> 62) ^ (state >> 51) ^ (state >> 38) ^ (state >> 23) ^ (state >> 13) ^ state
        ) & 1
        self._state = (state >> 1) | (new_bit << (STATE_BITS - 1))
        return new_bit

    def next_bit(self) -> int:
        """
        Returns the next bit of the self-shrinking output stream.

        Bits are clocked in pairs; the second bit of a pair is emitted
        only when the first one is set.
        """
        while True:
            select = self._clock()
            candidate = self._clock()
            if select == 1:
                return candidate

    def random_bits(self, num_bits: int) -> int:
        """Reads `num_bits` output bits as a big-endian integer."""
        value = 0
        for _ in range(num_bits):
            value = (value << 1) | self.next_bit()
        return value


def generate_round_constants(lfsr: GrainLFSR, prime: int, count: int) -> List[int]:
    """
    Samples round constants uniformly below `prime` by rejection.

    Args:
        lfsr: The seeded generator.
        prime: The field modulus.
        count: Number of constants to draw.

    Returns:
        The constants, in consumption order.
    """
    field_size = prime.bit_length()
    constants = []
    for _ in range(count):
        value = lfsr.random_bits(field_size)
        while value >= prime:
            value = lfsr.random_bits(field_size)
        constants.append(value)
    return constants


def generate_mds_matrix(lfsr: GrainLFSR, prime: int, width: int) -> List[List[int]]:
    """
    Samples a `width x width` Cauchy matrix over GF(prime).

    Every square submatrix of a Cauchy matrix with distinct `x_i`, distinct
    `y_j` and non-zero `x_i + y_j` is invertible, which is exactly the MDS
    property.

    Args:
        lfsr: The generator, positioned after the round constants.
        prime: The field modulus.
        width: Dimension of the matrix.

    Returns:
        The matrix as a list of rows.
    """
    field_size = prime.bit_length()
    while True:
        samples = [lfsr.random_bits(field_size) % prime for _ in range(2 * width)]
        while len(set(samples)) != len(samples):
            samples = [lfsr.random_bits(field_size) % prime for _ in range(2 * width)]

        xs, ys = samples[:width], samples[width:]
        if any((x + y) % prime == 0 for x in xs for y in ys):
            continue

        return [[pow(x + y, prime - 2, prime) for y in ys] for x in xs]


class PoseidonParameters(StrictBaseModel):
    """The static tables of one Poseidon instance."""

    prime: int = Field(ge=3, description="The field modulus p.")
    width: int = Field(gt=0, description="The size of the state (t).")
    rounds_f: int = Field(ge=0, description="Total number of 'full' rounds.")
    rounds_p: int = Field(ge=0, description="Total number of 'partial' rounds.")
    round_constants: Tuple[int, ...] = Field(
        description="Flat list of constants, consumed one per state word per round."
    )
    mds_matrix: Tuple[Tuple[int, ...], ...] = Field(
        description="The t x t linear layer matrix, row-major."
    )

    @model_validator(mode="after")
    def check_lengths(self) -> "PoseidonParameters":
        """Ensures table sizes match the configuration."""
        expected_constants = self.width * (self.rounds_f + self.rounds_p)
        if len(self.round_constants) != expected_constants:
            raise ValueError("Incorrect number of round constants provided.")

        if len(self.mds_matrix) != self.width or any(
            len(row) != self.width for row in self.mds_matrix
        ):
            raise ValueError("MDS matrix must be width x width.")

        return self


@lru_cache(maxsize=None)
def generate_parameters(
    prime: int, width: int, rounds_f: int, rounds_p: int
) -> PoseidonParameters:
    """
    Derives the round constants and MDS matrix of a GF(p) x^alpha instance.

    Both tables come from one LFSR stream: constants first, then the
    matrix. Results are cached per argument tuple.

    Args:
        prime: The field modulus p.
        width: The state width t.
        rounds_f: Number of full rounds R_F.
        rounds_p: Number of partial rounds R_P.

    Returns:
        The generated parameter tables.
    """
    logger.debug(
        "Generating Poseidon parameters for n=%d, t=%d, R_F=%d, R_P=%d",
        prime.bit_length(),
        width,
        rounds_f,
        rounds_p,
    )

    lfsr = GrainLFSR(
        field=FIELD_PRIME,
        sbox=SBOX_POWER,
        field_size=prime.bit_length(),
        width=width,
        rounds_f=rounds_f,
        rounds_p=rounds_p,
    )
    round_constants = generate_round_constants(lfsr, prime, width * (rounds_f + rounds_p))
    mds_matrix = generate_mds_matrix(lfsr, prime, width)

    return PoseidonParameters(
        prime=prime,
        width=width,
        rounds_f=rounds_f,
        rounds_p=rounds_p,
        round_constants=tuple(round_constants),
        mds_matrix=tuple(tuple(row) for row in mds_matrix),
    )
