"""
A minimal Python specification for the Poseidon permutation.

The design is based on the paper "Poseidon: A New Hash Function for
Zero-Knowledge Proof Systems" (https://eprint.iacr.org/2019/458).

Every round is the same three steps:

1.  **AddRoundConstants**: add the next `t` table entries to the state.
2.  **S-box**: raise some words to the power `t`.
3.  **Mix layer**: multiply the state by the MDS matrix.

Only the S-box step differs between round kinds. Full rounds apply it to
every word, partial rounds only to word 0. The schedule is
`R_F / 2` full rounds, then `R_P` partial rounds, then `R_F / 2` full
rounds.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence, Tuple

from pydantic import Field, model_validator

from poseidon_spec.config import PRIMALITY_ROUNDS
from poseidon_spec.types import StrictBaseModel

from ..prime_field import DEFAULT_BITS, Fe, Modulus, is_probable_prime
from .constants import MDS_MATRIX, PRIME, ROUND_CONSTANTS, ROUNDS_F, ROUNDS_P, WIDTH

logger = logging.getLogger(__name__)


class PoseidonConfig(StrictBaseModel):
    """Round structure of a Poseidon instance."""

    width: int = Field(default=WIDTH, gt=0, description="The size of the state (t).")
    rounds_f: int = Field(default=ROUNDS_F, ge=0, description="Total number of 'full' rounds.")
    rounds_p: int = Field(default=ROUNDS_P, ge=0, description="Total number of 'partial' rounds.")

    @model_validator(mode="after")
    def check_full_rounds_even(self) -> "PoseidonConfig":
        """The full rounds are split exactly in half around the partial rounds."""
        if self.rounds_f % 2 != 0:
            raise ValueError("rounds_f must be even.")
        return self

    @property
    def half_rounds_f(self) -> int:
        """Number of full rounds on each side of the partial rounds."""
        return self.rounds_f // 2

    @property
    def num_round_constants(self) -> int:
        """Number of table entries one permutation consumes."""
        return self.width * (self.rounds_f + self.rounds_p)


class RoundKind(Enum):
    """The two kinds of rounds in the Hades design."""

    FULL = "full"
    PARTIAL = "partial"


@dataclass(frozen=True, slots=True)
class Round:
    """One entry of the round schedule."""

    kind: RoundKind
    """Whether this is a full or a partial round."""

    sbox_indices: Tuple[int, ...]
    """State words the S-box is applied to in this round."""


def round_schedule(config: PoseidonConfig) -> List[Round]:
    """
    Lays out the rounds of one permutation in execution order.

    Args:
        config: The round structure.

    Returns:
        `R_F / 2` full rounds, `R_P` partial rounds, then `R_F / 2` full rounds.
    """
    full = Round(kind=RoundKind.FULL, sbox_indices=tuple(range(config.width)))
    partial = Round(kind=RoundKind.PARTIAL, sbox_indices=(0,))
    return (
        [full] * config.half_rounds_f
        + [partial] * config.rounds_p
        + [full] * config.half_rounds_f
    )


class Poseidon:
    """
    A Poseidon permutation bound to a modulus and its parameter tables.

    An instance holds no per-call state: the round-constant cursor lives
    on the stack of each `permute` call. One instance can therefore be
    shared freely between threads, as long as callers do not share a
    state list.
    """

    __slots__ = ("_config", "_modulus", "_round_constants", "_mds_matrix", "_schedule")

    def __init__(
        self,
        config: PoseidonConfig | None = None,
        prime: int = PRIME,
        *,
        round_constants: Sequence[int] = ROUND_CONSTANTS,
        mds_matrix: Sequence[Sequence[int]] = MDS_MATRIX,
        bits: int = DEFAULT_BITS,
    ) -> None:
        """
        Binds the configuration, modulus and tables, validating them up front.

        Only the leading `t * (R_F + R_P)` round constants and the top-left
        `t x t` block of the matrix are used; larger tables are accepted.

        Args:
            config: The round structure. Defaults to the x5_255_5 instance.
            prime: The field modulus. Must be prime.
            round_constants: Flat table of raw integer constants.
            mds_matrix: Square table of raw integer matrix entries.
            bits: Bit width of the field backend.

        Raises:
            FieldArithmeticError: If the modulus cannot be bound to the backend.
            ValueError: If the modulus is composite or a table is too small.
        """
        config = config if config is not None else PoseidonConfig()
        self._config = config
        self._modulus = Modulus.from_int(prime, bits)

        if not is_probable_prime(prime, PRIMALITY_ROUNDS):
            raise ValueError(f"Modulus {prime:#x} is not prime.")

        width = config.width
        if len(round_constants) < config.num_round_constants:
            raise ValueError(
                f"Round constant table has {len(round_constants)} entries, "
                f"{config.num_round_constants} are required."
            )
        if len(mds_matrix) < width or any(len(row) < width for row in mds_matrix[:width]):
            raise ValueError(f"MDS matrix must be at least {width} x {width}.")

        self._round_constants = tuple(round_constants)
        self._mds_matrix = tuple(tuple(row) for row in mds_matrix)
        self._schedule = tuple(round_schedule(config))

        logger.debug(
            "Initialized Poseidon: t=%d, R_F=%d, R_P=%d, %d-bit modulus",
            width,
            config.rounds_f,
            config.rounds_p,
            prime.bit_length(),
        )

    @property
    def config(self) -> PoseidonConfig:
        """The round structure."""
        return self._config

    @property
    def modulus(self) -> Modulus:
        """The field backend all arithmetic goes through."""
        return self._modulus

    @property
    def round_constants(self) -> Tuple[int, ...]:
        """The raw round-constant table, in consumption order."""
        return self._round_constants

    @property
    def mds_matrix(self) -> Tuple[Tuple[int, ...], ...]:
        """The raw MDS matrix, row-major."""
        return self._mds_matrix

    @property
    def schedule(self) -> Tuple[Round, ...]:
        """The rounds of one permutation, in execution order."""
        return self._schedule

    def add_round_constants(self, state: List[Fe], cursor: int) -> int:
        """
        Adds the next `t` round constants to the state, in place.

        Word `i` receives the table entry at `cursor + i`.

        Args:
            state: The current state, mutated in place.
            cursor: Index of the first unused round constant.

        Returns:
            The advanced cursor, `cursor + t`.
        """
        modulus = self.modulus
        for i in range(self.config.width):
            constant = modulus.fe(self.round_constants[cursor + i])
            state[i] = modulus.add(state[i], constant)
        return cursor + self.config.width

    def sbox(self, state: List[Fe], indices: Sequence[int]) -> None:
        """
        Applies the S-box `x -> x^t` to the selected words, in place.

        Args:
            state: The current state, mutated in place.
            indices: Positions of the words to substitute.
        """
        exponent = self.config.width
        for i in indices:
            state[i] = self.modulus.pow(state[i], exponent)

    def mix_layer(self, state: List[Fe]) -> None:
        """
        Replaces the state with `MDS * state`.

        Every output word is computed from the pre-mix state before any of
        them is written back.

        Args:
            state: The current state, replaced in place.
        """
        modulus = self.modulus
        width = self.config.width

        new_state = []
        for i in range(width):
            acc = modulus.zero()
            for j in range(width):
                entry = modulus.fe(self.mds_matrix[i][j])
                acc = modulus.add(acc, modulus.mul(entry, state[j]))
            new_state.append(acc)

        state[:] = new_state

    def permute(self, state: List[Fe]) -> List[Fe]:
        """
        Performs the full Poseidon permutation on the given state.

        The caller's list is transformed in place and handed back; the input
        values are not preserved.

        Args:
            state: A list of exactly `t` field elements.

        Returns:
            The same list, holding the permuted state.

        Raises:
            ValueError: If the state does not hold exactly `t` words.
            FieldArithmeticError: If a table entry cannot be lifted into the field.
        """
        if len(state) != self.config.width:
            raise ValueError(f"Input state must have length {self.config.width}")

        # The cursor runs through all three phases without being reset.
        cursor = 0
        for rnd in self.schedule:
            cursor = self.add_round_constants(state, cursor)
            self.sbox(state, rnd.sbox_indices)
            self.mix_layer(state)

        return state

    def permute_ints(self, values: Sequence[int]) -> List[int]:
        """
        Permutes raw integers, lifting them into the field first.

        Args:
            values: `t` integers in `[0, p)`.

        Returns:
            The canonical integer values of the permuted state.
        """
        state = [self.modulus.fe(value) for value in values]
        return [int(word) for word in self.permute(state)]
