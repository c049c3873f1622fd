"""
Parameter tables of the `poseidonperm_x5_255_5` instance.

This is the Poseidon reference instance over the BLS12-381 scalar field
with a state of five words, eight full rounds and sixty partial rounds.
Its S-box exponent is the width, 5.

The tables are derived from the Grain LFSR on first import rather than
being pasted in; see `grain.generate_parameters`.
"""

from typing import Tuple

from .grain import generate_parameters

PRIME: int = 0x73EDA753299D7D483339D80809A1D80553BDA402FFFE5BFEFFFFFFFF00000001
"""The BLS12-381 scalar field modulus (255 bits)."""

WIDTH: int = 5
"""The state width t."""

ROUNDS_F: int = 8
"""The number of full rounds R_F, split evenly around the partial rounds."""

ROUNDS_P: int = 60
"""The number of partial rounds R_P."""

_PARAMETERS = generate_parameters(PRIME, WIDTH, ROUNDS_F, ROUNDS_P)

ROUND_CONSTANTS: Tuple[int, ...] = _PARAMETERS.round_constants
"""The `t * (R_F + R_P) = 340` round constants, in consumption order."""

MDS_MATRIX: Tuple[Tuple[int, ...], ...] = _PARAMETERS.mds_matrix
"""The 5 x 5 Cauchy MDS matrix."""
