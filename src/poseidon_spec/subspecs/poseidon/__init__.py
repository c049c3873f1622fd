"""Specification for the Poseidon permutation."""

from .constants import MDS_MATRIX, PRIME, ROUND_CONSTANTS, ROUNDS_F, ROUNDS_P, WIDTH
from .grain import GrainLFSR, PoseidonParameters, generate_parameters
from .permutation import (
    Poseidon,
    PoseidonConfig,
    Round,
    RoundKind,
    round_schedule,
)

__all__ = [
    "Poseidon",
    "PoseidonConfig",
    "Round",
    "RoundKind",
    "round_schedule",
    "GrainLFSR",
    "PoseidonParameters",
    "generate_parameters",
    "PRIME",
    "WIDTH",
    "ROUNDS_F",
    "ROUNDS_P",
    "ROUND_CONSTANTS",
    "MDS_MATRIX",
]
