"""
Global configuration for the Poseidon specification.

This module contains environment-specific settings that apply across all subspecs.
"""

import os

_raw_primality_rounds = os.environ.get("POSEIDON_PRIMALITY_ROUNDS", "32").strip()

if not _raw_primality_rounds.isdigit() or int(_raw_primality_rounds) < 1:
    raise ValueError(
        "Invalid POSEIDON_PRIMALITY_ROUNDS environment variable: "
        f"'{_raw_primality_rounds}'. Expected a positive integer."
    )

PRIMALITY_ROUNDS: int = int(_raw_primality_rounds)
"""
Number of seeded Miller-Rabin witnesses used to vet a modulus.

Checked on top of a fixed set of small prime witnesses. Defaults to 32.
"""
