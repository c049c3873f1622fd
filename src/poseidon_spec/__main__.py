"""
Poseidon permutation CLI entry point.

Permute a state of field elements over the BLS12-381 scalar field and print
the result, one word per line.

Usage::

    python -m poseidon_spec 0 1 2 3 4
    python -m poseidon_spec --width 3 --rounds-p 57 0x1 0x2 0x3
    python -m poseidon_spec -v 0 1 2 3 4

Options:
    --width        State width t (default: 5)
    --rounds-f     Number of full rounds, even (default: 8)
    --rounds-p     Number of partial rounds (default: 60)

When the round structure differs from the built-in x5_255_5 instance, the
parameter tables are regenerated for it with the Grain LFSR.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from pydantic import ValidationError

from poseidon_spec.subspecs.poseidon import (
    PRIME,
    ROUNDS_F,
    ROUNDS_P,
    WIDTH,
    Poseidon,
    PoseidonConfig,
    generate_parameters,
)
from poseidon_spec.types import FieldArithmeticError

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LEVEL_COLORS: dict[int, str] = {
    logging.DEBUG: "90",
    logging.INFO: "32",
    logging.WARNING: "33",
    logging.ERROR: "31",
    logging.CRITICAL: "1;31",
}
"""ANSI SGR codes for each log level."""


class LevelColorFormatter(logging.Formatter):
    """Formatter that tints the padded level name of each record."""

    def formatMessage(self, record: logging.LogRecord) -> str:
        """Render the record, then wrap its level name in the level color."""
        plain = super().formatMessage(record)
        code = LEVEL_COLORS.get(record.levelno)
        if code is None:
            return plain
        levelname = f"{record.levelname:<8}"
        return plain.replace(levelname, f"\033[{code}m{levelname}\033[0m", 1)


def setup_logging(verbose: bool = False, no_color: bool = False) -> None:
    """Configure logging with optional colors."""
    level = logging.DEBUG if verbose else logging.WARNING

    # Log to stderr so stdout only carries the permuted words.
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    formatter_class = logging.Formatter if no_color else LevelColorFormatter
    handler.setFormatter(formatter_class(LOG_FORMAT, datefmt=DATE_FORMAT))

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)


def parse_word(text: str) -> int:
    """
    Parse one state word from the command line.

    Accepts decimal or `0x`-prefixed hexadecimal.

    Raises:
        argparse.ArgumentTypeError: If the text is not a non-negative integer.
    """
    try:
        value = int(text, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"state words must be non-negative: {text!r}")
    return value


def build_engine(config: PoseidonConfig) -> Poseidon:
    """
    Build an engine over the BLS12-381 scalar field for the given rounds.

    The built-in tables serve the default instance; any other round
    structure gets freshly generated tables.
    """
    if (config.width, config.rounds_f, config.rounds_p) == (WIDTH, ROUNDS_F, ROUNDS_P):
        return Poseidon(config, PRIME)

    logger.info(
        "Generating tables for t=%d, R_F=%d, R_P=%d",
        config.width,
        config.rounds_f,
        config.rounds_p,
    )
    params = generate_parameters(PRIME, config.width, config.rounds_f, config.rounds_p)
    return Poseidon(
        config,
        PRIME,
        round_constants=params.round_constants,
        mds_matrix=params.mds_matrix,
    )


def run(argv: Sequence[str] | None = None) -> int:
    """
    Parse arguments, permute and print.

    Returns:
        Process exit code.
    """
    parser = argparse.ArgumentParser(
        prog="poseidon_spec",
        description="Poseidon permutation over the BLS12-381 scalar field",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "words",
        nargs="+",
        type=parse_word,
        metavar="VALUE",
        help="State words (decimal or 0x-prefixed hex), exactly --width of them",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=WIDTH,
        help=f"State width t (default: {WIDTH})",
    )
    parser.add_argument(
        "--rounds-f",
        type=int,
        default=ROUNDS_F,
        help=f"Number of full rounds, must be even (default: {ROUNDS_F})",
    )
    parser.add_argument(
        "--rounds-p",
        type=int,
        default=ROUNDS_P,
        help=f"Number of partial rounds (default: {ROUNDS_P})",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored logging output",
    )

    args = parser.parse_args(argv)

    setup_logging(args.verbose, args.no_color)

    try:
        config = PoseidonConfig(
            width=args.width,
            rounds_f=args.rounds_f,
            rounds_p=args.rounds_p,
        )
    except ValidationError as e:
        parser.error(f"invalid round structure: {e.errors()[0]['msg']}")

    if len(args.words) != config.width:
        parser.error(f"expected {config.width} state words, got {len(args.words)}")

    # The LFSR seed has fixed-width fields for t, R_F and R_P.
    try:
        engine = build_engine(config)
    except ValueError as e:
        parser.error(f"unsupported round structure: {e}")

    try:
        output = engine.permute_ints(args.words)
    except FieldArithmeticError as e:
        logger.error("Permutation failed: %s", e)
        return 1

    digits = engine.modulus.hex_digits
    for word in output:
        print(f"0x{word:0{digits}x}")

    return 0


def main() -> None:
    """CLI entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
