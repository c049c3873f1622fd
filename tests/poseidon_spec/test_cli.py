"""Tests for the command-line entry point."""

from __future__ import annotations

import argparse
import logging

import pytest

from poseidon_spec.__main__ import (
    DATE_FORMAT,
    LOG_FORMAT,
    LevelColorFormatter,
    build_engine,
    parse_word,
    run,
)
from poseidon_spec.subspecs.poseidon import PoseidonConfig

EXPECTED_5 = [
    "0x2a918b9c9f9bd7bb509331c81e297b5707f6fc7393dcee1b13901a0b22202e18",
    "0x65ebf8671739eeb11fb217f2d5c5bf4a0c3f210e3f3cd3b08b5db75675d797f7",
    "0x2cc176fc26bc70737a696a9dfd1b636ce360ee76926d182390cdb7459cf585ce",
    "0x4dc4e29d283afd2a491fe6aef122b9a968e74eff05341f3cc23fda1781dcb566",
    "0x03ff622da276830b9451b88b85e6184fd6ae15c8ab3ee25a5667be8592cce3b1",
]

pytestmark = pytest.mark.usefixtures("restore_root_logger")


class TestParseWord:
    """Tests for command-line state word parsing."""

    def test_decimal_and_hex(self) -> None:
        """Both decimal and 0x-prefixed hex are accepted."""
        assert parse_word("42") == 42
        assert parse_word("0x2a") == 42
        assert parse_word("0X2A") == 42

    def test_rejects_garbage(self) -> None:
        """Non-integers are argument errors."""
        with pytest.raises(argparse.ArgumentTypeError, match="not an integer"):
            parse_word("forty-two")

    def test_rejects_negative(self) -> None:
        """Negative words are argument errors."""
        with pytest.raises(argparse.ArgumentTypeError, match="must be non-negative"):
            parse_word("-1")


class TestRun:
    """Tests for the full CLI flow."""

    def test_known_answer(self, capsys: pytest.CaptureFixture[str]) -> None:
        """The default instance prints the reference vector, one word per line."""
        assert run(["0", "1", "2", "3", "4"]) == 0

        out = capsys.readouterr().out
        assert out.splitlines() == EXPECTED_5

    def test_custom_instance(self, capsys: pytest.CaptureFixture[str]) -> None:
        """A different round structure runs on generated tables."""
        assert run(["--width", "3", "--rounds-p", "57", "--no-color", "1", "2", "3"]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 3
        assert all(line.startswith("0x") and len(line) == 66 for line in lines)

    def test_wrong_word_count(self, capsys: pytest.CaptureFixture[str]) -> None:
        """The number of words must match the width."""
        with pytest.raises(SystemExit) as exc_info:
            run(["1", "2", "3"])

        assert exc_info.value.code == 2
        assert "expected 5 state words, got 3" in capsys.readouterr().err

    def test_odd_full_rounds(self, capsys: pytest.CaptureFixture[str]) -> None:
        """An odd number of full rounds is rejected before permuting."""
        with pytest.raises(SystemExit) as exc_info:
            run(["--rounds-f", "7", "0", "1", "2", "3", "4"])

        assert exc_info.value.code == 2
        assert "invalid round structure" in capsys.readouterr().err

    @pytest.mark.parametrize(
        "flags",
        [["--rounds-f", "2000"], ["--rounds-p", "1024"]],
        ids=["full_rounds_overflow_seed", "partial_rounds_overflow_seed"],
    )
    def test_rounds_beyond_seed_width(
        self, capsys: pytest.CaptureFixture[str], flags: list[str]
    ) -> None:
        """Round counts the LFSR seed cannot encode are usage errors, not tracebacks."""
        with pytest.raises(SystemExit) as exc_info:
            run([*flags, "0", "1", "2", "3", "4"])

        assert exc_info.value.code == 2
        err = capsys.readouterr().err
        assert "unsupported round structure" in err
        assert "does not fit in 10 bits" in err

    def test_word_too_wide(self, capsys: pytest.CaptureFixture[str]) -> None:
        """A word that the backend cannot represent fails with exit code 1."""
        assert run(["--no-color", str(2**256), "1", "2", "3", "4"]) == 1
        assert "Permutation failed" in capsys.readouterr().err


class TestBuildEngine:
    """Tests for engine selection."""

    def test_default_instance_uses_builtin_tables(self) -> None:
        """The x5_255_5 instance reuses the shipped tables."""
        from poseidon_spec.subspecs.poseidon import ROUND_CONSTANTS

        engine = build_engine(PoseidonConfig())
        assert engine.round_constants == ROUND_CONSTANTS

    def test_other_instance_generates_tables(self) -> None:
        """Other round structures get tables sized for them."""
        engine = build_engine(PoseidonConfig(width=3, rounds_f=8, rounds_p=57))
        assert len(engine.round_constants) == 3 * (8 + 57)
        assert len(engine.mds_matrix) == 3


class TestLevelColorFormatter:
    """Tests for the colored log formatter."""

    @staticmethod
    def _record(level: int) -> logging.LogRecord:
        return logging.LogRecord(
            name="poseidon_spec.test",
            level=level,
            pathname=__file__,
            lineno=1,
            msg="permuted %d words",
            args=(5,),
            exc_info=None,
        )

    def test_level_name_is_colored(self) -> None:
        """Only the padded level name is wrapped in the level color."""
        formatter = LevelColorFormatter(LOG_FORMAT, datefmt=DATE_FORMAT)
        line = formatter.format(self._record(logging.WARNING))

        assert "\033[33mWARNING \033[0m" in line
        assert line.endswith("poseidon_spec.test: permuted 5 words")

    def test_plain_formatter_has_no_colors(self) -> None:
        """The --no-color layout is the same format without escape codes."""
        line = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT).format(
            self._record(logging.ERROR)
        )

        assert "\033[" not in line
        assert "ERROR    poseidon_spec.test: permuted 5 words" in line
