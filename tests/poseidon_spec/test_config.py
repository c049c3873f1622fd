"""Tests for the environment-driven global configuration."""

import importlib
from typing import Iterator

import pytest

import poseidon_spec.config


@pytest.fixture
def reload_config(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Reload the config module with a clean environment afterwards."""
    yield
    monkeypatch.delenv("POSEIDON_PRIMALITY_ROUNDS", raising=False)
    importlib.reload(poseidon_spec.config)


def test_default_primality_rounds(
    monkeypatch: pytest.MonkeyPatch, reload_config: None
) -> None:
    """Without the environment variable the default applies."""
    monkeypatch.delenv("POSEIDON_PRIMALITY_ROUNDS", raising=False)
    config = importlib.reload(poseidon_spec.config)
    assert config.PRIMALITY_ROUNDS == 32


def test_primality_rounds_from_environment(
    monkeypatch: pytest.MonkeyPatch, reload_config: None
) -> None:
    """The environment variable overrides the default."""
    monkeypatch.setenv("POSEIDON_PRIMALITY_ROUNDS", " 8 ")
    config = importlib.reload(poseidon_spec.config)
    assert config.PRIMALITY_ROUNDS == 8


@pytest.mark.parametrize("raw", ["0", "-3", "many", ""])
def test_invalid_primality_rounds(
    monkeypatch: pytest.MonkeyPatch, reload_config: None, raw: str
) -> None:
    """Anything but a positive integer fails at import time."""
    monkeypatch.setenv("POSEIDON_PRIMALITY_ROUNDS", raw)
    with pytest.raises(ValueError, match="Invalid POSEIDON_PRIMALITY_ROUNDS"):
        importlib.reload(poseidon_spec.config)
