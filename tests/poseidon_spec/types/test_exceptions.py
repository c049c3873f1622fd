"""Tests for the exception hierarchy."""

from poseidon_spec.types import FieldArithmeticError, PoseidonError


def test_field_arithmetic_error_hierarchy() -> None:
    """Backend failures are both Poseidon errors and arithmetic errors."""
    err = FieldArithmeticError(0x1FF, bits=8)

    assert isinstance(err, PoseidonError)
    assert isinstance(err, ArithmeticError)
    assert err.value == 0x1FF
    assert err.bits == 8
    assert err.detail is None
    assert str(err) == "0x1ff cannot be represented in a 8-bit field backend"


def test_field_arithmetic_error_detail() -> None:
    """The detail is appended to the message."""
    err = FieldArithmeticError(-1, bits=256, detail="negative integer")

    assert err.message == "-0x1 cannot be represented in a 256-bit field backend: negative integer"
    assert repr(err) == f"FieldArithmeticError({err.message!r})"
