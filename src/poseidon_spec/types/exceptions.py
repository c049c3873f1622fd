"""Exception hierarchy for the Poseidon specification."""

from __future__ import annotations


class PoseidonError(Exception):
    """
    Base exception for all Poseidon-related errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class FieldArithmeticError(PoseidonError, ArithmeticError):
    """
    Raised when the field arithmetic backend cannot represent a value.

    This covers a modulus that does not fit the fixed bit width (or that
    the backend cannot reduce against), and raw integers that cannot be
    lifted into a field element.

    Attributes:
        value: The offending integer.
        bits: The bit width of the backend.
        detail: Additional context about the error.
    """

    def __init__(
        self,
        value: int,
        *,
        bits: int,
        detail: str | None = None,
    ) -> None:
        self.value = value
        self.bits = bits
        self.detail = detail

        msg = f"{value:#x} cannot be represented in a {bits}-bit field backend"
        if detail:
            msg = f"{msg}: {detail}"

        super().__init__(msg)
