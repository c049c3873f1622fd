"""Strict base model shared by every specification type."""

from pydantic import BaseModel, ConfigDict


class StrictBaseModel(BaseModel):
    """
    An immutable pydantic model with strict validation.

    Field elements, moduli, configurations and parameter tables are all
    values: they are never mutated after construction, so instances can
    be shared between threads and used as cache keys.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        strict=True,
        validate_default=True,
    )
