"""
Base Pydantic model classes for statusline schemas.

Provides base classes with a strict, consistent validation configuration.
"""

from pydantic import BaseModel, ConfigDict


class SecureBaseModel(BaseModel):
    """
    Base model with standard validation configuration.

    Unknown fields are rejected and assignments are re-validated.
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
        validate_default=True,
    )


class FrozenBaseModel(BaseModel):
    """Immutable value object: built once per recompute, never mutated."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        str_strip_whitespace=True,
        validate_default=True,
        from_attributes=True,
    )
