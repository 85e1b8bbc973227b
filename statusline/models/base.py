"""
Shared SQLAlchemy DeclarativeBase for all models.

All models must inherit from this Base so they share one registry and
one metadata object for schema creation.
"""

from sqlalchemy.orm import DeclarativeBase

from ..metadata import metadata


class Base(DeclarativeBase):
    """Shared declarative base for all statusline models."""

    metadata = metadata
