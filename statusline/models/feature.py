"""Feature model: class or racial features, optionally with tracked uses."""

from uuid import UUID, uuid4

from sqlalchemy import Boolean, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class Feature(Base):
    """
    Character feature row.

    A tracked feature has a limited number of uses (``tracked_max``) of which
    ``tracked_used`` are spent. Untracked features are plain descriptive
    records.
    """

    __tablename__ = "features"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    character_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(length=128), nullable=False, default="")
    level: Mapped[int | None] = mapped_column(Integer, nullable=True)
    character_class: Mapped[str] = mapped_column(String(length=64), nullable=False, default="")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_tracked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    tracked_max: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    tracked_used: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
