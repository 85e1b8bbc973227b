"""
Status model: the persisted aggregate result for one character and one metric domain.

At most one row exists per (character_id, identifier); the unique constraint
is what makes the status store's upsert atomic.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Float, Integer, String, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class Status(Base):
    """
    Derived status row shown on a character's status line.

    ``name`` is the display phrase, ``type`` the severity/colour class and
    ``value`` the weighted mean in [0, 1]. ``version`` increments on every
    write to the row.
    """

    __tablename__ = "statuses"
    __table_args__ = (UniqueConstraint("character_id", "identifier"),)

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    character_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, index=True)
    identifier: Mapped[str] = mapped_column(String(length=64), nullable=False)
    name: Mapped[str] = mapped_column(String(length=64), nullable=False)
    type: Mapped[str] = mapped_column(String(length=16), nullable=False)
    value: Mapped[float] = mapped_column(Float, nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(),
        insert_default=func.now(),  # pylint: disable=not-callable  # func.now() callable at runtime
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Status {self.identifier} character={self.character_id} value={self.value:.4f}>"
