"""Spell slot model: one tier of spellcasting capacity for a character."""

from uuid import UUID, uuid4

from sqlalchemy import Integer, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class SpellSlot(Base):
    """
    Spell slot row.

    ``level`` may be NULL for a slot the player has not assigned a tier yet;
    such slots are ignored by the magical status.
    """

    __tablename__ = "spell_slots"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    character_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, index=True)
    level: Mapped[int | None] = mapped_column(Integer, nullable=True)
    max_uses: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    used: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
