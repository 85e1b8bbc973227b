"""Spellcasting stats model: plain keyed storage, one row per character."""

from uuid import UUID, uuid4

from sqlalchemy import Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class SpellStats(Base):
    __tablename__ = "spell_stats"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    character_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, unique=True)
    casting_ability: Mapped[str] = mapped_column(String(length=32), nullable=False, default="")
    spell_save_dc: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    spell_attack_bonus: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    spells_known: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    cantrips_known: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    invocations_known: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_prepared: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
