"""
Spell slot repository.

Every committed mutation publishes SpellSlotsChanged so the magical status
recomputes; reads never publish.
"""

from typing import Any
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from statusline.database import DatabaseManager
from statusline.events.event_bus import EventBus
from statusline.events.event_types import SpellSlotsChanged
from statusline.models.spell_slot import SpellSlot
from statusline.persistence.resource_validation import validate_resource_counts
from statusline.structured_logging.enhanced_logging_config import get_logger

from .keyed_record_repository import KeyedRecordRepository

logger = get_logger(__name__)

_UNSET: Any = object()


class SpellSlotRepository(KeyedRecordRepository[SpellSlot]):
    """Repository for the spell_slots table."""

    def __init__(self, database: DatabaseManager, bus: EventBus | None = None) -> None:
        super().__init__(database, SpellSlot)
        self._bus = bus

    def _publish_changed(self, character_id: UUID) -> None:
        if self._bus is not None:
            self._bus.publish(SpellSlotsChanged(character_id=character_id))

    async def add_slot(self, character_id: UUID, level: int | None, max_uses: int, used: int = 0) -> SpellSlot:
        """
        Add a spell slot for a character.

        Raises:
            ValidationError: If the counts are inconsistent
            DatabaseError: If the insert fails
        """
        validate_resource_counts(level=level, maximum=max_uses, used=used, operation="add_slot", record_type="spell_slot")
        slot = await self.save(SpellSlot(character_id=character_id, level=level, max_uses=max_uses, used=used))
        logger.info("Spell slot added", character_id=character_id, slot_id=str(slot.id), level=level)
        self._publish_changed(character_id)
        return slot

    async def update_slot(
        self,
        slot_id: UUID,
        *,
        level: int | None = _UNSET,
        max_uses: int | None = None,
        used: int | None = None,
    ) -> SpellSlot:
        """
        Change a slot's level, capacity or used count.

        Passing ``level=None`` clears the level; omitting it keeps the current one.

        Raises:
            ResourceNotFoundError: If the slot does not exist
            ValidationError: If the resulting counts are inconsistent
        """
        slot = await self.get_required(slot_id)
        new_level = slot.level if level is _UNSET else level
        new_max = slot.max_uses if max_uses is None else max_uses
        new_used = slot.used if used is None else used
        validate_resource_counts(
            level=new_level, maximum=new_max, used=new_used, operation="update_slot", record_type="spell_slot"
        )

        slot.level = new_level
        slot.max_uses = new_max
        slot.used = new_used
        slot = await self.save(slot)
        logger.debug("Spell slot updated", character_id=slot.character_id, slot_id=str(slot_id))
        self._publish_changed(slot.character_id)
        return slot

    async def use_slot(self, slot_id: UUID) -> SpellSlot:
        """Spend one use of a slot."""
        slot = await self.get_required(slot_id)
        return await self.update_slot(slot_id, used=slot.used + 1)

    async def restore_all(self, character_id: UUID) -> int:
        """
        Reset the used count of every slot of a character (a long rest). Returns slots touched.

        All slots are reset in one transaction, so a failure leaves none of them restored.

        Raises:
            DatabaseError: If the update fails
        """
        try:
            async with self._database.session_maker() as session:
                result = await session.execute(
                    update(SpellSlot)
                    .where(SpellSlot.character_id == character_id, SpellSlot.used > 0)
                    .values(used=0)
                )
                await session.commit()
        except (SQLAlchemyError, OSError) as e:
            self._raise_database_error("restore_slots", e, character_id=character_id)
        restored = result.rowcount or 0
        if restored:
            logger.info("Spell slots restored", character_id=character_id, count=restored)
            self._publish_changed(character_id)
        return restored

    async def delete_slot(self, slot_id: UUID) -> bool:
        """Delete a slot. Returns False if it did not exist."""
        slot = await self.get(slot_id)
        if slot is None:
            return False
        deleted = await self.delete(slot_id)
        if deleted:
            self._publish_changed(slot.character_id)
        return deleted
