"""Magical status: the character's remaining spell slots, weighted toward higher levels."""

from uuid import UUID

from ...events.event_types import SPELL_SLOTS_CHANGED
from ...schemas.status import DomainKind, RawMetricItem
from .component import StatusComponent


def spell_slot_weight(level: int, base: float = 1.0, delta: float = 1.5) -> float:
    """Weight of a spell slot: ``base + delta * level``, strictly increasing in level."""
    return base + delta * level


class MagicalStatusComponent(StatusComponent):
    """Aggregates spell slot usage into Status.Magical."""

    identifier = "Status.Magical"
    domain = DomainKind.MAGICAL
    data_changed_topics = (SPELL_SLOTS_CHANGED,)

    async def load_raw_items(self, character_id: UUID) -> list[RawMetricItem]:
        slots = await self._context.spell_slots.list_for_character(character_id)
        return [RawMetricItem(level=slot.level, capacity=slot.max_uses, consumed=slot.used) for slot in slots]

    def weight_for_level(self, level: int) -> float:
        settings = self._context.config.status
        return spell_slot_weight(level, settings.magical_weight_base, settings.magical_weight_delta)
