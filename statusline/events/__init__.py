"""
Events module for statusline.

An in-memory, topic-routed pub/sub bus and the event types that travel on it.
Data collaborators publish "data changed" events; status components publish
"status changed" events once they have persisted a new value.
"""

from .event_bus import EventBus
from .event_types import (
    CHARACTER_ACTIVATED,
    FEATURES_CHANGED,
    SPELL_SLOTS_CHANGED,
    STATUS_CHANGED,
    ActiveCharacterChanged,
    BaseEvent,
    FeaturesChanged,
    SpellSlotsChanged,
    StatusChanged,
    qualified_status_topic,
)

__all__ = [
    "EventBus",
    "BaseEvent",
    "SpellSlotsChanged",
    "FeaturesChanged",
    "ActiveCharacterChanged",
    "StatusChanged",
    "SPELL_SLOTS_CHANGED",
    "FEATURES_CHANGED",
    "CHARACTER_ACTIVATED",
    "STATUS_CHANGED",
    "qualified_status_topic",
]
