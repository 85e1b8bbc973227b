"""
Event types for statusline.

Every event is routed by its ``topic``. Payloads only identify the character
whose context changed; subscribers re-read the data they need.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

SPELL_SLOTS_CHANGED = "spell_slots.changed"
FEATURES_CHANGED = "features.changed"
CHARACTER_ACTIVATED = "character.activated"
STATUS_CHANGED = "status.changed"


def qualified_status_topic(domain: str) -> str:
    """Return the domain-qualified status topic, e.g. ``status.changed.magical``."""
    return f"{STATUS_CHANGED}.{domain}"


def _default_timestamp() -> datetime:
    """Factory function for default timestamp."""
    return datetime.now(UTC)


@dataclass
class BaseEvent:
    """
    Base class for all events published on the EventBus.

    ``topic`` and ``event_type`` are set by subclasses in ``__post_init__``;
    ``sequence_number`` is assigned by the bus on publish.
    """

    timestamp: datetime = field(default_factory=_default_timestamp, init=False)
    event_type: str = field(default="", init=False)
    topic: str = field(default="", init=False)
    sequence_number: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.event_type = type(self).__name__


@dataclass
class SpellSlotsChanged(BaseEvent):
    """Fired after any spell slot of a character is added, changed or removed."""

    character_id: UUID

    def __post_init__(self) -> None:
        super().__post_init__()
        self.topic = SPELL_SLOTS_CHANGED


@dataclass
class FeaturesChanged(BaseEvent):
    """Fired after any feature of a character is added, changed or removed."""

    character_id: UUID

    def __post_init__(self) -> None:
        super().__post_init__()
        self.topic = FEATURES_CHANGED


@dataclass
class ActiveCharacterChanged(BaseEvent):
    """Fired when the session switches to a different active character."""

    character_id: UUID
    previous_character_id: UUID | None = None

    def __post_init__(self) -> None:
        super().__post_init__()
        self.topic = CHARACTER_ACTIVATED


@dataclass
class StatusChanged(BaseEvent):
    """
    Fired after a status record is upserted or deleted.

    Published twice per change: once on ``status.changed`` and once on the
    domain-qualified topic (``qualified=True``).
    """

    character_id: UUID
    identifier: str
    domain: str
    qualified: bool = False

    def __post_init__(self) -> None:
        super().__post_init__()
        self.topic = qualified_status_topic(self.domain) if self.qualified else STATUS_CHANGED
