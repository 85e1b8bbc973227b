"""Unit tests for event types and topics."""

from uuid import uuid4

from statusline.events.event_types import (
    CHARACTER_ACTIVATED,
    FEATURES_CHANGED,
    SPELL_SLOTS_CHANGED,
    STATUS_CHANGED,
    ActiveCharacterChanged,
    FeaturesChanged,
    SpellSlotsChanged,
    StatusChanged,
    qualified_status_topic,
)


def test_data_changed_events_have_topics():
    """Each data-changed event routes to its domain topic."""
    character_id = uuid4()
    assert SpellSlotsChanged(character_id=character_id).topic == SPELL_SLOTS_CHANGED
    assert FeaturesChanged(character_id=character_id).topic == FEATURES_CHANGED
    assert ActiveCharacterChanged(character_id=character_id).topic == CHARACTER_ACTIVATED


def test_event_type_is_class_name():
    """event_type is derived from the class."""
    assert SpellSlotsChanged(character_id=uuid4()).event_type == "SpellSlotsChanged"


def test_status_changed_general_and_qualified_topics():
    """StatusChanged uses the general topic unless qualified."""
    character_id = uuid4()
    general = StatusChanged(character_id=character_id, identifier="Status.Magical", domain="magical")
    qualified = StatusChanged(
        character_id=character_id, identifier="Status.Magical", domain="magical", qualified=True
    )
    assert general.topic == STATUS_CHANGED
    assert qualified.topic == "status.changed.magical"
    assert qualified_status_topic("tracked") == "status.changed.tracked"


def test_events_start_unsequenced():
    """Sequence numbers are assigned by the bus, not at construction."""
    assert FeaturesChanged(character_id=uuid4()).sequence_number == 0
