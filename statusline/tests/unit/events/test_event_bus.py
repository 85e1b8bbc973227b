"""
Unit tests for event bus.

Tests the EventBus class.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from statusline.events.event_bus import EventBus
from statusline.events.event_types import SPELL_SLOTS_CHANGED, BaseEvent, FeaturesChanged, SpellSlotsChanged


@pytest.fixture
async def event_bus():
    """Create an EventBus instance."""
    bus = EventBus()
    yield bus
    await bus.shutdown()


@pytest.mark.asyncio
async def test_event_bus_init(event_bus):
    """Test EventBus initialization."""
    assert event_bus._running is False
    assert event_bus._processing_task is None
    assert len(event_bus._subscribers) == 0


@pytest.mark.asyncio
async def test_event_bus_subscribe(event_bus):
    """Test EventBus.subscribe() adds subscriber."""
    handler = MagicMock()
    event_bus.subscribe(SPELL_SLOTS_CHANGED, handler)
    assert handler in event_bus._subscribers[SPELL_SLOTS_CHANGED]
    assert event_bus.get_subscriber_count(SPELL_SLOTS_CHANGED) == 1


@pytest.mark.asyncio
async def test_event_bus_subscribe_rejects_bad_arguments(event_bus):
    """Test EventBus.subscribe() validates topic and handler."""
    with pytest.raises(ValueError):
        event_bus.subscribe("", MagicMock())
    with pytest.raises(ValueError):
        event_bus.subscribe(SPELL_SLOTS_CHANGED, "not callable")


@pytest.mark.asyncio
async def test_event_bus_unsubscribe(event_bus):
    """Test EventBus.unsubscribe() removes subscriber."""
    handler = MagicMock()
    event_bus.subscribe(SPELL_SLOTS_CHANGED, handler)
    assert event_bus.unsubscribe(SPELL_SLOTS_CHANGED, handler) is True
    assert event_bus.get_subscriber_count(SPELL_SLOTS_CHANGED) == 0


@pytest.mark.asyncio
async def test_event_bus_unsubscribe_not_found(event_bus):
    """Test EventBus.unsubscribe() when handler not found."""
    assert event_bus.unsubscribe(SPELL_SLOTS_CHANGED, MagicMock()) is False


@pytest.mark.asyncio
async def test_event_bus_get_all_subscriber_counts(event_bus):
    """Test EventBus.get_all_subscriber_counts() skips empty topics."""
    handler = MagicMock()
    event_bus.subscribe(SPELL_SLOTS_CHANGED, handler)
    event_bus.subscribe("features.changed", MagicMock())
    event_bus.unsubscribe(SPELL_SLOTS_CHANGED, handler)
    assert event_bus.get_all_subscriber_counts() == {"features.changed": 1}


@pytest.mark.asyncio
async def test_event_bus_publish_invalid_event(event_bus):
    """Test EventBus.publish() rejects non-events and topic-less events."""
    with pytest.raises(ValueError, match="BaseEvent"):
        event_bus.publish("not an event")
    with pytest.raises(ValueError, match="topic"):
        event_bus.publish(BaseEvent())


@pytest.mark.asyncio
async def test_event_bus_publish_assigns_sequence_numbers(event_bus):
    """Test EventBus.publish() numbers events in publish order."""
    first = SpellSlotsChanged(character_id=uuid4())
    second = SpellSlotsChanged(character_id=uuid4())
    event_bus.publish(first)
    event_bus.publish(second)
    assert second.sequence_number == first.sequence_number + 1
    await event_bus.join()


@pytest.mark.asyncio
async def test_event_bus_dispatches_by_topic(event_bus):
    """Test handlers only receive events for their topic."""
    slot_handler = MagicMock()
    feature_handler = MagicMock()
    event_bus.subscribe(SPELL_SLOTS_CHANGED, slot_handler)
    event_bus.subscribe("features.changed", feature_handler)

    event = SpellSlotsChanged(character_id=uuid4())
    event_bus.publish(event)
    await event_bus.join()

    slot_handler.assert_called_once_with(event)
    feature_handler.assert_not_called()


@pytest.mark.asyncio
async def test_event_bus_async_handler_awaited(event_bus):
    """Test async handlers are awaited during dispatch."""
    handler = AsyncMock()
    event_bus.subscribe("features.changed", handler)

    event = FeaturesChanged(character_id=uuid4())
    event_bus.publish(event)
    await event_bus.join()

    handler.assert_awaited_once_with(event)


@pytest.mark.asyncio
async def test_event_bus_handler_error_isolated(event_bus):
    """Test a failing handler does not stop other handlers or later events."""
    received = []

    def failing(event):
        raise RuntimeError("handler failed")

    async def failing_async(event):
        raise RuntimeError("async handler failed")

    def recording(event):
        received.append(event.sequence_number)

    event_bus.subscribe(SPELL_SLOTS_CHANGED, failing)
    event_bus.subscribe(SPELL_SLOTS_CHANGED, failing_async)
    event_bus.subscribe(SPELL_SLOTS_CHANGED, recording)

    event_bus.publish(SpellSlotsChanged(character_id=uuid4()))
    event_bus.publish(SpellSlotsChanged(character_id=uuid4()))
    await event_bus.join()

    assert received == [1, 2]


@pytest.mark.asyncio
async def test_event_bus_handler_publishing_is_not_reentrant(event_bus):
    """Test events published by a handler are dispatched after the current one."""
    order = []
    character_id = uuid4()

    def on_slots(event):
        order.append("slots-start")
        event_bus.publish(FeaturesChanged(character_id=character_id))
        order.append("slots-end")

    def on_features(event):
        order.append("features")

    event_bus.subscribe(SPELL_SLOTS_CHANGED, on_slots)
    event_bus.subscribe("features.changed", on_features)

    event_bus.publish(SpellSlotsChanged(character_id=character_id))
    await event_bus.join()

    assert order == ["slots-start", "slots-end", "features"]


@pytest.mark.asyncio
async def test_event_bus_shutdown_stops_processing():
    """Test EventBus.shutdown() stops the processing task."""
    bus = EventBus()
    bus.publish(SpellSlotsChanged(character_id=uuid4()))
    await bus.join()
    assert bus._running is True

    await bus.shutdown()

    assert bus._running is False
    assert bus._processing_task is None


@pytest.mark.asyncio
async def test_event_bus_shutdown_cancels_slow_handler():
    """Test EventBus.shutdown() does not hang on a stuck handler."""
    bus = EventBus()

    async def stuck(event):
        await asyncio.sleep(60)

    bus.subscribe(SPELL_SLOTS_CHANGED, stuck)
    bus.publish(SpellSlotsChanged(character_id=uuid4()))
    await asyncio.sleep(0.01)

    await asyncio.wait_for(bus.shutdown(), timeout=5.0)

    assert bus._running is False
