"""
Event bus for statusline.

This module provides the EventBus class that implements an in-memory,
topic-routed pub/sub system. Publishing never blocks: events are placed on
an asyncio.Queue and dispatched by a single background task, so a handler
that publishes further events never re-enters dispatch.

Failures in one handler are logged and never prevent the other handlers on
the same topic from running, nor stop the dispatch loop.
"""

import asyncio
import inspect
from collections import defaultdict
from collections.abc import Callable
from typing import Any

from ..structured_logging.enhanced_logging_config import get_logger
from .event_types import BaseEvent

logger = get_logger(__name__)

Handler = Callable[[BaseEvent], Any]


class EventBus:
    """
    Pure asyncio event bus.

    Handlers are registered per topic string. Dispatch happens on the running
    event loop: sync handlers run first, in registration order, then async
    handlers run concurrently and are awaited together.
    """

    def __init__(self) -> None:
        """Initialize the event bus. Processing starts on the first publish inside a loop."""
        self._subscribers: dict[str, list[Handler]] = defaultdict(list)
        self._event_queue: asyncio.Queue[BaseEvent | None] = asyncio.Queue()
        self._running: bool = False
        self._sequence: int = 0
        self._active_tasks: set[asyncio.Task] = set()
        self._processing_task: asyncio.Task | None = None
        self._logger = get_logger("EventBus")

    def _ensure_async_processing(self) -> None:
        """Start the processing task if a loop is running and it is not started yet."""
        if self._running:
            return
        try:
            asyncio.get_running_loop()
        except RuntimeError as e:
            # No running loop - processing will start on a later publish or join()
            self._logger.warning(
                "EventBus will start processing when an event loop is available",
                error=str(e),
            )
            return

        self._running = True
        self._processing_task = asyncio.create_task(self._process_events_async(), name="statusline-event-bus")
        self._active_tasks.add(self._processing_task)
        self._processing_task.add_done_callback(self._active_tasks.discard)
        self._logger.info("EventBus processing started")

    async def _process_events_async(self) -> None:
        """Dispatch loop: pull events off the queue until a sentinel arrives."""
        try:
            while self._running:
                event = await self._event_queue.get()
                try:
                    if event is None:
                        break
                    await self._handle_event_async(event)
                except Exception as e:  # pylint: disable=broad-exception-caught  # Reason: one bad event must not stop dispatch for the process
                    self._logger.error("Error processing event", error=str(e), exc_info=True)
                finally:
                    self._event_queue.task_done()
        except asyncio.CancelledError:
            pass
        finally:
            self._running = False
            self._processing_task = None
            self._logger.info("EventBus processing stopped")

    async def _handle_event_async(self, event: BaseEvent) -> None:
        """
        Handle a single event by calling all handlers registered for its topic.

        Async handlers run concurrently through asyncio.gather with
        return_exceptions=True so every handler runs even if some fail.
        """
        subscribers = list(self._subscribers.get(event.topic, []))

        if not subscribers:
            self._logger.debug("No subscribers for topic", topic=event.topic, event_type=event.event_type)
            return

        self._logger.debug(
            "Processing event for subscribers",
            topic=event.topic,
            event_type=event.event_type,
            sequence_number=event.sequence_number,
            subscriber_count=len(subscribers),
        )

        async_subscribers: list[Handler] = []
        sync_subscribers: list[Handler] = []
        for subscriber in subscribers:
            if inspect.iscoroutinefunction(subscriber):
                async_subscribers.append(subscriber)
            else:
                sync_subscribers.append(subscriber)

        for subscriber in sync_subscribers:
            try:
                subscriber(event)
            except Exception as e:  # pylint: disable=broad-exception-caught  # Reason: handler failures are isolated per subscriber
                self._logger.error(
                    "Error in sync event subscriber",
                    subscriber_name=getattr(subscriber, "__name__", "unknown"),
                    topic=event.topic,
                    error=str(e),
                )

        if not async_subscribers:
            return

        tasks: list[asyncio.Task] = []
        for subscriber in async_subscribers:
            task = asyncio.create_task(subscriber(event))
            tasks.append(task)
            self._active_tasks.add(task)
            task.add_done_callback(self._active_tasks.discard)

        results = await asyncio.gather(*tasks, return_exceptions=True)
        for subscriber, result in zip(async_subscribers, results, strict=True):
            if isinstance(result, BaseException):
                self._logger.error(
                    "Error in async subscriber",
                    subscriber_name=getattr(subscriber, "__name__", "unknown"),
                    topic=event.topic,
                    error=str(result),
                    error_type=type(result).__name__,
                )

    def publish(self, event: BaseEvent) -> None:
        """
        Publish an event to the bus.

        Args:
            event: The event to publish

        Raises:
            ValueError: If event is not a BaseEvent or has no topic
        """
        if not isinstance(event, BaseEvent):
            raise ValueError("Event must inherit from BaseEvent")
        if not event.topic:
            raise ValueError("Event must declare a topic")

        self._sequence += 1
        event.sequence_number = self._sequence

        self._ensure_async_processing()
        self._event_queue.put_nowait(event)
        self._logger.debug(
            "Published event to queue",
            topic=event.topic,
            event_type=event.event_type,
            sequence_number=event.sequence_number,
            queue_size=self._event_queue.qsize(),
        )

    def subscribe(self, topic: str, handler: Handler) -> None:
        """
        Subscribe a handler to a topic.

        Args:
            topic: Topic name, e.g. "spell_slots.changed"
            handler: Callable (sync or async) invoked with the event
        """
        if not topic:
            raise ValueError("Topic must be a non-empty string")
        if not callable(handler):
            raise ValueError("Handler must be callable")

        self._subscribers[topic].append(handler)
        self._logger.debug(
            "Added subscriber for topic", topic=topic, subscriber_name=getattr(handler, "__name__", "unknown")
        )

    def unsubscribe(self, topic: str, handler: Handler) -> bool:
        """
        Remove a handler from a topic.

        Returns:
            True if the handler was found and removed, False otherwise
        """
        subscribers = self._subscribers.get(topic, [])
        try:
            subscribers.remove(handler)
        except ValueError:
            self._logger.debug("Handler not found for topic", topic=topic)
            return False
        self._logger.debug("Removed subscriber for topic", topic=topic)
        return True

    def get_subscriber_count(self, topic: str) -> int:
        """Get the number of handlers registered for a topic."""
        return len(self._subscribers.get(topic, []))

    def get_all_subscriber_counts(self) -> dict[str, int]:
        """Get handler counts for every topic with at least one registration."""
        return {topic: len(handlers) for topic, handlers in self._subscribers.items() if handlers}

    async def join(self) -> None:
        """
        Wait until every queued event has been dispatched.

        Events published by handlers while draining are waited for as well.
        """
        if not self._event_queue.empty():
            self._ensure_async_processing()
        await self._event_queue.join()

    async def shutdown(self) -> None:
        """Stop dispatching gracefully, cancelling any handler still in flight."""
        self._logger.info("Shutting down EventBus")
        if self._running:
            self._event_queue.put_nowait(None)
            processing_task = self._processing_task
            if processing_task is not None:
                try:
                    await asyncio.wait_for(asyncio.shield(processing_task), timeout=1.0)
                except TimeoutError:
                    processing_task.cancel()

        pending = [task for task in self._active_tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._active_tasks.clear()
        self._running = False
