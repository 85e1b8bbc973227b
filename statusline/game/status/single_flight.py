"""
Per-key single-flight runner.

The first call for a key starts a run. Calls arriving while that run is in
flight do not start their own; they mark the key dirty and await the same
run, which executes once more after it finishes. Any number of overlapping
triggers therefore cost at most one extra run, and the last run always
starts after the last trigger.
"""

import asyncio
from collections.abc import Awaitable, Callable, Hashable
from typing import Generic, TypeVar

from ...structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class SingleFlight(Generic[T]):
    """Coalesce overlapping async runs per key."""

    def __init__(self) -> None:
        self._flights: dict[Hashable, asyncio.Task[T]] = {}
        self._dirty: set[Hashable] = set()

    @property
    def in_flight(self) -> int:
        return sum(1 for task in self._flights.values() if not task.done())

    def is_in_flight(self, key: Hashable) -> bool:
        task = self._flights.get(key)
        return task is not None and not task.done()

    async def run(self, key: Hashable, fn: Callable[[], Awaitable[T]]) -> T:
        """
        Run ``fn`` for ``key`` unless a run is already in flight, in which case join it.

        Returns:
            The result of the last run of the flight this call joined
        """
        task = self._flights.get(key)
        if task is not None and not task.done():
            self._dirty.add(key)
            logger.debug("Coalescing into in-flight run", flight_key=str(key))
            return await asyncio.shield(task)

        task = asyncio.create_task(self._drive(key, fn))
        self._flights[key] = task
        return await asyncio.shield(task)

    async def _drive(self, key: Hashable, fn: Callable[[], Awaitable[T]]) -> T:
        try:
            while True:
                self._dirty.discard(key)
                result = await fn()
                if key not in self._dirty:
                    return result
                logger.debug("Re-running flight after coalesced trigger", flight_key=str(key))
        finally:
            self._dirty.discard(key)
            if self._flights.get(key) is asyncio.current_task():
                del self._flights[key]
