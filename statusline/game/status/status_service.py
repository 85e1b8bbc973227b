"""
Status service: owns the registered status components of one context.

Components are registered once, initialized together, and queried for the
assembled status line the UI renders.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from typing import TYPE_CHECKING
from uuid import UUID

from ...structured_logging.enhanced_logging_config import get_logger
from .component import StatusComponent
from .magical_component import MagicalStatusComponent
from .tracked_component import TrackedAbilityStatusComponent

if TYPE_CHECKING:
    from ...context import StatusContext
    from ...schemas.status import StatusSnapshot

logger = get_logger(__name__)


def default_components(context: StatusContext) -> list[StatusComponent]:
    return [MagicalStatusComponent(context), TrackedAbilityStatusComponent(context)]


class StatusService:
    """Registry and facade for status components."""

    def __init__(self, context: StatusContext, components: Iterable[StatusComponent] | None = None) -> None:
        self._context = context
        self._components: dict[str, StatusComponent] = {}
        for component in default_components(context) if components is None else components:
            self.register(component)

    @property
    def components(self) -> list[StatusComponent]:
        return list(self._components.values())

    def register(self, component: StatusComponent) -> None:
        """
        Add a component.

        Raises:
            ValueError: If a component with the same identifier is already registered
        """
        if component.identifier in self._components:
            raise ValueError(f"Status component '{component.identifier}' is already registered")
        self._components[component.identifier] = component
        logger.debug("Status component registered", identifier=component.identifier)

    async def initialize(self) -> None:
        """Subscribe every component and compute each status once."""
        for component in self._components.values():
            await component.initialize()
        logger.info("Status service initialized", components=list(self._components))

    async def recompute_all(self) -> None:
        await asyncio.gather(*(component.recompute() for component in self._components.values()))

    async def status_line(self, character_id: UUID | None = None) -> list[StatusSnapshot]:
        """
        Current statuses of a character (the active one by default), ordered by identifier.

        Only statuses owned by registered components are returned.
        """
        character_id = character_id or self._context.active_character_id
        if character_id is None:
            return []
        statuses = await self._context.status_store.find_all(character_id)
        return [status for status in statuses if status.identifier in self._components]
