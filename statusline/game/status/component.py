"""
Status component base class.

A status component owns one status identifier (e.g. "Status.Magical") and
recomputes it whenever its domain's data changes. Subclasses only say where
the raw items come from and how a level maps to a weight; the subscribe,
aggregate and persist cycle is implemented once here.

Concurrency: recomputations are serialized per (character_id, identifier)
through a SingleFlight, and the store upsert is atomic on the same key, so
overlapping triggers can neither duplicate the record nor leave it stale.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING, ClassVar
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError

from ...events.event_types import CHARACTER_ACTIVATED, BaseEvent, StatusChanged
from ...exceptions import DatabaseError, DegenerateInputError, ValidationError
from ...schemas.status import DomainKind, RawMetricItem, StatusSnapshot
from ...structured_logging.enhanced_logging_config import (
    bound_status_context,
    get_logger,
    log_exception_once,
)
from .aggregator import StatusPhrase, classify, weighted_mean
from .single_flight import SingleFlight
from .weighted_metric import WeightedMetric

if TYPE_CHECKING:
    from ...context import StatusContext

logger = get_logger(__name__)


class ComponentState(str, Enum):
    UNINITIALIZED = "uninitialized"
    SUBSCRIBED = "subscribed"
    IDLE = "idle"
    RECOMPUTING = "recomputing"


class StatusComponent(ABC):
    """
    Base class for one metric domain's status.

    Subclasses set ``identifier``, ``domain`` and ``data_changed_topics`` and
    implement ``load_raw_items`` and ``weight_for_level``.
    """

    identifier: ClassVar[str]
    domain: ClassVar[DomainKind]
    data_changed_topics: ClassVar[tuple[str, ...]]

    def __init__(self, context: StatusContext) -> None:
        self._context = context
        self._flights: SingleFlight[None] = SingleFlight()
        self._subscribed = False
        self._completed_runs = 0

    @property
    def topics(self) -> tuple[str, ...]:
        """Every topic that triggers a recompute, including character activation."""
        return (*self.data_changed_topics, CHARACTER_ACTIVATED)

    @property
    def state(self) -> ComponentState:
        if not self._subscribed:
            return ComponentState.UNINITIALIZED
        if self._flights.in_flight:
            return ComponentState.RECOMPUTING
        if self._completed_runs:
            return ComponentState.IDLE
        return ComponentState.SUBSCRIBED

    @abstractmethod
    async def load_raw_items(self, character_id: UUID) -> list[RawMetricItem]:
        """Read the character's current raw resources for this domain."""

    @abstractmethod
    def weight_for_level(self, level: int) -> float:
        """Importance weight of a resource of the given tier."""

    def to_weighted_metrics(self, raw_items: Sequence[RawMetricItem]) -> list[WeightedMetric]:
        """Map raw items to weighted metrics, skipping items without a level."""
        return [
            WeightedMetric(value=item.remaining_fraction, weight=self.weight_for_level(item.level))
            for item in raw_items
            if item.level is not None
        ]

    def classify(self, value: float) -> StatusPhrase:
        return classify(self.domain, value)

    async def initialize(self) -> None:
        """Subscribe to this domain's topics, then compute the status once."""
        if self._subscribed:
            logger.debug("Status component already initialized", identifier=self.identifier)
            return
        for topic in self.topics:
            self._context.bus.subscribe(topic, self.on_data_changed)
        self._subscribed = True
        logger.info("Status component subscribed", identifier=self.identifier, topics=list(self.topics))
        await self.recompute()

    async def on_data_changed(self, event: BaseEvent) -> None:
        """Bus handler: recompute if the event concerns the active character."""
        character_id = getattr(event, "character_id", None)
        active = self._context.active_character_id
        if event.topic != CHARACTER_ACTIVATED and character_id is not None and character_id != active:
            logger.debug(
                "Ignoring data change for inactive character",
                identifier=self.identifier,
                character_id=character_id,
                topic=event.topic,
            )
            return
        await self.recompute()

    async def recompute(self) -> None:
        """
        Recompute and persist the status of the active character.

        Overlapping calls for the same character coalesce. Failures are
        logged, never raised, and leave the previously stored status in place.
        """
        character_id = self._context.active_character_id
        if character_id is None:
            logger.debug("No active character; skipping recompute", identifier=self.identifier)
            return
        await self._flights.run((character_id, self.identifier), lambda: self._recompute_for(character_id))

    async def _recompute_for(self, character_id: UUID) -> None:
        with bound_status_context(character_id=str(character_id), identifier=self.identifier):
            try:
                await self._recompute_cycle(character_id)
            except DatabaseError as e:
                logger.error(
                    "Status recompute failed; previous status kept",
                    error=str(e),
                    operation=e.operation,
                    details=e.details,
                )
            except (PydanticValidationError, ValidationError) as e:
                log_exception_once(logger, "error", "Raw metric data rejected; previous status kept", exc=e)
            except Exception as e:  # pylint: disable=broad-exception-caught  # Reason: a failing collaborator must stay local to this component's cycle
                log_exception_once(logger, "error", "Status recompute failed; previous status kept", exc=e)
            finally:
                self._completed_runs += 1

    async def _recompute_cycle(self, character_id: UUID) -> None:
        raw_items = await self.load_raw_items(character_id)
        metrics = self.to_weighted_metrics(raw_items)

        if not metrics:
            await self._remove_status(character_id)
            return

        try:
            snapshot = self._build_snapshot(character_id, metrics)
        except DegenerateInputError as e:
            if self._context.config.status.zero_weight_policy == "empty":
                logger.warning("Zero total weight treated as empty source", item_count=e.item_count)
                await self._remove_status(character_id)
            else:
                logger.error("Zero total weight; previous status kept", item_count=e.item_count)
            return

        committed = await self._context.status_store.upsert(snapshot)
        logger.info(
            "Status updated",
            display_name=committed.display_name,
            severity=committed.severity.value,
            value=committed.magnitude,
            version=committed.version,
            item_count=len(metrics),
        )
        self._publish_status_changed(character_id)

    def _build_snapshot(self, character_id: UUID, metrics: Sequence[WeightedMetric]) -> StatusSnapshot:
        """Construct the full target status before anything is written."""
        mean = weighted_mean(metrics)
        phrase = self.classify(mean)
        return StatusSnapshot(
            character_id=character_id,
            identifier=self.identifier,
            display_name=phrase.display_name,
            severity=phrase.severity,
            magnitude=mean,
        )

    async def _remove_status(self, character_id: UUID) -> None:
        deleted = await self._context.status_store.delete(character_id, self.identifier)
        if deleted:
            logger.info("Status removed; no eligible resources")
            self._publish_status_changed(character_id)

    def _publish_status_changed(self, character_id: UUID) -> None:
        bus = self._context.bus
        bus.publish(StatusChanged(character_id=character_id, identifier=self.identifier, domain=self.domain.value))
        bus.publish(
            StatusChanged(
                character_id=character_id,
                identifier=self.identifier,
                domain=self.domain.value,
                qualified=True,
            )
        )
