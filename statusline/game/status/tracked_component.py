"""Tracked-ability status: limited-use class features such as Rage or Channel Divinity."""

from uuid import UUID

from ...events.event_types import FEATURES_CHANGED
from ...schemas.status import DomainKind, RawMetricItem
from .component import StatusComponent


def tracked_feature_weight(level: int, base: float = 1.0, delta: float = 0.5) -> float:
    """Weight of a tracked feature: ``base + delta * level``, flatter than spell slots."""
    return base + delta * level


class TrackedAbilityStatusComponent(StatusComponent):
    """Aggregates tracked feature usage into Status.Tracked."""

    identifier = "Status.Tracked"
    domain = DomainKind.TRACKED
    data_changed_topics = (FEATURES_CHANGED,)

    async def load_raw_items(self, character_id: UUID) -> list[RawMetricItem]:
        """Only tracked features contribute; untracked ones have no use counter."""
        features = await self._context.features.list_tracked(character_id)
        return [
            RawMetricItem(level=feature.level, capacity=feature.tracked_max, consumed=feature.tracked_used)
            for feature in features
        ]

    def weight_for_level(self, level: int) -> float:
        settings = self._context.config.status
        return tracked_feature_weight(level, settings.tracked_weight_base, settings.tracked_weight_delta)
