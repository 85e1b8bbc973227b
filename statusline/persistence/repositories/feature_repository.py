"""
Feature repository.

Features are keyed storage; only the tracked ones (limited uses) feed the
tracked-ability status. Every committed mutation publishes FeaturesChanged.
"""

from typing import Any
from uuid import UUID

from statusline.database import DatabaseManager
from statusline.events.event_bus import EventBus
from statusline.events.event_types import FeaturesChanged
from statusline.models.feature import Feature
from statusline.persistence.predicates import KeyValuePredicate
from statusline.persistence.resource_validation import validate_resource_counts
from statusline.structured_logging.enhanced_logging_config import get_logger

from .keyed_record_repository import KeyedRecordRepository

logger = get_logger(__name__)

_MUTABLE_FIELDS = {
    "name",
    "level",
    "character_class",
    "description",
    "is_tracked",
    "tracked_max",
    "tracked_used",
}


class FeatureRepository(KeyedRecordRepository[Feature]):
    """Repository for the features table."""

    def __init__(self, database: DatabaseManager, bus: EventBus | None = None) -> None:
        super().__init__(database, Feature)
        self._bus = bus

    def _publish_changed(self, character_id: UUID) -> None:
        if self._bus is not None:
            self._bus.publish(FeaturesChanged(character_id=character_id))

    async def list_tracked(self, character_id: UUID) -> list[Feature]:
        """Get every tracked feature of a character."""
        return await self.find(
            [KeyValuePredicate("character_id", character_id), KeyValuePredicate("is_tracked", True)]
        )

    async def add_feature(
        self,
        character_id: UUID,
        name: str,
        *,
        level: int | None = None,
        character_class: str = "",
        description: str = "",
        is_tracked: bool = False,
        tracked_max: int = 0,
        tracked_used: int = 0,
    ) -> Feature:
        """
        Add a feature for a character.

        Raises:
            ValidationError: If the tracked counts are inconsistent
        """
        validate_resource_counts(
            level=level, maximum=tracked_max, used=tracked_used, operation="add_feature", record_type="feature"
        )
        feature = await self.save(
            Feature(
                character_id=character_id,
                name=name,
                level=level,
                character_class=character_class,
                description=description,
                is_tracked=is_tracked,
                tracked_max=tracked_max,
                tracked_used=tracked_used,
            )
        )
        logger.info("Feature added", character_id=character_id, feature_id=str(feature.id), tracked=is_tracked)
        self._publish_changed(character_id)
        return feature

    async def update_feature(self, feature_id: UUID, **changes: Any) -> Feature:
        """
        Apply field changes to a feature.

        Raises:
            ValueError: If a change names a field that cannot be updated
            ResourceNotFoundError: If the feature does not exist
            ValidationError: If the resulting counts are inconsistent
        """
        unknown = set(changes) - _MUTABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update feature fields: {sorted(unknown)}")

        feature = await self.get_required(feature_id)
        for field_name, value in changes.items():
            setattr(feature, field_name, value)
        validate_resource_counts(
            level=feature.level,
            maximum=feature.tracked_max,
            used=feature.tracked_used,
            operation="update_feature",
            record_type="feature",
        )
        feature = await self.save(feature)
        logger.debug("Feature updated", character_id=feature.character_id, feature_id=str(feature_id))
        self._publish_changed(feature.character_id)
        return feature

    async def delete_feature(self, feature_id: UUID) -> bool:
        """Delete a feature. Returns False if it did not exist."""
        feature = await self.get(feature_id)
        if feature is None:
            return False
        deleted = await self.delete(feature_id)
        if deleted:
            self._publish_changed(feature.character_id)
        return deleted
