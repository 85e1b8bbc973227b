"""Status schemas: severity classes, raw metric items and persisted status snapshots."""

from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import Field, model_validator

from .base import FrozenBaseModel


class Severity(str, Enum):
    """Display severity of a status; the value doubles as the UI colour class."""

    DANGER = "danger"
    WARNING = "warning"
    INFO = "info"
    SUCCESS = "success"


class DomainKind(str, Enum):
    """Metric domains that have a status component."""

    MAGICAL = "magical"
    TRACKED = "tracked"


class RawMetricItem(FrozenBaseModel):
    """
    One raw resource contributing to a domain status (a spell slot, a tracked feature).

    An item without ``level`` is skipped entirely by aggregation.
    """

    level: int | None = Field(default=None, ge=1)
    capacity: int = Field(default=0, ge=0)
    consumed: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def validate_consumed_within_capacity(self) -> "RawMetricItem":
        if self.consumed > self.capacity:
            raise ValueError(f"consumed ({self.consumed}) cannot exceed capacity ({self.capacity})")
        return self

    @property
    def remaining_fraction(self) -> float:
        """Fraction of the resource still available; 0 when capacity is 0."""
        if self.capacity <= 0:
            return 0.0
        return (self.capacity - self.consumed) / self.capacity


class StatusSnapshot(FrozenBaseModel):
    """
    Complete target value of one Status record.

    Constructed in full before any write so the store never sees a partial
    status. ``version`` is assigned by the store.
    """

    character_id: UUID
    identifier: str = Field(min_length=1, max_length=64)
    display_name: str = Field(min_length=1, max_length=64)
    severity: Severity
    magnitude: float = Field(ge=0.0, le=1.0)
    version: int = Field(default=0, ge=0)

    @classmethod
    def from_row(cls, row: Any) -> "StatusSnapshot":
        """Build a snapshot from a ``Status`` ORM row."""
        return cls(
            character_id=row.character_id,
            identifier=row.identifier,
            display_name=row.name,
            severity=Severity(row.type),
            magnitude=row.value,
            version=row.version,
        )

    def to_record(self) -> dict[str, Any]:
        """Wire/at-rest representation: characterId, identifier, name, type, value."""
        return {
            "characterId": str(self.character_id),
            "identifier": self.identifier,
            "name": self.display_name,
            "type": self.severity.value,
            "value": self.magnitude,
        }
