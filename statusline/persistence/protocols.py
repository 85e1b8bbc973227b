"""
Repository protocols for the statusline persistence layer.

Status components depend on these protocols rather than on concrete
repositories, so tests can substitute in-memory or failing stores.
"""

# pylint: disable=unnecessary-ellipsis  # Reason: Protocol method bodies use ... per typing.Protocol convention

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol
from uuid import UUID

if TYPE_CHECKING:
    from statusline.schemas.status import StatusSnapshot


class StatusStoreProtocol(Protocol):
    """
    Keyed status persistence.

    Implemented by statusline.persistence.repositories.status_repository.StatusRepository.
    """

    async def find_one(self, character_id: UUID, identifier: str) -> StatusSnapshot | None:
        """Get the status for (character_id, identifier), if any."""
        ...

    async def find_all(self, character_id: UUID) -> list[StatusSnapshot]:
        """Get every status of a character ordered by identifier."""
        ...

    async def upsert(self, snapshot: StatusSnapshot) -> StatusSnapshot:
        """Insert or replace the status keyed by (character_id, identifier) and return the committed value."""
        ...

    async def delete(self, character_id: UUID, identifier: str) -> bool:
        """Delete the status; returns False if there was none."""
        ...

