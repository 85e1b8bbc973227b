"""
Status repository: the keyed store behind every status component.

``upsert`` is a single INSERT .. ON CONFLICT (character_id, identifier)
DO UPDATE statement, so two concurrent writers for the same key can only
ever produce "last write wins", never a duplicate row.
"""

from datetime import UTC, datetime
from typing import Any, NoReturn, cast
from uuid import UUID, uuid4

from sqlalchemy import Table, delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError

from statusline.database import DatabaseManager
from statusline.exceptions import DatabaseError, create_error_context
from statusline.models.status import Status
from statusline.persistence.predicates import KeyValuePredicate, build_predicate_query
from statusline.schemas.status import StatusSnapshot
from statusline.structured_logging.enhanced_logging_config import get_logger
from statusline.utils.error_logging import log_and_raise

logger = get_logger(__name__)

_INSERTS = {
    "sqlite": sqlite_insert,
    "postgresql": pg_insert,
}


def _utc_now() -> datetime:
    """Naive UTC timestamp for TIMESTAMP WITHOUT TIME ZONE columns."""
    return datetime.now(UTC).replace(tzinfo=None)


class StatusRepository:
    """Repository for the statuses table."""

    def __init__(self, database: DatabaseManager) -> None:
        self._database = database
        dialect = database.dialect_name
        if dialect not in _INSERTS:
            raise ValueError(f"Status store does not support the '{dialect}' dialect")
        self._insert = _INSERTS[dialect]

    def _raise(self, operation: str, error: Exception, character_id: UUID, identifier: str | None) -> NoReturn:
        context = create_error_context(
            character_id=str(character_id), identifier=identifier, operation=operation
        )
        log_and_raise(
            DatabaseError,
            f"Database error during {operation}: {error}",
            context=context,
            details={"character_id": str(character_id), "identifier": identifier, "error": str(error)},
            user_friendly="Failed to access character status",
        )

    @staticmethod
    def _key_predicates(character_id: UUID, identifier: str) -> list[KeyValuePredicate]:
        return [KeyValuePredicate("character_id", character_id), KeyValuePredicate("identifier", identifier)]

    async def find_one(self, character_id: UUID, identifier: str) -> StatusSnapshot | None:
        """Get the status for (character_id, identifier), if any."""
        try:
            async with self._database.session_maker() as session:
                result = await session.execute(
                    build_predicate_query(Status, self._key_predicates(character_id, identifier))
                )
                row = result.scalars().first()
        except (SQLAlchemyError, OSError) as e:
            self._raise("find_status", e, character_id, identifier)
        return StatusSnapshot.from_row(row) if row is not None else None

    async def find_all(self, character_id: UUID) -> list[StatusSnapshot]:
        """Get every status of a character ordered by identifier."""
        try:
            async with self._database.session_maker() as session:
                result = await session.execute(
                    select(Status).where(Status.character_id == character_id).order_by(Status.identifier)
                )
                rows = result.scalars().all()
        except (SQLAlchemyError, OSError) as e:
            self._raise("find_statuses", e, character_id, None)
        return [StatusSnapshot.from_row(row) for row in rows]

    async def upsert(self, snapshot: StatusSnapshot) -> StatusSnapshot:
        """
        Insert or replace the status keyed by (character_id, identifier).

        Returns:
            The committed snapshot, with the store-assigned version

        Raises:
            DatabaseError: If the write fails; the previous row is untouched
        """
        table = cast(Table, Status.__table__)
        now = _utc_now()
        stmt: Any = self._insert(table).values(
            id=uuid4(),
            character_id=snapshot.character_id,
            identifier=snapshot.identifier,
            name=snapshot.display_name,
            type=snapshot.severity.value,
            value=snapshot.magnitude,
            version=1,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["character_id", "identifier"],
            set_={
                table.c.name: snapshot.display_name,
                table.c.type: snapshot.severity.value,
                table.c.value: snapshot.magnitude,
                table.c.version: table.c.version + 1,
                table.c.updated_at: now,
            },
        )

        try:
            async with self._database.session_maker() as session:
                await session.execute(stmt)
                result = await session.execute(
                    build_predicate_query(Status, self._key_predicates(snapshot.character_id, snapshot.identifier))
                )
                row = result.scalars().one()
                committed = StatusSnapshot.from_row(row)
                await session.commit()
        except (SQLAlchemyError, OSError) as e:
            self._raise("upsert_status", e, snapshot.character_id, snapshot.identifier)

        logger.debug(
            "Status upserted",
            character_id=snapshot.character_id,
            identifier=snapshot.identifier,
            value=committed.magnitude,
            version=committed.version,
        )
        return committed

    async def delete(self, character_id: UUID, identifier: str) -> bool:
        """Delete the status; returns False if there was none."""
        try:
            async with self._database.session_maker() as session:
                result = await session.execute(
                    delete(Status).where(Status.character_id == character_id, Status.identifier == identifier)
                )
                await session.commit()
        except (SQLAlchemyError, OSError) as e:
            self._raise("delete_status", e, character_id, identifier)
        deleted = bool(result.rowcount)
        logger.debug("Status delete", character_id=character_id, identifier=identifier, deleted=deleted)
        return deleted
