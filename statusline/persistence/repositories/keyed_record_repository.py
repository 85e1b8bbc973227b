"""
Generic keyed record repository.

Plain keyed storage for records with no computed behaviour (spellcasting
stats, features, spell slots): get by id, predicate find, save and delete.
"""

from collections.abc import Iterable
from typing import Any, Generic, NoReturn, TypeVar
from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError

from statusline.database import DatabaseManager
from statusline.exceptions import DatabaseError, ResourceNotFoundError, create_error_context
from statusline.persistence.predicates import KeyValuePredicate, find_by_predicates
from statusline.structured_logging.enhanced_logging_config import get_logger
from statusline.utils.error_logging import log_and_raise

logger = get_logger(__name__)

ModelT = TypeVar("ModelT")


class KeyedRecordRepository(Generic[ModelT]):
    """Repository for one model keyed by its ``id`` column."""

    def __init__(self, database: DatabaseManager, model: type[ModelT]) -> None:
        self._database = database
        self._model = model
        self._table = getattr(model, "__tablename__", model.__name__)

    def _raise_database_error(self, operation: str, error: Exception, **details: Any) -> NoReturn:
        context = create_error_context(operation=operation, metadata={"table": self._table})
        log_and_raise(
            DatabaseError,
            f"Database error during {operation} on {self._table}: {error}",
            context=context,
            details={**{k: str(v) for k, v in details.items()}, "error": str(error)},
            user_friendly=f"Failed to {operation.replace('_', ' ')}",
        )

    async def get(self, record_id: UUID) -> ModelT | None:
        """Get a record by id."""
        try:
            async with self._database.session_maker() as session:
                return await session.get(self._model, record_id)
        except (SQLAlchemyError, OSError) as e:
            self._raise_database_error("get_record", e, record_id=record_id)

    async def get_required(self, record_id: UUID) -> ModelT:
        """
        Get a record by id.

        Raises:
            ResourceNotFoundError: If no such record exists
        """
        record = await self.get(record_id)
        if record is None:
            raise ResourceNotFoundError(
                f"{self._model.__name__} {record_id} not found",
                context=create_error_context(operation="get_record"),
                resource_type=self._table,
                resource_id=str(record_id),
            )
        return record

    async def find(self, predicates: Iterable[KeyValuePredicate]) -> list[ModelT]:
        """Get every record matching all predicates."""
        predicates = list(predicates)
        try:
            async with self._database.session_maker() as session:
                return list(await find_by_predicates(session, self._model, predicates))
        except (SQLAlchemyError, OSError) as e:
            self._raise_database_error(
                "find_records", e, predicates=[(p.field, p.value) for p in predicates]
            )

    async def list_for_character(self, character_id: UUID) -> list[ModelT]:
        """Get every record belonging to a character."""
        return await self.find([KeyValuePredicate("character_id", character_id)])

    async def save(self, record: ModelT) -> ModelT:
        """Insert or update a record and return the committed instance."""
        try:
            async with self._database.session_maker() as session:
                merged = await session.merge(record)
                await session.commit()
                await session.refresh(merged)
        except (SQLAlchemyError, OSError) as e:
            self._raise_database_error("save_record", e, record_id=getattr(record, "id", None))
        logger.debug("Saved record", table=self._table, record_id=str(getattr(merged, "id", "")))
        return merged

    async def delete(self, record_id: UUID) -> bool:
        """Delete a record by id. Returns False if it did not exist."""
        try:
            async with self._database.session_maker() as session:
                result = await session.execute(delete(self._model).where(self._model.id == record_id))  # type: ignore[attr-defined]
                await session.commit()
        except (SQLAlchemyError, OSError) as e:
            self._raise_database_error("delete_record", e, record_id=record_id)
        deleted = bool(result.rowcount)
        logger.debug("Deleted record", table=self._table, record_id=str(record_id), deleted=deleted)
        return deleted
