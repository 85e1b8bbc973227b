"""
Unit tests for StatusRepository.

Runs against in-memory SQLite, which supports the same ON CONFLICT upsert as
PostgreSQL.
"""

import asyncio
from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from statusline.exceptions import DatabaseError
from statusline.models.status import Status
from statusline.persistence.repositories.status_repository import StatusRepository
from statusline.schemas.status import Severity, StatusSnapshot


def make_snapshot(character_id, identifier="Status.Magical", magnitude=0.5, severity=Severity.INFO):
    return StatusSnapshot(
        character_id=character_id,
        identifier=identifier,
        display_name="Waning",
        severity=severity,
        magnitude=magnitude,
    )


@pytest.fixture
def repository(database):
    return StatusRepository(database)


async def count_rows(database) -> int:
    async with database.session_maker() as session:
        return (await session.execute(select(func.count()).select_from(Status))).scalar_one()


class TestStatusRepository:
    """Test status store operations."""

    @pytest.mark.asyncio
    async def test_upsert_creates_status(self, repository, character_id):
        """Test the first upsert inserts version 1."""
        committed = await repository.upsert(make_snapshot(character_id))

        assert committed.version == 1
        assert committed.magnitude == 0.5
        assert await repository.find_one(character_id, "Status.Magical") == committed

    @pytest.mark.asyncio
    async def test_upsert_replaces_status(self, repository, database, character_id):
        """Test a second upsert updates the same row and bumps the version."""
        await repository.upsert(make_snapshot(character_id, magnitude=0.5))
        committed = await repository.upsert(make_snapshot(character_id, magnitude=0.1, severity=Severity.DANGER))

        assert committed.version == 2
        assert committed.magnitude == 0.1
        assert committed.severity == Severity.DANGER
        assert await count_rows(database) == 1

    @pytest.mark.asyncio
    async def test_concurrent_upserts_never_duplicate(self, file_database, character_id):
        """Test racing upserts for one key leave exactly one row."""
        repository = StatusRepository(file_database)
        await asyncio.gather(*(repository.upsert(make_snapshot(character_id, magnitude=i / 10)) for i in range(5)))

        assert await count_rows(file_database) == 1
        stored = await repository.find_one(character_id, "Status.Magical")
        assert stored.version == 5

    @pytest.mark.asyncio
    async def test_find_one_missing(self, repository, character_id):
        """Test a missing status returns None."""
        assert await repository.find_one(character_id, "Status.Magical") is None

    @pytest.mark.asyncio
    async def test_find_all_orders_by_identifier(self, repository, character_id):
        """Test a character's statuses come back sorted by identifier."""
        await repository.upsert(make_snapshot(character_id, identifier="Status.Tracked"))
        await repository.upsert(make_snapshot(character_id, identifier="Status.Magical"))
        await repository.upsert(make_snapshot(uuid4(), identifier="Status.Magical"))

        statuses = await repository.find_all(character_id)

        assert [s.identifier for s in statuses] == ["Status.Magical", "Status.Tracked"]

    @pytest.mark.asyncio
    async def test_delete(self, repository, character_id):
        """Test delete reports whether a row existed."""
        await repository.upsert(make_snapshot(character_id))

        assert await repository.delete(character_id, "Status.Magical") is True
        assert await repository.delete(character_id, "Status.Magical") is False
        assert await repository.find_one(character_id, "Status.Magical") is None

    @pytest.mark.asyncio
    async def test_upsert_failure_raises_database_error(self, repository, character_id):
        """Test storage failures surface as DatabaseError with context."""
        failing_session = MagicMock()
        failing_session.__aenter__.side_effect = OperationalError("INSERT", {}, Exception("disk I/O error"))

        with patch.object(repository._database, "session_maker", return_value=failing_session):
            with pytest.raises(DatabaseError) as exc_info:
                await repository.upsert(make_snapshot(character_id))

        assert exc_info.value.context.operation == "upsert_status"
        assert exc_info.value.context.identifier == "Status.Magical"

    @pytest.mark.asyncio
    async def test_upsert_failure_leaves_previous_row(self, repository, character_id):
        """Test a failed write does not touch the stored status."""
        previous = await repository.upsert(make_snapshot(character_id, magnitude=0.9))
        failing_session = MagicMock()
        failing_session.__aenter__.side_effect = OperationalError("INSERT", {}, Exception("locked"))

        with patch.object(repository._database, "session_maker", return_value=failing_session):
            with pytest.raises(DatabaseError):
                await repository.upsert(make_snapshot(character_id, magnitude=0.1))

        assert await repository.find_one(character_id, "Status.Magical") == previous

    def test_unsupported_dialect_rejected(self):
        """Test dialects without ON CONFLICT upsert are refused."""
        database = MagicMock(dialect_name="mysql")
        with pytest.raises(ValueError, match="mysql"):
            StatusRepository(database)
