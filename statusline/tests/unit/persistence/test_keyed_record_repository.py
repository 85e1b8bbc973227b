"""Unit tests for KeyedRecordRepository."""

from uuid import uuid4

import pytest

from statusline.exceptions import ResourceNotFoundError
from statusline.models.spell_stats import SpellStats
from statusline.persistence.predicates import KeyValuePredicate
from statusline.persistence.repositories.keyed_record_repository import KeyedRecordRepository


@pytest.fixture
def repository(database):
    return KeyedRecordRepository(database, SpellStats)


class TestKeyedRecordRepository:
    """Test generic keyed storage."""

    @pytest.mark.asyncio
    async def test_save_and_get(self, repository, character_id):
        """Test a saved record can be read back by id."""
        stats = await repository.save(SpellStats(character_id=character_id, casting_ability="wisdom"))

        loaded = await repository.get(stats.id)

        assert loaded is not None
        assert loaded.casting_ability == "wisdom"

    @pytest.mark.asyncio
    async def test_save_updates_existing(self, repository, character_id):
        """Test saving a modified record updates it in place."""
        stats = await repository.save(SpellStats(character_id=character_id, casting_ability="wisdom"))
        stats.casting_ability = "charisma"

        await repository.save(stats)

        assert (await repository.get_required(stats.id)).casting_ability == "charisma"
        assert len(await repository.list_for_character(character_id)) == 1

    @pytest.mark.asyncio
    async def test_get_required_missing(self, repository):
        """Test a missing record raises ResourceNotFoundError."""
        missing = uuid4()
        with pytest.raises(ResourceNotFoundError) as exc_info:
            await repository.get_required(missing)
        assert exc_info.value.resource_id == str(missing)

    @pytest.mark.asyncio
    async def test_find_by_predicate(self, repository, character_id):
        """Test predicate finds filter on column values."""
        await repository.save(SpellStats(character_id=character_id, casting_ability="wisdom"))
        await repository.save(SpellStats(character_id=uuid4(), casting_ability="intelligence"))

        found = await repository.find([KeyValuePredicate("casting_ability", "wisdom")])

        assert [s.character_id for s in found] == [character_id]

    @pytest.mark.asyncio
    async def test_delete(self, repository, character_id):
        """Test delete reports whether the record existed."""
        stats = await repository.save(SpellStats(character_id=character_id))

        assert await repository.delete(stats.id) is True
        assert await repository.delete(stats.id) is False
        assert await repository.get(stats.id) is None
