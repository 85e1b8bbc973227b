"""
Explicit session context for the status subsystem.

One StatusContext is built per process or session and handed to every
status component at construction time. It carries the active character,
the event bus, the database and the repositories, so nothing in the
subsystem reaches for global state.
"""

from uuid import UUID

from .config import AppConfig, get_config
from .database import DatabaseManager
from .events.event_bus import EventBus
from .events.event_types import ActiveCharacterChanged
from .models.spell_stats import SpellStats
from .persistence.protocols import StatusStoreProtocol
from .persistence.repositories.feature_repository import FeatureRepository
from .persistence.repositories.keyed_record_repository import KeyedRecordRepository
from .persistence.repositories.spell_slot_repository import SpellSlotRepository
from .persistence.repositories.status_repository import StatusRepository
from .structured_logging.enhanced_logging_config import get_logger, setup_logging

logger = get_logger(__name__)


class StatusContext:
    """Active character, bus, store and data collaborators shared by the status components."""

    def __init__(
        self,
        *,
        config: AppConfig,
        bus: EventBus,
        database: DatabaseManager,
        status_store: StatusStoreProtocol,
        spell_slots: SpellSlotRepository,
        features: FeatureRepository,
        spell_stats: KeyedRecordRepository[SpellStats],
        active_character_id: UUID | None = None,
    ) -> None:
        self.config = config
        self.bus = bus
        self.database = database
        self.status_store = status_store
        self.spell_slots = spell_slots
        self.features = features
        self.spell_stats = spell_stats
        self._active_character_id = active_character_id

    @classmethod
    async def create(cls, config: AppConfig | None = None, *, bus: EventBus | None = None) -> "StatusContext":
        """
        Build a context from configuration: logging, database schema, bus and repositories.

        Raises:
            DatabaseError: If the schema cannot be created
        """
        config = config or get_config()
        setup_logging(config.logging)

        bus = bus or EventBus()
        database = DatabaseManager(config.database)
        await database.create_schema()

        context = cls(
            config=config,
            bus=bus,
            database=database,
            status_store=StatusRepository(database),
            spell_slots=SpellSlotRepository(database, bus),
            features=FeatureRepository(database, bus),
            spell_stats=KeyedRecordRepository(database, SpellStats),
        )
        logger.info("Status context created", dialect=database.dialect_name)
        return context

    @property
    def active_character_id(self) -> UUID | None:
        return self._active_character_id

    def activate_character(self, character_id: UUID | None) -> None:
        """Switch the active character and announce it; a no-op if it is already active."""
        previous = self._active_character_id
        if previous == character_id:
            return
        self._active_character_id = character_id
        logger.info("Active character changed", character_id=character_id, previous_character_id=previous)
        if character_id is not None:
            self.bus.publish(ActiveCharacterChanged(character_id=character_id, previous_character_id=previous))

    async def close(self) -> None:
        """Stop the bus and release database connections."""
        await self.bus.shutdown()
        await self.database.close()
