"""
Test configuration and fixtures for the statusline test suite.

Environment defaults are set before any statusline module loads its
configuration, so every test runs against in-memory SQLite with unit_test
logging.
"""

import os
from collections.abc import AsyncIterator
from uuid import UUID, uuid4

import pytest

os.environ.setdefault("LOGGING_ENVIRONMENT", "unit_test")
os.environ.setdefault("LOGGING_LEVEL", "WARNING")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from statusline.config import AppConfig, DatabaseConfig, reset_config  # noqa: E402
from statusline.context import StatusContext  # noqa: E402
from statusline.database import DatabaseManager  # noqa: E402
from statusline.structured_logging.logging_context import clear_status_context  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_config():
    """Reset cached configuration and bound log context around each test."""
    reset_config()
    clear_status_context()
    yield
    reset_config()
    clear_status_context()


@pytest.fixture
def character_id() -> UUID:
    return uuid4()


@pytest.fixture
async def database() -> AsyncIterator[DatabaseManager]:
    """In-memory SQLite database with the full schema created."""
    manager = DatabaseManager(DatabaseConfig(url="sqlite+aiosqlite:///:memory:"))
    await manager.create_schema()
    yield manager
    await manager.close()


@pytest.fixture
async def file_database(tmp_path) -> AsyncIterator[DatabaseManager]:
    """File SQLite database; each session gets its own connection, so concurrent writers are safe."""
    manager = DatabaseManager(DatabaseConfig(url=f"sqlite+aiosqlite:///{tmp_path / 'status.db'}"))
    await manager.create_schema()
    yield manager
    await manager.close()


@pytest.fixture
async def status_context(tmp_path) -> AsyncIterator[StatusContext]:
    """Fully wired context backed by a file SQLite database."""
    config = AppConfig(database=DatabaseConfig(url=f"sqlite+aiosqlite:///{tmp_path / 'status.db'}"))
    context = await StatusContext.create(config)
    yield context
    await context.close()
