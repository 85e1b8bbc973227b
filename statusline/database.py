"""
Database engine and session management for statusline.

DatabaseManager owns one AsyncEngine and its session maker. It is created by
StatusContext and passed to the repositories; there is no module-level
singleton.
"""

from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from .config import DatabaseConfig
from .exceptions import DatabaseError, create_error_context
from .models.base import Base
from .structured_logging.enhanced_logging_config import get_logger
from .utils.error_logging import log_and_raise

logger = get_logger(__name__)


class DatabaseManager:
    """
    Async engine and session maker for the status store.

    In-memory SQLite shares one connection through StaticPool so every
    session sees the same database, which limits it to sequential use.
    File SQLite and PostgreSQL get one connection per session.
    """

    def __init__(self, config: DatabaseConfig) -> None:
        self.config = config
        self.database_url = config.url
        self.engine: AsyncEngine = create_async_engine(self.database_url, echo=config.echo, **self._pool_kwargs())
        self.session_maker: async_sessionmaker[AsyncSession] = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        logger.info("Database engine created", database_url=self.database_url, dialect=self.dialect_name)

    def _pool_kwargs(self) -> dict[str, Any]:
        if self.config.is_sqlite:
            if ":memory:" in self.database_url or self.database_url.endswith("://"):
                return {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
            return {}
        return {
            "pool_size": self.config.pool_size,
            "max_overflow": self.config.max_overflow,
            "pool_timeout": self.config.pool_timeout,
            "pool_pre_ping": True,
        }

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    async def create_schema(self) -> None:
        """Create all tables that do not exist yet."""
        context = create_error_context(operation="create_schema")
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError) as e:
            log_and_raise(
                DatabaseError,
                f"Failed to create schema: {e}",
                context=context,
                details={"error": str(e)},
                user_friendly="Status store could not be initialized",
            )
        logger.info("Database schema ready", tables=sorted(Base.metadata.tables))

    async def close(self) -> None:
        """Dispose of the engine and all pooled connections."""
        await self.engine.dispose()
        logger.info("Database engine disposed")
