"""
Pydantic-based configuration models for statusline.

All settings are read from environment variables (and an optional .env
file) through pydantic-settings, validated at construction time.
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from ..structured_logging.enhanced_logging_config import VALID_ENVIRONMENTS, get_logger

logger = get_logger(__name__)


class DatabaseConfig(BaseSettings):
    """Status store database configuration."""

    url: str = Field(default="sqlite+aiosqlite:///statusline.db", description="Async SQLAlchemy database URL")
    echo: bool = Field(default=False, description="Echo SQL statements")

    # Connection pool configuration (ignored for SQLite)
    pool_size: int = Field(default=5, description="Number of connections to maintain in pool")
    max_overflow: int = Field(default=10, description="Additional connections beyond pool_size")
    pool_timeout: int = Field(default=30, description="Seconds to wait for connection from pool")

    @field_validator("url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL format - SQLite or PostgreSQL."""
        if not v:
            logger.error("Database URL validation failed - empty URL")
            raise ValueError("Database URL cannot be empty")
        if not (v.startswith("sqlite") or v.startswith("postgresql")):
            logger.error("Database URL validation failed - invalid protocol", url_preview=v[:50])
            raise ValueError("Database URL must start with 'sqlite' or 'postgresql'")
        # Async drivers are required by the status store
        if v.startswith("postgresql://"):
            v = v.replace("postgresql://", "postgresql+asyncpg://", 1)
        elif v.startswith("sqlite://"):
            v = v.replace("sqlite://", "sqlite+aiosqlite://", 1)
        return v

    @field_validator("pool_size", "max_overflow", "pool_timeout")
    @classmethod
    def validate_pool_numbers(cls, v: int) -> int:
        """Pool sizing values must not be negative."""
        if v < 0:
            raise ValueError("Pool settings must be non-negative")
        return v

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    model_config = {"env_prefix": "DATABASE_", "case_sensitive": False, "extra": "ignore"}


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    environment: str = Field(default="local", description="Logging environment")
    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="json", description="Log format")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate logging environment."""
        if v not in VALID_ENVIRONMENTS:
            logger.error("Invalid logging environment", environment=v, valid_environments=VALID_ENVIRONMENTS)
            raise ValueError(f"Environment must be one of {list(VALID_ENVIRONMENTS)}, got '{v}'")
        return v

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}, got '{v}'")
        return v_upper

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate log format."""
        valid_formats = ["json", "human"]
        if v not in valid_formats:
            raise ValueError(f"Log format must be one of {valid_formats}, got '{v}'")
        return v

    model_config = {"env_prefix": "LOGGING_", "case_sensitive": False, "extra": "ignore"}


class StatusConfig(BaseSettings):
    """Tuning for the per-domain weight formulas and degenerate-input handling."""

    magical_weight_base: float = Field(default=1.0, description="Constant term of the spell slot weight")
    magical_weight_delta: float = Field(default=1.5, description="Per-level increment of the spell slot weight")
    tracked_weight_base: float = Field(default=1.0, description="Constant term of the tracked feature weight")
    tracked_weight_delta: float = Field(default=0.5, description="Per-level increment of the tracked feature weight")
    zero_weight_policy: Literal["raise", "empty"] = Field(
        default="raise",
        description="'raise' keeps the stored status on zero total weight, 'empty' deletes it",
    )

    @field_validator("magical_weight_base", "tracked_weight_base")
    @classmethod
    def validate_base(cls, v: float) -> float:
        """A negative base could make weights negative."""
        if v < 0:
            raise ValueError("Weight base must be non-negative")
        return v

    @field_validator("magical_weight_delta", "tracked_weight_delta")
    @classmethod
    def validate_delta(cls, v: float) -> float:
        """Weights must be strictly increasing in level."""
        if v <= 0:
            raise ValueError("Weight delta must be positive")
        return v

    model_config = {"env_prefix": "STATUS_", "case_sensitive": False, "extra": "ignore"}


class AppConfig(BaseSettings):
    """
    Composite application configuration.

    Aggregates the database, logging and status sections.
    Access via get_config().
    """

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    status: StatusConfig = Field(default_factory=StatusConfig)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "case_sensitive": False, "extra": "ignore"}
