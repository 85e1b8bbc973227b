"""
Exception hierarchy and error context for statusline.

Every error raised by the package derives from StatusLineError, which
carries a structured ErrorContext and logs itself on construction so that
failures inside a fire-and-forget recompute still reach observability.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from .structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class ErrorContext:
    """
    Contextual information for error handling.

    Identifies the character and status identifier a failure belongs to,
    plus the operation that was underway.
    """

    character_id: str | None = None
    identifier: str | None = None
    operation: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert context to dictionary for logging."""
        return {
            "character_id": self.character_id,
            "identifier": self.identifier,
            "operation": self.operation,
            "timestamp": self.timestamp.isoformat(),
            "metadata": self.metadata,
        }


class StatusLineError(Exception):
    """
    Base exception for all statusline errors.

    Provides structured error handling with context and metadata
    for proper error categorization and debugging.
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        details: dict[str, Any] | None = None,
        user_friendly: str | None = None,
    ):
        """
        Initialize statusline error.

        Args:
            message: Technical error message
            context: Error context information
            details: Additional error details
            user_friendly: User-friendly error message
        """
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext()
        self.details = details or {}
        self.user_friendly = user_friendly or message
        self.timestamp = datetime.now(UTC)

        self._log_error()

    def _log_error(self) -> None:
        """Log the error with structured context."""
        logger.error(
            "Statusline error occurred",
            error_type=self.__class__.__name__,
            message=self.message,
            context=self.context.to_dict(),
            details=self.details,
            timestamp=self.timestamp.isoformat(),
        )
        self.already_logged = True

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for reporting."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "user_friendly": self.user_friendly,
            "context": self.context.to_dict(),
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }


class DatabaseError(StatusLineError):
    """Persistence read or write failures."""

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        operation: str = "unknown",
        table: str | None = None,
        **kwargs,
    ):
        super().__init__(message, context, **kwargs)
        self.operation = operation
        self.table = table
        self.details["operation"] = operation
        if table:
            self.details["table"] = table


class DegenerateInputError(StatusLineError):
    """Weighted metrics were supplied but their total weight is zero."""

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        total_weight: float = 0.0,
        item_count: int = 0,
        **kwargs,
    ):
        super().__init__(message, context, **kwargs)
        self.total_weight = total_weight
        self.item_count = item_count
        self.details["total_weight"] = total_weight
        self.details["item_count"] = item_count


class ValidationError(StatusLineError):
    """Data validation errors."""

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        field: str | None = None,
        value: Any | None = None,
        **kwargs,
    ):
        super().__init__(message, context, **kwargs)
        self.field = field
        self.value = value
        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = str(value)


class ConfigurationError(StatusLineError):
    """Configuration and setup errors."""

    def __init__(self, message: str, context: ErrorContext | None = None, config_key: str | None = None, **kwargs):
        super().__init__(message, context, **kwargs)
        self.config_key = config_key
        if config_key:
            self.details["config_key"] = config_key


class ResourceNotFoundError(StatusLineError):
    """A keyed record the caller expected to exist is missing."""

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        resource_type: str | None = None,
        resource_id: str | None = None,
        **kwargs,
    ):
        super().__init__(message, context, **kwargs)
        self.resource_type = resource_type
        self.resource_id = resource_id
        if resource_type:
            self.details["resource_type"] = resource_type
        if resource_id:
            self.details["resource_id"] = resource_id


def create_error_context(**kwargs) -> ErrorContext:
    """
    Create an error context with the given parameters.

    Args:
        **kwargs: Context parameters (character_id, identifier, operation, metadata)

    Returns:
        ErrorContext instance
    """
    return ErrorContext(**kwargs)
