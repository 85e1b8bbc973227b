"""
Structlog-based logging configuration for statusline.

This module is the single entry point for logging: it installs the
processor chain (sanitization, correlation IDs, context variables,
timestamps) and hands out bound loggers.

CORRECT USAGE:
    from statusline.structured_logging.enhanced_logging_config import get_logger
    logger = get_logger(__name__)
    logger.info("Status upserted", character_id=character_id, value=0.5)
"""

import json
import logging
import os
import sys
from typing import Any, cast

import structlog
from structlog.contextvars import merge_contextvars
from structlog.stdlib import BoundLogger, LoggerFactory

from statusline.structured_logging.logging_context import (
    bind_status_context as _bind_status_context,
)
from statusline.structured_logging.logging_context import (
    bound_status_context as _bound_status_context,
)
from statusline.structured_logging.logging_context import (
    clear_status_context as _clear_status_context,
)
from statusline.structured_logging.logging_context import (
    get_current_context as _get_current_context,
)
from statusline.structured_logging.logging_processors import (
    add_correlation_id,
    redact_database_url,
    sanitize_sensitive_data,
    stringify_character_ids,
)

# Re-export context helpers so callers need a single import path
bind_status_context = _bind_status_context
bound_status_context = _bound_status_context
clear_status_context = _clear_status_context
get_current_context = _get_current_context

VALID_ENVIRONMENTS = ("local", "unit_test", "e2e_test", "production")

# NOTE: Infrastructure code may use structlog.get_logger() directly; all other
# modules must use get_logger() from this module.
logger = structlog.get_logger(__name__)


class _LoggingState:
    """State container for logging initialization to avoid global statements."""

    initialized: bool = False
    signature: str | None = None


_logging_state = _LoggingState()


def detect_environment() -> str:
    """
    Detect the current environment based on various indicators.

    Returns:
        Environment name: "e2e_test", "unit_test", "local", or "production"
    """
    if "pytest" in sys.modules:
        return "unit_test"

    logging_env = os.getenv("LOGGING_ENVIRONMENT", "")
    if logging_env in VALID_ENVIRONMENTS:
        return logging_env

    return "local"


def configure_structlog(
    environment: str | None = None,
    log_level: str = "INFO",
    log_format: str = "json",
) -> None:
    """
    Configure structlog with sanitization, correlation IDs and context variables.

    Args:
        environment: Environment name (auto-detected if None)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: "json" for machine-readable output, "human" for console output
    """
    if environment is None:
        environment = detect_environment()

    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=True)

    base_processors: list[Any] = [
        # Security first - sanitize sensitive data
        sanitize_sensitive_data,
        redact_database_url,
        # Merge context variables bound for the current recompute cycle
        merge_contextvars,
        add_correlation_id,
        stringify_character_ids,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    renderer: Any
    if log_format == "human":
        renderer = structlog.dev.ConsoleRenderer(colors=False)
    else:
        renderer = structlog.processors.JSONRenderer(default=str)

    structlog.configure(
        processors=base_processors + [renderer],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=BoundLogger,
        cache_logger_on_first_use=False,
    )

    structlog.get_logger(__name__).debug(
        "Structlog configured", environment=environment, log_level=log_level.upper(), log_format=log_format
    )


def setup_logging(logging_config: Any, *, force_reconfigure: bool = False) -> None:
    """
    Set up logging from a ``LoggingConfig`` instance.

    Repeated calls with the same configuration are ignored unless
    ``force_reconfigure`` is set.

    Args:
        logging_config: LoggingConfig (or any object with environment/level/format)
        force_reconfigure: Re-apply configuration even if already initialized
    """
    settings = {
        "environment": logging_config.environment,
        "level": logging_config.level,
        "format": logging_config.format,
    }
    config_signature = json.dumps(settings, sort_keys=True, default=str)

    if _logging_state.initialized and not force_reconfigure and _logging_state.signature == config_signature:
        get_logger("statusline.structured_logging.setup").debug(
            "setup_logging skipped; logging system already initialized",
            config_signature=_logging_state.signature,
        )
        return

    configure_structlog(settings["environment"], settings["level"], settings["format"])

    _logging_state.initialized = True
    _logging_state.signature = config_signature


def get_logger(name: str) -> Any:  # Returns BoundLogger but typed as Any for flexibility
    """
    Get a Structlog logger with the specified name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured Structlog logger instance
    """
    return structlog.get_logger(name)


def log_exception_once(
    bound_logger: BoundLogger,
    level: str,
    message: str,
    *,
    exc: Exception | None = None,
    mark_logged: bool = True,
    **kwargs: Any,
) -> None:
    """
    Log an exception once, respecting exceptions that have already been logged.

    Args:
        bound_logger: Structlog bound logger instance.
        level: Logging level to use (for example, "error" or "warning").
        message: Log message to emit.
        exc: Optional exception to include in the log entry.
        mark_logged: When True, mark the exception as logged to prevent duplicates.
        **kwargs: Additional key-value pairs for structured logging.
    """
    if exc is not None:
        if getattr(exc, "already_logged", False):
            return
        kwargs.setdefault("error_type", type(exc).__name__)
        kwargs.setdefault("error", str(exc))

    log_method = getattr(bound_logger, level.lower(), bound_logger.error)
    log_method(message, **kwargs)

    if exc is not None and mark_logged:
        marker = getattr(exc, "mark_logged", None)
        if callable(marker):
            marker()
        else:
            cast(Any, exc).already_logged = True
