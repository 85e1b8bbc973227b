"""
Error logging utilities for statusline.

Provides the standard "log, then raise" helper used by the repositories so
every persistence failure is recorded with its context before it surfaces.
"""

from typing import Any, NoReturn

from ..exceptions import ErrorContext, StatusLineError, create_error_context
from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


def log_and_raise(
    exception_class: type[StatusLineError],
    message: str,
    context: ErrorContext | None = None,
    details: dict[str, Any] | None = None,
    user_friendly: str | None = None,
    logger_name: str | None = None,
) -> NoReturn:
    """
    Log an error and raise a statusline exception.

    Args:
        exception_class: The statusline exception class to raise
        message: Technical error message
        context: Error context information
        details: Additional error details
        user_friendly: User-friendly error message
        logger_name: Specific logger name to use (defaults to current module)

    Raises:
        The specified statusline exception
    """
    error_logger = get_logger(logger_name) if logger_name else logger

    if context is None:
        context = create_error_context()

    error_logger.error(
        f"Error logged and exception raised: {message}",
        error_type=exception_class.__name__,
        details=details or {},
        user_friendly=user_friendly,
        context=context.to_dict(),
    )

    raise exception_class(
        message=message,
        context=context,
        details=details,
        user_friendly=user_friendly,
    )
