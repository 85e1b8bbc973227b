"""
Context management utilities for status logging.

Binds the character and status identifier of the recompute cycle in flight
so every log line emitted during that cycle carries them.
"""

import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars


def bind_status_context(
    correlation_id: str | None = None,
    character_id: str | None = None,
    identifier: str | None = None,
    **kwargs,
) -> str:
    """
    Bind status recompute context to the current logging context.

    Args:
        correlation_id: Unique correlation ID for the cycle (generated if omitted)
        character_id: Character whose status is being computed
        identifier: Status identifier, e.g. "Status.Magical"
        **kwargs: Additional context variables

    Returns:
        The correlation ID that was bound
    """
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())

    context_vars = {
        "correlation_id": correlation_id,
        "character_id": character_id,
        "identifier": identifier,
        **kwargs,
    }

    # Remove None values
    context_vars = {k: v for k, v in context_vars.items() if v is not None}

    bind_contextvars(**context_vars)
    return correlation_id


def clear_status_context() -> None:
    """Clear the current status context from logging."""
    clear_contextvars()


def get_current_context() -> dict[str, Any]:
    """Get the current logging context."""
    try:
        return structlog.contextvars.get_contextvars()
    except (AttributeError, KeyError):
        return {}


@contextmanager
def bound_status_context(
    character_id: str | None = None,
    identifier: str | None = None,
    correlation_id: str | None = None,
    **kwargs,
) -> Iterator[str]:
    """
    Bind status context for the duration of a block, restoring the previous context afterwards.

    Yields:
        The correlation ID bound for the block
    """
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())
    context_vars = {
        "correlation_id": correlation_id,
        "character_id": character_id,
        "identifier": identifier,
        **kwargs,
    }
    with structlog.contextvars.bound_contextvars(**{k: v for k, v in context_vars.items() if v is not None}):
        yield correlation_id
