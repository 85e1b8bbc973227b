"""
Logging processors for structlog event processing.

This module provides processors for sanitizing sensitive data, adding
correlation IDs and normalizing identifiers on status log entries.
"""

import re
import uuid
from typing import Any

# Sensitive patterns that should be redacted
# These patterns match whole words or specific suffixes/prefixes
SENSITIVE_PATTERNS = [
    r"\bpassword\b",
    r"\btoken\b",
    r"\bsecret\b",
    r"_key\b",
    r"^key$",
    r"\bcredential\b",
    r"\bauthorization\b",
]

# Safe field names that should never be redacted even if they match patterns
SAFE_FIELDS = {
    "status_key",
    "flight_key",
}


def sanitize_sensitive_data(_logger: Any, _name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Remove sensitive data from log entries.

    Database URLs in particular may carry credentials, so any field whose
    name looks like a secret is replaced with "[REDACTED]".

    Args:
        _logger: Logger instance (unused)
        _name: Logger name (unused)
        event_dict: Event dictionary to sanitize

    Returns:
        Sanitized event dictionary
    """

    def sanitize_dict(d: dict[str, Any]) -> dict[str, Any]:
        """Recursively sanitize dictionary values."""
        sanitized: dict[str, Any] = {}
        for key, value in d.items():
            if isinstance(value, dict):
                sanitized[key] = sanitize_dict(value)
                continue
            key_lower = str(key).lower()
            if key_lower in SAFE_FIELDS:
                sanitized[key] = value
            elif any(re.search(pattern, key_lower) for pattern in SENSITIVE_PATTERNS):
                sanitized[key] = "[REDACTED]"
            else:
                sanitized[key] = value
        return sanitized

    return sanitize_dict(event_dict)


def redact_database_url(_logger: Any, _name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Strip the password portion from any ``database_url`` field.

    Args:
        _logger: Logger instance (unused)
        _name: Logger name (unused)
        event_dict: Event dictionary to sanitize

    Returns:
        Event dictionary with the URL password masked
    """
    url = event_dict.get("database_url")
    if isinstance(url, str):
        event_dict["database_url"] = re.sub(r"(://[^:/@]+:)[^@]+@", r"\1***@", url)
    return event_dict


def add_correlation_id(_logger: Any, _name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Add correlation ID to log entries if not already present.

    Args:
        _logger: Logger instance (unused)
        _name: Logger name (unused)
        event_dict: Event dictionary to enhance

    Returns:
        Enhanced event dictionary with correlation ID
    """
    if "correlation_id" not in event_dict:
        event_dict["correlation_id"] = str(uuid.uuid4())

    return event_dict


def stringify_character_ids(_logger: Any, _name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Render UUID-valued character ids as plain strings for JSON output."""
    for key in ("character_id", "previous_character_id"):
        value = event_dict.get(key)
        if isinstance(value, uuid.UUID):
            event_dict[key] = str(value)
    return event_dict
