"""
Configuration module for statusline.

Type-safe, validated configuration using Pydantic BaseSettings.

Usage:
    from statusline.config import get_config

    config = get_config()
    logger.info("Database configuration", database_url=config.database.url)
"""

import sys
import threading
from functools import lru_cache
from os import getenv

from .models import AppConfig, DatabaseConfig, LoggingConfig, StatusConfig

__all__ = ["get_config", "reset_config", "AppConfig", "DatabaseConfig", "LoggingConfig", "StatusConfig"]

_config_lock = threading.Lock()


def _is_test_mode() -> bool:
    """
    Detect if running in test environment.

    Returns:
        bool: True if running under pytest, False otherwise
    """
    if "pytest" in sys.modules:
        return True
    return bool(getenv("PYTEST_CURRENT_TEST"))


@lru_cache(maxsize=1)
def _get_config_cached() -> AppConfig:
    """Production config loader with caching."""
    return AppConfig()


def get_config() -> AppConfig:
    """
    Get application configuration (cached in production, fresh in tests).

    Returns:
        AppConfig: The application configuration

    Raises:
        pydantic.ValidationError: If configuration is invalid
    """
    if _is_test_mode():
        return AppConfig()
    with _config_lock:
        return _get_config_cached()


def reset_config() -> None:
    """
    Reset the configuration cache.

    Primarily used by tests to force a reload after changing the environment.
    """
    with _config_lock:
        _get_config_cached.cache_clear()
