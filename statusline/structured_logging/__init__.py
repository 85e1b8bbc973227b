"""
Structured logging package for statusline.

All imports should use explicit paths like
'from statusline.structured_logging.enhanced_logging_config import get_logger'.

Named 'structured_logging' rather than 'logging' to avoid shadowing the
standard library module.
"""

__all__ = []
