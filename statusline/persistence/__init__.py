"""
Persistence layer for statusline.

Repositories wrap an async SQLAlchemy session maker. The status store is
written only by status components; the raw resource repositories publish a
data-changed event after every committed mutation.
"""

from .predicates import KeyValuePredicate, find_by_predicates
from .protocols import StatusStoreProtocol

__all__ = ["KeyValuePredicate", "find_by_predicates", "StatusStoreProtocol"]
