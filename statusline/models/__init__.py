"""
Database models for statusline.

This package contains:
- Status (derived, owned by the status components)
- SpellSlot and Feature (raw resources the statuses are computed from)
- SpellStats (plain keyed storage, no computed behaviour)
"""

from .base import Base
from .feature import Feature
from .spell_slot import SpellSlot
from .spell_stats import SpellStats
from .status import Status

__all__ = [
    "Base",
    "Status",
    "SpellSlot",
    "Feature",
    "SpellStats",
]
