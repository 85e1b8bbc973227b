"""Repositories for the statusline persistence layer."""

from .feature_repository import FeatureRepository
from .keyed_record_repository import KeyedRecordRepository
from .spell_slot_repository import SpellSlotRepository
from .status_repository import StatusRepository

__all__ = ["FeatureRepository", "KeyedRecordRepository", "SpellSlotRepository", "StatusRepository"]
