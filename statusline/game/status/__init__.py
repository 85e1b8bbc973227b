"""Status aggregation: weighted metrics, threshold classification and status components."""

from .aggregator import (
    MAGICAL_BANDS,
    THRESHOLD_TABLES,
    TRACKED_BANDS,
    StatusBand,
    StatusPhrase,
    classify,
    classify_with,
    normalize,
    total_weight,
    validate_threshold_table,
    weighted_mean,
)
from .component import ComponentState, StatusComponent
from .magical_component import MagicalStatusComponent, spell_slot_weight
from .single_flight import SingleFlight
from .status_service import StatusService, default_components
from .tracked_component import TrackedAbilityStatusComponent, tracked_feature_weight
from .weighted_metric import WeightedMetric

__all__ = [
    "MAGICAL_BANDS",
    "THRESHOLD_TABLES",
    "TRACKED_BANDS",
    "ComponentState",
    "MagicalStatusComponent",
    "SingleFlight",
    "StatusBand",
    "StatusComponent",
    "StatusPhrase",
    "StatusService",
    "TrackedAbilityStatusComponent",
    "WeightedMetric",
    "classify",
    "classify_with",
    "default_components",
    "normalize",
    "spell_slot_weight",
    "total_weight",
    "tracked_feature_weight",
    "validate_threshold_table",
    "weighted_mean",
]
