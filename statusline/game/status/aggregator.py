"""
Status aggregation math.

Pure functions: normalize a set of weighted metrics, reduce them to a
weighted mean in [0, 1], and classify that mean through a per-domain
threshold table. Nothing here performs I/O.

Threshold tables are ordered from the highest lower bound down to 0.0.
A value exactly on a boundary belongs to the band whose lower bound it
equals (the higher band); 1.0 belongs to the top band.
"""

import math
from collections.abc import Mapping, Sequence
from typing import NamedTuple

from ...exceptions import DegenerateInputError, create_error_context
from ...schemas.status import DomainKind, Severity
from .weighted_metric import WeightedMetric


class StatusPhrase(NamedTuple):
    """Display phrase and severity class for a classified status."""

    display_name: str
    severity: Severity


class StatusBand(NamedTuple):
    """One row of a threshold table: values >= lower_bound map to phrase."""

    lower_bound: float
    phrase: StatusPhrase


MAGICAL_BANDS: tuple[StatusBand, ...] = (
    StatusBand(0.75, StatusPhrase("Empowered", Severity.SUCCESS)),
    StatusBand(0.50, StatusPhrase("Waning", Severity.INFO)),
    StatusBand(0.25, StatusPhrase("Weakened", Severity.WARNING)),
    StatusBand(0.00, StatusPhrase("Drained", Severity.DANGER)),
)

TRACKED_BANDS: tuple[StatusBand, ...] = (
    StatusBand(0.75, StatusPhrase("Fresh", Severity.SUCCESS)),
    StatusBand(0.50, StatusPhrase("Ready", Severity.INFO)),
    StatusBand(0.25, StatusPhrase("Strained", Severity.WARNING)),
    StatusBand(0.00, StatusPhrase("Spent", Severity.DANGER)),
)


def validate_threshold_table(bands: Sequence[StatusBand]) -> None:
    """
    Check that a table partitions [0, 1]: strictly decreasing bounds in [0, 1], ending at 0.0.

    Raises:
        ValueError: If the table would leave part of [0, 1] unclassified
    """
    if not bands:
        raise ValueError("Threshold table must have at least one band")
    bounds = [band.lower_bound for band in bands]
    if any(not 0.0 <= bound <= 1.0 for bound in bounds):
        raise ValueError(f"Threshold bounds must lie in [0, 1], got {bounds}")
    if any(upper <= lower for upper, lower in zip(bounds, bounds[1:])):
        raise ValueError(f"Threshold bounds must be strictly decreasing, got {bounds}")
    if bounds[-1] != 0.0:
        raise ValueError(f"Lowest threshold bound must be 0.0, got {bounds[-1]}")


THRESHOLD_TABLES: Mapping[DomainKind, tuple[StatusBand, ...]] = {
    DomainKind.MAGICAL: MAGICAL_BANDS,
    DomainKind.TRACKED: TRACKED_BANDS,
}

for _bands in THRESHOLD_TABLES.values():
    validate_threshold_table(_bands)


def total_weight(metrics: Sequence[WeightedMetric]) -> float:
    return math.fsum(metric.weight for metric in metrics)


def normalize(metrics: Sequence[WeightedMetric]) -> list[WeightedMetric]:
    """
    Divide every weight by the total weight, preserving order and values.

    Empty input returns an empty list.

    Raises:
        DegenerateInputError: If the input is non-empty and its total weight is zero
    """
    if not metrics:
        return []
    total = total_weight(metrics)
    if total <= 0.0:
        raise DegenerateInputError(
            "Cannot normalize weighted metrics with zero total weight",
            context=create_error_context(operation="normalize"),
            total_weight=total,
            item_count=len(metrics),
        )
    return [metric.with_weight(metric.weight / total) for metric in metrics]


def weighted_mean(metrics: Sequence[WeightedMetric]) -> float:
    """
    Weighted mean of the metric values: sum(value * normalized weight).

    Raises:
        ValueError: If metrics is empty (callers delete the status instead)
        DegenerateInputError: If the total weight is zero
    """
    if not metrics:
        raise ValueError("weighted_mean requires at least one metric")
    mean = math.fsum(metric.value * metric.weight for metric in normalize(metrics))
    # Float error can push the sum a hair outside [0, 1]
    return min(1.0, max(0.0, mean))


def classify_with(bands: Sequence[StatusBand], value: float) -> StatusPhrase:
    """Look a value up in an explicit threshold table (values are clamped to [0, 1])."""
    if math.isnan(value):
        raise ValueError("Cannot classify NaN")
    clamped = min(1.0, max(0.0, value))
    for band in bands:
        if clamped >= band.lower_bound:
            return band.phrase
    # validate_threshold_table guarantees a 0.0 band
    return bands[-1].phrase


def classify(domain: DomainKind, value: float) -> StatusPhrase:
    """
    Map a weighted mean to the domain's display phrase and severity.

    Raises:
        KeyError: If the domain has no threshold table
        ValueError: If value is NaN
    """
    return classify_with(THRESHOLD_TABLES[domain], value)
