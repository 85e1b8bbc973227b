"""Pydantic schemas for statusline value objects."""

from .status import DomainKind, RawMetricItem, Severity, StatusSnapshot

__all__ = ["DomainKind", "RawMetricItem", "Severity", "StatusSnapshot"]
