"""WeightedMetric: the (value, weight) pair every raw resource is reduced to."""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class WeightedMetric:
    """
    Remaining-fraction value of one resource and its importance weight.

    ``value`` is in [0, 1] (1 = fully available); ``weight`` is non-negative.
    Created per recompute, never persisted.
    """

    value: float
    weight: float

    def __post_init__(self) -> None:
        if math.isnan(self.value) or not 0.0 <= self.value <= 1.0:
            raise ValueError(f"WeightedMetric value must be in [0, 1], got {self.value}")
        if not math.isfinite(self.weight) or self.weight < 0.0:
            raise ValueError(f"WeightedMetric weight must be finite and non-negative, got {self.weight}")

    def with_weight(self, weight: float) -> "WeightedMetric":
        return WeightedMetric(value=self.value, weight=weight)
