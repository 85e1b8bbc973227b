"""Unit tests for WeightedMetric."""

import pytest

from statusline.game.status.weighted_metric import WeightedMetric


def test_weighted_metric_accepts_bounds():
    """Values 0 and 1 and weight 0 are valid."""
    assert WeightedMetric(0.0, 0.0).value == 0.0
    assert WeightedMetric(1.0, 3.5).weight == 3.5


@pytest.mark.parametrize("value", [-0.01, 1.01, float("nan")])
def test_weighted_metric_rejects_bad_value(value):
    """Values must lie in [0, 1]."""
    with pytest.raises(ValueError):
        WeightedMetric(value, 1.0)


@pytest.mark.parametrize("weight", [-1.0, float("inf"), float("nan")])
def test_weighted_metric_rejects_bad_weight(weight):
    """Weights must be finite and non-negative."""
    with pytest.raises(ValueError):
        WeightedMetric(0.5, weight)


def test_with_weight_returns_new_metric():
    """with_weight keeps the value and leaves the original untouched."""
    metric = WeightedMetric(0.4, 2.0)
    rescaled = metric.with_weight(0.25)
    assert rescaled == WeightedMetric(0.4, 0.25)
    assert metric.weight == 2.0


def test_weighted_metric_is_frozen():
    """Metrics are immutable."""
    metric = WeightedMetric(0.4, 2.0)
    with pytest.raises(AttributeError):
        metric.value = 0.9  # type: ignore[misc]
