"""Tests for forecast_engine.engine.variance."""

from datetime import date, timedelta

import pytest

from forecast_engine.engine.variance import classify_variance, compare_to_target

TARGET = date(2026, 11, 1)


@pytest.mark.parametrize("days, status, is_late", [
    (6, "critical", True),
    (5, "at_risk", True),
    (1, "at_risk", True),
    (0, "on_track", False),
    (-1, "on_track", False),
])
def test_classification_boundaries(days, status, is_late):
    variance = compare_to_target(TARGET + timedelta(days=days), TARGET)

    assert variance.variance_days == days
    assert variance.status == status
    assert variance.is_late is is_late


def test_variance_text():
    assert compare_to_target(TARGET + timedelta(days=3), TARGET).variance_text == "+3 days"
    assert compare_to_target(TARGET - timedelta(days=2), TARGET).variance_text == "-2 days"
    assert compare_to_target(TARGET, TARGET).variance_text == "0 days"


def test_custom_critical_threshold():
    assert classify_variance(6, critical_days=10) == "at_risk"
