"""Tests for forecast_engine.engine.lead_time."""

from datetime import date

import pytest

from forecast_engine.engine.lead_time import calculate_lead_time, queue_length, target_requirements
from forecast_engine.errors import InvalidInputError

from .factories import NOW, make_backlog, make_completions


class TestCalculateLeadTime:
    def test_queue_counts_only_p1_and_p2(self):
        assert queue_length(make_backlog(p1=2, p2=2, p3=5)) == 4

    def test_windowed_throughput_and_dependency_buffer(self):
        lead_time = calculate_lead_time(
            "team-a",
            6,
            make_backlog(p1=2, p2=2, p3=3),
            make_completions(15),
            [10, 3, 7],
            NOW,
        )

        assert lead_time.throughput == 0.5
        assert lead_time.queue_length == 4
        assert lead_time.base_lead_time_days == 20
        assert lead_time.dependency_buffer_days == 10
        assert lead_time.lead_time_days == 30
        assert lead_time.calculated_date == date(2026, 11, 17)

    def test_base_lead_time_uses_ceiling(self):
        lead_time = calculate_lead_time(
            "team-a", 0, make_backlog(p1=5), [], [], NOW, throughput_per_day=2.5 / 7,
        )
        assert lead_time.base_lead_time_days == 14
        assert lead_time.throughput == 0.36

    def test_partial_day_rounds_up_not_to_nearest(self):
        lead_time = calculate_lead_time(
            "team-a", 7, [], [], [], NOW, throughput_per_day=0.3,
        )
        assert lead_time.base_lead_time_days == 24

    def test_no_history_uses_floor(self):
        lead_time = calculate_lead_time("team-a", 1, [], [], [], NOW)

        assert lead_time.throughput == 0.25
        assert lead_time.lead_time_days == 4

    def test_zero_explicit_throughput_is_undefined(self):
        lead_time = calculate_lead_time(
            "team-a", 3, make_backlog(p1=1), [], [5], NOW, throughput_per_day=0,
        )

        assert not lead_time.is_defined
        assert lead_time.lead_time_days is None
        assert lead_time.base_lead_time_days is None
        assert lead_time.calculated_date is None
        assert lead_time.dependency_buffer_days == 5

    def test_negative_new_items_rejected(self):
        with pytest.raises(InvalidInputError):
            calculate_lead_time("team-a", -1, [], [], [], NOW)


class TestTargetRequirements:
    def test_behind_target(self):
        requirements = target_requirements(0.5, 10, 10, 20)

        assert requirements.required_throughput == 1.0
        assert requirements.throughput_increase == 0.5
        assert requirements.items_to_remove == 10
        assert requirements.recommendations == [
            "Increase throughput to 1.00 items/day",
            "Reduce queue by 10 items",
            "Negotiate target date with leadership",
        ]

    def test_ahead_of_target(self):
        requirements = target_requirements(1.0, 5, 5, 20)

        assert requirements.required_throughput == 0.5
        assert requirements.throughput_increase == -0.5
        assert requirements.items_to_remove == 0
        assert requirements.recommendations == ["Negotiate target date with leadership"]

    def test_increase_rounds_half_up(self):
        requirements = target_requirements(0.5, 3, 2, 8)

        assert requirements.required_throughput == 0.63
        assert requirements.throughput_increase == 0.13
        assert requirements.items_to_remove == 1

    def test_past_target_is_undefined(self):
        requirements = target_requirements(1.0, 5, 5, 0)

        assert requirements.required_throughput is None
        assert requirements.throughput_increase is None
        assert requirements.items_to_remove == 10
        assert requirements.recommendations[0] == "Target date has passed"

    def test_negative_queue_rejected(self):
        with pytest.raises(InvalidInputError):
            target_requirements(1.0, -1, 5, 10)
