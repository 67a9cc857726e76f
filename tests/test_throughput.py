"""Tests for forecast_engine.engine.throughput."""

from datetime import timedelta

import pytest

from forecast_engine.engine.throughput import (
    bucket_completions,
    bucketed_throughput,
    windowed_throughput,
)
from forecast_engine.errors import InvalidInputError
from forecast_engine.models.backlog import CompletionRecord

from .factories import NOW, make_completions


class TestBucketedThroughput:
    def test_mean_of_weekly_counts_is_rounded(self):
        assert bucketed_throughput([12, 10, 8, 14, 9, 11]) == 11

    def test_empty_history_is_zero(self):
        assert bucketed_throughput([]) == 0

    def test_half_rounds_up(self):
        assert bucketed_throughput([2, 3]) == 3

    def test_negative_count_rejected(self):
        with pytest.raises(InvalidInputError):
            bucketed_throughput([4, -1, 3])


class TestWindowedThroughput:
    def test_count_over_window(self):
        assert windowed_throughput(make_completions(15), NOW, 30) == pytest.approx(0.5)

    def test_records_outside_window_ignored(self):
        records = make_completions(6) + make_completions(10, days_ago=45)
        records.append(CompletionRecord(completed_at=NOW + timedelta(days=2)))
        assert windowed_throughput(records, NOW, 30) == pytest.approx(0.2)

    def test_empty_history_uses_floor(self):
        assert windowed_throughput([], NOW) == 0.25

    def test_only_stale_history_uses_floor(self):
        assert windowed_throughput(make_completions(5, days_ago=90), NOW, 30) == 0.25

    def test_custom_floor(self):
        assert windowed_throughput([], NOW, 30, floor=0.1) == 0.1

    def test_non_positive_window_rejected(self):
        with pytest.raises(InvalidInputError):
            windowed_throughput(make_completions(3), NOW, 0)


class TestBucketCompletions:
    def test_counts_by_week_most_recent_first(self):
        records = [
            CompletionRecord(completed_at=NOW - timedelta(days=1)),
            CompletionRecord(completed_at=NOW - timedelta(days=8)),
            CompletionRecord(completed_at=NOW - timedelta(days=9)),
            CompletionRecord(completed_at=NOW - timedelta(days=50)),
            CompletionRecord(completed_at=NOW + timedelta(days=1)),
        ]
        assert bucket_completions(records, NOW, weeks=6) == [1, 2, 0, 0, 0, 0]

    def test_feeds_bucketed_mode(self):
        records = make_completions(12, days_ago=2) + make_completions(10, days_ago=10)
        assert bucketed_throughput(bucket_completions(records, NOW, weeks=2)) == 11
