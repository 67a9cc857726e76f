"""Tests for forecast_engine.engine.queue."""

from datetime import date

import pytest

from forecast_engine.engine.queue import (
    bucket_counts,
    forecast_backlog,
    forecast_item,
    items_ahead,
    team_load,
)
from forecast_engine.errors import InvalidInputError
from forecast_engine.models.backlog import BacklogItem, Priority

from .factories import NOW, make_backlog


class TestPriority:
    @pytest.mark.parametrize("raw, expected", [
        ("P1", Priority.P1),
        ("p2", Priority.P2),
        (" P3 ", Priority.P3),
        (1, Priority.P1),
        ("2", Priority.P2),
        (Priority.P3, Priority.P3),
    ])
    def test_parse_accepts_known_spellings(self, raw, expected):
        assert Priority.parse(raw) is expected

    @pytest.mark.parametrize("raw", ["P4", "high", 0, None, True, 2.5, "P"])
    def test_parse_rejects_malformed_tiers(self, raw):
        with pytest.raises(InvalidInputError):
            Priority.parse(raw)

    def test_backlog_item_normalizes_priority(self):
        item = BacklogItem(item_id="x", priority="p1", team_id="t")
        assert item.priority is Priority.P1


class TestForecastItem:
    def test_p2_item_behind_all_p1_and_other_p2(self):
        backlog = make_backlog(p1=3, p2=2, p3=4)

        forecast = forecast_item("p2-2", backlog, 11, today=NOW.date())

        assert forecast.items_ahead == 4
        assert forecast.queue_position == 5
        assert forecast.weeks == 0.4
        assert forecast.window == "~0.4 weeks"
        assert forecast.lead_time_days == 3
        assert forecast.estimated_date == date(2026, 10, 21)

    def test_zero_throughput_is_unknown(self):
        forecast = forecast_item("p1-1", make_backlog(p1=2), 0)

        assert forecast.weeks is None
        assert forecast.window == "unknown"
        assert forecast.estimated_date is None
        assert not forecast.is_defined

    def test_missing_item_is_unknown(self):
        forecast = forecast_item("nope", make_backlog(p1=2), 5)
        assert forecast.weeks is None
        assert forecast.window == "unknown"

    def test_weeks_do_not_decrease_as_tier_worsens(self):
        backlog = make_backlog(p1=3, p2=2, p3=4)
        weeks = [forecast_item(item_id, backlog, 11).weeks for item_id in ("p1-1", "p2-1", "p3-1")]
        assert weeks == sorted(weeks)
        assert weeks == [0.2, 0.4, 0.7]

    def test_to_dict_is_json_friendly(self):
        forecast = forecast_item("p1-1", make_backlog(p1=1), 2, today=NOW.date())
        assert forecast.to_dict()["estimated_date"] == "2026-10-18"


class TestStackRank:
    def _backlog(self):
        return [
            BacklogItem(item_id="x", priority="P1", team_id="t"),
            BacklogItem(item_id="a", priority="P2", team_id="t", stack_rank=5),
            BacklogItem(item_id="b", priority="P2", team_id="t", stack_rank=2),
            BacklogItem(item_id="c", priority="P2", team_id="t"),
        ]

    def test_lower_rank_goes_first(self):
        backlog = self._backlog()
        assert items_ahead(backlog[2], backlog) == 1
        assert items_ahead(backlog[1], backlog) == 2

    def test_unranked_target_counts_whole_tier(self):
        backlog = self._backlog()
        assert items_ahead(backlog[3], backlog) == 3

    def test_equal_ranks_keep_insertion_order(self):
        backlog = [
            BacklogItem(item_id="d", priority="P3", team_id="t", stack_rank=3),
            BacklogItem(item_id="e", priority="P3", team_id="t", stack_rank=3),
        ]
        assert items_ahead(backlog[0], backlog) == 0
        assert items_ahead(backlog[1], backlog) == 1


class TestForecastBacklog:
    def test_items_forecast_in_pull_order(self):
        p1, p2, p3 = make_backlog(p1=1), make_backlog(p2=1), make_backlog(p3=1)
        backlog = p3 + p1 + p2

        forecasts = forecast_backlog(backlog, 1, today=NOW.date())

        assert [f.item_id for f in forecasts] == ["p1-1", "p2-1", "p3-1"]
        assert [f.queue_position for f in forecasts] == [1, 2, 3]
        assert [f.lead_time_days for f in forecasts] == [0, 7, 14]

    def test_unknown_throughput_gives_nothing(self):
        assert forecast_backlog(make_backlog(p1=2), 0) == []


class TestTeamLoad:
    def test_cumulative_buckets(self):
        load = team_load(make_backlog(p1=3, p2=2, p3=4), 11)

        assert load.buckets == {"p1": 3, "p2": 2, "p3": 4, "total": 9}
        assert load.p1_load_weeks == pytest.approx(3 / 11)
        assert load.p2_load_weeks == pytest.approx(5 / 11)
        assert load.total_load_weeks == pytest.approx(9 / 11)
        assert (load.p1_load_days, load.p2_load_days, load.total_load_days) == (2, 4, 6)
        assert load.status == "healthy"

    @pytest.mark.parametrize("items, status", [(8, "healthy"), (10, "busy"), (13, "overloaded")])
    def test_status_thresholds(self, items, status):
        assert team_load(make_backlog(p3=items), 1).status == status

    def test_zero_throughput_has_no_weeks(self):
        load = team_load(make_backlog(p1=2, p3=1), 0)

        assert load.p1_load_weeks is None
        assert load.total_load_weeks is None
        assert load.status == "unknown"
        assert bucket_counts(make_backlog(p1=2, p3=1))["total"] == 3
