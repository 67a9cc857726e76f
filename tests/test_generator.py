"""Tests for forecast_engine.simulation.generator."""

import json
from datetime import timedelta

from forecast_engine.engine.forecaster import ForecastEngine
from forecast_engine.models.backlog import CompletionRecord, TeamSnapshot
from forecast_engine.models.objective import Snapshot
from forecast_engine.simulation.generator import SnapshotGenerator

from .factories import NOW


def test_same_seed_same_snapshot():
    first = SnapshotGenerator(seed=7)
    second = SnapshotGenerator(seed=7)

    assert first.snapshot_to_dict(first.generate_snapshot(NOW)) == second.snapshot_to_dict(second.generate_snapshot(NOW))


def test_generated_snapshot_round_trips_and_forecasts():
    generator = SnapshotGenerator(seed=42)
    document = generator.snapshot_to_dict(generator.generate_snapshot(NOW))

    snapshot = Snapshot.from_dict(document)
    forecast = ForecastEngine(snapshot).project_forecast("proj-1")

    assert len(snapshot.teams) == 4
    assert len(forecast.objective_forecasts) == 6
    assert forecast.project_lead_time_days > 0
    assert forecast.critical_path_objective_ids


def test_team_history_survives_serialization():
    team = TeamSnapshot(
        team_id="web",
        completions=[CompletionRecord(completed_at=NOW - timedelta(days=2), item_id="w-9")],
        weekly_counts=[3, 5],
        throughput_per_day=0.5,
    )
    snapshot = Snapshot(now=NOW, teams={"web": team})

    document = json.loads(json.dumps(SnapshotGenerator().snapshot_to_dict(snapshot)))
    restored = Snapshot.from_dict(document).teams["web"]

    assert restored.completions == team.completions
    assert restored.weekly_counts == [3, 5]
    assert restored.throughput_per_day == 0.5
