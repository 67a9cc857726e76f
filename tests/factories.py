"""Builders shared by the test modules."""

from datetime import datetime, timedelta

from forecast_engine.models.backlog import BacklogItem, CompletionRecord, TeamSnapshot

NOW = datetime(2026, 10, 18, 9, 0)


def make_backlog(p1: int = 0, p2: int = 0, p3: int = 0, team_id: str = "team-a") -> list:
    """Backlog with items named <tier>-<n>, in tier order."""
    items = []
    for tier, count in (("P1", p1), ("P2", p2), ("P3", p3)):
        for n in range(1, count + 1):
            items.append(BacklogItem(item_id=f"{tier.lower()}-{n}", priority=tier, team_id=team_id))
    return items


def make_completions(count: int, now: datetime = NOW, days_ago: int = 1) -> list:
    return [CompletionRecord(completed_at=now - timedelta(days=days_ago, minutes=i)) for i in range(count)]


def make_team(team_id: str, p1: int = 0, p2: int = 0, p3: int = 0, throughput_per_day=None) -> TeamSnapshot:
    return TeamSnapshot(
        team_id=team_id,
        backlog=make_backlog(p1, p2, p3, team_id=team_id),
        throughput_per_day=throughput_per_day,
    )
