"""Request/response API over one snapshot."""

import logging
from datetime import date, datetime
from typing import Iterable, List, Optional

from ..errors import InvalidInputError
from ..models.backlog import TeamSnapshot
from ..models.forecast import (
    ItemForecast,
    ProjectForecast,
    TargetRequirements,
    TeamLeadTime,
    TeamLoad,
    UNKNOWN_WINDOW,
)
from ..models.objective import Snapshot
from ..utils.config import merge_config
from ..utils.datetime_utils import days_between
from .lead_time import calculate_lead_time, queue_length, target_requirements
from .queue import forecast_backlog, forecast_item, team_load
from .rollup import ProjectRollupAggregator
from .throughput import bucket_completions, bucketed_throughput, windowed_throughput

logger = logging.getLogger(__name__)

THROUGHPUT_MODES = ('bucketed', 'windowed')


class ForecastEngine:
    """Forecasting entry point.
    
    Every call reads the same snapshot and the same ``now``, so repeated
    calls with the same inputs return identical results.
    """
    
    def __init__(self, snapshot: Snapshot, config: Optional[dict] = None):
        """Initialize engine with a snapshot and configuration."""
        self.snapshot = snapshot
        self.config = merge_config(config)
        self.throughput_config = self.config['throughput']
        self.queue_config = self.config['queue']
    
    def _team(self, team_id: str) -> TeamSnapshot:
        team = self.snapshot.teams.get(team_id)
        if team is None:
            logger.info("Team %s not in snapshot; treating as empty", team_id)
            return TeamSnapshot(team_id=team_id)
        return team
    
    def _weekly_counts(self, team: TeamSnapshot, weeks: int) -> List[int]:
        if team.weekly_counts is not None:
            return team.weekly_counts[:weeks]
        return bucket_completions(team.completions, self.snapshot.now, weeks)
    
    def throughput(self, team_id: str, mode: str = 'bucketed', window: Optional[int] = None) -> float:
        """Team throughput: items/week (bucketed, window in weeks) or items/day (windowed, window in days)."""
        if mode not in THROUGHPUT_MODES:
            raise InvalidInputError(f"Unknown throughput mode: {mode}")
        if window is None:
            window = self.throughput_config['bucket_weeks' if mode == 'bucketed' else 'window_days']
        if window <= 0:
            raise InvalidInputError(f"Throughput window must be positive, got {window}")
        team = self._team(team_id)
        if mode == 'bucketed':
            return bucketed_throughput(self._weekly_counts(team, window))
        return windowed_throughput(
            team.completions,
            self.snapshot.now,
            window,
            self.throughput_config['floor_per_day'],
        )
    
    def _team_of_item(self, item_id: str) -> Optional[str]:
        for team_id, team in self.snapshot.teams.items():
            if any(item.item_id == item_id for item in team.backlog):
                return team_id
        return None
    
    def forecast_item(self, item_id: str, team_id: Optional[str] = None) -> ItemForecast:
        """Queue-position forecast for one backlog item."""
        team_id = team_id or self._team_of_item(item_id)
        if team_id is None:
            return ItemForecast(item_id=item_id, weeks=None, window=UNKNOWN_WINDOW)
        team = self._team(team_id)
        return forecast_item(item_id, team.backlog, self.throughput(team_id), self.snapshot.today)
    
    def forecast_backlog(self, team_id: str) -> List[ItemForecast]:
        """Forecast every item in a team's backlog."""
        team = self._team(team_id)
        return forecast_backlog(team.backlog, self.throughput(team_id), self.snapshot.today)
    
    def team_load(self, team_id: str) -> TeamLoad:
        """Weeks of work queued per priority bucket."""
        team = self._team(team_id)
        load = team_load(
            team.backlog,
            self.throughput(team_id),
            self.queue_config['busy_weeks'],
            self.queue_config['overloaded_weeks'],
        )
        load.team_id = team_id
        return load
    
    def lead_time(
        self,
        team_id: str,
        new_items: int = 0,
        dependency_lead_times: Iterable[Optional[float]] = (),
    ) -> TeamLeadTime:
        """Lead time for a team to absorb `new_items` behind its queue."""
        team = self._team(team_id)
        return calculate_lead_time(
            team_id,
            new_items,
            team.backlog,
            team.completions,
            dependency_lead_times,
            self.snapshot.now,
            throughput_per_day=team.throughput_per_day,
            window_days=self.throughput_config['window_days'],
            floor=self.throughput_config['floor_per_day'],
        )
    
    def target_requirements(self, team_id: str, new_items: int, target_date: date) -> TargetRequirements:
        """Throughput or scope change needed for a team to hit `target_date`."""
        team = self._team(team_id)
        rate = team.throughput_per_day
        if rate is None:
            rate = self.throughput(team_id, mode='windowed')
        return target_requirements(
            rate,
            queue_length(team.backlog),
            new_items,
            days_between(target_date, self.snapshot.today),
        )
    
    def project_forecast(self, project_id: str, now: Optional[datetime] = None) -> ProjectForecast:
        """Roll a project's objective tree up to a completion date."""
        now = now or self.snapshot.now
        project = self.snapshot.projects.get(project_id)
        if project is None:
            logger.warning("Project %s not found in snapshot", project_id)
            return ProjectForecast(
                project_id=project_id,
                today=now.date(),
                project_calculated_date=None,
                flags=['not_found'],
            )
        return ProjectRollupAggregator(self.snapshot, self.config).rollup(project, now)
