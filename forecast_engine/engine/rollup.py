"""Project rollup: teams -> objectives -> project."""

import logging
from datetime import datetime
from typing import Dict, List, Optional, Set

from ..models.backlog import TeamSnapshot
from ..models.forecast import Alert, ObjectiveForecast, ProjectForecast, TeamLeadTime
from ..models.objective import Objective, Project, Snapshot
from ..utils.datetime_utils import add_days, ceil_days
from .critical_path import aggregate_lead_times, dependency_buffer, max_with_ties
from .lead_time import calculate_lead_time
from .variance import compare_to_target

logger = logging.getLogger(__name__)


class ProjectRollupAggregator:
    """Rolls team lead times up an objective tree into a project forecast."""
    
    def __init__(self, snapshot: Snapshot, config: dict):
        """Initialize aggregator with a snapshot and configuration."""
        self.snapshot = snapshot
        self.config = config
        throughput_config = config.get('throughput', {})
        self.window_days = throughput_config.get('window_days', 30)
        self.floor = throughput_config.get('floor_per_day', 0.25)
        self.critical_days = config.get('variance', {}).get('critical_days', 5)
        alerts_config = config.get('alerts', {})
        self.objective_alert_days = alerts_config.get('objective_critical_days', 7)
        self.project_alert_days = alerts_config.get('project_critical_days', 14)
    
    def rollup(self, project: Project, now: Optional[datetime] = None) -> ProjectForecast:
        """Forecast every objective of `project` and roll them up."""
        now = now or self.snapshot.now
        today = now.date()
        by_id = {o.objective_id: o for o in project.objectives}
        results: Dict[str, ObjectiveForecast] = {}
        visiting: Set[str] = set()
        
        def visit(objective: Objective) -> ObjectiveForecast:
            if objective.objective_id in results:
                return results[objective.objective_id]
            visiting.add(objective.objective_id)
            
            forecast = ObjectiveForecast(
                objective_id=objective.objective_id,
                title=objective.title,
                target_date=objective.target_date,
            )
            
            children = []
            for child in project.children_of(objective.objective_id):
                if child.objective_id in visiting:
                    forecast.flag('circular_dependency')
                    continue
                children.append(visit(child))
            forecast.child_ids = [c.objective_id for c in children]
            
            dependency_lead_times = []
            for predecessor_id in objective.predecessor_ids:
                if predecessor_id not in by_id:
                    forecast.flag('missing_dependency')
                    continue
                if predecessor_id in visiting:
                    logger.warning(
                        "Circular dependency between %s and %s; ignoring edge",
                        predecessor_id, objective.objective_id,
                    )
                    forecast.flag('circular_dependency')
                    continue
                predecessor = visit(by_id[predecessor_id])
                if predecessor.is_defined:
                    dependency_lead_times.append(predecessor.total_lead_time_days)
                else:
                    forecast.flag('undefined_dependency')
            
            forecast.dependency_buffer_days = ceil_days(dependency_buffer(dependency_lead_times))
            forecast.team_lead_times = self._team_lead_times(objective, dependency_lead_times, now, forecast)
            self._combine(forecast, children, today)
            
            visiting.discard(objective.objective_id)
            results[objective.objective_id] = forecast
            return forecast
        
        for objective in project.objectives:
            visit(objective)
        
        objective_forecasts = [results[o.objective_id] for o in project.objectives]
        return self._project_forecast(project, objective_forecasts, today)
    
    def _team_ids(self, objective: Objective) -> List[str]:
        """Assigned units expanded to leaf teams, first occurrence wins."""
        team_ids = []
        for unit_id in objective.assigned_team_ids:
            for team_id in self.snapshot.leaf_team_ids(unit_id):
                if team_id not in team_ids:
                    team_ids.append(team_id)
        return team_ids
    
    def _team_lead_times(
        self,
        objective: Objective,
        dependency_lead_times: List[int],
        now: datetime,
        forecast: ObjectiveForecast,
    ) -> List[TeamLeadTime]:
        """Lead time of each assigned team for this objective's new work."""
        lead_times = []
        for team_id in self._team_ids(objective):
            team = self.snapshot.teams.get(team_id)
            if team is None:
                logger.warning("No backlog or history for team %s (objective %s)", team_id, objective.objective_id)
                forecast.flag('missing_team_data')
                team = TeamSnapshot(team_id=team_id)
            
            lead_time = calculate_lead_time(
                team_id,
                objective.work_item_count,
                team.backlog,
                team.completions,
                dependency_lead_times,
                now,
                throughput_per_day=team.throughput_per_day,
                window_days=self.window_days,
                floor=self.floor,
            )
            if not lead_time.is_defined:
                forecast.flag('undefined_throughput')
            lead_times.append(lead_time)
        return lead_times
    
    def _combine(self, forecast: ObjectiveForecast, children: List[ObjectiveForecast], today):
        """Objective lead time = slowest of its teams and its child objectives."""
        defined_teams = [t for t in forecast.team_lead_times if t.is_defined]
        child_entries = [(c.objective_id, c.total_lead_time_days) for c in children if c.is_defined]
        
        if not forecast.team_lead_times and not children:
            forecast.flag('unassigned')
        if not defined_teams and not child_entries:
            logger.warning("Objective %s has no forecast: %s", forecast.objective_id, forecast.flags)
            return
        
        team_total = None
        aggregate = None
        if defined_teams:
            aggregate = aggregate_lead_times(defined_teams)
            team_total = aggregate.total_lead_time_days
            forecast.average_lead_time_days = aggregate.average_lead_time_days
        else:
            values = [days for _, days in child_entries]
            forecast.average_lead_time_days = ceil_days(sum(values) / len(values))
        
        child_total, tied_children = max_with_ties(child_entries)
        total = max(team_total or 0, child_total)
        
        forecast.total_lead_time_days = total
        forecast.critical_path = aggregate.critical_path if aggregate and team_total == total else []
        forecast.critical_children = tied_children if child_total == total else []
        forecast.calculated_date = add_days(today, total)
        
        if forecast.target_date:
            forecast.variance = compare_to_target(forecast.calculated_date, forecast.target_date, self.critical_days)
            if forecast.variance.is_late:
                days_late = forecast.variance.variance_days
                forecast.alerts.append(Alert(
                    type='behind_schedule',
                    severity='critical' if days_late > self.objective_alert_days else 'warning',
                    message=f"Objective is {days_late} days behind target date",
                    objective_id=forecast.objective_id,
                    days_late=days_late,
                ))
    
    def _project_forecast(
        self,
        project: Project,
        objective_forecasts: List[ObjectiveForecast],
        today,
    ) -> ProjectForecast:
        """Project lead time = slowest objective; every tied objective is critical."""
        defined = [(o.objective_id, o.total_lead_time_days) for o in objective_forecasts if o.is_defined]
        project_lead_time, critical_ids = max_with_ties(defined)
        
        result = ProjectForecast(
            project_id=project.project_id,
            today=today,
            title=project.title,
            target_date=project.target_date,
            objective_forecasts=objective_forecasts,
            project_lead_time_days=project_lead_time,
            project_calculated_date=add_days(today, project_lead_time),
            critical_path_objective_ids=critical_ids,
        )
        
        if len(defined) < len(objective_forecasts):
            result.flags.append('partial')
        
        if objective_forecasts and not defined:
            # No objective has a date, so neither does the project
            logger.warning("Project %s has no objective with a forecast", project.project_id)
            result.project_lead_time_days = None
            result.project_calculated_date = None
            return result
        
        if project.target_date:
            result.variance_vs_target = compare_to_target(
                result.project_calculated_date, project.target_date, self.critical_days
            )
            if result.variance_vs_target.is_late:
                days_late = result.variance_vs_target.variance_days
                late_critical = [
                    o.objective_id for o in objective_forecasts
                    if o.objective_id in critical_ids and o.variance and o.variance.is_late
                ]
                result.alerts.append(Alert(
                    type='project_behind_schedule',
                    severity='critical' if days_late > self.project_alert_days else 'warning',
                    message=f"Project is {days_late} days behind target date",
                    days_late=days_late,
                    affected_objective_ids=late_critical,
                ))
                if late_critical:
                    result.alerts.append(Alert(
                        type='critical_path_delay',
                        severity='warning',
                        message=f"{len(late_critical)} objective(s) on critical path are behind schedule",
                        affected_objective_ids=late_critical,
                    ))
        
        logger.debug(
            "Project %s: lead time %s days, critical path %s",
            project.project_id, project_lead_time, critical_ids,
        )
        return result
