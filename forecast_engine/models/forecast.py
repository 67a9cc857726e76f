"""Forecast result models.

Every result is derived from a snapshot and recomputed per request; none of
these objects is a source of truth. ``to_dict`` output is JSON-serializable.
"""

from dataclasses import dataclass, field, asdict
from datetime import date
from typing import Any, Dict, List, Optional

UNKNOWN_WINDOW = "unknown"


def _jsonable(value: Any) -> Any:
    """Convert dates and nested containers to JSON-friendly values."""
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


@dataclass
class ItemForecast:
    """Queue position and expected completion for one backlog item."""
    
    item_id: str
    weeks: Optional[float]
    window: str
    priority: Optional[str] = None
    items_ahead: Optional[int] = None
    queue_position: Optional[int] = None
    lead_time_days: Optional[int] = None
    estimated_date: Optional[date] = None
    
    @property
    def is_defined(self) -> bool:
        return self.weeks is not None
    
    def to_dict(self) -> Dict[str, Any]:
        return _jsonable(asdict(self))


@dataclass
class TeamLoad:
    """Weeks of queued work per cumulative priority bucket."""
    
    throughput: float
    buckets: Dict[str, int]
    p1_load_weeks: Optional[float] = None
    p2_load_weeks: Optional[float] = None
    total_load_weeks: Optional[float] = None
    p1_load_days: Optional[int] = None
    p2_load_days: Optional[int] = None
    total_load_days: Optional[int] = None
    status: str = 'unknown'
    team_id: Optional[str] = None
    
    def to_dict(self) -> Dict[str, Any]:
        return _jsonable(asdict(self))


@dataclass
class TeamLeadTime:
    """Lead time for one team taking on one objective's work."""
    
    team_id: str
    lead_time_days: Optional[int]
    base_lead_time_days: Optional[int]
    queue_length: int
    new_item_count: int
    throughput: float
    dependency_buffer_days: int
    calculated_date: Optional[date]
    
    @property
    def is_defined(self) -> bool:
        return self.lead_time_days is not None
    
    def to_dict(self) -> Dict[str, Any]:
        return _jsonable(asdict(self))


@dataclass
class LeadTimeAggregate:
    """Parallel-work rollup of several lead times."""
    
    total_lead_time_days: int
    average_lead_time_days: int
    critical_path: List[str] = field(default_factory=list)


@dataclass
class Variance:
    """Calculated date versus target date."""
    
    variance_days: int
    variance_text: str
    status: str
    is_late: bool
    
    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class TargetRequirements:
    """What it would take for a team to hit a target date."""
    
    required_throughput: Optional[float]
    throughput_increase: Optional[float]
    items_to_remove: int
    recommendations: List[str] = field(default_factory=list)
    
    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Alert:
    """A user-facing warning raised during the rollup."""
    
    type: str
    severity: str
    message: str
    objective_id: Optional[str] = None
    days_late: Optional[int] = None
    affected_objective_ids: List[str] = field(default_factory=list)
    
    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ObjectiveForecast:
    """Rolled-up lead time and date for one objective."""
    
    objective_id: str
    title: Optional[str]
    target_date: Optional[date]
    team_lead_times: List[TeamLeadTime] = field(default_factory=list)
    dependency_buffer_days: int = 0
    total_lead_time_days: Optional[int] = None
    average_lead_time_days: Optional[int] = None
    calculated_date: Optional[date] = None
    critical_path: List[str] = field(default_factory=list)
    critical_children: List[str] = field(default_factory=list)
    child_ids: List[str] = field(default_factory=list)
    variance: Optional[Variance] = None
    flags: List[str] = field(default_factory=list)
    alerts: List[Alert] = field(default_factory=list)
    
    @property
    def is_defined(self) -> bool:
        return self.total_lead_time_days is not None
    
    def flag(self, reason: str):
        if reason not in self.flags:
            self.flags.append(reason)
    
    def to_dict(self) -> Dict[str, Any]:
        return _jsonable(asdict(self))


@dataclass
class ProjectForecast:
    """Project completion date, critical path and variance."""
    
    project_id: str
    today: date
    title: Optional[str] = None
    target_date: Optional[date] = None
    objective_forecasts: List[ObjectiveForecast] = field(default_factory=list)
    project_lead_time_days: Optional[int] = 0
    project_calculated_date: Optional[date] = None
    critical_path_objective_ids: List[str] = field(default_factory=list)
    variance_vs_target: Optional[Variance] = None
    flags: List[str] = field(default_factory=list)
    alerts: List[Alert] = field(default_factory=list)
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert forecast to dictionary for JSON export."""
        return _jsonable(asdict(self))
    
    def _lead_time_text(self) -> str:
        if self.project_lead_time_days is None:
            return "unavailable"
        return f"{self.project_lead_time_days} days"
    
    def to_human_readable(self) -> str:
        """Generate human-readable report format."""
        lines = [
            f"=== Project Forecast: {self.project_id} ===",
            f"Title: {self.title or '-'}",
            f"As of: {self.today}",
            f"Target date: {self.target_date or '-'}",
            f"Calculated date: {self.project_calculated_date or 'unavailable'}",
            f"Lead time: {self._lead_time_text()}",
            f"Critical path: {', '.join(self.critical_path_objective_ids) or '-'}",
        ]
        
        if self.variance_vs_target:
            lines.append(
                f"Variance: {self.variance_vs_target.variance_text} ({self.variance_vs_target.status})"
            )
        if self.flags:
            lines.append(f"Flags: {', '.join(self.flags)}")
        
        lines.extend([
            "",
            "Objectives:",
        ])
        
        for of in self.objective_forecasts:
            lines.append(f"  Objective {of.objective_id}: {of.title or ''}".rstrip())
            if of.is_defined:
                lines.append(f"    Lead time: {of.total_lead_time_days} days (avg {of.average_lead_time_days})")
                lines.append(f"    Calculated date: {of.calculated_date}")
            else:
                lines.append("    Forecast unavailable")
            if of.dependency_buffer_days:
                lines.append(f"    Dependency buffer: {of.dependency_buffer_days} days")
            if of.variance:
                lines.append(f"    Variance: {of.variance.variance_text} ({of.variance.status})")
            for tl in of.team_lead_times:
                days = tl.lead_time_days if tl.is_defined else 'unknown'
                lines.append(
                    f"    Team {tl.team_id}: {days} days, queue {tl.queue_length}, "
                    f"+{tl.new_item_count} items @ {tl.throughput}/day"
                )
            if of.critical_path:
                lines.append(f"    Critical teams: {', '.join(of.critical_path)}")
            if of.flags:
                lines.append(f"    Flags: {', '.join(of.flags)}")
        
        if self.alerts:
            lines.extend([
                "",
                "Alerts:",
            ])
            for alert in self.alerts:
                lines.append(f"  [{alert.severity}] {alert.message}")
        
        lines.append("=" * 50)
        
        return "\n".join(lines)
