"""Data models for backlog, objectives and forecasts."""

from .backlog import BacklogItem, CompletionRecord, OrgUnit, Priority, TeamSnapshot
from .objective import DependencyEdge, Objective, Project, Snapshot, load_snapshot
from .forecast import (
    Alert,
    ItemForecast,
    LeadTimeAggregate,
    ObjectiveForecast,
    ProjectForecast,
    TargetRequirements,
    TeamLeadTime,
    TeamLoad,
    Variance,
)

__all__ = [
    'Alert',
    'BacklogItem',
    'CompletionRecord',
    'DependencyEdge',
    'ItemForecast',
    'LeadTimeAggregate',
    'Objective',
    'ObjectiveForecast',
    'OrgUnit',
    'Priority',
    'Project',
    'ProjectForecast',
    'Snapshot',
    'TargetRequirements',
    'TeamLeadTime',
    'TeamLoad',
    'Variance',
    'load_snapshot',
]
