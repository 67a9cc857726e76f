"""Objective, project and snapshot data models."""

import json
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..errors import InvalidInputError, SnapshotError
from ..utils.datetime_utils import parse_date, parse_datetime
from .backlog import OrgUnit, TeamSnapshot

DEPENDENCY_TYPES = ('FS', 'SS', 'FF', 'SF')


@dataclass(frozen=True)
class DependencyEdge:
    """Predecessor -> successor link between two objectives."""
    
    predecessor_objective_id: str
    successor_objective_id: str
    type: str = 'FS'
    
    def __post_init__(self):
        """Validate the dependency type."""
        if self.type not in DEPENDENCY_TYPES:
            raise InvalidInputError(f"Invalid dependency type: {self.type!r}")
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any], successor_id: Optional[str] = None) -> 'DependencyEdge':
        """Deserialize from dictionary."""
        predecessor = data.get('predecessor_objective_id', data.get('predecessorId'))
        successor = data.get('successor_objective_id', data.get('successorId', successor_id))
        if predecessor is None or successor is None:
            raise InvalidInputError(f"Dependency edge is missing an endpoint: {data!r}")
        return cls(
            predecessor_objective_id=str(predecessor),
            successor_objective_id=str(successor),
            type=str(data.get('type', 'FS')).upper(),
        )


@dataclass
class Objective:
    """A unit of project scope delivered by one or more teams."""
    
    objective_id: str
    title: Optional[str] = None
    target_date: Optional[date] = None
    assigned_team_ids: List[str] = field(default_factory=list)
    parent_objective_id: Optional[str] = None
    dependency_edges: List[DependencyEdge] = field(default_factory=list)
    work_item_count: int = 0
    
    def __post_init__(self):
        """Reject negative work item counts."""
        if self.work_item_count < 0:
            raise InvalidInputError(
                f"Negative work item count for objective {self.objective_id}: {self.work_item_count}"
            )
    
    @property
    def predecessor_ids(self) -> List[str]:
        """Objectives that must precede this one."""
        return [
            edge.predecessor_objective_id
            for edge in self.dependency_edges
            if edge.successor_objective_id == self.objective_id
        ]
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Objective':
        """Deserialize from dictionary."""
        objective_id = str(data.get('objective_id', data.get('id')))
        target = data.get('target_date', data.get('targetDate'))
        parent = data.get('parent_objective_id', data.get('parentObjectiveId'))
        return cls(
            objective_id=objective_id,
            title=data.get('title'),
            target_date=parse_date(target) if target else None,
            assigned_team_ids=[str(t) for t in data.get('assigned_team_ids', data.get('assignedTeams', []))],
            parent_objective_id=str(parent) if parent is not None else None,
            dependency_edges=[
                DependencyEdge.from_dict(edge, objective_id)
                for edge in data.get('dependency_edges', data.get('dependencies', []))
            ],
            work_item_count=int(data.get('work_item_count', data.get('workItemCount', 0))),
        )


@dataclass
class Project:
    """A tree of objectives with an optional overall target date."""
    
    project_id: str
    title: Optional[str] = None
    target_date: Optional[date] = None
    objectives: List[Objective] = field(default_factory=list)
    
    def children_of(self, objective_id: str) -> List[Objective]:
        """Direct child objectives, in declaration order."""
        return [o for o in self.objectives if o.parent_objective_id == objective_id]
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Project':
        """Deserialize from dictionary."""
        target = data.get('target_date', data.get('targetDate'))
        return cls(
            project_id=str(data.get('project_id', data.get('id'))),
            title=data.get('title'),
            target_date=parse_date(target) if target else None,
            objectives=[Objective.from_dict(o) for o in data.get('objectives', [])],
        )


@dataclass
class Snapshot:
    """All inputs for one forecasting call, fetched at approximately one instant."""
    
    now: datetime
    units: List[OrgUnit] = field(default_factory=list)
    teams: Dict[str, TeamSnapshot] = field(default_factory=dict)
    projects: Dict[str, Project] = field(default_factory=dict)
    
    @property
    def today(self) -> date:
        """Calendar anchor for every date computed from this snapshot."""
        return self.now.date()
    
    def leaf_team_ids(self, unit_id: str) -> List[str]:
        """Expand a unit to the leaf teams beneath it (itself when it is a leaf)."""
        children: Dict[str, List[str]] = {}
        for unit in self.units:
            if unit.parent_id is not None:
                children.setdefault(str(unit.parent_id), []).append(unit.unit_id)
        
        leaves = []
        stack = [unit_id]
        seen = set()
        while stack:
            current = stack.pop()
            if current in seen:
                continue
            seen.add(current)
            below = children.get(current, [])
            if below:
                stack.extend(reversed(below))
            else:
                leaves.append(current)
        return leaves
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Snapshot':
        """Deserialize from dictionary."""
        if not isinstance(data, dict):
            raise InvalidInputError("Snapshot document must be a mapping")
        now = data.get('now')
        teams = data.get('teams', {})
        if isinstance(teams, list):
            teams = {str(t.get('team_id', t.get('id'))): t for t in teams}
        projects = [Project.from_dict(p) for p in data.get('projects', [])]
        return cls(
            now=parse_datetime(now) if now else datetime.now(),
            units=[OrgUnit.from_dict(u) for u in data.get('units', [])],
            teams={str(tid): TeamSnapshot.from_dict(str(tid), t) for tid, t in teams.items()},
            projects={p.project_id: p for p in projects},
        )


def load_snapshot(snapshot_path: str) -> Snapshot:
    """Load a snapshot from a YAML or JSON document."""
    path = Path(snapshot_path)
    
    if not path.exists():
        raise SnapshotError(f"Snapshot file not found: {snapshot_path}")
    
    with open(path, 'r') as f:
        try:
            if path.suffix.lower() in ['.yaml', '.yml']:
                data = yaml.safe_load(f)
            elif path.suffix.lower() == '.json':
                data = json.load(f)
            else:
                raise SnapshotError(f"Unsupported snapshot file format: {path.suffix}")
        except (yaml.YAMLError, json.JSONDecodeError) as exc:
            raise SnapshotError(f"Could not parse snapshot {snapshot_path}: {exc}") from exc
    
    return Snapshot.from_dict(data)
