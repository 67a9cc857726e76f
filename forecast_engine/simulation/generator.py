"""Deterministic snapshot generator."""

import random
from datetime import datetime, timedelta
from typing import Any, Dict, List

from ..models.backlog import BacklogItem, CompletionRecord, OrgUnit, Priority, TeamSnapshot
from ..models.objective import DependencyEdge, Objective, Project, Snapshot


class SnapshotGenerator:
    """Generates reproducible teams, backlogs, history and projects."""
    
    def __init__(self, seed: int = 42, config: dict = None):
        """Initialize generator with seed for reproducibility."""
        self.seed = seed
        self.random = random.Random(seed)
        self.config = config or {}
        self.window_days = self.config.get('throughput', {}).get('window_days', 30)
    
    def generate_team(self, team_id: str, now: datetime, backlog_size: int = 12) -> TeamSnapshot:
        """Generate a team with a mixed-priority backlog and recent completions."""
        backlog = []
        for i in range(backlog_size):
            roll = self.random.random()
            if roll < 0.25:
                priority = Priority.P1
            elif roll < 0.6:
                priority = Priority.P2
            else:
                priority = Priority.P3
            backlog.append(BacklogItem(
                item_id=f"{team_id}-{i:03d}",
                priority=priority,
                team_id=team_id,
                stack_rank=i + 1,
                title=f"Work item {i}",
            ))
        
        # Some teams are new and have no history at all
        completions = []
        if self.random.random() < 0.85:
            for j in range(self.random.randint(3, 20)):
                age = timedelta(days=self.random.randint(0, self.window_days * 2), hours=self.random.randint(0, 23))
                completions.append(CompletionRecord(completed_at=now - age, item_id=f"{team_id}-done-{j:03d}"))
        
        return TeamSnapshot(team_id=team_id, backlog=backlog, completions=completions)
    
    def generate_project(self, project_id: str, team_ids: List[str], now: datetime) -> Project:
        """Generate a project with parent objectives, children and dependencies."""
        objectives = []
        parents = []
        for i in range(3):
            objective_id = f"{project_id}-obj-{i}"
            parents.append(objective_id)
            edges = []
            if i > 0 and self.random.random() < 0.6:
                edges.append(DependencyEdge(
                    predecessor_objective_id=parents[self.random.randint(0, i - 1)],
                    successor_objective_id=objective_id,
                    type=self.random.choice(['FS', 'SS', 'FF', 'SF']),
                ))
            objectives.append(Objective(
                objective_id=objective_id,
                title=f"Objective {i}",
                target_date=(now + timedelta(days=self.random.randint(30, 120))).date(),
                assigned_team_ids=self.random.sample(team_ids, k=self.random.randint(1, min(2, len(team_ids)))),
                dependency_edges=edges,
                work_item_count=self.random.randint(2, 10),
            ))
        
        # One child per parent objective
        for parent_id in parents:
            objectives.append(Objective(
                objective_id=f"{parent_id}-a",
                title=f"Part of {parent_id}",
                target_date=(now + timedelta(days=self.random.randint(20, 90))).date(),
                assigned_team_ids=[self.random.choice(team_ids)],
                parent_objective_id=parent_id,
                work_item_count=self.random.randint(1, 6),
            ))
        
        return Project(
            project_id=project_id,
            title=f"Project {project_id}",
            target_date=(now + timedelta(days=90)).date(),
            objectives=objectives,
        )
    
    def generate_snapshot(self, now: datetime, team_count: int = 4) -> Snapshot:
        """Generate a complete snapshot with one project."""
        team_ids = [f"team-{i}" for i in range(team_count)]
        units = [OrgUnit(unit_id="org", tier="organization", name="Organization")]
        units.extend(OrgUnit(unit_id=t, parent_id="org", tier="team", name=t.title()) for t in team_ids)
        teams = {t: self.generate_team(t, now, self.random.randint(4, 20)) for t in team_ids}
        project = self.generate_project("proj-1", team_ids, now)
        
        return Snapshot(now=now, units=units, teams=teams, projects={project.project_id: project})
    
    def snapshot_to_dict(self, snapshot: Snapshot) -> Dict[str, Any]:
        """Serialize a snapshot to a JSON-friendly document loadable by Snapshot.from_dict."""
        return {
            'now': snapshot.now.isoformat(),
            'units': [
                {'unit_id': u.unit_id, 'parent_id': u.parent_id, 'tier': u.tier, 'name': u.name}
                for u in snapshot.units
            ],
            'teams': {
                team_id: {
                    'backlog': [
                        {
                            'id': item.item_id,
                            'priority': str(item.priority),
                            'stack_rank': item.stack_rank,
                            'title': item.title,
                        }
                        for item in team.backlog
                    ],
                    'completions': [
                        {'completed_at': r.completed_at.isoformat(), 'item_id': r.item_id}
                        for r in team.completions
                    ],
                    'weekly_counts': team.weekly_counts,
                    'throughput_per_day': team.throughput_per_day,
                }
                for team_id, team in snapshot.teams.items()
            },
            'projects': [
                {
                    'id': project.project_id,
                    'title': project.title,
                    'target_date': project.target_date.isoformat() if project.target_date else None,
                    'objectives': [
                        {
                            'id': o.objective_id,
                            'title': o.title,
                            'target_date': o.target_date.isoformat() if o.target_date else None,
                            'assigned_team_ids': o.assigned_team_ids,
                            'parent_objective_id': o.parent_objective_id,
                            'work_item_count': o.work_item_count,
                            'dependency_edges': [
                                {
                                    'predecessor_objective_id': e.predecessor_objective_id,
                                    'successor_objective_id': e.successor_objective_id,
                                    'type': e.type,
                                }
                                for e in o.dependency_edges
                            ],
                        }
                        for o in project.objectives
                    ],
                }
                for project in snapshot.projects.values()
            ],
        }
