"""Backlog, completion history and team data models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from ..errors import InvalidInputError
from ..utils.datetime_utils import parse_datetime


class Priority(Enum):
    """Queue tier. P1 is worked strictly before P2, P2 strictly before P3."""
    
    P1 = 1
    P2 = 2
    P3 = 3
    
    @classmethod
    def parse(cls, value: Any) -> 'Priority':
        """Normalize "P1", "p1", 1 or "1" style values to a tier."""
        if isinstance(value, Priority):
            return value
        if isinstance(value, bool):
            raise InvalidInputError(f"Invalid priority tier: {value!r}")
        if isinstance(value, int):
            rank = value
        elif isinstance(value, str):
            text = value.strip().upper()
            if text.startswith('P'):
                text = text[1:]
            if not text.isdigit():
                raise InvalidInputError(f"Invalid priority tier: {value!r}")
            rank = int(text)
        else:
            raise InvalidInputError(f"Invalid priority tier: {value!r}")
        
        try:
            return cls(rank)
        except ValueError as exc:
            raise InvalidInputError(f"Invalid priority tier: {value!r}") from exc
    
    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class CompletionRecord:
    """A finished piece of work; the only input to throughput."""
    
    completed_at: datetime
    item_id: Optional[str] = None
    
    @classmethod
    def from_value(cls, value: Any) -> 'CompletionRecord':
        """Build from a bare timestamp or a {completed_at, item_id} mapping."""
        if isinstance(value, dict):
            raw = value.get('completed_at', value.get('completedAt'))
            if raw is None:
                raise InvalidInputError("Completion record is missing completed_at")
            return cls(completed_at=parse_datetime(raw), item_id=value.get('item_id'))
        return cls(completed_at=parse_datetime(value))


@dataclass
class BacklogItem:
    """Queued, unstarted work assigned to a team."""
    
    item_id: str
    priority: Priority
    team_id: str
    stack_rank: Optional[int] = None
    title: Optional[str] = None
    
    def __post_init__(self):
        """Normalize the priority tier at ingestion."""
        self.priority = Priority.parse(self.priority)
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any], team_id: Optional[str] = None) -> 'BacklogItem':
        """Deserialize from dictionary."""
        item_id = data.get('item_id', data.get('id'))
        if item_id is None:
            raise InvalidInputError("Backlog item is missing an id")
        rank = data.get('stack_rank', data.get('stackRank'))
        return cls(
            item_id=str(item_id),
            priority=data.get('priority'),
            team_id=str(data.get('team_id', data.get('teamId', team_id))),
            stack_rank=int(rank) if rank is not None else None,
            title=data.get('title'),
        )


@dataclass
class TeamSnapshot:
    """Backlog and completion history for one team at one instant."""
    
    team_id: str
    backlog: List[BacklogItem] = field(default_factory=list)
    completions: List[CompletionRecord] = field(default_factory=list)
    weekly_counts: Optional[List[int]] = None
    throughput_per_day: Optional[float] = None
    
    def __post_init__(self):
        """Reject negative weekly counts."""
        if self.weekly_counts is not None:
            for count in self.weekly_counts:
                if count < 0:
                    raise InvalidInputError(
                        f"Negative weekly completion count for team {self.team_id}: {count}"
                    )
    
    @classmethod
    def from_dict(cls, team_id: str, data: Dict[str, Any]) -> 'TeamSnapshot':
        """Deserialize from dictionary."""
        weekly = data.get('weekly_counts', data.get('completedPerWeek'))
        return cls(
            team_id=team_id,
            backlog=[BacklogItem.from_dict(item, team_id) for item in data.get('backlog', [])],
            completions=[CompletionRecord.from_value(v) for v in data.get('completions', [])],
            weekly_counts=[int(c) for c in weekly] if weekly is not None else None,
            throughput_per_day=(
                float(data['throughput_per_day']) if data.get('throughput_per_day') is not None else None
            ),
        )


@dataclass
class OrgUnit:
    """A node in the organizational tree; leaves are delivery teams."""
    
    unit_id: str
    parent_id: Optional[str] = None
    tier: Optional[str] = None
    name: Optional[str] = None
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OrgUnit':
        """Deserialize from dictionary."""
        return cls(
            unit_id=str(data.get('unit_id', data.get('id'))),
            parent_id=data.get('parent_id', data.get('parentId')),
            tier=data.get('tier'),
            name=data.get('name'),
        )
