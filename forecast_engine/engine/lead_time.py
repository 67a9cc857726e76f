"""Per-team lead time for an objective's new work."""

import logging
from datetime import datetime
from typing import Iterable, Optional, Sequence

from ..errors import InvalidInputError
from ..models.backlog import BacklogItem, CompletionRecord, Priority
from ..models.forecast import TargetRequirements, TeamLeadTime
from ..utils.datetime_utils import add_days, ceil_days
from ..utils.rounding import round_half_up
from .critical_path import dependency_buffer
from .throughput import DEFAULT_FLOOR_PER_DAY, DEFAULT_WINDOW_DAYS, windowed_throughput

logger = logging.getLogger(__name__)


def queue_length(backlog: Sequence[BacklogItem]) -> int:
    """Items competing with new work: the P1 and P2 buckets."""
    return sum(1 for item in backlog if item.priority in (Priority.P1, Priority.P2))


def calculate_lead_time(
    team_id: str,
    new_item_count: int,
    backlog: Sequence[BacklogItem],
    completions: Iterable[CompletionRecord],
    dependency_lead_times: Iterable[Optional[float]],
    now: datetime,
    throughput_per_day: Optional[float] = None,
    window_days: int = DEFAULT_WINDOW_DAYS,
    floor: float = DEFAULT_FLOOR_PER_DAY,
) -> TeamLeadTime:
    """Lead time for `team_id` to finish its queue plus `new_item_count` items.
    
    Every day count is ceiling-rounded. An explicit ``throughput_per_day``
    bypasses the windowed floor; when it is not positive the day counts and
    date come back as ``None``.
    """
    if new_item_count < 0:
        raise InvalidInputError(f"Negative new item count for team {team_id}: {new_item_count}")
    
    if throughput_per_day is None:
        throughput_per_day = windowed_throughput(completions, now, window_days, floor)
    
    queued = queue_length(backlog)
    buffer = dependency_buffer(dependency_lead_times)
    
    if throughput_per_day <= 0:
        logger.debug("Team %s: throughput %.2f/day, lead time undefined", team_id, throughput_per_day)
        return TeamLeadTime(
            team_id=team_id,
            lead_time_days=None,
            base_lead_time_days=None,
            queue_length=queued,
            new_item_count=new_item_count,
            throughput=round_half_up(max(throughput_per_day, 0), 2),
            dependency_buffer_days=ceil_days(buffer),
            calculated_date=None,
        )
    
    base = (queued + new_item_count) / throughput_per_day
    total = base + buffer
    total_days = ceil_days(total)
    
    logger.debug(
        "Team %s: queue=%d new=%d throughput=%.3f/day base=%.2f buffer=%.2f",
        team_id, queued, new_item_count, throughput_per_day, base, buffer,
    )
    
    return TeamLeadTime(
        team_id=team_id,
        lead_time_days=total_days,
        base_lead_time_days=ceil_days(base),
        queue_length=queued,
        new_item_count=new_item_count,
        throughput=round_half_up(throughput_per_day, 2),
        dependency_buffer_days=ceil_days(buffer),
        calculated_date=add_days(now.date(), total_days),
    )


def target_requirements(
    current_throughput: float,
    queue_length: int,
    new_items: int,
    target_days: int,
) -> TargetRequirements:
    """Throughput or scope change needed to finish within `target_days`.
    
    A target of today or earlier has no achievable throughput; the required
    and increase figures come back as ``None`` and all work is over scope.
    """
    if queue_length < 0 or new_items < 0:
        raise InvalidInputError("Queue length and new item count must be non-negative")
    
    total_items = queue_length + new_items
    if target_days <= 0:
        logger.debug("Target is %d days away; requirements undefined", target_days)
        return TargetRequirements(
            required_throughput=None,
            throughput_increase=None,
            items_to_remove=total_items,
            recommendations=["Target date has passed", "Negotiate target date with leadership"],
        )
    
    required = total_items / target_days
    increase = required - current_throughput
    items_to_remove = max(0, ceil_days(total_items - current_throughput * target_days))
    
    recommendations = []
    if increase > 0:
        recommendations.append(f"Increase throughput to {required:.2f} items/day")
    if items_to_remove > 0:
        recommendations.append(f"Reduce queue by {items_to_remove} items")
    recommendations.append("Negotiate target date with leadership")
    
    return TargetRequirements(
        required_throughput=round_half_up(required, 2),
        throughput_increase=round_half_up(increase, 2),
        items_to_remove=items_to_remove,
        recommendations=recommendations,
    )
