"""Priority-queue lead time forecasting.

Work is pulled strictly by tier: every P1 item before any P2, every P2
before any P3. Within a tier, items are ordered by stack rank when one is
supplied and by backlog order otherwise.
"""

import logging
from datetime import date
from typing import Dict, List, Optional, Sequence

from ..models.backlog import BacklogItem, Priority
from ..models.forecast import ItemForecast, TeamLoad, UNKNOWN_WINDOW
from ..utils.datetime_utils import add_days, ceil_days
from ..utils.rounding import round_half_up

logger = logging.getLogger(__name__)

DEFAULT_BUSY_WEEKS = 8
DEFAULT_OVERLOADED_WEEKS = 12


def bucket_counts(backlog: Sequence[BacklogItem]) -> Dict[str, int]:
    """Count items in each priority bucket."""
    counts = {
        'p1': sum(1 for item in backlog if item.priority is Priority.P1),
        'p2': sum(1 for item in backlog if item.priority is Priority.P2),
        'p3': sum(1 for item in backlog if item.priority is Priority.P3),
    }
    counts['total'] = counts['p1'] + counts['p2'] + counts['p3']
    return counts


def queue_order(backlog: Sequence[BacklogItem]) -> List[BacklogItem]:
    """Backlog in pull order: tier, then stack rank (unranked last), then insertion order."""
    indexed = list(enumerate(backlog))
    
    def sort_key(entry):
        position, item = entry
        rank = item.stack_rank
        return (item.priority.value, rank is None, rank if rank is not None else 0, position)
    
    return [item for _, item in sorted(indexed, key=sort_key)]


def items_ahead(target: BacklogItem, backlog: Sequence[BacklogItem]) -> int:
    """Number of backlog items pulled before `target`."""
    higher_tiers = sum(1 for item in backlog if item.priority.value < target.priority.value)
    peers = [item for item in backlog if item.priority is target.priority]
    
    if target.stack_rank is None:
        # No rank to order by: every other item in the tier counts as ahead
        same_tier = sum(1 for item in peers if item.item_id != target.item_id)
    else:
        ordered = queue_order(peers)
        same_tier = 0
        for item in ordered:
            if item.item_id == target.item_id:
                break
            same_tier += 1
    
    return higher_tiers + same_tier


def _weeks_window(weeks: float) -> str:
    return f"~{round_half_up(weeks, 1):.1f} weeks"


def forecast_item(
    item_id: str,
    backlog: Sequence[BacklogItem],
    throughput: float,
    today: Optional[date] = None,
) -> ItemForecast:
    """Forecast one item from its queue position and weekly throughput.
    
    Zero throughput or an unknown item gives an undefined forecast
    (``weeks=None, window="unknown"``) rather than an error.
    """
    if not throughput or throughput <= 0:
        return ItemForecast(item_id=item_id, weeks=None, window=UNKNOWN_WINDOW)
    
    target = next((item for item in backlog if item.item_id == item_id), None)
    if target is None:
        logger.debug("Item %s not found in backlog of %d items", item_id, len(backlog))
        return ItemForecast(item_id=item_id, weeks=None, window=UNKNOWN_WINDOW)
    
    ahead = items_ahead(target, backlog)
    weeks = ahead / throughput
    lead_time_days = ceil_days(weeks * 7)
    
    return ItemForecast(
        item_id=item_id,
        weeks=round_half_up(weeks, 1),
        window=_weeks_window(weeks),
        priority=str(target.priority),
        items_ahead=ahead,
        queue_position=ahead + 1,
        lead_time_days=lead_time_days,
        estimated_date=add_days(today, lead_time_days) if today else None,
    )


def forecast_backlog(
    backlog: Sequence[BacklogItem],
    throughput: float,
    today: Optional[date] = None,
) -> List[ItemForecast]:
    """Forecast every backlog item in pull order; empty when throughput is unknown."""
    if not throughput or throughput <= 0 or not backlog:
        return []
    
    forecasts = []
    for position, item in enumerate(queue_order(backlog)):
        weeks = position / throughput
        lead_time_days = ceil_days(weeks * 7)
        forecasts.append(ItemForecast(
            item_id=item.item_id,
            weeks=round_half_up(weeks, 1),
            window=_weeks_window(weeks),
            priority=str(item.priority),
            items_ahead=position,
            queue_position=position + 1,
            lead_time_days=lead_time_days,
            estimated_date=add_days(today, lead_time_days) if today else None,
        ))
    return forecasts


def load_status(
    total_load_weeks: Optional[float],
    busy_weeks: float = DEFAULT_BUSY_WEEKS,
    overloaded_weeks: float = DEFAULT_OVERLOADED_WEEKS,
) -> str:
    """Classify queue depth: healthy, busy or overloaded."""
    if total_load_weeks is None:
        return 'unknown'
    if total_load_weeks > overloaded_weeks:
        return 'overloaded'
    if total_load_weeks > busy_weeks:
        return 'busy'
    return 'healthy'


def team_load(
    backlog: Sequence[BacklogItem],
    throughput: float,
    busy_weeks: float = DEFAULT_BUSY_WEEKS,
    overloaded_weeks: float = DEFAULT_OVERLOADED_WEEKS,
) -> TeamLoad:
    """Weeks of work queued in the P1, P1+P2 and total buckets."""
    counts = bucket_counts(backlog)
    
    if not throughput or throughput <= 0:
        return TeamLoad(throughput=throughput or 0, buckets=counts)
    
    p1_weeks = counts['p1'] / throughput
    p2_weeks = (counts['p1'] + counts['p2']) / throughput
    total_weeks = counts['total'] / throughput
    
    return TeamLoad(
        throughput=throughput,
        buckets=counts,
        p1_load_weeks=p1_weeks,
        p2_load_weeks=p2_weeks,
        total_load_weeks=total_weeks,
        p1_load_days=ceil_days(p1_weeks * 7),
        p2_load_days=ceil_days(p2_weeks * 7),
        total_load_days=ceil_days(total_weeks * 7),
        status=load_status(total_weeks, busy_weeks, overloaded_weeks),
    )
