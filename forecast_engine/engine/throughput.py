"""Team throughput from completion history.

Two formulas coexist and are kept apart on purpose:

* bucketed - mean of weekly completed counts, rounded to whole items/week.
  Empty history gives 0, which queue forecasting reads as "cannot forecast".
* windowed - completions inside the trailing window divided by the window,
  in items/day. No completions gives a floor of 0.25/day, which lead-time
  estimation reads as "slow but non-zero".
"""

import logging
from datetime import datetime, timedelta
from typing import Iterable, List, Sequence

from ..errors import InvalidInputError
from ..models.backlog import CompletionRecord
from ..utils.rounding import round_half_up

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 30
DEFAULT_FLOOR_PER_DAY = 0.25
DEFAULT_BUCKET_WEEKS = 6


def bucketed_throughput(completed_per_week: Sequence[int]) -> float:
    """Average items completed per week, e.g. [12, 10, 8, 14, 9, 11] -> 11."""
    if not completed_per_week:
        return 0
    for count in completed_per_week:
        if count < 0:
            raise InvalidInputError(f"Negative weekly completion count: {count}")
    
    return int(round_half_up(sum(completed_per_week) / len(completed_per_week)))


def windowed_throughput(
    records: Iterable[CompletionRecord],
    now: datetime,
    window_days: int = DEFAULT_WINDOW_DAYS,
    floor: float = DEFAULT_FLOOR_PER_DAY,
) -> float:
    """Items per day completed in [now - window_days, now], never below `floor` when idle."""
    if window_days <= 0:
        raise InvalidInputError(f"Throughput window must be positive, got {window_days}")
    
    cutoff = now - timedelta(days=window_days)
    recent = sum(1 for r in records if cutoff <= r.completed_at <= now)
    
    if recent == 0:
        logger.debug("No completions in the last %s days; using floor %.2f/day", window_days, floor)
        return floor
    
    return recent / window_days


def bucket_completions(
    records: Iterable[CompletionRecord],
    now: datetime,
    weeks: int = DEFAULT_BUCKET_WEEKS,
) -> List[int]:
    """Weekly completed counts for the trailing `weeks`, most recent week first."""
    if weeks <= 0:
        raise InvalidInputError(f"Bucket count must be positive, got {weeks}")
    
    counts = [0] * weeks
    for record in records:
        if record.completed_at > now:
            continue
        age_days = (now - record.completed_at).total_seconds() / 86400
        index = int(age_days // 7)
        if index < weeks:
            counts[index] += 1
    return counts
