"""Critical-path aggregation.

Parallel work finishes when its slowest branch finishes, so lead times are
combined with max, never summed. Ties keep every tied id.
"""

from typing import Iterable, List, Optional, Sequence, Tuple

from ..errors import InvalidInputError
from ..models.forecast import LeadTimeAggregate, TeamLeadTime
from ..utils.datetime_utils import ceil_days


def dependency_buffer(predecessor_lead_times: Iterable[Optional[float]]) -> float:
    """Buffer contributed by predecessors running in parallel: the slowest one.
    
    ``[10, 3, 7] -> 10``; no predecessors -> 0. Undefined entries are skipped.
    """
    longest = 0
    for lead_time in predecessor_lead_times:
        if lead_time is None:
            continue
        if lead_time < 0:
            raise InvalidInputError(f"Negative dependency lead time: {lead_time}")
        longest = max(longest, lead_time)
    return longest


def max_with_ties(entries: Sequence[Tuple[str, int]]) -> Tuple[int, List[str]]:
    """Largest value and every id that reaches it, in input order."""
    if not entries:
        return 0, []
    longest = max(value for _, value in entries)
    return longest, [key for key, value in entries if value == longest]


def aggregate_lead_times(team_lead_times: Sequence[TeamLeadTime]) -> LeadTimeAggregate:
    """Combine defined team lead times for one objective.
    
    Only the max drives the objective's date; the average is informational.
    """
    defined = [(t.team_id, t.lead_time_days) for t in team_lead_times if t.is_defined]
    if not defined:
        return LeadTimeAggregate(total_lead_time_days=0, average_lead_time_days=0, critical_path=[])
    
    longest, critical = max_with_ties(defined)
    average = ceil_days(sum(days for _, days in defined) / len(defined))
    
    return LeadTimeAggregate(
        total_lead_time_days=longest,
        average_lead_time_days=average,
        critical_path=critical,
    )
