"""Date and time utilities."""

import math
from datetime import date, datetime, timedelta, timezone
from typing import Union

from ..errors import InvalidInputError

DateLike = Union[str, date, datetime]


def _naive_utc(value: datetime) -> datetime:
    """Drop the timezone, converting offset-aware values to UTC first."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def parse_datetime(value: DateLike) -> datetime:
    """Normalize an ISO string, date or datetime to a naive UTC datetime."""
    if isinstance(value, datetime):
        return _naive_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    if isinstance(value, str):
        try:
            return _naive_utc(datetime.fromisoformat(value.replace('Z', '+00:00')))
        except ValueError as exc:
            raise InvalidInputError(f"Invalid timestamp: {value!r}") from exc
    raise InvalidInputError(f"Invalid timestamp: {value!r}")


def parse_date(value: DateLike) -> date:
    """Normalize an ISO string, date or datetime to a calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_datetime(value).date()


def add_days(start: date, days: int) -> date:
    """Return the calendar date `days` after `start`."""
    return start + timedelta(days=days)


def days_between(later: date, earlier: date) -> int:
    """Signed whole days from `earlier` to `later`."""
    return (later - earlier).days


def ceil_days(value: float) -> int:
    """Ceiling of a day count; a partial day consumes a full calendar day."""
    # 14.000000000000002 is 14 days, not 15
    return int(math.ceil(round(value, 9)))
