"""Utility functions."""

from .config import load_config, get_default_config, merge_config
from .datetime_utils import add_days, ceil_days, days_between, parse_date, parse_datetime
from .rounding import round_half_up

__all__ = [
    'load_config',
    'get_default_config',
    'merge_config',
    'add_days',
    'ceil_days',
    'days_between',
    'parse_date',
    'parse_datetime',
    'round_half_up',
]
