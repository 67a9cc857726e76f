"""Calculated-versus-target variance classification."""

from datetime import date

from ..models.forecast import Variance
from ..utils.datetime_utils import days_between

DEFAULT_CRITICAL_DAYS = 5


def classify_variance(variance_days: int, critical_days: int = DEFAULT_CRITICAL_DAYS) -> str:
    """on_track (<= 0), at_risk (1..critical_days), critical (beyond)."""
    if variance_days > critical_days:
        return 'critical'
    if variance_days > 0:
        return 'at_risk'
    return 'on_track'


def compare_to_target(
    calculated_date: date,
    target_date: date,
    critical_days: int = DEFAULT_CRITICAL_DAYS,
) -> Variance:
    """Compare an estimated completion date to its target."""
    variance_days = days_between(calculated_date, target_date)
    
    return Variance(
        variance_days=variance_days,
        variance_text=f"+{variance_days} days" if variance_days > 0 else f"{variance_days} days",
        status=classify_variance(variance_days, critical_days),
        is_late=variance_days > 0,
    )
