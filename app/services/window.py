"""Module C: Rolling 180-day window aggregator.

The window for a reference date is [reference_date - 179, reference_date], both ends
inclusive: a presence date 179 days back still counts, one 180 days back does not.
"""
from datetime import date, timedelta
from typing import AbstractSet

SCHENGEN_DAY_LIMIT = 90
WINDOW_SIZE_DAYS = 180


def window_bounds(reference_date: date, compliance_start_date: date | None = None) -> tuple[date, date]:
    start = reference_date - timedelta(days=WINDOW_SIZE_DAYS - 1)
    if compliance_start_date is not None and compliance_start_date > start:
        start = compliance_start_date
    return start, reference_date


def is_in_window(day: date, reference_date: date) -> bool:
    start, end = window_bounds(reference_date)
    return start <= day <= end


def days_used_in_window(
    presence: AbstractSet[date],
    reference_date: date,
    compliance_start_date: date | None = None,
) -> int:
    start, end = window_bounds(reference_date, compliance_start_date)
    if end < start:
        return 0
    span = (end - start).days + 1
    if len(presence) > span:
        return sum(1 for i in range(span) if start + timedelta(days=i) in presence)
    return sum(1 for day in presence if start <= day <= end)


def days_remaining(presence: AbstractSet[date], reference_date: date, compliance_start_date: date | None = None) -> int:
    return SCHENGEN_DAY_LIMIT - days_used_in_window(presence, reference_date, compliance_start_date)


def is_compliant(presence: AbstractSet[date], reference_date: date, compliance_start_date: date | None = None) -> bool:
    # Exactly 90 days used is already a violation
    return days_used_in_window(presence, reference_date, compliance_start_date) < SCHENGEN_DAY_LIMIT


def can_safely_enter(presence: AbstractSet[date], reference_date: date, compliance_start_date: date | None = None) -> bool:
    """True when at most 89 days are used, leaving room for the entry day itself."""
    return days_used_in_window(presence, reference_date, compliance_start_date) <= SCHENGEN_DAY_LIMIT - 1
