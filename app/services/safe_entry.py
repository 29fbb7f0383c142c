"""Module E: Safe-entry solver.

Days fall out of the rolling window as time passes without new travel, so the
count is non-increasing day by day and a forward scan finds the first date with
89 or fewer days used.
"""
import logging
from datetime import date, timedelta
from typing import AbstractSet

from app.schemas.compliance import ExpiringDays, SafeEntryResult
from app.services.errors import SafeEntrySearchExhausted
from app.services.window import SCHENGEN_DAY_LIMIT, can_safely_enter, days_used_in_window

SAFE_ENTRY_SEARCH_CAP_DAYS = 365

log = logging.getLogger("uvicorn.error")


def earliest_safe_entry(
    presence: AbstractSet[date],
    from_date: date,
    compliance_start_date: date | None = None,
    search_cap_days: int = SAFE_ENTRY_SEARCH_CAP_DAYS,
) -> date | None:
    """Earliest date after from_date with at most 89 days used; None if from_date is already fine."""
    used = days_used_in_window(presence, from_date, compliance_start_date)
    if used <= SCHENGEN_DAY_LIMIT - 1:
        return None

    for days_ahead in range(1, search_cap_days + 1):
        check = from_date + timedelta(days=days_ahead)
        if can_safely_enter(presence, check, compliance_start_date):
            return check

    log.error(
        "Safe entry search exhausted: from=%s cap=%d days_used=%d presence_days=%d",
        from_date.isoformat(), search_cap_days, used, len(presence),
    )
    raise SafeEntrySearchExhausted(from_date, search_cap_days, used)


def days_until_compliant(
    presence: AbstractSet[date],
    today: date,
    compliance_start_date: date | None = None,
) -> int:
    safe = earliest_safe_entry(presence, today, compliance_start_date)
    if safe is None:
        return 0
    return (safe - today).days


def safe_entry_info(
    presence: AbstractSet[date],
    today: date,
    compliance_start_date: date | None = None,
    search_cap_days: int = SAFE_ENTRY_SEARCH_CAP_DAYS,
) -> SafeEntryResult:
    used_today = days_used_in_window(presence, today, compliance_start_date)
    if used_today <= SCHENGEN_DAY_LIMIT - 1:
        return SafeEntryResult(
            can_enter_today=True,
            earliest_safe_date=None,
            days_until_compliant=0,
            days_used_on_entry=used_today,
        )
    safe = earliest_safe_entry(presence, today, compliance_start_date, search_cap_days)
    return SafeEntryResult(
        can_enter_today=False,
        earliest_safe_date=safe,
        days_until_compliant=(safe - today).days,
        days_used_on_entry=days_used_in_window(presence, safe, compliance_start_date),
    )


def project_expiring_days(
    presence: AbstractSet[date],
    from_date: date,
    days: int,
    compliance_start_date: date | None = None,
) -> list[ExpiringDays]:
    """Day-by-day outlook from from_date: how many days drop out of the window each day."""
    projection = []
    previous = days_used_in_window(presence, from_date, compliance_start_date)
    for i in range(days + 1):
        day = from_date + timedelta(days=i)
        used = days_used_in_window(presence, day, compliance_start_date)
        projection.append(
            ExpiringDays(
                day=day,
                expiring_days=0 if i == 0 else max(0, previous - used),
                days_used=used,
                days_remaining=SCHENGEN_DAY_LIMIT - used,
            )
        )
        previous = used
    return projection


def max_stay_days(
    presence: AbstractSet[date],
    entry_date: date,
    compliance_start_date: date | None = None,
) -> int:
    """Upper bound on consecutive days from entry_date (entry day counts as day 1); 0 if entry is unsafe."""
    if not can_safely_enter(presence, entry_date, compliance_start_date):
        return 0
    return SCHENGEN_DAY_LIMIT - days_used_in_window(presence, entry_date, compliance_start_date)


def presence_up_to(presence: AbstractSet[date], day: date) -> frozenset[date]:
    """Presence on or before `day`. The solver assumes no travel after the date it starts from."""
    return frozenset(p for p in presence if p <= day)
