"""Module F: Daily compliance over a date range (calendar views).

Slides the 180-day window one day at a time instead of recounting each date.
"""
import calendar
from datetime import date, timedelta
from typing import Iterable

from app.schemas.compliance import ComplianceConfig, DailyCompliance, Trip
from app.services.errors import InvalidReferenceDateError
from app.services.presence import build_presence
from app.services.risk import risk_level_for
from app.services.schengen_countries import SchengenMembership
from app.services.window import SCHENGEN_DAY_LIMIT, WINDOW_SIZE_DAYS, days_used_in_window


def compute_compliance_vector(
    trips: Iterable[Trip],
    start_date: date,
    end_date: date,
    config: ComplianceConfig,
    membership: SchengenMembership | None = None,
) -> list[DailyCompliance]:
    if start_date > end_date:
        raise InvalidReferenceDateError(start_date, "Start date must be before or equal to end date")

    presence = build_presence(trips, config, membership)
    count = days_used_in_window(presence, start_date)
    result = []
    current = start_date
    while True:
        remaining = SCHENGEN_DAY_LIMIT - count
        result.append(
            DailyCompliance(
                day=current,
                days_used=count,
                days_remaining=remaining,
                risk_level=risk_level_for(remaining, config.thresholds),
            )
        )
        if current == end_date:
            break
        # current - 179 leaves the window, the next day enters it
        if current - timedelta(days=WINDOW_SIZE_DAYS - 1) in presence:
            count -= 1
        current += timedelta(days=1)
        if current in presence:
            count += 1
    return result


def compute_month_compliance(
    trips: Iterable[Trip],
    year: int,
    month: int,
    config: ComplianceConfig,
    membership: SchengenMembership | None = None,
) -> list[DailyCompliance]:
    last_day = calendar.monthrange(year, month)[1]
    return compute_compliance_vector(trips, date(year, month, 1), date(year, month, last_day), config, membership)


def compute_year_compliance(
    trips: Iterable[Trip],
    year: int,
    config: ComplianceConfig,
    membership: SchengenMembership | None = None,
) -> list[DailyCompliance]:
    return compute_compliance_vector(trips, date(year, 1, 1), date(year, 12, 31), config, membership)
