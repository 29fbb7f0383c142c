"""Module B: Presence set builder.

Turns a trip history into the set of calendar dates spent inside the Schengen Area.
Entry and exit dates both count as full days; overlapping trips in different
countries contribute each date once.
"""
from datetime import date, timedelta
from typing import Iterable

from app.schemas.compliance import CalculationMode, ComplianceConfig, Trip
from app.services.schengen_countries import SchengenMembership, get_membership, normalize_country


def trip_presence_range(
    trip: Trip,
    config: ComplianceConfig,
    membership: SchengenMembership,
) -> tuple[date, date] | None:
    """Inclusive (start, end) of countable days for one trip, or None if it contributes nothing."""
    code = normalize_country(trip.country)
    if code is None:
        return None
    joined = membership.effective_from(code)
    if joined is None:
        return None

    ref = config.reference_date
    start = trip.entry_date
    end = trip.exit_date if trip.exit_date is not None else ref

    if config.mode == CalculationMode.audit:
        if start > ref:
            return None
        end = min(end, ref)

    if config.compliance_start_date is not None and config.compliance_start_date > start:
        start = config.compliance_start_date
    # Versioned membership: days before the country joined are not Schengen days
    if joined > start:
        start = joined

    if end < start:
        return None
    return start, end


def build_presence(
    trips: Iterable[Trip],
    config: ComplianceConfig,
    membership: SchengenMembership | None = None,
) -> frozenset[date]:
    membership = membership or get_membership()
    days: set[date] = set()
    for trip in trips:
        bounds = trip_presence_range(trip, config, membership)
        if bounds is None:
            continue
        start, end = bounds
        days.update(start + timedelta(days=i) for i in range((end - start).days + 1))
    return frozenset(days)


def presence_bounds(presence: Iterable[date]) -> tuple[date, date] | None:
    """Earliest and latest presence date, None for an empty set."""
    ordered = sorted(presence)
    if not ordered:
        return None
    return ordered[0], ordered[-1]
