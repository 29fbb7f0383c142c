"""Module H: Future trip forecasting.

Answers "what would my status be if I took this trip": the days already used in the
window at the trip's entry date, counted from trips that start before it, plus the
trip's own length. Trips that start later are not part of the history.
"""
from datetime import date, timedelta
from typing import Iterable, Sequence

from app.schemas.compliance import CalculationMode, ComplianceConfig, ForecastResult, RiskLevel, Trip
from app.services.errors import InvalidConfigError
from app.services.presence import build_presence
from app.services.schengen_countries import SchengenMembership, get_membership
from app.services.window import SCHENGEN_DAY_LIMIT, WINDOW_SIZE_DAYS, days_used_in_window

FORECAST_WARNING_THRESHOLD = 80


def forecast_risk_level(days_after_trip: int, warning_threshold: int = FORECAST_WARNING_THRESHOLD) -> RiskLevel:
    """red when the trip reaches the limit, amber from the warning threshold, else green."""
    if not 0 < warning_threshold <= SCHENGEN_DAY_LIMIT:
        raise InvalidConfigError(
            "warning_threshold",
            f"Warning threshold must be between 1 and {SCHENGEN_DAY_LIMIT}, got {warning_threshold}",
        )
    if days_after_trip >= SCHENGEN_DAY_LIMIT:
        return RiskLevel.red
    if days_after_trip >= warning_threshold:
        return RiskLevel.amber
    return RiskLevel.green


def trip_length(trip: Trip) -> int:
    if trip.exit_date is None:
        raise InvalidConfigError("trip.exit_date", "A forecast trip needs an exit date")
    return (trip.exit_date - trip.entry_date).days + 1


def _is_same_trip(candidate: Trip, trip: Trip) -> bool:
    return candidate == trip or (trip.id is not None and candidate.id == trip.id)


def _history_before(trip: Trip, history: Iterable[Trip], start: date) -> list[Trip]:
    return [t for t in history if t.entry_date < start and not _is_same_trip(t, trip)]


def _days_used_at(
    start: date,
    history: list[Trip],
    compliance_start_date: date | None,
    membership: SchengenMembership,
) -> int:
    config = ComplianceConfig(
        mode=CalculationMode.planning,
        reference_date=start,
        compliance_start_date=compliance_start_date,
    )
    return days_used_in_window(build_presence(history, config, membership), start)


def compliant_from_date(
    trip: Trip,
    history: Sequence[Trip],
    compliance_start_date: date | None = None,
    membership: SchengenMembership | None = None,
) -> date | None:
    """First start date, from the trip's own entry date on, at which a trip of the same
    length stays under the limit.

    None for a non-Schengen trip, for a trip of 90 days or more, or when no start
    within the next 180 days fits.
    """
    membership = membership or get_membership()
    if not membership.classify(trip.country, trip.entry_date).is_schengen_member:
        return None
    length = trip_length(trip)
    if length >= SCHENGEN_DAY_LIMIT:
        return None
    for offset in range(WINDOW_SIZE_DAYS + 1):
        start = trip.entry_date + timedelta(days=offset)
        used = _days_used_at(start, _history_before(trip, history, start), compliance_start_date, membership)
        if used + length < SCHENGEN_DAY_LIMIT:
            return start
    return None


def forecast_trip(
    trip: Trip,
    history: Sequence[Trip],
    compliance_start_date: date | None = None,
    membership: SchengenMembership | None = None,
    warning_threshold: int = FORECAST_WARNING_THRESHOLD,
) -> ForecastResult:
    membership = membership or get_membership()
    length = trip_length(trip)
    is_schengen = membership.classify(trip.country, trip.entry_date).is_schengen_member

    used_before = _days_used_at(
        trip.entry_date,
        _history_before(trip, history, trip.entry_date),
        compliance_start_date,
        membership,
    )
    days_after = used_before + length if is_schengen else used_before
    is_compliant = days_after < SCHENGEN_DAY_LIMIT

    return ForecastResult(
        trip=trip,
        trip_duration=length,
        is_schengen=is_schengen,
        days_used_before_trip=used_before,
        days_after_trip=days_after,
        days_remaining_after_trip=SCHENGEN_DAY_LIMIT - days_after,
        risk_level=forecast_risk_level(days_after, warning_threshold),
        is_compliant=is_compliant,
        compliant_from_date=None if is_compliant else compliant_from_date(trip, history, compliance_start_date, membership),
    )


def forecast_what_if(
    country: str,
    entry_date: date,
    exit_date: date,
    history: Sequence[Trip],
    compliance_start_date: date | None = None,
    membership: SchengenMembership | None = None,
    warning_threshold: int = FORECAST_WARNING_THRESHOLD,
) -> ForecastResult:
    """Forecast for a trip that is not on record yet."""
    trip = Trip(country=country.strip().upper(), entry_date=entry_date, exit_date=exit_date)
    return forecast_trip(trip, history, compliance_start_date, membership, warning_threshold)


def forecast_future_trips(
    trips: Sequence[Trip],
    from_date: date,
    compliance_start_date: date | None = None,
    membership: SchengenMembership | None = None,
    warning_threshold: int = FORECAST_WARNING_THRESHOLD,
) -> list[ForecastResult]:
    """One forecast per trip entering on or after from_date, in entry order. Open trips have no length and are skipped."""
    upcoming = sorted(
        (t for t in trips if t.entry_date >= from_date and t.exit_date is not None),
        key=lambda t: (t.entry_date, t.exit_date),
    )
    return [forecast_trip(t, trips, compliance_start_date, membership, warning_threshold) for t in upcoming]
