"""Module D: Compliance evaluator.

calculate_compliance is deterministic and keeps no shared state, so it is safe to
call per employee from concurrent requests or a batch job.
"""
from datetime import date
from typing import Iterable, Sequence

from app.schemas.compliance import (
    CalculationMode,
    ComplianceConfig,
    ComplianceResult,
    EmployeeTrips,
    RiskThresholds,
    Trip,
)
from app.services.presence import build_presence
from app.services.risk import risk_level_for
from app.services.schengen_countries import SchengenMembership
from app.services.window import SCHENGEN_DAY_LIMIT, days_used_in_window


def evaluate_days_used(
    days_used: int,
    reference_date: date,
    thresholds: RiskThresholds | None = None,
) -> ComplianceResult:
    remaining = SCHENGEN_DAY_LIMIT - days_used
    return ComplianceResult(
        reference_date=reference_date,
        days_used=days_used,
        days_remaining=remaining,
        risk_level=risk_level_for(remaining, thresholds),
        is_compliant=days_used < SCHENGEN_DAY_LIMIT,
    )


def calculate_compliance(
    trips: Iterable[Trip],
    config: ComplianceConfig,
    membership: SchengenMembership | None = None,
) -> ComplianceResult:
    presence = build_presence(trips, config, membership)
    days_used = days_used_in_window(presence, config.reference_date)
    return evaluate_days_used(days_used, config.reference_date, config.thresholds)


def batch_calculate_compliance(
    employees: Iterable[EmployeeTrips],
    reference_date: date,
    mode: CalculationMode = CalculationMode.audit,
    membership: SchengenMembership | None = None,
    compliance_start_date: date | None = None,
) -> dict[str, ComplianceResult]:
    """One independent calculation per employee, all anchored to the same reference date."""
    config = ComplianceConfig(mode=mode, reference_date=reference_date, compliance_start_date=compliance_start_date)
    return {emp.id: calculate_compliance(emp.trips, config, membership) for emp in employees}


def calculate_compliance_at_dates(
    trips: Sequence[Trip],
    dates: Sequence[date],
    membership: SchengenMembership | None = None,
    compliance_start_date: date | None = None,
) -> dict[date, ComplianceResult]:
    """Audit-mode results for several reference dates, building the presence set once."""
    if not dates:
        return {}
    config = ComplianceConfig(
        mode=CalculationMode.audit,
        reference_date=max(dates),
        compliance_start_date=compliance_start_date,
    )
    presence = build_presence(trips, config, membership)
    return {d: evaluate_days_used(days_used_in_window(presence, d), d) for d in dates}


def trips_fingerprint(trips: Iterable[Trip]) -> str:
    """Order-independent key for a trip list."""
    parts = sorted(
        f"{t.id or ''}|{t.entry_date.isoformat()}|{t.exit_date.isoformat() if t.exit_date else 'open'}|{t.country.strip().upper()}"
        for t in trips
    )
    return ";".join(parts)


class ComplianceCalculator:
    """Memoises calculate_compliance for the lifetime of one instance.

    Create one per request (or per render); instances must not be shared across requests.
    """

    def __init__(self, membership: SchengenMembership | None = None):
        self.membership = membership
        self._cache: dict[tuple, ComplianceResult] = {}
        self.hits = 0
        self.misses = 0

    def _key(self, trips: Sequence[Trip], config: ComplianceConfig) -> tuple:
        thresholds = (config.thresholds.green, config.thresholds.amber) if config.thresholds else None
        return (
            trips_fingerprint(trips),
            config.mode.value,
            config.reference_date,
            config.compliance_start_date,
            thresholds,
        )

    def calculate(self, trips: Sequence[Trip], config: ComplianceConfig) -> ComplianceResult:
        key = self._key(trips, config)
        cached = self._cache.get(key)
        if cached is not None:
            self.hits += 1
            return cached
        self.misses += 1
        result = calculate_compliance(trips, config, self.membership)
        self._cache[key] = result
        return result

    __call__ = calculate

    def clear(self) -> None:
        self._cache.clear()
