"""Module G: Compliance snapshots.

Dashboards read the stored snapshot instead of recomputing the rolling window on every
page load. A snapshot is stale when the employee's trip list (by hash) or the reference
date changed since it was generated; stale rows are recomputed on read.
"""
import hashlib
import logging
from datetime import date, datetime, timezone

from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import SessionLocal
from app.models.compliance_snapshot import ComplianceSnapshot
from app.models.employee import Employee, TripRecord
from app.schemas.compliance import CalculationMode, ComplianceConfig, Trip
from app.services.compliance import evaluate_days_used, trips_fingerprint
from app.services.presence import build_presence
from app.services.safe_entry import earliest_safe_entry
from app.services.schengen_countries import get_membership
from app.services.window import days_used_in_window

settings = get_settings()
log = logging.getLogger("uvicorn.error")


def to_engine_trips(records: list[TripRecord]) -> list[Trip]:
    """Stored trip rows as engine trips; ghosted trips are left out."""
    return [
        Trip(id=str(r.id), country=r.country, entry_date=r.entry_date, exit_date=r.exit_date)
        for r in records
        if not r.ghosted
    ]


def trips_hash(trips: list[Trip]) -> str:
    return hashlib.sha256(trips_fingerprint(trips).encode("utf-8")).hexdigest()


def is_snapshot_stale(snapshot: ComplianceSnapshot | None, trips: list[Trip], reference_date: date) -> bool:
    if snapshot is None:
        return True
    return snapshot.reference_date != reference_date or snapshot.trips_hash != trips_hash(trips)


def refresh_snapshot(
    db: Session,
    employee: Employee,
    reference_date: date | None = None,
    force: bool = False,
) -> ComplianceSnapshot:
    """Return the employee's snapshot, recomputing it if stale (or always, with force). Commit is left to the caller."""
    ref = reference_date or date.today()
    trips = to_engine_trips(employee.trips)
    snapshot = db.query(ComplianceSnapshot).filter(ComplianceSnapshot.employee_id == employee.id).first()
    if not force and not is_snapshot_stale(snapshot, trips, ref):
        return snapshot

    config = ComplianceConfig(
        mode=CalculationMode.audit,
        reference_date=ref,
        compliance_start_date=settings.compliance_start_date,
    )
    presence = build_presence(trips, config, get_membership(settings.schengen_membership_mode))
    result = evaluate_days_used(days_used_in_window(presence, ref), ref)
    next_reset = earliest_safe_entry(presence, ref, search_cap_days=settings.safe_entry_search_cap_days)

    if snapshot is None:
        snapshot = ComplianceSnapshot(employee_id=employee.id)
        db.add(snapshot)
    snapshot.reference_date = ref
    snapshot.days_used = result.days_used
    snapshot.days_remaining = result.days_remaining
    snapshot.risk_level = result.risk_level
    snapshot.is_compliant = result.is_compliant
    snapshot.next_reset_date = next_reset
    snapshot.trips_hash = trips_hash(trips)
    snapshot.snapshot_generated_at = datetime.now(timezone.utc)
    db.flush()
    return snapshot


def rebuild_all_snapshots(db: Session, reference_date: date | None = None) -> int:
    """Recompute every employee's snapshot. Returns the number rebuilt."""
    employees = db.query(Employee).order_by(Employee.id).all()
    for employee in employees:
        refresh_snapshot(db, employee, reference_date, force=True)
    db.commit()
    return len(employees)


def run_snapshot_refresh_job() -> None:
    """Run once per day: rebuild all snapshots against today's date."""
    if not settings.snapshot_cron_enabled:
        return
    db = SessionLocal()
    try:
        count = rebuild_all_snapshots(db)
        log.info("Compliance snapshots: rebuilt %d employee snapshot(s).", count)
    except Exception:
        db.rollback()
        log.exception("Compliance snapshot refresh failed")
        raise
    finally:
        db.close()
