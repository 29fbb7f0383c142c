"""Module G: Employee compliance dashboard backed by snapshots."""
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from app.config import get_settings
from app.database import get_db
from app.models.compliance_snapshot import ComplianceSnapshot
from app.models.employee import Employee
from app.schemas.compliance import ForecastResult
from app.schemas.employee import EmployeeComplianceResponse
from app.services.errors import SafeEntrySearchExhausted
from app.services.forecast import forecast_future_trips
from app.services.risk import risk_action, risk_description, severity_score
from app.services.schengen_countries import get_membership
from app.services.snapshots import refresh_snapshot, to_engine_trips

router = APIRouter(prefix="/employees", tags=["employees"])
settings = get_settings()


def _to_response(employee: Employee, snapshot: ComplianceSnapshot) -> EmployeeComplianceResponse:
    active = [t for t in employee.trips if not t.ghosted]
    last_trip = max((t.exit_date or t.entry_date for t in active), default=None)
    return EmployeeComplianceResponse(
        id=employee.id,
        name=employee.name,
        total_trips=len(active),
        last_trip_date=last_trip,
        reference_date=snapshot.reference_date,
        days_used=snapshot.days_used,
        days_remaining=snapshot.days_remaining,
        risk_level=snapshot.risk_level,
        is_compliant=snapshot.is_compliant,
        next_reset_date=snapshot.next_reset_date,
        severity_score=severity_score(snapshot.days_remaining),
        risk_description=risk_description(snapshot.risk_level),
        risk_action=risk_action(snapshot.risk_level, snapshot.days_remaining),
        snapshot_generated_at=snapshot.snapshot_generated_at,
    )


def _get_employee(db: Session, employee_id: int) -> Employee:
    employee = db.query(Employee).filter(Employee.id == employee_id).first()
    if not employee:
        raise HTTPException(status_code=404, detail="Employee not found")
    return employee


def _refresh(db: Session, employee: Employee, reference_date: date | None, force: bool = False) -> ComplianceSnapshot:
    try:
        return refresh_snapshot(db, employee, reference_date, force=force)
    except SafeEntrySearchExhausted as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/", response_model=list[EmployeeComplianceResponse])
def list_employees(
    reference_date: date | None = Query(None, description="Defaults to today"),
    db: Session = Depends(get_db),
):
    """All employees, most urgent first. Stale snapshots are recomputed on read."""
    rows = []
    for employee in db.query(Employee).order_by(Employee.name).all():
        rows.append(_to_response(employee, _refresh(db, employee, reference_date)))
    db.commit()
    return sorted(rows, key=lambda r: r.severity_score, reverse=True)


@router.get("/{employee_id}/compliance", response_model=EmployeeComplianceResponse)
def get_employee_compliance(
    employee_id: int,
    reference_date: date | None = Query(None, description="Defaults to today"),
    db: Session = Depends(get_db),
):
    employee = _get_employee(db, employee_id)
    snapshot = _refresh(db, employee, reference_date)
    db.commit()
    return _to_response(employee, snapshot)


@router.post("/{employee_id}/compliance/refresh", response_model=EmployeeComplianceResponse)
def refresh_employee_compliance(
    employee_id: int,
    reference_date: date | None = Query(None, description="Defaults to today"),
    db: Session = Depends(get_db),
):
    employee = _get_employee(db, employee_id)
    snapshot = _refresh(db, employee, reference_date, force=True)
    db.commit()
    return _to_response(employee, snapshot)


@router.get("/{employee_id}/forecast", response_model=list[ForecastResult])
def get_employee_forecast(
    employee_id: int,
    from_date: date | None = Query(None, description="Forecast trips entering on or after this date; defaults to today"),
    db: Session = Depends(get_db),
):
    """Upcoming trips on record, each with the status it leaves the employee in."""
    employee = _get_employee(db, employee_id)
    return forecast_future_trips(
        to_engine_trips(employee.trips),
        from_date or date.today(),
        settings.compliance_start_date,
        get_membership(settings.schengen_membership_mode),
    )
