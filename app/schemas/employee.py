"""Module G: Employee compliance schemas (dashboard rows)."""
from datetime import date, datetime
from pydantic import BaseModel
from app.schemas.compliance import RiskLevel


class EmployeeComplianceResponse(BaseModel):
    id: int
    name: str
    total_trips: int
    last_trip_date: date | None
    reference_date: date
    days_used: int
    days_remaining: int
    risk_level: RiskLevel
    is_compliant: bool
    next_reset_date: date | None
    severity_score: int
    risk_description: str
    risk_action: str
    snapshot_generated_at: datetime | None = None
