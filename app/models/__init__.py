"""
All SQLAlchemy models. Schema is the source of truth for new DBs.
Base.metadata.create_all() creates every table; no migration scripts needed for fresh installs.
"""
from app.models.employee import Employee, TripRecord
from app.models.compliance_snapshot import ComplianceSnapshot

__all__ = [
    "Employee",
    "TripRecord",
    "ComplianceSnapshot",
]
