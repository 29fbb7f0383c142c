"""Module G: Precomputed compliance status, one row per employee."""
from sqlalchemy import Column, Integer, String, Date, Boolean, ForeignKey, DateTime, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base
from app.schemas.compliance import RiskLevel


class ComplianceSnapshot(Base):
    __tablename__ = "employee_compliance_snapshots"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), unique=True, nullable=False)

    reference_date = Column(Date, nullable=False)
    days_used = Column(Integer, nullable=False)
    days_remaining = Column(Integer, nullable=False)  # negative when over the limit
    risk_level = Column(SQLEnum(RiskLevel), nullable=False, index=True)
    is_compliant = Column(Boolean, nullable=False, default=True)

    # Earliest safe entry if no more travel; NULL when entry is already possible
    next_reset_date = Column(Date, nullable=True)

    # Hash of the trip data used, so a changed trip list invalidates the row
    trips_hash = Column(String(64), nullable=False)
    snapshot_generated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    employee = relationship("Employee", back_populates="snapshot")
