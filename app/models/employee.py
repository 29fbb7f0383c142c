"""Employees and their stored trip records. The engine only ever sees these as Trip schemas."""
from sqlalchemy import Column, Integer, String, Date, Boolean, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    trips = relationship("TripRecord", back_populates="employee", cascade="all, delete-orphan")
    snapshot = relationship("ComplianceSnapshot", back_populates="employee", uselist=False, cascade="all, delete-orphan")


class TripRecord(Base):
    __tablename__ = "trips"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)

    country = Column(String(64), nullable=False)  # ISO alpha-2, normalized on import
    entry_date = Column(Date, nullable=False)
    exit_date = Column(Date, nullable=True)  # NULL: still travelling

    # Ghosted trips stay on record but are excluded from compliance
    ghosted = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    employee = relationship("Employee", back_populates="trips")
