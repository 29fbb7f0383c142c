"""Standalone script to create DB tables and seed demo employees with trips."""
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.database import engine, SessionLocal, Base
from app.models import Employee, TripRecord, ComplianceSnapshot  # noqa: F401
from app.seed import seed_demo_employees

if __name__ == "__main__":
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_demo_employees(db)
        print(f"Demo employees seeded: {db.query(Employee).count()} employee(s).")
    finally:
        db.close()
