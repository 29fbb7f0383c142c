"""
Recompute every employee's compliance snapshot.
Run from project root: python scripts/rebuild_snapshots.py [--date YYYY-MM-DD]
Use after changing SCHENGEN_MEMBERSHIP_MODE or COMPLIANCE_START_DATE, or after a bulk trip import.
"""
import argparse
import os
import sys
from datetime import date

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.database import engine, SessionLocal, Base
from app.models import Employee, TripRecord, ComplianceSnapshot  # noqa: F401
from app.services.snapshots import rebuild_all_snapshots


def main():
    parser = argparse.ArgumentParser(description="Rebuild compliance snapshots for all employees.")
    parser.add_argument("--date", help="Reference date (YYYY-MM-DD); defaults to today")
    args = parser.parse_args()
    ref = date.fromisoformat(args.date) if args.date else date.today()

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        count = rebuild_all_snapshots(db, ref)
        print(f"Rebuilt {count} snapshot(s) as of {ref.isoformat()}.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
