"""Seed demo employees and trips (dev/demo only)."""
from datetime import date, timedelta
from sqlalchemy.orm import Session
from app.models.employee import Employee, TripRecord


def seed_demo_employees(db: Session, today: date | None = None) -> None:
    if db.query(Employee).count() > 0:
        return
    today = today or date.today()

    def ago(days: int) -> date:
        return today - timedelta(days=days)

    employees = [
        Employee(
            name="Ana Lopez",
            trips=[
                TripRecord(country="FR", entry_date=ago(60), exit_date=ago(51)),
                TripRecord(country="DE", entry_date=ago(55), exit_date=ago(45)),
            ],
        ),
        Employee(
            name="Ben Okafor",
            trips=[
                TripRecord(country="ES", entry_date=ago(150), exit_date=ago(81)),
                TripRecord(country="IE", entry_date=ago(40), exit_date=ago(30)),
                TripRecord(country="IT", entry_date=ago(10), exit_date=None),
            ],
        ),
        Employee(
            name="Chen Wei",
            trips=[
                TripRecord(country="NL", entry_date=ago(120), exit_date=ago(31)),
                TripRecord(country="MC", entry_date=ago(5), exit_date=ago(2)),
            ],
        ),
        Employee(
            name="Dara Novak",
            trips=[
                TripRecord(country="PT", entry_date=ago(20), exit_date=ago(14)),
                TripRecord(country="GR", entry_date=ago(100), exit_date=ago(90), ghosted=True),
            ],
        ),
    ]
    for e in employees:
        db.add(e)
    db.commit()
