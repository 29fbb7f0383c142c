import os
import tempfile
from pathlib import Path

# Point the app at a throwaway SQLite file before anything imports app.config
_DB_DIR = Path(tempfile.mkdtemp(prefix="schengen-compliance-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR / 'test.db'}"
os.environ["SNAPSHOT_CRON_ENABLED"] = "false"
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["SCHENGEN_MEMBERSHIP_MODE"] = "versioned"

import pytest
from fastapi.testclient import TestClient

from app.database import Base, SessionLocal, engine
from app.models import Employee, TripRecord, ComplianceSnapshot  # noqa: F401


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    from app.main import app

    return TestClient(app)
