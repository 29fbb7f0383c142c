"""Schengen Compliance – FastAPI application."""
# Load .env before any app code that might read config
from dotenv import load_dotenv
from pathlib import Path
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.database import Base, engine
# Import models so Base.metadata has all tables before create_all (schema source of truth)
from app.models import Employee, TripRecord, ComplianceSnapshot  # noqa: F401
from app.routers import compliance, countries, employees

settings = get_settings()
app = FastAPI(title=settings.app_name, debug=settings.debug)
log = logging.getLogger("uvicorn.error")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(compliance.router)
app.include_router(countries.router)
app.include_router(employees.router)


@app.on_event("startup")
def startup():
    log.info(
        "Schengen membership mode=%s, compliance start=%s",
        settings.schengen_membership_mode,
        settings.compliance_start_date.isoformat() if settings.compliance_start_date else "none",
    )
    try:
        Base.metadata.create_all(bind=engine)
        if settings.seed_demo_data:
            from app.database import SessionLocal
            from app.seed import seed_demo_employees
            db = SessionLocal()
            try:
                seed_demo_employees(db)
            finally:
                db.close()
    except Exception as e:
        log.warning("Database startup failed (tables/seed skipped). Check DATABASE_URL and network. Error: %s", e)

    # Scheduler: nightly snapshot rebuild so dashboards roll over to the new day
    if settings.snapshot_cron_enabled:
        try:
            from apscheduler.schedulers.background import BackgroundScheduler
            from app.services.snapshots import run_snapshot_refresh_job
            scheduler = BackgroundScheduler()
            scheduler.add_job(run_snapshot_refresh_job, "cron", hour=settings.snapshot_cron_hour, minute=0)
            scheduler.start()
            app.state.scheduler = scheduler
        except Exception as e:
            log.warning("Snapshot scheduler not started: %s", e)


@app.on_event("shutdown")
def shutdown():
    scheduler = getattr(app.state, "scheduler", None)
    if scheduler is not None:
        scheduler.shutdown(wait=False)


@app.get("/")
def root():
    return {"app": settings.app_name, "status": "ok"}


@app.get("/health")
def health():
    return {"status": "healthy"}
