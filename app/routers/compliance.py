"""Module D/E/F/H: Stateless compliance calculations over a posted trip list.

A request that leaves compliance_start_date out gets the configured COMPLIANCE_START_DATE,
the same limit the employee dashboard applies.
"""
from datetime import date
from fastapi import APIRouter, HTTPException
from app.config import get_settings
from app.schemas.compliance import (
    BatchComplianceRequest,
    BatchComplianceResponse,
    ComplianceConfig,
    ComplianceRequest,
    ComplianceResult,
    ComplianceVectorRequest,
    DailyCompliance,
    ForecastRequest,
    ForecastResult,
    FutureForecastRequest,
    SafeEntryRequest,
    SafeEntryResponse,
)
from app.services.compliance import batch_calculate_compliance, calculate_compliance
from app.services.compliance_vector import compute_compliance_vector
from app.services.errors import InvalidConfigError, InvalidReferenceDateError, SafeEntrySearchExhausted
from app.services.forecast import forecast_future_trips, forecast_trip
from app.services.presence import build_presence
from app.services.safe_entry import max_stay_days, presence_up_to, safe_entry_info
from app.services.schengen_countries import get_membership

router = APIRouter(prefix="/compliance", tags=["compliance"])
settings = get_settings()

MAX_VECTOR_DAYS = 3 * 366


def _compliance_start(requested: date | None) -> date | None:
    return requested if requested is not None else settings.compliance_start_date


def _with_defaults(config: ComplianceConfig) -> ComplianceConfig:
    if config.compliance_start_date is not None or settings.compliance_start_date is None:
        return config
    return config.model_copy(update={"compliance_start_date": settings.compliance_start_date})


@router.post("/calculate", response_model=ComplianceResult)
def calculate(data: ComplianceRequest):
    try:
        return calculate_compliance(
            data.trips,
            _with_defaults(data.config),
            get_membership(settings.schengen_membership_mode),
        )
    except InvalidConfigError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/safe-entry", response_model=SafeEntryResponse)
def safe_entry(data: SafeEntryRequest):
    """Earliest safe entry assuming no travel after the reference date, so planned trips are ignored."""
    config = _with_defaults(data.config)
    presence = build_presence(data.trips, config, get_membership(settings.schengen_membership_mode))
    presence = presence_up_to(presence, config.reference_date)
    try:
        info = safe_entry_info(
            presence,
            config.reference_date,
            config.compliance_start_date,
            search_cap_days=settings.safe_entry_search_cap_days,
        )
    except SafeEntrySearchExhausted as e:
        raise HTTPException(status_code=500, detail=str(e))
    return SafeEntryResponse(
        **info.model_dump(),
        max_stay_days=max_stay_days(presence, config.reference_date, config.compliance_start_date),
    )


@router.post("/vector", response_model=list[DailyCompliance])
def vector(data: ComplianceVectorRequest):
    if (data.end_date - data.start_date).days > MAX_VECTOR_DAYS:
        raise HTTPException(status_code=400, detail=f"Date range may not exceed {MAX_VECTOR_DAYS} days")
    try:
        return compute_compliance_vector(
            data.trips,
            data.start_date,
            data.end_date,
            _with_defaults(data.config),
            get_membership(settings.schengen_membership_mode),
        )
    except (InvalidReferenceDateError, InvalidConfigError) as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/batch", response_model=BatchComplianceResponse)
def batch(data: BatchComplianceRequest):
    ids = [e.id for e in data.employees]
    if len(ids) != len(set(ids)):
        raise HTTPException(status_code=400, detail="Employee ids must be unique")
    results = batch_calculate_compliance(
        data.employees,
        data.reference_date,
        membership=get_membership(settings.schengen_membership_mode),
        compliance_start_date=_compliance_start(data.compliance_start_date),
    )
    return BatchComplianceResponse(reference_date=data.reference_date, results=results)


@router.post("/forecast", response_model=ForecastResult)
def forecast(data: ForecastRequest):
    """What-if: status after a proposed trip, and the first start date it would fit."""
    try:
        return forecast_trip(
            data.trip,
            data.history,
            _compliance_start(data.compliance_start_date),
            get_membership(settings.schengen_membership_mode),
            data.warning_threshold,
        )
    except InvalidConfigError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/forecast/future", response_model=list[ForecastResult])
def forecast_future(data: FutureForecastRequest):
    try:
        return forecast_future_trips(
            data.trips,
            data.from_date,
            _compliance_start(data.compliance_start_date),
            get_membership(settings.schengen_membership_mode),
            data.warning_threshold,
        )
    except InvalidConfigError as e:
        raise HTTPException(status_code=400, detail=str(e))
