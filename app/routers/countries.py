"""Module A: Schengen membership lookup (read-only)."""
from datetime import date
from fastapi import APIRouter, Query
from app.config import get_settings
from app.schemas.country import CountryClassification, SchengenCountryResponse
from app.services.schengen_countries import get_membership, list_schengen_countries

router = APIRouter(prefix="/countries", tags=["countries"])
settings = get_settings()


@router.get("/schengen", response_model=list[SchengenCountryResponse])
def schengen_countries():
    return list_schengen_countries()


@router.get("/{country}", response_model=CountryClassification)
def classify_country(
    country: str,
    on: date | None = Query(None, description="Classify as of this date (versioned membership)"),
):
    return get_membership(settings.schengen_membership_mode).classify(country, on)
