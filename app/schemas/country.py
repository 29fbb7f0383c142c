"""Module A: Country classification schemas."""
from pydantic import BaseModel


class CountryClassification(BaseModel):
    code: str | None
    name: str | None
    is_schengen_member: bool
    is_non_schengen_eu: bool
    is_microstate: bool = False
    exclusion_reason: str | None = None

    class Config:
        frozen = True


class SchengenCountryResponse(BaseModel):
    code: str
    name: str
    is_microstate: bool
    member_since: str | None = None
