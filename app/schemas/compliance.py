"""Module C: Compliance engine data model (trips, config, results)."""
import enum
from datetime import date
from pydantic import BaseModel, Field, model_validator


class CalculationMode(str, enum.Enum):
    audit = "audit"  # backward-looking from the reference date
    planning = "planning"  # includes future-dated trips


class RiskLevel(str, enum.Enum):
    green = "green"
    amber = "amber"
    red = "red"


class RiskThresholds(BaseModel):
    """Days-remaining boundaries: green at or above `green`, amber at or above `amber`, red below."""

    green: int = 16
    amber: int = 1

    class Config:
        frozen = True


class Trip(BaseModel):
    id: str | None = None
    country: str
    entry_date: date
    exit_date: date | None = None  # None: still present as of the reference date

    class Config:
        frozen = True

    @model_validator(mode="after")
    def check_date_range(self) -> "Trip":
        if self.exit_date is not None and self.exit_date < self.entry_date:
            raise ValueError(
                f"exit_date ({self.exit_date.isoformat()}) is before entry_date ({self.entry_date.isoformat()})"
            )
        return self

    @property
    def is_open(self) -> bool:
        return self.exit_date is None


class ComplianceConfig(BaseModel):
    mode: CalculationMode = CalculationMode.audit
    reference_date: date
    compliance_start_date: date | None = None
    thresholds: RiskThresholds | None = None

    class Config:
        frozen = True


class ComplianceResult(BaseModel):
    reference_date: date
    days_used: int
    days_remaining: int  # negative when over the limit
    risk_level: RiskLevel
    is_compliant: bool

    class Config:
        frozen = True


class DailyCompliance(BaseModel):
    day: date
    days_used: int
    days_remaining: int
    risk_level: RiskLevel

    class Config:
        frozen = True


class SafeEntryResult(BaseModel):
    can_enter_today: bool
    earliest_safe_date: date | None
    days_until_compliant: int
    days_used_on_entry: int


class ExpiringDays(BaseModel):
    day: date
    expiring_days: int
    days_used: int
    days_remaining: int


class ForecastResult(BaseModel):
    """Status once a proposed trip is complete, counted from the history before it."""

    trip: Trip
    trip_duration: int
    is_schengen: bool
    days_used_before_trip: int
    days_after_trip: int
    days_remaining_after_trip: int  # negative when the trip would overstay
    risk_level: RiskLevel
    is_compliant: bool
    compliant_from_date: date | None = None  # first start date that fits, when this one does not


# HTTP payloads

class ComplianceRequest(BaseModel):
    trips: list[Trip] = Field(default_factory=list)
    config: ComplianceConfig


class SafeEntryRequest(BaseModel):
    trips: list[Trip] = Field(default_factory=list)
    config: ComplianceConfig


class SafeEntryResponse(SafeEntryResult):
    max_stay_days: int


class ComplianceVectorRequest(BaseModel):
    trips: list[Trip] = Field(default_factory=list)
    config: ComplianceConfig
    start_date: date
    end_date: date


class EmployeeTrips(BaseModel):
    id: str
    trips: list[Trip] = Field(default_factory=list)


class BatchComplianceRequest(BaseModel):
    employees: list[EmployeeTrips]
    reference_date: date
    compliance_start_date: date | None = None


class BatchComplianceResponse(BaseModel):
    reference_date: date
    results: dict[str, ComplianceResult]


class ForecastRequest(BaseModel):
    trip: Trip
    history: list[Trip] = Field(default_factory=list)
    compliance_start_date: date | None = None
    warning_threshold: int = 80

    @model_validator(mode="after")
    def check_trip_has_exit(self) -> "ForecastRequest":
        if self.trip.exit_date is None:
            raise ValueError("trip.exit_date is required for a forecast")
        return self


class FutureForecastRequest(BaseModel):
    trips: list[Trip] = Field(default_factory=list)
    from_date: date
    compliance_start_date: date | None = None
    warning_threshold: int = 80
