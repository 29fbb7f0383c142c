from app.schemas.compliance import (
    CalculationMode, RiskLevel, RiskThresholds, Trip, ComplianceConfig, ComplianceResult,
    DailyCompliance, SafeEntryResult, ExpiringDays, ForecastResult,
)
from app.schemas.country import CountryClassification, SchengenCountryResponse
from app.schemas.employee import EmployeeComplianceResponse
