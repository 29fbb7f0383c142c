"""Module D: Risk tiers derived from days remaining."""
from app.schemas.compliance import RiskLevel, RiskThresholds
from app.services.errors import InvalidConfigError

DEFAULT_RISK_THRESHOLDS = RiskThresholds()


def validate_thresholds(thresholds: RiskThresholds) -> None:
    if thresholds.green < 0:
        raise InvalidConfigError("thresholds.green", "Green threshold cannot be negative")
    if thresholds.amber < 0:
        raise InvalidConfigError("thresholds.amber", "Amber threshold cannot be negative")
    if thresholds.amber >= thresholds.green:
        raise InvalidConfigError(
            "thresholds.amber",
            f"Amber threshold ({thresholds.amber}) must be less than green threshold ({thresholds.green})",
        )


def risk_level_for(days_remaining: int, thresholds: RiskThresholds | None = None) -> RiskLevel:
    """green at 16+ remaining, amber at 1-15, red at 0 or below (default thresholds)."""
    thresholds = thresholds or DEFAULT_RISK_THRESHOLDS
    validate_thresholds(thresholds)
    if days_remaining < thresholds.amber:
        return RiskLevel.red
    if days_remaining < thresholds.green:
        return RiskLevel.amber
    return RiskLevel.green


def risk_description(level: RiskLevel) -> str:
    return {
        RiskLevel.green: "Low risk - plenty of days remaining",
        RiskLevel.amber: "Moderate risk - approaching limit",
        RiskLevel.red: "High risk - at or over limit",
    }[level]


def risk_action(level: RiskLevel, days_remaining: int) -> str:
    if level == RiskLevel.green:
        return "Travel planning can proceed normally."
    if level == RiskLevel.amber:
        return "Plan upcoming travel carefully. Consider spreading out Schengen visits."
    if days_remaining < 0:
        over_by = abs(days_remaining)
        return f"Over limit by {over_by} day{'' if over_by == 1 else 's'}. Must remain outside Schengen until compliant."
    return "Limit reached. Avoid new Schengen travel until days fall out of the window."


def severity_score(days_remaining: int, thresholds: RiskThresholds | None = None) -> int:
    """Sort key for dashboards: green 0-33, amber 34-66, red 67-100, over limit above 100."""
    thresholds = thresholds or DEFAULT_RISK_THRESHOLDS
    if days_remaining < 0:
        return 100 + abs(days_remaining)
    if days_remaining < thresholds.amber:
        position = thresholds.amber - days_remaining
        return 67 + round(position / thresholds.amber * 33)
    if days_remaining < thresholds.green:
        span = thresholds.green - thresholds.amber
        position = thresholds.green - days_remaining
        return 34 + round(position / span * 32)
    max_green = 90
    effective = min(days_remaining, max_green)
    span = max_green - thresholds.green
    if span <= 0:
        return 0
    return max(0, 33 - round((effective - thresholds.green) / span * 33))
