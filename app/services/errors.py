"""Compliance engine errors. Routers map these to HTTP responses."""


class ComplianceError(Exception):
    """Base error for compliance calculation failures."""


class InvalidConfigError(ComplianceError):
    def __init__(self, config_key: str, reason: str):
        self.config_key = config_key
        self.reason = reason
        super().__init__(f'Invalid configuration "{config_key}": {reason}')


class InvalidReferenceDateError(ComplianceError):
    def __init__(self, reference_date, reason: str):
        self.reference_date = reference_date
        self.reason = reason
        super().__init__(f"Invalid reference date: {reason}")


class SafeEntrySearchExhausted(ComplianceError):
    """Raised when no compliant date exists within the search cap.

    A presence history built under the 90-day cap always frees up within 180 days,
    so hitting this means the presence set itself is inconsistent.
    """

    def __init__(self, from_date, cap_days: int, days_used: int):
        self.from_date = from_date
        self.cap_days = cap_days
        self.days_used = days_used
        super().__init__(
            f"No compliant date within {cap_days} days of {from_date.isoformat()} "
            f"({days_used} days used at start)"
        )
