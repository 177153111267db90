"""Domain errors raised by the analytics engine."""


class PeriodParseError(ValueError):
    """The period string does not contain a usable fiscal year."""

    def __init__(self, period: str, reason: str = "no 4-digit year found"):
        super().__init__(f"Invalid period format {period!r}: {reason}")
        self.period = period
        self.reason = reason


class AggregationError(RuntimeError):
    """The ledger store failed while aggregating a period."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
