"""Exception types raised by the forecasting engine."""


class ForecastError(Exception):
    """Base class for forecasting errors."""


class InvalidInputError(ForecastError, ValueError):
    """Raised when supplied data violates an integrity rule (bad tier, negative count)."""


class SnapshotError(ForecastError):
    """Raised when a snapshot document cannot be read."""
