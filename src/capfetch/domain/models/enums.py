"""Enumerations for domain models."""

from enum import Enum


class BatchStatus(str, Enum):
    """Lifecycle states of a batch run."""

    IDLE = "IDLE"
    RUNNING = "RUNNING"
    PAUSED = "PAUSED"
    STOPPED = "STOPPED"
    COMPLETED = "COMPLETED"

    @property
    def is_active(self) -> bool:
        return self in (BatchStatus.RUNNING, BatchStatus.PAUSED)


class SharesSource(str, Enum):
    """Where a shares-outstanding figure came from."""

    HISTORICAL = "historical"
    DEFAULT = "default"


class PivotMetric(str, Enum):
    """Record fields that can be pivoted into a ticker x year table."""

    PRICE = "price"  # adjusted price
    MARKET_CAP = "market_cap"  # billions
    SHARES = "shares"


class ErrorKind(str, Enum):
    """Per-item failure kinds recorded in the error log."""

    NO_PRICE_DATA = "NO_PRICE_DATA"
    MISSING_YEAR_DATE = "MISSING_YEAR_DATE"
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"
