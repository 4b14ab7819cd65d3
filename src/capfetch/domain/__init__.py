"""Domain layer - pure models with no external dependencies."""

from capfetch.domain.models import (
    BatchStatus,
    SharesSource,
    PivotMetric,
    ErrorKind,
    RequestKey,
    PriceQuote,
    SharesEstimate,
    MarketCapRecord,
    FetchError,
    BatchProgress,
    BatchSnapshot,
)

__all__ = [
    "BatchStatus",
    "SharesSource",
    "PivotMetric",
    "ErrorKind",
    "RequestKey",
    "PriceQuote",
    "SharesEstimate",
    "MarketCapRecord",
    "FetchError",
    "BatchProgress",
    "BatchSnapshot",
]
