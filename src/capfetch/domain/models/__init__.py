"""Domain models package."""

from capfetch.domain.models.enums import BatchStatus, SharesSource, PivotMetric, ErrorKind
from capfetch.domain.models.records import (
    RequestKey,
    PriceQuote,
    SharesEstimate,
    MarketCapRecord,
    FetchError,
)
from capfetch.domain.models.batch import BatchProgress, BatchSnapshot

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
