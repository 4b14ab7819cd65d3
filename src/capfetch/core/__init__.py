"""Core utilities and shared functionality."""

from capfetch.core.timezone import (
    now_eastern,
    today_eastern,
    parse_date,
    following_days,
    EASTERN_TZ,
)
from capfetch.core.exceptions import (
    AppError,
    ValidationError,
    InvalidStateError,
    TransportError,
    NoPriceDataError,
    MissingYearDateError,
    CancelledError,
)
from capfetch.core.cancellation import CancellationToken, call_cancellable

__all__ = [
    "now_eastern",
    "today_eastern",
    "parse_date",
    "following_days",
    "EASTERN_TZ",
    "AppError",
    "ValidationError",
    "InvalidStateError",
    "TransportError",
    "NoPriceDataError",
    "MissingYearDateError",
    "CancelledError",
    "CancellationToken",
    "call_cancellable",
]
