"""Pydantic schemas for batch endpoints."""

from datetime import date
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field

from capfetch.domain.models import BatchStatus, ErrorKind, SharesSource


class BatchStartRequest(BaseModel):
    """Request schema for starting a batch."""

    tickers: list[str]
    start_year: int = Field(2010, ge=1900, le=2100)
    end_year: Optional[int] = Field(
        None, ge=1900, le=2100, description="Defaults to the latest configured year already begun"
    )
    year_dates: Optional[dict[int, date]] = Field(
        None, description="Overrides merged over the default year dates"
    )
    delay_ms: Optional[int] = Field(None, ge=0, le=60_000)
    concurrency: int = Field(1, ge=1, le=1, description="Requests are always sequential")


class ProgressResponse(BaseModel):
    """Response schema for progress counters."""

    status: BatchStatus
    completed: int
    failed: int
    total: int


class MarketCapRecordResponse(BaseModel):
    """Response schema for a resolved (ticker, year) cell."""

    ticker: str
    year: int
    requested_date: date
    resolved_date: date
    price: float
    adjusted_price: float
    shares_outstanding: int
    shares_source: SharesSource
    market_cap: float
    market_cap_billions: float
    formatted_market_cap: str
    price_adjustment_note: Optional[str] = None


class FetchErrorResponse(BaseModel):
    """Response schema for a failed (ticker, year) cell."""

    ticker: str
    year: int
    requested_date: Optional[date] = None
    error: str
    kind: ErrorKind


class BatchSnapshotResponse(ProgressResponse):
    """Response schema for the full batch state."""

    tickers: list[str]
    years: list[int]
    results: list[MarketCapRecordResponse]
    errors: list[FetchErrorResponse]


class TableMetric(str, Enum):
    """Metrics available as pivot tables."""

    PRICE = "price"
    MARKET_CAP = "market_cap"
    SHARES = "shares"


class ExportKind(str, Enum):
    """CSV downloads."""

    PRICE = "price"
    MARKET_CAP = "market_cap"
    SHARES = "shares"
    RAW = "raw"
    ERRORS = "errors"


class TableResponse(BaseModel):
    """Response schema for a 2-D export grid (first row is the header)."""

    metric: str
    rows: list[list[Union[str, int, float]]]


class ExportFileResponse(BaseModel):
    """Response schema for a CSV written to the export directory."""

    path: str
