"""Pydantic schemas for API request/response."""

from capfetch.api.schemas.batch import (
    BatchStartRequest,
    ProgressResponse,
    MarketCapRecordResponse,
    FetchErrorResponse,
    BatchSnapshotResponse,
    TableMetric,
    ExportKind,
    TableResponse,
    ExportFileResponse,
)
from capfetch.api.schemas.imports import TickerListResponse, YearDatesResponse

__all__ = [
    "BatchStartRequest",
    "ProgressResponse",
    "MarketCapRecordResponse",
    "FetchErrorResponse",
    "BatchSnapshotResponse",
    "TableMetric",
    "ExportKind",
    "TableResponse",
    "ExportFileResponse",
    "TickerListResponse",
    "YearDatesResponse",
]
