"""Batch control endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, status

from capfetch.api.deps import get_orchestrator, get_year_dates
from capfetch.api.schemas import (
    BatchSnapshotResponse,
    BatchStartRequest,
    FetchErrorResponse,
    MarketCapRecordResponse,
    ProgressResponse,
)
from capfetch.config.year_dates import default_end_year
from capfetch.domain.models import BatchSnapshot
from capfetch.services import BatchOrchestrator

router = APIRouter(prefix="/batch", tags=["batch"])


def snapshot_response(snapshot: BatchSnapshot) -> BatchSnapshotResponse:
    """Convert a domain snapshot to its API schema."""
    return BatchSnapshotResponse(
        status=snapshot.status,
        completed=snapshot.completed,
        failed=snapshot.failed,
        total=snapshot.total,
        tickers=list(snapshot.tickers),
        years=list(snapshot.years),
        results=[
            MarketCapRecordResponse(
                ticker=r.ticker,
                year=r.year,
                requested_date=r.requested_date,
                resolved_date=r.resolved_date,
                price=r.raw_price,
                adjusted_price=r.adjusted_price,
                shares_outstanding=r.shares,
                shares_source=r.shares_source,
                market_cap=r.market_cap,
                market_cap_billions=r.market_cap_billions,
                formatted_market_cap=r.formatted_market_cap,
                price_adjustment_note=r.adjustment_note,
            )
            for r in snapshot.results
        ],
        errors=[
            FetchErrorResponse(
                ticker=e.ticker,
                year=e.year,
                requested_date=e.requested_date,
                error=e.message,
                kind=e.kind,
            )
            for e in snapshot.errors
        ],
    )


@router.post("/start", response_model=BatchSnapshotResponse, status_code=status.HTTP_202_ACCEPTED)
def start_batch(
    request: BatchStartRequest,
    orchestrator: BatchOrchestrator = Depends(get_orchestrator),
    default_year_dates: dict[int, date] = Depends(get_year_dates),
) -> BatchSnapshotResponse:
    """Start fetching every ticker x year pair in the background."""
    year_dates = {**default_year_dates, **(request.year_dates or {})}
    end_year = request.end_year
    if end_year is None:
        end_year = default_end_year(year_dates)
    snapshot = orchestrator.start(
        tickers=request.tickers,
        start_year=request.start_year,
        end_year=end_year,
        year_dates=year_dates,
        delay_ms=request.delay_ms,
    )
    return snapshot_response(snapshot)


@router.post("/pause", response_model=BatchSnapshotResponse)
def pause_batch(orchestrator: BatchOrchestrator = Depends(get_orchestrator)) -> BatchSnapshotResponse:
    """Pause before the next request."""
    return snapshot_response(orchestrator.pause())


@router.post("/resume", response_model=BatchSnapshotResponse)
def resume_batch(orchestrator: BatchOrchestrator = Depends(get_orchestrator)) -> BatchSnapshotResponse:
    """Resume a paused batch."""
    return snapshot_response(orchestrator.resume())


@router.post("/stop", response_model=BatchSnapshotResponse)
def stop_batch(orchestrator: BatchOrchestrator = Depends(get_orchestrator)) -> BatchSnapshotResponse:
    """Stop the batch; gathered results stay exportable."""
    return snapshot_response(orchestrator.stop())


@router.get("", response_model=BatchSnapshotResponse)
def get_batch(orchestrator: BatchOrchestrator = Depends(get_orchestrator)) -> BatchSnapshotResponse:
    """Get the full batch state, including results and errors so far."""
    return snapshot_response(orchestrator.get_snapshot())


@router.get("/progress", response_model=ProgressResponse)
def get_progress(orchestrator: BatchOrchestrator = Depends(get_orchestrator)) -> ProgressResponse:
    """Get progress counters only."""
    snapshot = orchestrator.get_snapshot()
    progress = snapshot.progress
    return ProgressResponse(
        status=snapshot.status,
        completed=progress.completed,
        failed=progress.failed,
        total=progress.total,
    )
