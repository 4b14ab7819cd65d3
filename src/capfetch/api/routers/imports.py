"""Ticker list and year-date import endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, Request

from capfetch.api.deps import get_year_dates
from capfetch.api.schemas import TickerListResponse, YearDatesResponse
from capfetch.csv import parse_tickers, parse_year_dates

router = APIRouter(tags=["imports"])


async def _read_text(request: Request) -> str:
    # utf-8-sig drops the BOM spreadsheet exports tend to add
    return (await request.body()).decode("utf-8-sig")


@router.post("/import/tickers", response_model=TickerListResponse)
async def import_tickers(request: Request) -> TickerListResponse:
    """Parse tickers from an uploaded CSV body."""
    return TickerListResponse(tickers=parse_tickers(await _read_text(request)))


@router.post("/import/year-dates", response_model=YearDatesResponse)
async def import_year_dates(request: Request) -> YearDatesResponse:
    """Parse a ``year,date`` CSV body into year date overrides."""
    return YearDatesResponse(year_dates=parse_year_dates(await _read_text(request)))


@router.get("/year-dates", response_model=YearDatesResponse)
def get_default_year_dates(
    year_dates: dict[int, date] = Depends(get_year_dates),
) -> YearDatesResponse:
    """Get the configured default year dates."""
    return YearDatesResponse(year_dates=year_dates)
