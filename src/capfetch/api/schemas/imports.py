"""Pydantic schemas for import endpoints."""

from datetime import date

from pydantic import BaseModel


class TickerListResponse(BaseModel):
    """Response schema for parsed tickers."""

    tickers: list[str]


class YearDatesResponse(BaseModel):
    """Response schema for a year -> target date map."""

    year_dates: dict[int, date]
