"""Pivot and flat tables built from batch snapshots."""

from typing import Iterable, Union

from capfetch.domain.models import BatchSnapshot, FetchError, MarketCapRecord, PivotMetric
from capfetch.services.request_resolver import DEFAULT_EXCHANGE_SUFFIX, display_ticker

Cell = Union[str, int, float]
Table = list[list[Cell]]

RAW_COLUMNS = [
    "ticker",
    "year",
    "date",
    "requested_date",
    "price",
    "adjusted_price",
    "shares_outstanding",
    "shares_source",
    "market_cap",
    "market_cap_billions",
    "price_adjustment_note",
]

ERROR_COLUMNS = ["ticker", "year", "date", "error"]


def _metric_value(record: MarketCapRecord, metric: PivotMetric) -> Cell:
    if metric is PivotMetric.PRICE:
        return record.adjusted_price
    if metric is PivotMetric.MARKET_CAP:
        return record.market_cap_billions
    return record.shares


class ResultAggregator:
    """
    Builds export tables from accumulated results.

    All methods are pure functions of their inputs, so they can run against a
    snapshot taken mid-run.
    """

    def __init__(self, exchange_suffix: str = DEFAULT_EXCHANGE_SUFFIX):
        self._exchange_suffix = exchange_suffix

    def pivot(
        self,
        results: Iterable[MarketCapRecord],
        years: Iterable[int],
        metric: PivotMetric,
    ) -> Table:
        """
        Tickers as rows (sorted), every configured year as a column.

        Cells without a result are empty strings. The first row is the header
        ``["Ticker", "<year>", ...]``.
        """
        year_list = list(years)
        cells: dict[str, dict[int, Cell]] = {}
        for record in results:
            row = cells.setdefault(display_ticker(record.ticker, self._exchange_suffix), {})
            # First record for a (ticker, year) wins
            row.setdefault(record.year, _metric_value(record, metric))

        table: Table = [["Ticker", *[str(year) for year in year_list]]]
        for ticker in sorted(cells):
            row = cells[ticker]
            table.append([ticker, *[row.get(year, "") for year in year_list]])
        return table

    def pivot_table(self, snapshot: BatchSnapshot, metric: PivotMetric) -> Table:
        return self.pivot(snapshot.results, snapshot.years, metric)

    def raw_rows(self, results: Iterable[MarketCapRecord]) -> Table:
        """Every result field, one row per record, in fetch order."""
        table: Table = [list(RAW_COLUMNS)]
        for record in results:
            table.append(
                [
                    record.ticker,
                    record.year,
                    record.resolved_date.isoformat(),
                    record.requested_date.isoformat(),
                    record.raw_price,
                    record.adjusted_price,
                    record.shares,
                    record.shares_source.value,
                    record.market_cap,
                    record.market_cap_billions,
                    record.adjustment_note or "",
                ]
            )
        return table

    def error_rows(self, errors: Iterable[FetchError]) -> Table:
        """One row per failure: ticker, year, requested date, message."""
        table: Table = [list(ERROR_COLUMNS)]
        for error in errors:
            table.append(
                [
                    error.ticker,
                    error.year,
                    error.requested_date.isoformat() if error.requested_date else "",
                    error.message,
                ]
            )
        return table
