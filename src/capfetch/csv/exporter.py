"""CSV export functionality."""

import csv
import io
from pathlib import Path

from capfetch.domain.models import BatchSnapshot, PivotMetric
from capfetch.services.result_aggregator import ResultAggregator, Table

# Download file names per export kind
EXPORT_FILENAMES = {
    "price": "market_cap_prices.csv",
    "market_cap": "market_cap_values.csv",
    "shares": "shares_outstanding.csv",
    "raw": "market_cap_raw_data.csv",
    "errors": "market_cap_errors.csv",
}


class CsvExporter:
    """
    CSV exporter for batch results.

    Pivot exports (price, market_cap, shares) are ticker x year grids; ``raw``
    lists every record field and ``errors`` the failure log.
    """

    def __init__(self, aggregator: ResultAggregator):
        self._aggregator = aggregator

    def table(self, snapshot: BatchSnapshot, kind: str) -> Table:
        """Build the table for an export kind."""
        if kind == "raw":
            return self._aggregator.raw_rows(snapshot.results)
        if kind == "errors":
            return self._aggregator.error_rows(snapshot.errors)
        return self._aggregator.pivot_table(snapshot, PivotMetric(kind))

    def render(self, snapshot: BatchSnapshot, kind: str) -> str:
        """Render an export kind as CSV text."""
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerows(self.table(snapshot, kind))
        return buffer.getvalue()

    def export_csv(self, snapshot: BatchSnapshot, kind: str, directory: str | Path) -> Path:
        """
        Write an export kind to ``directory`` under its standard file name.

        Returns the written path.
        """
        file_path = Path(directory) / EXPORT_FILENAMES[kind]
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, "w", newline="", encoding="utf-8") as csvfile:
            csvfile.write(self.render(snapshot, kind))
        return file_path
