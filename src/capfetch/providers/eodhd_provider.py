"""EODHD market data provider."""

import logging
import math
from datetime import date
from typing import Any, Optional

import requests

from capfetch.core.cancellation import CancellationToken
from capfetch.core.exceptions import CancelledError, TransportError
from capfetch.core.timezone import parse_date

logger = logging.getLogger(__name__)

QUARTERLY_BALANCE_SHEET = "Financials::Balance_Sheet::quarterly"
SHARES_STATS = "SharesStats"


def _make_session() -> requests.Session:
    session = requests.Session()
    session.headers.update(
        {
            "Accept": "application/json",
            "User-Agent": "market-cap-fetcher/0.1",
        }
    )
    return session


def _as_positive_number(value: Any) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return number if math.isfinite(number) and number > 0 else None


class EodhdMarketDataProvider:
    """
    Fetches end-of-day prices and shares outstanding from eodhd.com.

    Every call is a single GET; retrying is left to the caller. Bodies are
    streamed so that cancelling the caller's token closes the connection
    instead of waiting for the download to finish.
    """

    def __init__(
        self,
        api_token: str,
        base_url: str = "https://eodhd.com/api",
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self._api_token = api_token
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or _make_session()

    def get_eod_prices(
        self,
        symbol: str,
        on_date: date,
        token: Optional[CancellationToken] = None,
    ) -> list[dict[str, Any]]:
        """Return the EOD rows for ``on_date`` (empty on non-trading days)."""
        day = on_date.isoformat()
        data = self._get_json(
            f"/eod/{symbol}",
            {"from": day, "to": day, "period": "d"},
            token,
        )
        if isinstance(data, list):
            return [row for row in data if isinstance(row, dict)]
        if isinstance(data, dict) and "date" in data:
            return [data]
        return []

    def get_shares_stats(
        self,
        symbol: str,
        as_of: date,
        token: Optional[CancellationToken] = None,
    ) -> Optional[dict[str, Any]]:
        """
        Return shares-outstanding fields for ``symbol`` as of ``as_of``.

        Prefers the latest quarterly balance sheet dated on or before ``as_of``;
        falls back to the current SharesStats block.
        """
        try:
            quarterly = self._get_json(
                f"/fundamentals/{symbol}",
                {"filter": QUARTERLY_BALANCE_SHEET},
                token,
            )
        except TransportError as exc:
            if exc.status_code is None:
                raise
            # Plans without financials answer 403; SharesStats may still work
            logger.warning("Quarterly balance sheet unavailable for %s: %s", symbol, exc.message)
            quarterly = None

        sheet = self._latest_quarter(quarterly, as_of)
        if sheet is not None:
            return sheet

        stats = self._get_json(f"/fundamentals/{symbol}", {"filter": SHARES_STATS}, token)
        return stats if isinstance(stats, dict) and stats else None

    def _latest_quarter(self, quarterly: Any, as_of: date) -> Optional[dict[str, Any]]:
        if not isinstance(quarterly, dict):
            return None

        best: Optional[tuple[date, dict[str, Any]]] = None
        for key, sheet in quarterly.items():
            if not isinstance(sheet, dict):
                continue
            raw_date = sheet.get("date") or key
            if not isinstance(raw_date, str):
                continue
            try:
                sheet_date = parse_date(raw_date)
            except (ValueError, OverflowError):
                continue
            if sheet_date > as_of:
                continue
            if _as_positive_number(sheet.get("commonStockSharesOutstanding")) is None:
                continue
            if best is None or sheet_date > best[0]:
                best = (sheet_date, sheet)
        return best[1] if best else None

    def _get_json(
        self,
        path: str,
        params: dict[str, str],
        token: Optional[CancellationToken] = None,
    ) -> Any:
        if token is not None:
            token.raise_if_cancelled()

        url = f"{self._base_url}{path}"
        query = {**params, "api_token": self._api_token, "fmt": "json"}
        try:
            response = self._session.get(url, params=query, timeout=self._timeout, stream=True)
            try:
                self._read_body(response, token)
            finally:
                response.close()
        except requests.RequestException as exc:
            raise TransportError(f"Request to {path} failed: {exc}") from exc

        if not response.ok:
            raise TransportError(
                f"HTTP {response.status_code}: {response.reason}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(f"Invalid JSON from {path}: {exc}") from exc

    @staticmethod
    def _read_body(response: requests.Response, token: Optional[CancellationToken]) -> bytes:
        """Download and cache the body; cancelling ``token`` closes the response mid-read."""
        if token is None:
            return response.content
        try:
            with token.on_cancel(response.close):
                body = response.content
        except Exception as exc:
            if token.cancelled:
                raise CancelledError() from exc
            raise
        token.raise_if_cancelled()
        return body

    def close(self) -> None:
        self._session.close()
