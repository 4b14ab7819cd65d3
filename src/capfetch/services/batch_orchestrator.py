"""Batch orchestration: sequential (ticker x year) fetching with pause/resume/stop."""

import logging
import threading
from datetime import date
from typing import Callable, Iterable, Mapping, Optional, Union

from capfetch.core.cancellation import CancellationToken
from capfetch.core.exceptions import (
    AppError,
    CancelledError,
    InvalidStateError,
    MissingYearDateError,
    ValidationError,
)
from capfetch.domain.models import (
    BatchSnapshot,
    BatchStatus,
    ErrorKind,
    FetchError,
    MarketCapRecord,
    RequestKey,
)
from capfetch.services.request_resolver import RequestResolver

logger = logging.getLogger(__name__)

ProgressListener = Callable[[BatchSnapshot], None]

_ERROR_KINDS = {
    "NO_PRICE_DATA": ErrorKind.NO_PRICE_DATA,
    "MISSING_YEAR_DATE": ErrorKind.MISSING_YEAR_DATE,
}


def build_request_keys(
    tickers: Iterable[str],
    years: Iterable[int],
    year_dates: Mapping[int, date],
) -> list[RequestKey]:
    """Enumerate the request space ticker-major, year-minor."""
    year_list = list(years)
    return [
        RequestKey(ticker=ticker, year=year, target_date=year_dates.get(year))
        for ticker in tickers
        for year in year_list
    ]


class BatchOrchestrator:
    """
    Drives one batch run at a time on a background worker thread.

    Requests are issued strictly one after another. Before each request the
    worker honors stop and pause; between requests it sleeps for the
    configured delay, which a stop interrupts. Batch state is only mutated
    under ``_lock`` and readers get immutable snapshots.

    Progress listeners are called on the worker thread after every
    ``publish_every`` requests, when the loop blocks on pause, and once more
    when the run ends for any reason.
    """

    def __init__(
        self,
        resolver: RequestResolver,
        default_year_dates: Optional[Mapping[int, date]] = None,
        default_delay_ms: int = 100,
        publish_every: int = 1,
    ):
        self._resolver = resolver
        self._default_year_dates = dict(default_year_dates or {})
        self._default_delay_ms = default_delay_ms
        self._publish_every = max(1, publish_every)

        self._lock = threading.RLock()
        self._resume_gate = threading.Event()
        self._resume_gate.set()
        self._token = CancellationToken()
        self._worker: Optional[threading.Thread] = None
        self._listeners: list[ProgressListener] = []

        self._status = BatchStatus.IDLE
        self._tickers: tuple[str, ...] = ()
        self._years: tuple[int, ...] = ()
        self._total = 0
        self._completed = 0
        self._failed = 0
        self._results: list[MarketCapRecord] = []
        self._errors: list[FetchError] = []

    # -------------------------------------------------------------------------
    # Listeners
    # -------------------------------------------------------------------------

    def add_listener(self, listener: ProgressListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: ProgressListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    # -------------------------------------------------------------------------
    # Control operations
    # -------------------------------------------------------------------------

    @property
    def status(self) -> BatchStatus:
        with self._lock:
            return self._status

    def start(
        self,
        tickers: Iterable[str],
        start_year: int,
        end_year: int,
        year_dates: Optional[Mapping[int, date]] = None,
        delay_ms: Optional[int] = None,
    ) -> BatchSnapshot:
        """
        Start a fresh run over ``tickers`` x ``start_year..end_year``.

        Accumulators from a previous run are discarded. No request is issued
        when validation fails.

        Raises:
            ValidationError: no tickers, an empty year range or a negative delay.
            InvalidStateError: a run is already running or paused.
        """
        symbols = self._normalize_tickers(tickers)
        if not symbols:
            raise ValidationError("At least one ticker is required")

        years = tuple(range(start_year, end_year + 1))
        if not years:
            raise ValidationError(f"Year range {start_year}-{end_year} is empty")

        delay = self._default_delay_ms if delay_ms is None else delay_ms
        if delay < 0:
            raise ValidationError("Delay between requests cannot be negative")

        dates = self._default_year_dates if year_dates is None else dict(year_dates)
        keys = build_request_keys(symbols, years, dates)

        with self._lock:
            if self._status.is_active:
                raise InvalidStateError("start", self._status.value.lower())

            self._token = CancellationToken()
            self._resume_gate.set()
            self._status = BatchStatus.RUNNING
            self._tickers = symbols
            self._years = years
            self._total = len(keys)
            self._completed = 0
            self._failed = 0
            self._results = []
            self._errors = []

            self._worker = threading.Thread(
                target=self._run,
                args=(keys, delay / 1000.0, self._token),
                name="capfetch-batch",
                daemon=True,
            )
            self._worker.start()

        logger.info(
            "Batch started: %d tickers x %d years = %d requests (delay %d ms)",
            len(symbols),
            len(years),
            len(keys),
            delay,
        )
        return self.get_snapshot()

    def pause(self) -> BatchSnapshot:
        """Hold the loop before its next request; the request in flight finishes."""
        with self._lock:
            if self._status is not BatchStatus.RUNNING:
                raise InvalidStateError("pause", self._status.value.lower())
            self._status = BatchStatus.PAUSED
            self._resume_gate.clear()
        logger.info("Batch pause requested")
        return self.get_snapshot()

    def resume(self) -> BatchSnapshot:
        """Release a paused loop."""
        with self._lock:
            if self._status is not BatchStatus.PAUSED:
                raise InvalidStateError("resume", self._status.value.lower())
            self._status = BatchStatus.RUNNING
            self._resume_gate.set()
        logger.info("Batch resumed")
        return self.get_snapshot()

    def stop(self) -> BatchSnapshot:
        """
        Cancel the run.

        The request in flight is abandoned and its outcome discarded; results
        and errors gathered so far are kept. Once this returns, the snapshot's
        accumulators no longer change.
        """
        with self._lock:
            if not self._status.is_active:
                raise InvalidStateError("stop", self._status.value.lower())
            self._status = BatchStatus.STOPPED
            self._token.cancel()
            self._resume_gate.set()
        logger.info("Batch stop requested")
        return self.get_snapshot()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the worker thread; return True if it has finished."""
        worker = self._worker
        if worker is None:
            return True
        worker.join(timeout)
        return not worker.is_alive()

    def get_snapshot(self) -> BatchSnapshot:
        with self._lock:
            return BatchSnapshot(
                status=self._status,
                total=self._total,
                completed=self._completed,
                failed=self._failed,
                tickers=self._tickers,
                years=self._years,
                results=tuple(self._results),
                errors=tuple(self._errors),
            )

    # -------------------------------------------------------------------------
    # Worker loop
    # -------------------------------------------------------------------------

    def _run(self, keys: list[RequestKey], delay_seconds: float, token: CancellationToken) -> None:
        try:
            for index, key in enumerate(keys):
                token.raise_if_cancelled()
                self._wait_while_paused(token, key)

                outcome = self._resolve(key, token)
                with self._lock:
                    # stop() may have landed while the call was returning
                    token.raise_if_cancelled()
                    self._record(outcome)
                    processed = self._completed + self._failed
                    publish = processed % self._publish_every == 0

                if publish:
                    self._publish(token)

                if index < len(keys) - 1 and delay_seconds > 0:
                    token.sleep(delay_seconds)
        except CancelledError:
            logger.info(
                "Batch stopped after %d of %d requests",
                self._completed + self._failed,
                self._total,
            )
        except Exception:
            # Resolver failures are recorded per item; this is a loop bug
            logger.exception("Batch worker crashed")
            with self._lock:
                if self._token is token and self._status.is_active:
                    self._status = BatchStatus.STOPPED
        else:
            with self._lock:
                if self._token is token and self._status.is_active:
                    self._status = BatchStatus.COMPLETED
            logger.info(
                "Batch completed: %d succeeded, %d failed", self._completed, self._failed
            )
        finally:
            self._publish(token)

    def _wait_while_paused(self, token: CancellationToken, key: RequestKey) -> None:
        if not self._resume_gate.is_set():
            logger.info("Batch paused before %s %d", key.ticker, key.year)
            self._publish(token)
            self._resume_gate.wait()
        token.raise_if_cancelled()

    def _resolve(
        self,
        key: RequestKey,
        token: CancellationToken,
    ) -> Union[MarketCapRecord, FetchError]:
        try:
            if key.target_date is None:
                raise MissingYearDateError(key.year)
            return self._resolver.resolve(key.ticker, key.year, key.target_date, token)
        except CancelledError:
            raise
        except AppError as exc:
            logger.info("%s %d failed: %s", key.ticker, key.year, exc.message)
            return FetchError(
                ticker=key.ticker,
                year=key.year,
                requested_date=key.target_date,
                message=exc.message,
                kind=_ERROR_KINDS.get(exc.code, ErrorKind.UNEXPECTED_ERROR),
            )
        except Exception as exc:
            logger.exception("Unexpected failure resolving %s %d", key.ticker, key.year)
            return FetchError(
                ticker=key.ticker,
                year=key.year,
                requested_date=key.target_date,
                message=str(exc) or type(exc).__name__,
                kind=ErrorKind.UNEXPECTED_ERROR,
            )

    def _record(self, outcome: Union[MarketCapRecord, FetchError]) -> None:
        if isinstance(outcome, FetchError):
            self._errors.append(outcome)
            self._failed += 1
        else:
            self._results.append(outcome)
            self._completed += 1

    def _publish(self, token: CancellationToken) -> None:
        with self._lock:
            # A newer run owns the state now
            if self._token is not token:
                return
            listeners = list(self._listeners)
        snapshot = self.get_snapshot()
        for listener in listeners:
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Progress listener failed")

    def _normalize_tickers(self, tickers: Iterable[str]) -> tuple[str, ...]:
        seen: dict[str, None] = {}
        for ticker in tickers:
            if ticker and ticker.strip():
                seen.setdefault(self._resolver.normalize(ticker), None)
        return tuple(seen)
