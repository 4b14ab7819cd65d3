"""Batch run state as seen by readers."""

from dataclasses import dataclass, field

from capfetch.domain.models.enums import BatchStatus
from capfetch.domain.models.records import FetchError, MarketCapRecord


@dataclass(frozen=True)
class BatchProgress:
    """Counters published after each request."""

    completed: int
    failed: int
    total: int

    @property
    def processed(self) -> int:
        return self.completed + self.failed

    @property
    def fraction(self) -> float:
        return self.processed / self.total if self.total else 0.0


@dataclass(frozen=True)
class BatchSnapshot:
    """
    Read-only copy of the orchestrator's batch state.

    ``completed`` counts successful requests and ``failed`` the ones that
    ended in the error log; together they never exceed ``total``. ``years``
    is the full configured range, used as pivot columns even where no data
    arrived.
    """

    status: BatchStatus = BatchStatus.IDLE
    total: int = 0
    completed: int = 0
    failed: int = 0
    tickers: tuple[str, ...] = field(default_factory=tuple)
    years: tuple[int, ...] = field(default_factory=tuple)
    results: tuple[MarketCapRecord, ...] = field(default_factory=tuple)
    errors: tuple[FetchError, ...] = field(default_factory=tuple)

    @property
    def progress(self) -> BatchProgress:
        return BatchProgress(completed=self.completed, failed=self.failed, total=self.total)
