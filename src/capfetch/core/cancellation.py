"""Cooperative cancellation for the batch worker thread."""

import threading
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional, TypeVar

from capfetch.core.exceptions import CancelledError

T = TypeVar("T")

_LOCK_POLL_SECONDS = 0.05


class CancellationToken:
    """
    One-shot cancellation flag shared between the batch loop and its callers.

    Waiting on the token doubles as an interruptible sleep, and callbacks
    registered with ``on_cancel`` fire from whichever thread calls ``cancel``.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks = list(self._callbacks)
        for callback in callbacks:
            callback()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise CancelledError()

    def sleep(self, seconds: float) -> None:
        """Sleep for ``seconds`` unless cancelled first; raise if cancelled."""
        if seconds > 0:
            self._event.wait(seconds)
        self.raise_if_cancelled()

    @contextmanager
    def on_cancel(self, callback: Callable[[], None]) -> Iterator[None]:
        """Run ``callback`` on cancellation while the block is active."""
        with self._lock:
            already = self._event.is_set()
            if not already:
                self._callbacks.append(callback)
        if already:
            callback()
        try:
            yield
        finally:
            with self._lock:
                if callback in self._callbacks:
                    self._callbacks.remove(callback)


def acquire_cancellable(lock: threading.Lock, token: CancellationToken) -> None:
    """Acquire ``lock``, giving up with CancelledError once ``token`` is cancelled."""
    while not lock.acquire(timeout=_LOCK_POLL_SECONDS):
        token.raise_if_cancelled()
    if token.cancelled:
        lock.release()
        raise CancelledError()


def call_cancellable(
    fn: Callable[[], T],
    token: CancellationToken,
    slot: Optional[threading.Lock] = None,
) -> T:
    """
    Run a blocking call so that cancelling ``token`` returns control at once.

    The call runs on a daemon thread. When the token is cancelled first, the
    call is abandoned, its eventual result discarded, and CancelledError raised.

    With a ``slot``, the lock is held until ``fn`` really returns, abandoned
    or not, so calls sharing the slot never overlap.
    """
    token.raise_if_cancelled()
    if slot is not None:
        acquire_cancellable(slot, token)

    done = threading.Event()
    outcome: dict[str, Any] = {}

    def _target() -> None:
        try:
            outcome["value"] = fn()
        except BaseException as exc:  # re-raised on the calling thread
            outcome["error"] = exc
        finally:
            if slot is not None:
                slot.release()
            done.set()

    worker = threading.Thread(target=_target, name="capfetch-upstream", daemon=True)
    try:
        worker.start()
    except RuntimeError:
        if slot is not None:
            slot.release()
        raise
    with token.on_cancel(done.set):
        done.wait()

    token.raise_if_cancelled()
    if "error" in outcome:
        raise outcome["error"]
    return outcome["value"]
