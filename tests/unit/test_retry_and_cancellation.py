"""
Unit tests for the retry wrapper and cancellation token.

Tests cover:
- Retry on transport errors, linear backoff, exhaustion
- Non-transport errors are not retried
- Cancellation interrupting backoff and blocking calls
- Upstream slot serializing abandoned and fresh calls
"""

import threading
import time

import pytest

from capfetch.core.cancellation import CancellationToken, call_cancellable
from capfetch.core.exceptions import CancelledError, NoPriceDataError, TransportError
from capfetch.services.retry import with_retry

from tests.conftest import JOIN_TIMEOUT


class FlakyCall:
    """Fails with TransportError a set number of times, then returns a value."""

    def __init__(self, failures: int, value: str = "ok"):
        self.failures = failures
        self.value = value
        self.attempts = 0

    def __call__(self) -> str:
        self.attempts += 1
        if self.attempts <= self.failures:
            raise TransportError(f"HTTP 503: attempt {self.attempts}", status_code=503)
        return self.value


class RecordingToken(CancellationToken):
    """Token that records requested sleeps instead of waiting."""

    def __init__(self):
        super().__init__()
        self.sleeps: list[float] = []

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.raise_if_cancelled()


# =============================================================================
# RETRY TESTS
# =============================================================================


class TestWithRetry:
    """Tests for with_retry."""

    def test_success_on_first_attempt(self, token):
        call = FlakyCall(failures=0)

        assert with_retry(call, token, max_attempts=3, backoff_seconds=0) == "ok"
        assert call.attempts == 1

    def test_recovers_after_transient_failures(self):
        """
        GIVEN a call that fails twice then succeeds
        WHEN I run it with 3 attempts and backoff 1s
        THEN it returns the value after waiting 1s then 2s
        """
        token = RecordingToken()
        call = FlakyCall(failures=2)

        result = with_retry(call, token, max_attempts=3, backoff_seconds=1.0)

        assert result == "ok"
        assert call.attempts == 3
        assert token.sleeps == [1.0, 2.0]

    def test_exhaustion_raises_last_error(self):
        """
        GIVEN a call that always fails
        WHEN I run it with 3 attempts
        THEN the third failure is raised and no wait follows it
        """
        token = RecordingToken()
        call = FlakyCall(failures=10)

        with pytest.raises(TransportError, match="attempt 3"):
            with_retry(call, token, max_attempts=3, backoff_seconds=0.5)

        assert call.attempts == 3
        assert token.sleeps == [0.5, 1.0]

    def test_other_errors_are_not_retried(self, token):
        calls = []

        def fails():
            calls.append(1)
            raise NoPriceDataError("nothing")

        with pytest.raises(NoPriceDataError):
            with_retry(fails, token, max_attempts=3, backoff_seconds=0)

        assert len(calls) == 1

    def test_cancel_during_backoff_skips_remaining_attempts(self):
        """
        GIVEN a call that always fails and a long backoff
        WHEN the token is cancelled while the wrapper waits
        THEN CancelledError is raised promptly without another attempt
        """
        token = CancellationToken()
        call = FlakyCall(failures=10)
        threading.Timer(0.05, token.cancel).start()

        started = time.monotonic()
        with pytest.raises(CancelledError):
            with_retry(call, token, max_attempts=3, backoff_seconds=30.0)

        assert time.monotonic() - started < 5.0
        assert call.attempts == 1

    def test_cancelled_token_makes_no_attempt(self, token):
        token.cancel()
        call = FlakyCall(failures=0)

        with pytest.raises(CancelledError):
            with_retry(call, token)

        assert call.attempts == 0

    def test_rejects_zero_attempts(self, token):
        with pytest.raises(ValueError):
            with_retry(lambda: None, token, max_attempts=0)


# =============================================================================
# CANCELLATION TESTS
# =============================================================================


class TestCancellationToken:
    """Tests for CancellationToken."""

    def test_sleep_returns_when_not_cancelled(self, token):
        token.sleep(0)

        assert not token.cancelled

    def test_sleep_interrupted_by_cancel(self, token):
        threading.Timer(0.05, token.cancel).start()

        started = time.monotonic()
        with pytest.raises(CancelledError):
            token.sleep(30.0)

        assert time.monotonic() - started < 5.0

    def test_on_cancel_callback_fires_once(self, token):
        fired = []

        with token.on_cancel(lambda: fired.append(1)):
            token.cancel()
            token.cancel()

        assert fired == [1]

    def test_on_cancel_after_cancel_fires_immediately(self, token):
        token.cancel()
        fired = []

        with token.on_cancel(lambda: fired.append(1)):
            pass

        assert fired == [1]

    def test_callback_removed_after_block(self, token):
        fired = []

        with token.on_cancel(lambda: fired.append(1)):
            pass
        token.cancel()

        assert fired == []


class TestCallCancellable:
    """Tests for call_cancellable."""

    def test_returns_value(self, token):
        assert call_cancellable(lambda: 42, token) == 42

    def test_reraises_call_error(self, token):
        def boom():
            raise TransportError("HTTP 500: Internal Server Error", status_code=500)

        with pytest.raises(TransportError) as exc_info:
            call_cancellable(boom, token)

        assert exc_info.value.status_code == 500

    def test_cancel_abandons_blocked_call(self, token):
        """
        GIVEN a call blocked indefinitely
        WHEN the token is cancelled
        THEN control returns at once with CancelledError
        """
        release = threading.Event()
        threading.Timer(0.05, token.cancel).start()

        started = time.monotonic()
        with pytest.raises(CancelledError):
            call_cancellable(lambda: release.wait(30.0), token)

        assert time.monotonic() - started < 5.0
        release.set()

    def test_abandoned_call_keeps_slot_until_it_returns(self):
        """
        GIVEN a call sharing a slot is abandoned by a cancelled token
        WHEN a second call on a fresh token uses the same slot
        THEN the second call only runs after the first really returns
        """
        slot = threading.Lock()
        first_token = CancellationToken()
        release = threading.Event()
        order: list[str] = []

        def first_call():
            release.wait(JOIN_TIMEOUT)
            order.append("first")

        threading.Timer(0.05, first_token.cancel).start()
        with pytest.raises(CancelledError):
            call_cancellable(first_call, first_token, slot=slot)
        assert slot.locked()

        threading.Timer(0.2, release.set).start()
        def second_call():
            order.append("second")
            return "done"

        result = call_cancellable(second_call, CancellationToken(), slot=slot)

        assert result == "done"
        assert order == ["first", "second"]
        assert not slot.locked()

    def test_cancel_while_waiting_for_slot(self, token):
        slot = threading.Lock()
        slot.acquire()
        threading.Timer(0.05, token.cancel).start()

        try:
            with pytest.raises(CancelledError):
                call_cancellable(lambda: "never", token, slot=slot)
        finally:
            slot.release()

    def test_slot_released_after_error(self, token):
        slot = threading.Lock()

        def boom():
            raise TransportError("HTTP 502: Bad Gateway", status_code=502)

        with pytest.raises(TransportError):
            call_cancellable(boom, token, slot=slot)

        assert not slot.locked()
