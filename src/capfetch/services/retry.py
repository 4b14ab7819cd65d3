"""Bounded retry with linear backoff for upstream calls."""

import logging
from typing import Callable, Optional, TypeVar

from capfetch.core.cancellation import CancellationToken
from capfetch.core.exceptions import TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BACKOFF_SECONDS = 1.0


def with_retry(
    attempt_fn: Callable[[], T],
    token: CancellationToken,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    backoff_seconds: float = DEFAULT_BACKOFF_SECONDS,
    description: str = "upstream call",
) -> T:
    """
    Call ``attempt_fn`` until it succeeds or ``max_attempts`` TransportErrors occur.

    After failed attempt N the wrapper waits ``backoff_seconds * N``. The wait is
    interruptible: cancelling ``token`` raises CancelledError immediately and
    skips any remaining attempts. Exceptions other than TransportError are not
    retried.

    Raises:
        TransportError: the last failure once attempts are exhausted.
        CancelledError: the token was cancelled before or during an attempt.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    last_error: Optional[TransportError] = None
    for attempt in range(1, max_attempts + 1):
        token.raise_if_cancelled()
        try:
            return attempt_fn()
        except TransportError as exc:
            last_error = exc
            if attempt == max_attempts:
                break
            logger.warning(
                "%s failed (attempt %d/%d): %s",
                description,
                attempt,
                max_attempts,
                exc.message,
            )
            token.sleep(backoff_seconds * attempt)

    assert last_error is not None
    raise last_error
