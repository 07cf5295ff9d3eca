"""Bounded retry with linear backoff for storage writes and email sends."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    stop_after_attempt,
    wait_incrementing,
    wait_random,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_ATTEMPTS = 3
BASE_DELAY = 0.5  # seconds


def _log_failed_attempt(label: str) -> Callable[[RetryCallState], None]:
    def log(retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning("%s attempt %d failed: %s", label, retry_state.attempt_number, exc)

    return log


async def retry_operation(
    operation: Callable[[], Awaitable[T]],
    *,
    max_attempts: int = MAX_ATTEMPTS,
    base_delay: float = BASE_DELAY,
    jitter: float = 0.0,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    label: str = "operation",
) -> T:
    """Await *operation* up to *max_attempts* times.

    After failed attempt ``n`` the wait is ``base_delay * n`` seconds, plus a
    uniform random amount up to *jitter*. Every exception counts as a
    failure; once attempts run out the last one is re-raised.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    wait = wait_incrementing(start=base_delay, increment=base_delay)
    if jitter > 0:
        wait = wait + wait_random(0, jitter)

    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait,
        sleep=sleep,
        after=_log_failed_attempt(label),
        reraise=True,
    )
    # Iterate attempts so closures returning coroutines are awaited here.
    async for attempt in retrying:
        with attempt:
            return await operation()
    raise RuntimeError(f"{label} did not run")  # pragma: no cover
