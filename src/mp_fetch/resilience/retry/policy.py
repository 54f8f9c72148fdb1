"""Resilience – RetryPolicy, the default retry scheduler."""
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Protocol, TypeVar

from mp_fetch.observability.logging import get_logger
from mp_fetch.resilience.retry.backoff import BackoffStrategy, ExponentialBackoff
from mp_fetch.resilience.retry.jitter import JitterStrategy, NoJitter

T = TypeVar("T")
logger = get_logger(__name__)

Sleep = Callable[[float], Awaitable[None]]
Attempt = Callable[[int], Awaitable[T]]


class RetryEngine(Protocol):
    """Anything that can drive an attempt function under a retry schedule.

    Implementations must call *func* with a strictly increasing, 1-based
    attempt number, never overlap attempts, and re-raise the last error.
    """

    max_attempts: int

    async def execute_async(self, func: Attempt[T]) -> T: ...


class RetryPolicy:
    """Sequential retry loop with pluggable backoff, jitter and eligibility.

    Parameters
    ----------
    max_attempts:
        Total attempts including the first one (``retries + 1``).
    backoff:
        Delay schedule; defaults to ``ExponentialBackoff()``.
    jitter:
        Randomisation applied to each delay; defaults to none.
    should_retry:
        Predicate deciding whether a failure is worth another attempt.
        Defaults to retrying every :class:`Exception`.
    sleep:
        Coroutine used between attempts; the fetcher swaps in a
        cancellation-aware sleep.
    """

    def __init__(
        self,
        max_attempts: int = 1,
        backoff: BackoffStrategy | None = None,
        jitter: JitterStrategy | None = None,
        should_retry: Callable[[BaseException], bool] | None = None,
        sleep: Sleep | None = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.max_attempts = max_attempts
        self.backoff = backoff or ExponentialBackoff()
        self.jitter = jitter or NoJitter()
        self.should_retry = should_retry or (lambda exc: isinstance(exc, Exception))
        self._sleep = sleep or asyncio.sleep

    def delay_for(self, attempt: int) -> float:
        return self.jitter.apply(self.backoff.compute(attempt))

    async def execute_async(self, func: Attempt[T]) -> T:
        """Run ``func(attempt)`` until it succeeds, fails terminally, or the budget runs out."""
        for attempt in range(1, self.max_attempts + 1):
            try:
                return await func(attempt)
            except Exception as exc:
                if attempt == self.max_attempts or not self.should_retry(exc):
                    raise
                delay = self.delay_for(attempt)
                logger.debug("retry.scheduled", attempt=attempt, delay=round(delay, 3), error=repr(exc))
                await self._sleep(delay)
        raise AssertionError("unreachable: retry loop exited without result")


__all__ = ["RetryEngine", "RetryPolicy"]
