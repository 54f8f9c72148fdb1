"""Resilience – TenacityRetryPolicy adapter.

Drop-in alternative to :class:`~mp_fetch.resilience.retry.policy.RetryPolicy`
that delegates scheduling to ``tenacity.AsyncRetrying``.
"""
from __future__ import annotations

import asyncio
from typing import Any, Callable, TypeVar

import tenacity

from mp_fetch.observability.logging import get_logger
from mp_fetch.resilience.retry.backoff import BackoffStrategy, ExponentialBackoff
from mp_fetch.resilience.retry.jitter import JitterStrategy, NoJitter
from mp_fetch.resilience.retry.policy import Attempt, Sleep

T = TypeVar("T")
logger = get_logger(__name__)


class TenacityRetryPolicy:
    """Retry policy backed by the ``tenacity`` library.

    Takes the same constructor arguments as ``RetryPolicy`` and exposes the
    same ``execute_async`` interface, so ``Fetcher(retry_engine=...)`` can
    switch between them.  The backoff and jitter strategies are translated
    into a tenacity ``wait`` callable; *should_retry* becomes a
    ``retry_if_exception`` predicate.

    Example
    -------
    ::

        policy = TenacityRetryPolicy(
            max_attempts=3,
            backoff=ExponentialBackoff(base_delay=0.5),
            should_retry=is_retryable,
        )
        result = await policy.execute_async(lambda attempt: call(attempt))
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

    def _wait(self, retry_state: tenacity.RetryCallState) -> float:
        return self.jitter.apply(self.backoff.compute(retry_state.attempt_number))

    def _before_sleep(self, retry_state: tenacity.RetryCallState) -> None:
        outcome = retry_state.outcome
        exc = outcome.exception() if outcome is not None else None
        delay = retry_state.next_action.sleep if retry_state.next_action is not None else 0.0
        logger.debug(
            "retry.scheduled",
            attempt=retry_state.attempt_number,
            delay=round(delay, 3),
            error=repr(exc),
        )

    def _build_async_retrying(self) -> Any:
        return tenacity.AsyncRetrying(
            stop=tenacity.stop_after_attempt(self.max_attempts),
            wait=self._wait,
            retry=tenacity.retry_if_exception(self.should_retry),
            before_sleep=self._before_sleep,
            sleep=self._sleep,
            reraise=True,
        )

    async def execute_async(self, func: Attempt[T]) -> T:
        """Run ``func(attempt)`` under the tenacity schedule."""
        async for attempt in self._build_async_retrying():
            with attempt:
                result = await func(attempt.retry_state.attempt_number)
        return result  # type: ignore[return-value]


__all__ = ["TenacityRetryPolicy"]
