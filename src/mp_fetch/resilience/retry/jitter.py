"""Resilience – jitter hook applied to each computed backoff delay."""
from __future__ import annotations

import abc


class JitterStrategy(abc.ABC):
    """Adjust the delay the retry engine is about to sleep.

    Both engines call ``apply(backoff.compute(n))`` once per scheduled retry,
    so an implementation sees the plain ``retry_delay_ms * 2^(n-1)`` value
    and returns what is actually slept (seconds).  Pass one through
    ``FetcherOptions(jitter=...)`` to spread retries of many concurrent
    callers; the result must not be negative.
    """

    @abc.abstractmethod
    def apply(self, delay: float) -> float: ...


class NoJitter(JitterStrategy):
    """The fetcher default: sleep exactly the backoff delay."""

    def apply(self, delay: float) -> float:
        return delay


__all__ = ["JitterStrategy", "NoJitter"]
