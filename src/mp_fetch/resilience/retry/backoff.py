"""Resilience – backoff strategies."""
from __future__ import annotations

import abc


class BackoffStrategy(abc.ABC):
    """Compute the wait (seconds) after the *attempt*-th failure (1-based)."""

    @abc.abstractmethod
    def compute(self, attempt: int) -> float: ...


class ExponentialBackoff(BackoffStrategy):
    """Delay doubles per failure: ``base_delay * 2^(attempt - 1)``.

    The first retry waits exactly ``base_delay``.  ``max_delay=None``
    leaves the growth uncapped.
    """

    def __init__(self, base_delay: float = 1.0, max_delay: float | None = None) -> None:
        if base_delay <= 0:
            raise ValueError("base_delay must be positive")
        self._base = base_delay
        self._max = max_delay

    @property
    def base_delay(self) -> float:
        return self._base

    def compute(self, attempt: int) -> float:
        delay = self._base * (2 ** max(attempt - 1, 0))
        return delay if self._max is None else min(delay, self._max)


__all__ = ["BackoffStrategy", "ExponentialBackoff"]
