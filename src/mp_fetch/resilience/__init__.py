"""Resilience – retry scheduling, timeouts and cooperative cancellation."""

from mp_fetch.resilience.cancellation import CancellationToken
from mp_fetch.resilience.retry import (
    BackoffStrategy,
    JitterStrategy,
    RetryPolicy,
    TenacityRetryPolicy,
    is_retryable,
)
from mp_fetch.resilience.timeouts import TimeoutPolicy

__all__ = [
    "BackoffStrategy",
    "CancellationToken",
    "JitterStrategy",
    "RetryPolicy",
    "TenacityRetryPolicy",
    "TimeoutPolicy",
    "is_retryable",
]
