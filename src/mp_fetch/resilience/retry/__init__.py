"""Resilience – retry with configurable backoff, jitter and eligibility."""
from mp_fetch.resilience.retry.backoff import BackoffStrategy, ExponentialBackoff
from mp_fetch.resilience.retry.eligibility import is_retryable
from mp_fetch.resilience.retry.jitter import JitterStrategy, NoJitter
from mp_fetch.resilience.retry.policy import RetryEngine, RetryPolicy
from mp_fetch.resilience.retry.tenacity_adapter import TenacityRetryPolicy

__all__ = [
    "BackoffStrategy", "ExponentialBackoff", "JitterStrategy", "NoJitter",
    "RetryEngine", "RetryPolicy", "TenacityRetryPolicy", "is_retryable",
]
