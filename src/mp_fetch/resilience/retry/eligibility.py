"""Resilience – which fetch failures are worth another attempt."""
from __future__ import annotations

from mp_fetch.kernel.errors import (
    HttpStatusError,
    InvalidUrlError,
    RequestCancelledError,
    SerializationError,
    ValidationError,
)


def is_retryable(error: BaseException) -> bool:
    """Return ``True`` when repeating the identical request might succeed.

    ======================================  ======
    Failure                                 Retry?
    ======================================  ======
    ValidationError                         never
    SerializationError, cancellation        never
    InvalidUrlError                         never
    HTTP 429                                yes
    other HTTP 4xx                          never
    timeout, network, 5xx, parse, other     yes
    ======================================  ======
    """
    if not isinstance(error, Exception):
        # task cancellation, KeyboardInterrupt, ...
        return False
    if isinstance(error, (ValidationError, SerializationError, InvalidUrlError, RequestCancelledError)):
        return False
    if isinstance(error, HttpStatusError):
        if error.is_rate_limited:
            return True
        return not 400 <= error.status < 500
    return True


__all__ = ["is_retryable"]
