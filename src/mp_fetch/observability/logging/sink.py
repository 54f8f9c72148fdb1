"""Observability – ErrorLogSink, a ready-made ``on_error`` callback."""
from __future__ import annotations

from typing import Any

from mp_fetch.kernel.errors import FetcherError, HttpStatusError, ValidationError
from mp_fetch.observability.logging.processors import get_logger


class ErrorLogSink:
    """Route terminal fetch errors to a structlog logger.

    The fetch layer never logs failures itself; pass an instance as
    ``FetcherOptions(on_error=ErrorLogSink())`` to get one structured
    ``fetch.failed`` event per failed call.  Client-side mistakes (schema
    mismatch, 4xx other than 429) are logged at ``warning``, everything else
    at ``error``.
    """

    def __init__(self, logger: Any = None, event: str = "fetch.failed") -> None:
        self._log = logger if logger is not None else get_logger("mp_fetch.errors")
        self._event = event

    def __call__(self, error: FetcherError | ValidationError) -> None:
        fields = error.to_dict()
        fields["error_type"] = type(error).__name__
        log = self._log.warning if self._is_client_side(error) else self._log.error
        log(self._event, **fields)

    @staticmethod
    def _is_client_side(error: FetcherError | ValidationError) -> bool:
        if isinstance(error, ValidationError):
            return True
        if isinstance(error, HttpStatusError):
            return 400 <= error.status < 500 and not error.is_rate_limited
        return False


__all__ = ["ErrorLogSink"]
