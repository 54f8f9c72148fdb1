"""Transport-tier errors – everything that can go wrong before a body is validated."""

from __future__ import annotations

from typing import Any

from mp_fetch.kernel.errors.base import BaseError


def _format_line(label: str, message: str, url: str, status: int | None, attempt: int | None) -> str:
    parts = [f"URL: {url}"]
    if status is not None:
        parts.append(f"Status: {status}")
    if attempt is not None:
        parts.append(f"Attempt: {attempt}")
    return f"{label}: {message} ({', '.join(parts)})"


class FetcherError(BaseError):
    """A request failed at the transport tier.

    Covers network failures, timeouts, non-2xx responses and body
    (de)serialisation problems.  Subclasses narrow the kind; all of them
    render the same stable ``str()`` form so log lines stay greppable.
    """

    default_code = "fetcher_error"
    label = "FetcherError"

    def __init__(
        self,
        message: str,
        url: str,
        *,
        status: int | None = None,
        response_data: Any = None,
        attempt: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.url = url
        self.status = status
        self.response_data = response_data
        self.attempt = attempt

    def __str__(self) -> str:
        return _format_line(self.label, self.message, self.url, self.status, self.attempt)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, url={self.url!r}, "
            f"status={self.status!r}, attempt={self.attempt!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["url"] = self.url
        if self.status is not None:
            payload["status"] = self.status
        if self.attempt is not None:
            payload["attempt"] = self.attempt
        return payload


class TransportError(FetcherError):
    """The HTTP client could not complete the exchange (DNS, connect, reset, ...)."""

    default_code = "transport_error"


class RequestTimeoutError(TransportError):
    """An attempt exceeded its configured deadline and was cancelled."""

    default_code = "request_timeout"


class RequestCancelledError(TransportError):
    """The caller's cancellation token fired; the call stops without retrying."""

    default_code = "request_cancelled"


class InvalidUrlError(FetcherError):
    """The client rejected the URL itself (malformed, relative without a base, unknown scheme)."""

    default_code = "invalid_url"


class SerializationError(FetcherError):
    """The request body could not be encoded."""

    default_code = "serialization_error"


class HttpStatusError(FetcherError):
    """The server answered with a non-2xx status."""

    default_code = "http_status_error"

    def __init__(self, message: str, url: str, *, status: int, **kwargs: Any) -> None:
        super().__init__(message, url, status=status, **kwargs)

    @property
    def is_rate_limited(self) -> bool:
        return self.status == 429


class ParseError(FetcherError):
    """A 2xx response body was not valid JSON."""

    default_code = "parse_error"


__all__ = [
    "FetcherError",
    "HttpStatusError",
    "InvalidUrlError",
    "ParseError",
    "RequestCancelledError",
    "RequestTimeoutError",
    "SerializationError",
    "TransportError",
]
