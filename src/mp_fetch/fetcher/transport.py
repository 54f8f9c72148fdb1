"""Fetcher – TransportExecutor, one timed and cancellable attempt."""
from __future__ import annotations

import asyncio

import httpx

from mp_fetch.adapters.http import HttpTransport, RawResponse, RequestDescriptor
from mp_fetch.kernel.errors import (
    FetcherError,
    InvalidUrlError,
    RequestCancelledError,
    RequestTimeoutError,
    TransportError,
)
from mp_fetch.observability.logging import get_logger
from mp_fetch.resilience.cancellation import CancellationToken
from mp_fetch.resilience.timeouts import TimeoutPolicy

logger = get_logger(__name__)


class TransportExecutor:
    """Issue exactly one request through the injected :class:`HttpTransport`.

    Status codes are not inspected here.  Any failure of the client is
    mapped to a :class:`FetcherError` subclass carrying the attempt number:

    * deadline exceeded -> :class:`RequestTimeoutError` (in-flight call cancelled)
    * token cancelled   -> :class:`RequestCancelledError` (in-flight call cancelled)
    * URL rejected      -> :class:`InvalidUrlError` (never retried)
    * anything else     -> :class:`TransportError`
    """

    def __init__(self, client: HttpTransport) -> None:
        self._client = client

    async def execute(
        self,
        request: RequestDescriptor,
        *,
        attempt: int,
        timeout_ms: int,
        cancel_token: CancellationToken | None = None,
    ) -> RawResponse:
        if cancel_token is not None and cancel_token.is_cancelled():
            raise RequestCancelledError("Request cancelled", request.url, attempt=attempt)

        logger.debug("fetch.attempt", method=request.method.value, url=request.url, attempt=attempt)
        policy = TimeoutPolicy(timeout_seconds=timeout_ms / 1000)
        try:
            return await policy.execute(
                lambda: self._send(request, attempt, cancel_token),
                on_timeout=lambda: RequestTimeoutError("Request timed out", request.url, attempt=attempt),
            )
        except FetcherError:
            raise
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError(
                f"Request timed out: {exc}", request.url, attempt=attempt, cause=exc
            ) from exc
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
            raise InvalidUrlError(
                f"Invalid request URL: {exc}", request.url, attempt=attempt, cause=exc
            ) from exc
        except Exception as exc:
            # unclassified client failure
            raise TransportError(
                str(exc) or type(exc).__name__, request.url, attempt=attempt, cause=exc
            ) from exc

    async def _send(
        self,
        request: RequestDescriptor,
        attempt: int,
        cancel_token: CancellationToken | None,
    ) -> RawResponse:
        if cancel_token is None:
            return await self._client.send(request)

        send_task = asyncio.ensure_future(self._client.send(request))
        cancel_task = asyncio.ensure_future(cancel_token.wait())
        try:
            done, _ = await asyncio.wait({send_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            cancel_task.cancel()
            if not send_task.done():
                send_task.cancel()
                await asyncio.wait({send_task})
        if send_task in done:
            return send_task.result()
        raise RequestCancelledError("Request cancelled", request.url, attempt=attempt)


__all__ = ["TransportExecutor"]
