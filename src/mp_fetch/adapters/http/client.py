"""HTTP adapter – HttpTransport port and its httpx implementation."""
from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

import httpx

from mp_fetch.adapters.http.messages import RawResponse, RequestDescriptor
from mp_fetch.observability.correlation import CorrelationContext


@runtime_checkable
class HttpTransport(Protocol):
    """Port: send one request and hand back the raw response.

    Implementations must not interpret status codes and must be safe to
    share between concurrent calls.
    """

    async def send(self, request: RequestDescriptor) -> RawResponse: ...


class HttpxTransport:
    """``httpx.AsyncClient``-backed transport.

    Correlation headers from :class:`CorrelationContext` are added to every
    request; headers on the descriptor take precedence.  ``base_url`` lets a
    browser-context resolver hand over relative paths, mirroring how a user
    agent resolves them against the page origin.

    The per-attempt deadline is enforced by the fetcher, so the client is
    built with ``timeout=None`` unless one is passed explicitly.
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
        **kwargs: Any,
    ) -> None:
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout, **kwargs)

    async def __aenter__(self) -> "HttpxTransport":
        await self._client.__aenter__()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self._client.__aexit__(*args)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def send(self, request: RequestDescriptor) -> RawResponse:
        headers = httpx.Headers(self._correlation_headers())
        headers.update(request.headers)
        response = await self._client.request(
            request.method.value,
            request.url,
            headers=headers,
            content=request.body,
        )
        content = await response.aread()
        return RawResponse(
            status_code=response.status_code,
            headers={k.lower(): v for k, v in response.headers.items()},
            content=content,
            reason_phrase=response.reason_phrase,
        )

    @staticmethod
    def _correlation_headers() -> dict[str, str]:
        ctx = CorrelationContext.get()
        return ctx.to_headers() if ctx is not None else {}


__all__ = ["HttpTransport", "HttpxTransport"]
