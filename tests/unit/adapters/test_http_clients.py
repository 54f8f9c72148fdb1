"""Unit tests – HTTP adapter (HttpxTransport)."""
from __future__ import annotations

import asyncio

import httpx
import pytest
import respx

from mp_fetch.adapters.http import (
    BodyEncoding,
    HttpMethod,
    HttpTransport,
    HttpxTransport,
    RawResponse,
    RequestDescriptor,
)
from mp_fetch.observability.correlation import CorrelationContext, RequestContext


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _set_correlation(
    correlation_id: str = "test-cid",
    tenant_id: str | None = None,
    user_id: str | None = None,
) -> RequestContext:
    ctx = RequestContext(correlation_id=correlation_id, tenant_id=tenant_id, user_id=user_id)
    CorrelationContext.set(ctx)
    return ctx


def _get(url: str, headers: dict[str, str] | None = None) -> RequestDescriptor:
    return RequestDescriptor(method=HttpMethod.GET, url=url, headers=headers or {})


# ---------------------------------------------------------------------------
# Correlation header injection
# ---------------------------------------------------------------------------

class TestCorrelationHeaderInjection:
    """HttpxTransport injects correlation headers from CorrelationContext."""

    def teardown_method(self) -> None:
        CorrelationContext.clear()

    @respx.mock
    def test_correlation_id_injected(self) -> None:
        _set_correlation(correlation_id="abc-123")
        route = respx.get("http://svc/ok").mock(return_value=httpx.Response(200))

        async def run() -> None:
            async with HttpxTransport() as transport:
                await transport.send(_get("http://svc/ok"))
            sent = route.calls.last.request
            assert sent.headers.get("x-correlation-id") == "abc-123"

        asyncio.run(run())

    @respx.mock
    def test_tenant_and_user_headers_injected(self) -> None:
        _set_correlation(correlation_id="cid", tenant_id="tenant-1", user_id="user-42")
        route = respx.get("http://svc/ok").mock(return_value=httpx.Response(200))

        async def run() -> None:
            async with HttpxTransport() as transport:
                await transport.send(_get("http://svc/ok"))
            sent = route.calls.last.request
            assert sent.headers.get("x-tenant-id") == "tenant-1"
            assert sent.headers.get("x-user-id") == "user-42"

        asyncio.run(run())

    @respx.mock
    def test_no_correlation_context_no_extra_headers(self) -> None:
        CorrelationContext.clear()
        route = respx.get("http://svc/ok").mock(return_value=httpx.Response(200))

        async def run() -> None:
            async with HttpxTransport() as transport:
                await transport.send(_get("http://svc/ok"))
            sent = route.calls.last.request
            assert "x-correlation-id" not in sent.headers

        asyncio.run(run())

    @respx.mock
    def test_explicit_headers_override_correlation(self) -> None:
        """Headers on the descriptor take precedence over the ambient context."""
        _set_correlation(correlation_id="from-context")
        route = respx.get("http://svc/ok").mock(return_value=httpx.Response(200))

        async def run() -> None:
            async with HttpxTransport() as transport:
                await transport.send(_get("http://svc/ok", {"x-correlation-id": "caller-override"}))
            sent = route.calls.last.request
            assert sent.headers.get_list("x-correlation-id") == ["caller-override"]

        asyncio.run(run())


# ---------------------------------------------------------------------------
# Request / response translation
# ---------------------------------------------------------------------------

class TestHttpxTransportExchange:
    """HttpxTransport hands back uninterpreted RawResponse values."""

    @respx.mock
    def test_body_and_method_forwarded(self) -> None:
        route = respx.post("http://svc/items").mock(return_value=httpx.Response(201, json={"id": 1}))
        request = RequestDescriptor(
            method=HttpMethod.POST,
            url="http://svc/items",
            headers={"Content-Type": "application/json"},
            body=b'{"name":"x"}',
        )

        async def run() -> RawResponse:
            async with HttpxTransport() as transport:
                return await transport.send(request)

        response = asyncio.run(run())
        sent = route.calls.last.request
        assert sent.method == "POST"
        assert sent.content == b'{"name":"x"}'
        assert sent.headers["content-type"] == "application/json"
        assert response.status_code == 201
        assert response.json() == {"id": 1}

    @respx.mock
    def test_text_body_forwarded(self) -> None:
        route = respx.put("http://svc/note").mock(return_value=httpx.Response(204))
        request = RequestDescriptor(
            method=HttpMethod.PUT,
            url="http://svc/note",
            body="hello",
            body_encoding=BodyEncoding.TEXT,
        )

        async def run() -> RawResponse:
            async with HttpxTransport() as transport:
                return await transport.send(request)

        response = asyncio.run(run())
        assert route.calls.last.request.content == b"hello"
        assert response.content == b""

    @respx.mock
    def test_error_status_is_not_raised(self) -> None:
        respx.get("http://svc/missing").mock(
            return_value=httpx.Response(404, text="nope", headers={"Content-Type": "text/plain"})
        )

        async def run() -> RawResponse:
            async with HttpxTransport() as transport:
                return await transport.send(_get("http://svc/missing"))

        response = asyncio.run(run())
        assert response.status_code == 404
        assert response.ok is False
        assert response.reason_phrase == "Not Found"
        assert response.content_type == "text/plain"
        assert response.text() == "nope"

    @respx.mock
    def test_base_url_resolves_relative_paths(self) -> None:
        route = respx.get("http://site.test/api/ping").mock(return_value=httpx.Response(200))

        async def run() -> None:
            async with HttpxTransport(base_url="http://site.test") as transport:
                await transport.send(_get("/api/ping"))

        asyncio.run(run())
        assert route.called

    @respx.mock
    def test_connect_error_propagates(self) -> None:
        respx.get("http://svc/down").mock(side_effect=httpx.ConnectError("refused"))

        async def run() -> None:
            async with HttpxTransport() as transport:
                await transport.send(_get("http://svc/down"))

        with pytest.raises(httpx.ConnectError):
            asyncio.run(run())

    def test_satisfies_protocol(self) -> None:
        assert isinstance(HttpxTransport(), HttpTransport)


# ---------------------------------------------------------------------------
# Wire value types
# ---------------------------------------------------------------------------

class TestMessages:
    def test_accepts_body(self) -> None:
        assert HttpMethod.POST.accepts_body
        assert HttpMethod.PATCH.accepts_body
        assert not HttpMethod.GET.accepts_body
        assert not HttpMethod.HEAD.accepts_body

    def test_header_lookup_case_insensitive(self) -> None:
        request = _get("/a", {"Content-Type": "application/json"})
        assert request.header("content-type") == "application/json"
        assert request.header("accept") is None

    def test_charset_from_content_type(self) -> None:
        response = RawResponse(200, {"content-type": "text/plain; charset=latin-1"}, "caf\xe9".encode("latin-1"))
        assert response.charset == "latin-1"
        assert response.text() == "caf\xe9"

    def test_json_raises_value_error(self) -> None:
        with pytest.raises(ValueError):
            RawResponse(200, {}, b"<html>").json()
