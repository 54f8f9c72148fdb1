"""Unit tests – Fetcher facade and module-level verb helpers."""
from __future__ import annotations

import asyncio
from typing import Any

import httpx
import pydantic
import pytest
import respx

from mp_fetch.adapters.http import HttpMethod, HttpxTransport, RawResponse
from mp_fetch.config import SiteSettings
from mp_fetch.fetcher import Fetcher, FetcherOptions, UrlResolver
from mp_fetch.fetcher import client as verbs
from mp_fetch.kernel.errors import (
    FetcherError,
    HttpStatusError,
    InvalidUrlError,
    ParseError,
    RequestCancelledError,
    RequestTimeoutError,
    SerializationError,
    TransportError,
    ValidationError,
)
from mp_fetch.kernel.types import Err, Ok
from mp_fetch.observability.correlation import CorrelationContext, RequestContext
from mp_fetch.resilience import CancellationToken, JitterStrategy, RetryPolicy, TenacityRetryPolicy
from mp_fetch.testing import FakeTransport, json_response, text_response

BASE = "https://api.test"


class Message(pydantic.BaseModel):
    id: int
    text: str


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _fetcher(transport: FakeTransport, engine: type = RetryPolicy) -> Fetcher:
    return Fetcher(transport, UrlResolver(SiteSettings(site_url=BASE)), retry_engine=engine)


def _status(code: int) -> RawResponse:
    return json_response({"error": "x"}, status_code=code)


class _ErrorRecorder:
    def __init__(self) -> None:
        self.errors: list[FetcherError | ValidationError] = []

    def __call__(self, error: FetcherError | ValidationError) -> None:
        self.errors.append(error)


@pytest.fixture(params=[RetryPolicy, TenacityRetryPolicy], ids=["builtin", "tenacity"])
def engine(request: pytest.FixtureRequest) -> type:
    return request.param


# ---------------------------------------------------------------------------
# Reference scenarios
# ---------------------------------------------------------------------------


class TestScenarios:
    def test_schema_mismatch_is_validation_error_on_first_attempt(self, engine: type) -> None:
        transport = FakeTransport(json_response([{"id": "not-a-number", "text": "hi"}]))
        options = FetcherOptions(schema=list[Message], retries=3, retry_delay_ms=1)

        result = asyncio.run(_fetcher(transport, engine).get("/api/v1/messages", options))

        assert isinstance(result, Err)
        err = result.error
        assert isinstance(err, ValidationError)
        assert err.attempt == 1
        assert err.url == f"{BASE}/api/v1/messages"
        assert err.problems_string()
        assert err.response_data == [{"id": "not-a-number", "text": "hi"}]
        assert transport.calls == 1

    def test_rate_limited_until_budget_exhausted(self, engine: type) -> None:
        transport = FakeTransport(_status(429))
        options = FetcherOptions(retries=2, retry_delay_ms=1)

        result = asyncio.run(_fetcher(transport, engine).get("/x", options))

        err = result.unwrap_err()
        assert isinstance(err, HttpStatusError)
        assert err.status == 429
        assert err.attempt == 3
        assert transport.calls == 3

    def test_slow_server_times_out_and_retries(self, engine: type) -> None:
        transport = FakeTransport(json_response({"late": True}), delay=0.5)
        options = FetcherOptions(timeout_ms=50, retries=1, retry_delay_ms=1)

        result = asyncio.run(_fetcher(transport, engine).get("/y", options))

        err = result.unwrap_err()
        assert isinstance(err, RequestTimeoutError)
        assert isinstance(err, FetcherError)
        assert err.attempt == 2
        assert transport.calls == 2
        assert transport.cancelled == 2

    def test_post_json_without_schema(self) -> None:
        transport = FakeTransport(json_response({"ok": True}, status_code=201))

        result = asyncio.run(_fetcher(transport).post("/z", {"a": 1}))

        assert result == Ok({"ok": True})
        sent = transport.requests[0]
        assert sent.method is HttpMethod.POST
        assert sent.url == f"{BASE}/z"
        assert sent.body == b'{"a":1}'
        assert sent.header("content-type") == "application/json"

    def test_post_list_of_models(self) -> None:
        transport = FakeTransport(json_response({"ok": True}, status_code=201))
        body = [Message(id=1, text="a"), Message(id=2, text="b")]

        result = asyncio.run(_fetcher(transport).post("/batch", body))

        assert result == Ok({"ok": True})
        assert transport.calls == 1
        assert transport.requests[0].body == b'[{"id":1,"text":"a"},{"id":2,"text":"b"}]'


# ---------------------------------------------------------------------------
# Attempt accounting
# ---------------------------------------------------------------------------


class TestAttemptBudget:
    @pytest.mark.parametrize("retries", [0, 1, 2, 4])
    def test_always_failing_uses_whole_budget(self, engine: type, retries: int) -> None:
        transport = FakeTransport(_status(503))
        options = FetcherOptions(retries=retries, retry_delay_ms=1)

        result = asyncio.run(_fetcher(transport, engine).get("/flaky", options))

        assert result.is_err()
        assert result.error.attempt == retries + 1
        assert transport.calls == retries + 1

    def test_stops_at_first_success(self, engine: type) -> None:
        transport = FakeTransport(_status(500), _status(502), json_response({"v": 1}))
        options = FetcherOptions(retries=5, retry_delay_ms=1)

        result = asyncio.run(_fetcher(transport, engine).get("/flaky", options))

        assert result == Ok({"v": 1})
        assert transport.calls == 3

    @pytest.mark.parametrize("status", [400, 401, 403, 404, 409, 422, 428, 430, 499])
    def test_client_errors_never_retried(self, engine: type, status: int) -> None:
        transport = FakeTransport(_status(status))
        options = FetcherOptions(retries=3, retry_delay_ms=1)

        result = asyncio.run(_fetcher(transport, engine).get("/bad", options))

        assert result.error.status == status
        assert transport.calls == 1

    def test_network_failure_retried(self, engine: type) -> None:
        transport = FakeTransport(httpx.ConnectError("refused"), json_response([]))
        options = FetcherOptions(retries=1, retry_delay_ms=1)

        result = asyncio.run(_fetcher(transport, engine).get("/net", options))

        assert result == Ok([])
        assert transport.calls == 2

    def test_parse_failure_retried(self, engine: type) -> None:
        transport = FakeTransport(text_response("<html>maintenance</html>"))
        options = FetcherOptions(retries=1, retry_delay_ms=1)

        result = asyncio.run(_fetcher(transport, engine).get("/html", options))

        err = result.unwrap_err()
        assert isinstance(err, ParseError)
        assert "Content-Type: text/html" in err.message
        assert transport.calls == 2

    def test_jitter_sees_each_backoff_delay(self, engine: type) -> None:
        class Recording(JitterStrategy):
            def __init__(self) -> None:
                self.seen: list[float] = []

            def apply(self, delay: float) -> float:
                self.seen.append(delay)
                return 0.0

        jitter = Recording()
        transport = FakeTransport(_status(503))
        options = FetcherOptions(retries=2, retry_delay_ms=10, jitter=jitter)

        result = asyncio.run(_fetcher(transport, engine).get("/flaky", options))

        assert result.error.attempt == 3
        assert jitter.seen == [0.01, 0.02]

    def test_same_descriptor_replayed(self) -> None:
        transport = FakeTransport(_status(500), json_response({}))
        options = FetcherOptions(retries=1, retry_delay_ms=1)

        asyncio.run(_fetcher(transport).put("/items/1", {"name": "n"}, options))

        first, second = transport.requests
        assert first is second


# ---------------------------------------------------------------------------
# Success values
# ---------------------------------------------------------------------------


class TestSuccessValues:
    def test_schema_validated_value(self) -> None:
        transport = FakeTransport(json_response([{"id": 1, "text": "hi"}]))
        options = FetcherOptions(schema=list[Message])

        result = asyncio.run(_fetcher(transport).get("/api/v1/messages", options))

        assert result == Ok([Message(id=1, text="hi")])

    def test_type_adapter_accepted(self) -> None:
        transport = FakeTransport(json_response({"id": 1, "text": "hi"}))
        options = FetcherOptions(schema=pydantic.TypeAdapter(Message))

        result = asyncio.run(_fetcher(transport).get("/m/1", options))

        assert result.unwrap() == Message(id=1, text="hi")

    def test_head_has_no_body(self) -> None:
        transport = FakeTransport(RawResponse(200, {"content-length": "10"}))

        result = asyncio.run(_fetcher(transport).head("/health"))

        assert result == Ok(None)
        assert transport.requests[0].method is HttpMethod.HEAD

    def test_no_content(self) -> None:
        transport = FakeTransport(RawResponse(204))

        assert asyncio.run(_fetcher(transport).delete("/items/1")) == Ok(None)

    def test_query_params_appended(self) -> None:
        transport = FakeTransport(json_response([]))

        asyncio.run(_fetcher(transport).get("/search", params={"q": "a b", "tag": ["x", "y"], "skip": None}))

        assert transport.requests[0].url == f"{BASE}/search?q=a+b&tag=x&tag=y"

    def test_text_body_encoding(self) -> None:
        transport = FakeTransport(json_response({}))

        asyncio.run(_fetcher(transport).patch("/note", "raw text", FetcherOptions(body_encoding="text")))

        sent = transport.requests[0]
        assert sent.body == "raw text"
        assert sent.header("content-type") == "text/plain; charset=utf-8"

    def test_caller_headers_sent(self) -> None:
        transport = FakeTransport(json_response({}))
        options = FetcherOptions(headers={"Authorization": "Bearer t", "Content-Type": "application/vnd+json"})

        asyncio.run(_fetcher(transport).post("/things", {"a": 1}, options))

        sent = transport.requests[0]
        assert sent.header("authorization") == "Bearer t"
        assert sent.header("content-type") == "application/vnd+json"

    def test_method_string_normalised(self) -> None:
        transport = FakeTransport(json_response({}))

        asyncio.run(_fetcher(transport).fetch("/x", "options"))

        assert transport.requests[0].method is HttpMethod.OPTIONS

    def test_identical_gets_are_equal(self) -> None:
        transport = FakeTransport(json_response([{"id": 1, "text": "a"}]))
        fetcher = _fetcher(transport)
        options = FetcherOptions(schema=list[Message])

        async def run() -> tuple[Any, Any]:
            return await fetcher.get("/m", options, {"page": 1}), await fetcher.get("/m", options, {"page": 1})

        first, second = asyncio.run(run())
        assert first == second
        assert transport.requests[0] == transport.requests[1]

    def test_concurrent_calls_independent(self) -> None:
        def echo(request: Any) -> RawResponse:
            return json_response({"url": request.url})

        fetcher = _fetcher(FakeTransport(echo, delay=0.01))

        async def run() -> list[Any]:
            return await asyncio.gather(*(fetcher.get(f"/item/{i}") for i in range(5)))

        results = asyncio.run(run())
        assert [r.unwrap()["url"] for r in results] == [f"{BASE}/item/{i}" for i in range(5)]


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestFailures:
    def test_serialization_failure_never_sent(self) -> None:
        transport = FakeTransport(json_response({}))
        hook = _ErrorRecorder()
        options = FetcherOptions(retries=3, retry_delay_ms=1, on_error=hook)

        result = asyncio.run(_fetcher(transport).post("/z", {"when": object()}, options))

        assert isinstance(result.error, SerializationError)
        assert transport.calls == 0
        assert hook.errors == [result.error]

    def test_rejected_url_not_retried(self, engine: type) -> None:
        transport = FakeTransport(httpx.UnsupportedProtocol("Request URL is missing an 'http://' or 'https://' protocol."))
        resolver = UrlResolver(SiteSettings(browser_context=True))
        options = FetcherOptions(retries=3, retry_delay_ms=1)

        result = asyncio.run(Fetcher(transport, resolver, retry_engine=engine).get("/api/items", options))

        err = result.unwrap_err()
        assert isinstance(err, InvalidUrlError)
        assert err.url == "/api/items"
        assert err.attempt == 1
        assert transport.calls == 1

    def test_on_error_called_once_with_terminal_error(self, engine: type) -> None:
        transport = FakeTransport(_status(500))
        hook = _ErrorRecorder()
        options = FetcherOptions(retries=2, retry_delay_ms=1, on_error=hook)

        result = asyncio.run(_fetcher(transport, engine).get("/boom", options))

        assert len(hook.errors) == 1
        assert hook.errors[0] is result.error
        assert hook.errors[0].attempt == 3

    def test_on_error_not_called_on_success(self) -> None:
        hook = _ErrorRecorder()
        result = asyncio.run(_fetcher(FakeTransport(json_response(1))).get("/ok", FetcherOptions(on_error=hook)))
        assert result == Ok(1)
        assert hook.errors == []

    def test_unexpected_exception_becomes_fetcher_error(self) -> None:
        transport = FakeTransport(lambda request: None)  # type: ignore[arg-type, return-value]

        result = asyncio.run(_fetcher(transport).get("/weird"))

        err = result.unwrap_err()
        assert type(err) is FetcherError
        assert err.attempt == 1
        assert isinstance(err.cause, AttributeError)

    def test_transport_error_str(self) -> None:
        transport = FakeTransport(httpx.ConnectError("refused"))

        result = asyncio.run(_fetcher(transport).get("/down"))

        assert isinstance(result.error, TransportError)
        assert str(result.error) == f"FetcherError: refused (URL: {BASE}/down, Attempt: 1)"


# ---------------------------------------------------------------------------
# Cancellation
# ---------------------------------------------------------------------------


class TestCancellation:
    def test_cancel_in_flight_is_terminal(self, engine: type) -> None:
        transport = FakeTransport(json_response({}), delay=5.0)
        token = CancellationToken()
        options = FetcherOptions(retries=3, retry_delay_ms=1, cancel_token=token)

        async def run() -> Any:
            task = asyncio.create_task(_fetcher(transport, engine).get("/slow", options))
            await asyncio.sleep(0.02)
            token.cancel()
            return await task

        result = asyncio.run(run())
        assert isinstance(result.error, RequestCancelledError)
        assert transport.calls == 1
        assert transport.cancelled == 1

    def test_cancel_during_backoff(self, engine: type) -> None:
        transport = FakeTransport(_status(503))
        token = CancellationToken()
        hook = _ErrorRecorder()
        options = FetcherOptions(retries=3, retry_delay_ms=10_000, cancel_token=token, on_error=hook)

        async def run() -> Any:
            task = asyncio.create_task(_fetcher(transport, engine).get("/backoff", options))
            await asyncio.sleep(0.02)
            token.cancel()
            return await asyncio.wait_for(task, timeout=2)

        result = asyncio.run(run())
        err = result.unwrap_err()
        assert isinstance(err, RequestCancelledError)
        assert err.attempt == 1
        assert transport.calls == 1
        assert hook.errors == [err]

    def test_pre_cancelled_token(self) -> None:
        token = CancellationToken()
        token.cancel()
        transport = FakeTransport(json_response({}))

        result = asyncio.run(_fetcher(transport).get("/never", FetcherOptions(cancel_token=token)))

        assert isinstance(result.error, RequestCancelledError)
        assert transport.calls == 0


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------


class TestModuleLevelHelpers:
    def test_get(self) -> None:
        transport = FakeTransport(json_response({"a": 1}))
        result = asyncio.run(verbs.get(transport, f"{BASE}/a", params={"x": 1}))
        assert result == Ok({"a": 1})
        assert transport.requests[0].url == f"{BASE}/a?x=1"

    @pytest.mark.parametrize(
        ("helper", "method"),
        [(verbs.post, HttpMethod.POST), (verbs.put, HttpMethod.PUT), (verbs.patch, HttpMethod.PATCH)],
    )
    def test_body_verbs(self, helper: Any, method: HttpMethod) -> None:
        transport = FakeTransport(json_response({}))
        asyncio.run(helper(transport, f"{BASE}/b", {"k": "v"}))
        sent = transport.requests[0]
        assert sent.method is method
        assert sent.body == b'{"k":"v"}'

    @pytest.mark.parametrize(
        ("helper", "method"),
        [(verbs.delete, HttpMethod.DELETE), (verbs.options, HttpMethod.OPTIONS), (verbs.head, HttpMethod.HEAD)],
    )
    def test_bodyless_verbs(self, helper: Any, method: HttpMethod) -> None:
        transport = FakeTransport(RawResponse(204))
        result = asyncio.run(helper(transport, f"{BASE}/c"))
        assert result == Ok(None)
        assert transport.requests[0].method is method

    def test_fetch_with_resolver(self) -> None:
        transport = FakeTransport(json_response([]))
        resolver = UrlResolver(SiteSettings(site_url="https://other.test"))
        asyncio.run(verbs.fetch(transport, "/r", "GET", resolver=resolver))
        assert transport.requests[0].url == "https://other.test/r"

    def test_default_resolver_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NEXT_PUBLIC_SITE_URL", "https://env.test")
        transport = FakeTransport(json_response([]))
        asyncio.run(verbs.get(transport, "/from-env"))
        assert transport.requests[0].url == "https://env.test/from-env"


# ---------------------------------------------------------------------------
# End to end over httpx
# ---------------------------------------------------------------------------


class TestHttpxEndToEnd:
    def teardown_method(self) -> None:
        CorrelationContext.clear()

    @respx.mock
    def test_retry_then_validated_success(self) -> None:
        route = respx.get(f"{BASE}/api/v1/messages").mock(
            side_effect=[
                httpx.Response(503),
                httpx.Response(200, json=[{"id": 7, "text": "hello"}]),
            ]
        )
        CorrelationContext.set(RequestContext(correlation_id="cid-1"))
        options = FetcherOptions(schema=list[Message], retries=2, retry_delay_ms=1)

        async def run() -> Any:
            async with HttpxTransport() as transport:
                fetcher = Fetcher(transport, UrlResolver(SiteSettings(site_url=BASE)))
                return await fetcher.get("/api/v1/messages", options, {"limit": 10})

        result = asyncio.run(run())
        assert result == Ok([Message(id=7, text="hello")])
        assert route.call_count == 2
        sent = route.calls.last.request
        assert sent.url.params["limit"] == "10"
        assert sent.headers["x-correlation-id"] == "cid-1"

    @respx.mock
    def test_rate_limit_over_the_wire(self) -> None:
        route = respx.get(f"{BASE}/limited").mock(return_value=httpx.Response(429, json={"error": "slow down"}))
        options = FetcherOptions(retries=1, retry_delay_ms=1)

        async def run() -> Any:
            async with HttpxTransport() as transport:
                return await Fetcher(transport, UrlResolver(SiteSettings(site_url=BASE))).get("/limited", options)

        err = asyncio.run(run()).unwrap_err()
        assert err.status == 429
        assert err.response_data == {"error": "slow down"}
        assert err.message == f"Rate limit exceeded (429). Please slow down requests to {BASE}/limited"
        assert route.call_count == 2

    @respx.mock
    def test_post_body_over_the_wire(self) -> None:
        route = respx.post(f"{BASE}/z").mock(return_value=httpx.Response(201, json={"ok": True}))

        async def run() -> Any:
            async with HttpxTransport() as transport:
                return await Fetcher(transport, UrlResolver(SiteSettings(site_url=BASE))).post("/z", {"a": 1})

        assert asyncio.run(run()) == Ok({"ok": True})
        assert route.calls.last.request.content == b'{"a":1}'
