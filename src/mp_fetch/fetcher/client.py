"""Fetcher – the caller-facing facade, one coroutine per HTTP verb."""
from __future__ import annotations

import asyncio
from typing import Any, TypeVar

from mp_fetch.adapters.http import HttpMethod, HttpTransport, RequestDescriptor
from mp_fetch.config import EnvSettingsLoader, SiteSettings
from mp_fetch.fetcher.call_options import FetcherOptions
from mp_fetch.fetcher.request import build_request
from mp_fetch.fetcher.response import interpret_response
from mp_fetch.fetcher.transport import TransportExecutor
from mp_fetch.fetcher.url import QueryParams, UrlResolver
from mp_fetch.kernel.errors import FetcherError, RequestCancelledError, ValidationError
from mp_fetch.kernel.types import Err, Ok, Outcome
from mp_fetch.resilience.cancellation import CancellationToken
from mp_fetch.resilience.retry import ExponentialBackoff, NoJitter, RetryPolicy, is_retryable
from mp_fetch.resilience.retry.policy import RetryEngine

T = TypeVar("T")

_DEFAULT_OPTIONS: FetcherOptions[Any] = FetcherOptions()


class _CallState:
    """Per-call bookkeeping; never shared between calls."""

    __slots__ = ("attempt",)

    def __init__(self) -> None:
        self.attempt = 0


class Fetcher:
    """Resilient, schema-validating HTTP fetcher.

    Every call resolves the URL, builds one :class:`RequestDescriptor` and
    replays it under a retry schedule until it succeeds, fails terminally,
    or the budget is spent.  Failures are *returned* as ``Err`` values:

    .. code-block:: python

        async with HttpxTransport() as transport:
            fetcher = Fetcher(transport)
            match await fetcher.get("/api/v1/messages", FetcherOptions(schema=list[Message])):
                case Ok(messages):
                    ...
                case Err(ValidationError() as err):
                    print(err.problems_string())
                case Err(err):
                    print(err)

    Parameters
    ----------
    client:
        Injected transport, assumed stateless and safe for concurrent use.
    resolver:
        URL resolver; defaults to one built from ``NEXT_PUBLIC_*`` env vars.
    retry_engine:
        ``RetryPolicy`` (default) or ``TenacityRetryPolicy``.
    """

    def __init__(
        self,
        client: HttpTransport,
        resolver: UrlResolver | None = None,
        retry_engine: type[RetryEngine] = RetryPolicy,
    ) -> None:
        self._executor = TransportExecutor(client)
        self._resolver = resolver or UrlResolver(EnvSettingsLoader().load(SiteSettings))
        self._retry_engine = retry_engine

    @property
    def resolver(self) -> UrlResolver:
        return self._resolver

    async def fetch(
        self,
        url: str,
        method: HttpMethod | str = HttpMethod.GET,
        options: FetcherOptions[T] | None = None,
        params: QueryParams | None = None,
        body: Any = None,
    ) -> Outcome[T]:
        opts = options or _DEFAULT_OPTIONS
        verb = HttpMethod(method.upper() if isinstance(method, str) else method)
        target = self._resolver.resolve(url, params)
        state = _CallState()

        try:
            request = build_request(verb, target, body, opts.headers, opts.body_encoding)
            value = await self._run(request, opts, state)
        except (FetcherError, ValidationError) as exc:
            return self._fail(exc, opts)
        except Exception as exc:
            # anything unclassified still ends the call as a typed failure
            error = FetcherError(str(exc) or type(exc).__name__, target, attempt=state.attempt or None, cause=exc)
            return self._fail(error, opts)
        return Ok(value)

    async def get(self, url: str, options: FetcherOptions[T] | None = None, params: QueryParams | None = None) -> Outcome[T]:
        return await self.fetch(url, HttpMethod.GET, options, params)

    async def post(
        self, url: str, body: Any = None, options: FetcherOptions[T] | None = None, params: QueryParams | None = None
    ) -> Outcome[T]:
        return await self.fetch(url, HttpMethod.POST, options, params, body)

    async def put(
        self, url: str, body: Any = None, options: FetcherOptions[T] | None = None, params: QueryParams | None = None
    ) -> Outcome[T]:
        return await self.fetch(url, HttpMethod.PUT, options, params, body)

    async def patch(
        self, url: str, body: Any = None, options: FetcherOptions[T] | None = None, params: QueryParams | None = None
    ) -> Outcome[T]:
        return await self.fetch(url, HttpMethod.PATCH, options, params, body)

    async def delete(self, url: str, options: FetcherOptions[T] | None = None, params: QueryParams | None = None) -> Outcome[T]:
        return await self.fetch(url, HttpMethod.DELETE, options, params)

    async def options(self, url: str, options: FetcherOptions[T] | None = None, params: QueryParams | None = None) -> Outcome[T]:
        return await self.fetch(url, HttpMethod.OPTIONS, options, params)

    async def head(self, url: str, options: FetcherOptions[T] | None = None, params: QueryParams | None = None) -> Outcome[T]:
        return await self.fetch(url, HttpMethod.HEAD, options, params)

    async def _run(self, request: RequestDescriptor, opts: FetcherOptions[T], state: _CallState) -> T:
        async def attempt_once(attempt: int) -> T:
            state.attempt = attempt
            response = await self._executor.execute(
                request,
                attempt=attempt,
                timeout_ms=opts.timeout_ms,
                cancel_token=opts.cancel_token,
            )
            return interpret_response(
                response,
                url=request.url,
                attempt=attempt,
                method=request.method,
                adapter=opts.adapter,
            )

        policy = self._retry_engine(
            max_attempts=opts.max_attempts,
            backoff=ExponentialBackoff(base_delay=opts.retry_delay_ms / 1000),
            jitter=opts.jitter or NoJitter(),
            should_retry=is_retryable,
            sleep=self._backoff_sleep(request.url, opts.cancel_token, state),
        )
        return await policy.execute_async(attempt_once)

    @staticmethod
    def _backoff_sleep(url: str, token: CancellationToken | None, state: _CallState):  # noqa: ANN205
        async def sleep(delay: float) -> None:
            if token is None:
                await asyncio.sleep(delay)
                return
            try:
                await asyncio.wait_for(token.wait(), timeout=delay)
            except TimeoutError:
                return
            raise RequestCancelledError("Request cancelled", url, attempt=state.attempt)

        return sleep

    @staticmethod
    def _fail(error: FetcherError | ValidationError, opts: FetcherOptions[Any]) -> Err[FetcherError | ValidationError]:
        if opts.on_error is not None:
            opts.on_error(error)
        return Err(error)


async def fetch(
    client: HttpTransport,
    url: str,
    method: HttpMethod | str = HttpMethod.GET,
    options: FetcherOptions[T] | None = None,
    params: QueryParams | None = None,
    body: Any = None,
    resolver: UrlResolver | None = None,
) -> Outcome[T]:
    """One-shot helper: ``Fetcher(client, resolver).fetch(...)``."""
    return await Fetcher(client, resolver).fetch(url, method, options, params, body)


async def get(client: HttpTransport, url: str, options: FetcherOptions[T] | None = None, params: QueryParams | None = None) -> Outcome[T]:
    return await fetch(client, url, HttpMethod.GET, options, params)


async def post(
    client: HttpTransport, url: str, body: Any = None, options: FetcherOptions[T] | None = None, params: QueryParams | None = None
) -> Outcome[T]:
    return await fetch(client, url, HttpMethod.POST, options, params, body)


async def put(
    client: HttpTransport, url: str, body: Any = None, options: FetcherOptions[T] | None = None, params: QueryParams | None = None
) -> Outcome[T]:
    return await fetch(client, url, HttpMethod.PUT, options, params, body)


async def patch(
    client: HttpTransport, url: str, body: Any = None, options: FetcherOptions[T] | None = None, params: QueryParams | None = None
) -> Outcome[T]:
    return await fetch(client, url, HttpMethod.PATCH, options, params, body)


async def delete(client: HttpTransport, url: str, options: FetcherOptions[T] | None = None, params: QueryParams | None = None) -> Outcome[T]:
    return await fetch(client, url, HttpMethod.DELETE, options, params)


async def options(client: HttpTransport, url: str, options: FetcherOptions[T] | None = None, params: QueryParams | None = None) -> Outcome[T]:
    return await fetch(client, url, HttpMethod.OPTIONS, options, params)


async def head(client: HttpTransport, url: str, options: FetcherOptions[T] | None = None, params: QueryParams | None = None) -> Outcome[T]:
    return await fetch(client, url, HttpMethod.HEAD, options, params)


__all__ = ["Fetcher", "delete", "fetch", "get", "head", "options", "patch", "post", "put"]
