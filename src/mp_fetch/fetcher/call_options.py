"""Fetcher – per-call options."""
from __future__ import annotations

import dataclasses
from typing import Any, Callable, Generic, Mapping, TypeVar

import pydantic

from mp_fetch.adapters.http import BodyEncoding
from mp_fetch.config.validation import InvalidSettingValueError
from mp_fetch.kernel.errors import FetcherError, ValidationError
from mp_fetch.resilience.cancellation import CancellationToken
from mp_fetch.resilience.retry import JitterStrategy

T = TypeVar("T")

ErrorHook = Callable[[FetcherError | ValidationError], None]


@dataclasses.dataclass(frozen=True)
class FetcherOptions(Generic[T]):
    """Knobs for a single fetch call.

    Attributes:
        retries: Extra attempts after the first one (total = ``retries + 1``).
        retry_delay_ms: Base backoff; the n-th retry waits
            ``retry_delay_ms * 2**(n-1)`` milliseconds.
        timeout_ms: Deadline for each individual attempt.
        headers: Sent with the request; override defaults such as ``Content-Type``.
        schema: Anything :class:`pydantic.TypeAdapter` accepts (a model,
            ``list[Model]``, a ``TypedDict``...) or a ready ``TypeAdapter``.
            When given, the call yields the validated value.
        on_error: Called once, synchronously, with the terminal error.
        body_encoding: ``json`` (default) or ``text``.
        cancel_token: Cancels the in-flight attempt; the call is not retried.
        jitter: Optional randomisation of backoff delays.
    """

    retries: int = 0
    retry_delay_ms: int = 1_000
    timeout_ms: int = 10_000
    headers: Mapping[str, str] = dataclasses.field(default_factory=dict)
    schema: type[T] | pydantic.TypeAdapter[T] | Any | None = None
    on_error: ErrorHook | None = None
    body_encoding: BodyEncoding = BodyEncoding.JSON
    cancel_token: CancellationToken | None = None
    jitter: JitterStrategy | None = None
    adapter: pydantic.TypeAdapter[T] | None = dataclasses.field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.retries < 0:
            raise InvalidSettingValueError("retries", self.retries, "must be >= 0")
        if self.retry_delay_ms <= 0:
            raise InvalidSettingValueError("retry_delay_ms", self.retry_delay_ms, "must be > 0")
        if self.timeout_ms <= 0:
            raise InvalidSettingValueError("timeout_ms", self.timeout_ms, "must be > 0")
        object.__setattr__(self, "body_encoding", BodyEncoding(self.body_encoding))
        object.__setattr__(self, "adapter", _adapter_for(self.schema))

    @property
    def max_attempts(self) -> int:
        return self.retries + 1

    def replace(self, **changes: Any) -> "FetcherOptions[T]":
        return dataclasses.replace(self, **changes)


def _adapter_for(schema: Any) -> pydantic.TypeAdapter[Any] | None:
    if schema is None:
        return None
    if isinstance(schema, pydantic.TypeAdapter):
        return schema
    return pydantic.TypeAdapter(schema)


__all__ = ["ErrorHook", "FetcherOptions"]
