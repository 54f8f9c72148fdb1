"""Fetcher – request construction and body encoding."""
from __future__ import annotations

import json
from typing import Any, Mapping

import pydantic

from mp_fetch.adapters.http import BodyEncoding, HttpMethod, RequestDescriptor
from mp_fetch.kernel.errors import SerializationError

JSON_CONTENT_TYPE = "application/json"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"

_ANY_ADAPTER: pydantic.TypeAdapter[Any] = pydantic.TypeAdapter(Any)


def _to_jsonable(value: Any) -> Any:
    # models, dataclasses, datetimes, UUIDs, ... at any nesting depth
    return _ANY_ADAPTER.dump_python(value, mode="json", by_alias=True)


def encode_json(body: Any) -> bytes:
    """Compact UTF-8 JSON.

    Anything the standard encoder does not know is handed to pydantic, so
    models (dumped by alias), dataclasses and datetimes work wherever they
    sit in the body.

    Raises :class:`TypeError` / :class:`ValueError` for values JSON cannot
    represent (unknown types, circular references, NaN/Infinity).
    ``pydantic_core.PydanticSerializationError`` is a ``ValueError``.
    """
    return json.dumps(
        body, separators=(",", ":"), ensure_ascii=False, allow_nan=False, default=_to_jsonable
    ).encode("utf-8")


def _merge_headers(defaults: dict[str, str], overrides: Mapping[str, str] | None) -> dict[str, str]:
    merged = dict(defaults)
    for name, value in (overrides or {}).items():
        for existing in [k for k in merged if k.lower() == name.lower()]:
            del merged[existing]
        merged[name] = value
    return merged


def build_request(
    method: HttpMethod,
    url: str,
    body: Any = None,
    headers: Mapping[str, str] | None = None,
    body_encoding: BodyEncoding = BodyEncoding.JSON,
) -> RequestDescriptor:
    """Build the descriptor for one call.

    A body is only attached for POST/PUT/PATCH.  Caller headers are applied
    after encoding, so they replace (case-insensitively) the default
    ``Content-Type``.

    Raises:
        SerializationError: the body could not be JSON-encoded.  Retrying
            cannot fix this, so the scheduler treats it as terminal.
    """
    defaults: dict[str, str] = {}
    encoded: bytes | str | None = None

    if body is not None and method.accepts_body:
        if body_encoding is BodyEncoding.TEXT:
            encoded = body if isinstance(body, str) else str(body)
            defaults["Content-Type"] = TEXT_CONTENT_TYPE
        else:
            try:
                encoded = encode_json(body)
            except (TypeError, ValueError) as exc:
                raise SerializationError(
                    f"Failed to serialize request body: {exc}",
                    url,
                    cause=exc,
                ) from exc
            defaults["Content-Type"] = JSON_CONTENT_TYPE

    return RequestDescriptor(
        method=method,
        url=url,
        headers=_merge_headers(defaults, headers),
        body=encoded,
        body_encoding=body_encoding,
    )


__all__ = ["JSON_CONTENT_TYPE", "TEXT_CONTENT_TYPE", "build_request", "encode_json"]
