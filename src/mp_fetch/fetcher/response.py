"""Fetcher – response interpretation: status, body decoding, schema validation."""
from __future__ import annotations

from collections import OrderedDict
from typing import Any, TypeVar

import pydantic

from mp_fetch.adapters.http import HttpMethod, RawResponse
from mp_fetch.kernel.errors import HttpStatusError, ParseError, ValidationError

T = TypeVar("T")

PREVIEW_CHARS = 200
_INPUT_PREVIEW_CHARS = 80
_EMPTY_BODY_STATUSES = frozenset({204, 205})


def _truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else f"{text[:limit]}..."


def _format_loc(loc: tuple[Any, ...]) -> str:
    if not loc:
        return "<root>"
    return "[" + ", ".join(str(p) if isinstance(p, int) else f'"{p}"' for p in loc) + "]"


def format_problems(exc: pydantic.ValidationError) -> str:
    """Render pydantic's issue list as an indented tree grouped by location.

    Example::

        2 validation errors for Message
        ├─ ["messages", 0, "id"]
        │  └─ Input should be a valid integer (type=int_parsing, input='abc')
        └─ ["total"]
           └─ Field required (type=missing)
    """
    grouped: OrderedDict[tuple[Any, ...], list[str]] = OrderedDict()
    for issue in exc.errors(include_url=False):
        detail = f"{issue['msg']} (type={issue['type']}"
        if issue["type"] != "missing":
            detail += f", input={_truncate(repr(issue.get('input')), _INPUT_PREVIEW_CHARS)}"
        grouped.setdefault(tuple(issue["loc"]), []).append(f"{detail})")

    count = exc.error_count()
    lines = [f"{count} validation error{'s' if count != 1 else ''} for {exc.title}"]
    locations = list(grouped.items())
    for index, (loc, details) in enumerate(locations):
        last = index == len(locations) - 1
        lines.append(f"{'└─' if last else '├─'} {_format_loc(loc)}")
        branch = "   " if last else "│  "
        for position, detail in enumerate(details):
            lines.append(f"{branch}{'└─' if position == len(details) - 1 else '├─'} {detail}")
    return "\n".join(lines)


def raise_for_status(response: RawResponse, *, url: str, attempt: int) -> None:
    """Raise :class:`HttpStatusError` for any non-2xx status.

    A JSON error body is attached as ``response_data`` when there is one;
    unreadable bodies are ignored.
    """
    if response.ok:
        return
    try:
        error_data = response.json() if response.content else None
    except ValueError:
        error_data = None

    if response.status_code == 429:
        message = f"Rate limit exceeded (429). Please slow down requests to {url}"
    else:
        message = f"HTTP {response.status_code}: {response.reason_phrase or 'Request failed'}"
    raise HttpStatusError(message, url, status=response.status_code, response_data=error_data, attempt=attempt)


def decode_body(response: RawResponse, *, url: str, attempt: int, method: HttpMethod = HttpMethod.GET) -> Any:
    """Parse a 2xx body as JSON.

    HEAD responses and empty 204/205 bodies decode to ``None``.  Anything
    else that is not JSON raises :class:`ParseError` with a content-type and
    a 200-character preview of the text for diagnosis.
    """
    if not response.content and (method is HttpMethod.HEAD or response.status_code in _EMPTY_BODY_STATUSES):
        return None
    try:
        return response.json()
    except ValueError as exc:
        text = response.text()
        message = (
            f"Failed to parse JSON response. Status: {response.status_code}, "
            f"Content-Type: {response.content_type or 'unknown'}, "
            f"Body: {_truncate(text, PREVIEW_CHARS)}"
        )
        raise ParseError(
            message,
            url,
            status=response.status_code,
            response_data={"original_error": str(exc), "response_text": text},
            attempt=attempt,
            cause=exc,
        ) from exc


def validate_payload(data: Any, adapter: pydantic.TypeAdapter[T], *, url: str, attempt: int) -> T:
    """Run *data* through *adapter*; mismatches become :class:`ValidationError`."""
    try:
        return adapter.validate_python(data)
    except pydantic.ValidationError as exc:
        raise ValidationError(
            "Response validation failed",
            url,
            problems=format_problems(exc),
            response_data=data,
            attempt=attempt,
            cause=exc,
        ) from exc


def interpret_response(
    response: RawResponse,
    *,
    url: str,
    attempt: int,
    method: HttpMethod = HttpMethod.GET,
    adapter: pydantic.TypeAdapter[Any] | None = None,
) -> Any:
    """Classify, decode and (optionally) validate one response."""
    raise_for_status(response, url=url, attempt=attempt)
    data = decode_body(response, url=url, attempt=attempt, method=method)
    if adapter is None:
        return data
    return validate_payload(data, adapter, url=url, attempt=attempt)


__all__ = [
    "PREVIEW_CHARS",
    "decode_body",
    "format_problems",
    "interpret_response",
    "raise_for_status",
    "validate_payload",
]
