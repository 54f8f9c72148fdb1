"""HTTP adapter – transport-neutral request/response value types."""
from __future__ import annotations

import dataclasses
import json
from enum import Enum
from typing import Any


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    HEAD = "HEAD"

    @property
    def accepts_body(self) -> bool:
        return self in (HttpMethod.POST, HttpMethod.PUT, HttpMethod.PATCH)


class BodyEncoding(str, Enum):
    JSON = "json"
    TEXT = "text"


@dataclasses.dataclass(frozen=True)
class RequestDescriptor:
    """Everything needed to put one request on the wire.

    Built once per call and replayed unchanged on every retry.
    ``body`` is already encoded: ``bytes`` for JSON, ``str`` for text.
    """
    method: HttpMethod
    url: str
    headers: dict[str, str] = dataclasses.field(default_factory=dict)
    body: bytes | str | None = None
    body_encoding: BodyEncoding = BodyEncoding.JSON

    def header(self, name: str) -> str | None:
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None


@dataclasses.dataclass(frozen=True)
class RawResponse:
    """Uninterpreted response handle returned by an :class:`HttpTransport`.

    Header names are stored lower-cased.
    """
    status_code: int
    headers: dict[str, str] = dataclasses.field(default_factory=dict)
    content: bytes = b""
    reason_phrase: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def charset(self) -> str:
        for part in (self.content_type or "").split(";")[1:]:
            key, _, value = part.strip().partition("=")
            if key.lower() == "charset" and value:
                return value.strip('"')
        return "utf-8"

    def text(self) -> str:
        try:
            return self.content.decode(self.charset, errors="replace")
        except LookupError:
            return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Decode the body as JSON; raises :class:`ValueError` on malformed input."""
        return json.loads(self.content)


__all__ = ["BodyEncoding", "HttpMethod", "RawResponse", "RequestDescriptor"]
