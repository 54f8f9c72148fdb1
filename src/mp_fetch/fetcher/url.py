"""Fetcher – URL resolution and query-string serialisation."""
from __future__ import annotations

import re
from typing import Mapping, Sequence, Union
from urllib.parse import urlencode, urlsplit, urlunsplit

from mp_fetch.config import SiteSettings

Scalar = Union[str, int, float, bool]
QueryValue = Union[Scalar, Sequence[Scalar | None], None]
QueryParams = Mapping[str, QueryValue]

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*://")


def _stringify(value: Scalar) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_query_string(params: QueryParams | None) -> str:
    """Serialise *params* into a form-encoded query string.

    Keys keep insertion order, ``None`` values are dropped and sequence
    values expand into repeated ``key=value`` pairs::

        >>> build_query_string({"a": [1, 2], "b": None, "c": "x"})
        'a=1&a=2&c=x'
    """
    if not params:
        return ""
    pairs: list[tuple[str, str]] = []
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((key, _stringify(item)) for item in value if item is not None)
        else:
            pairs.append((key, _stringify(value)))  # type: ignore[arg-type]
    return urlencode(pairs)


def is_absolute(url: str) -> bool:
    return bool(_SCHEME_RE.match(url))


def append_query(url: str, query: str) -> str:
    """Add *query* to *url*, after any existing query and before a ``#fragment``."""
    if not query:
        return url
    parts = urlsplit(url)
    return urlunsplit(parts._replace(query=f"{parts.query}&{query}" if parts.query else query))


class UrlResolver:
    """Turn a path plus query params into the URL that is actually dispatched.

    * Absolute URLs (any ``scheme://``) are external; only the query is added.
    * In a browser context relative paths stay relative so the user agent
      resolves them same-origin.
    * Otherwise relative paths are anchored at ``settings.base_url``
      (explicit site URL, then deployment URL, then localhost).

    The result depends only on the injected settings and the arguments.
    """

    def __init__(self, settings: SiteSettings | None = None) -> None:
        self._settings = settings or SiteSettings()

    @property
    def settings(self) -> SiteSettings:
        return self._settings

    def resolve(self, path: str, params: QueryParams | None = None) -> str:
        query = build_query_string(params)
        if is_absolute(path):
            return append_query(path, query)
        base = self._settings.base_url
        if base and not path.startswith("/"):
            path = f"/{path}"
        return append_query(f"{base}{path}", query)


__all__ = [
    "QueryParams",
    "QueryValue",
    "UrlResolver",
    "append_query",
    "build_query_string",
    "is_absolute",
]
