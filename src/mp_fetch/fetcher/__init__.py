"""Fetcher – resilient, schema-validated HTTP calls returning ``Ok``/``Err``.

Modules:
  url.py        – UrlResolver, build_query_string
  request.py    – build_request, encode_json
  transport.py  – TransportExecutor (timeout + cancellation per attempt)
  response.py   – interpret_response, format_problems
  call_options.py – FetcherOptions
  client.py     – Fetcher facade and module-level verb helpers
  schemas.py    – paginated_schema, api_response_schema
"""

from mp_fetch.fetcher.client import Fetcher, delete, fetch, get, head, options, patch, post, put
from mp_fetch.fetcher.call_options import ErrorHook, FetcherOptions
from mp_fetch.fetcher.request import build_request, encode_json
from mp_fetch.fetcher.response import format_problems, interpret_response
from mp_fetch.fetcher.schemas import Pagination, api_response_schema, paginated_schema
from mp_fetch.fetcher.transport import TransportExecutor
from mp_fetch.fetcher.url import QueryParams, UrlResolver, build_query_string

__all__ = [
    "ErrorHook",
    "Fetcher",
    "FetcherOptions",
    "Pagination",
    "QueryParams",
    "TransportExecutor",
    "UrlResolver",
    "api_response_schema",
    "build_query_string",
    "build_request",
    "delete",
    "encode_json",
    "fetch",
    "format_problems",
    "get",
    "head",
    "interpret_response",
    "options",
    "paginated_schema",
    "patch",
    "post",
    "put",
]
