"""Observability – structured logging helpers and the fetch error sink."""
from mp_fetch.observability.logging.filters import DEFAULT_SENSITIVE_FIELDS, SensitiveFieldsFilter
from mp_fetch.observability.logging.factory import JsonLoggerFactory
from mp_fetch.observability.logging.processors import CorrelationProcessor, get_logger
from mp_fetch.observability.logging.async_handler import AsyncLogHandler
from mp_fetch.observability.logging.sink import ErrorLogSink

__all__ = [
    "AsyncLogHandler",
    "CorrelationProcessor",
    "DEFAULT_SENSITIVE_FIELDS",
    "ErrorLogSink",
    "JsonLoggerFactory",
    "SensitiveFieldsFilter",
    "get_logger",
]
