"""Observability – structured logging and request correlation."""

from mp_fetch.observability.correlation import CorrelationContext, RequestContext
from mp_fetch.observability.logging import (
    AsyncLogHandler,
    CorrelationProcessor,
    ErrorLogSink,
    JsonLoggerFactory,
    SensitiveFieldsFilter,
    get_logger,
)

__all__ = [
    "AsyncLogHandler",
    "CorrelationContext",
    "CorrelationProcessor",
    "ErrorLogSink",
    "JsonLoggerFactory",
    "RequestContext",
    "SensitiveFieldsFilter",
    "get_logger",
]
