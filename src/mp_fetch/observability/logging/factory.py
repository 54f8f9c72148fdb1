"""Observability – JsonLoggerFactory."""
from __future__ import annotations

import logging
from typing import Any

import structlog

from mp_fetch.observability.logging.filters import SensitiveFieldsFilter
from mp_fetch.observability.logging.processors import CorrelationProcessor


class JsonLoggerFactory:
    """Configure structlog on top of stdlib logging.

    Events are rendered as JSON by default; ``json_output=False`` switches to
    the console renderer for local development.  Sensitive keys (auth headers,
    cookies, tokens) are redacted before rendering.  Handlers are attached to
    the root logger, so an :class:`AsyncLogHandler` can be passed in to take
    the I/O off the event loop.
    """

    @staticmethod
    def configure(
        level: int = logging.INFO,
        sensitive_fields: frozenset[str] | None = None,
        json_output: bool = True,
        handler: logging.Handler | None = None,
    ) -> logging.Handler:
        _filter = SensitiveFieldsFilter(sensitive_fields)

        def _redact(logger: Any, method: Any, event_dict: dict[str, Any]) -> dict[str, Any]:  # noqa: ARG001
            return _filter.redact_deep(event_dict)

        shared_processors: list[Any] = [
            _redact,
            structlog.contextvars.merge_contextvars,
            CorrelationProcessor(),
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
        ]

        structlog.configure(
            processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        renderer: Any = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
        formatter = structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
        target = handler or logging.StreamHandler()
        target.setFormatter(formatter)
        root = logging.getLogger()
        root.handlers.clear()
        root.addHandler(target)
        root.setLevel(level)
        return target


__all__ = ["JsonLoggerFactory"]
