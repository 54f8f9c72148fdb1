"""BaseError – common root of fetch, validation and configuration errors."""

from __future__ import annotations

import json
from typing import Any, ClassVar


class BaseError(Exception):
    """Root of every error mp-fetch raises or returns inside ``Err``.

    ``code`` is a stable slug for log queries and ``detail`` holds JSON-safe
    context.  ``str()`` is a single-line JSON document so the error survives
    plain-text log transports intact; subclasses with a friendlier one-line
    form override it.

    The originating exception is exposed as :attr:`cause`, whether it was
    passed explicitly or attached with ``raise ... from exc``.
    """

    default_code: ClassVar[str] = "mp_fetch_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.detail: dict[str, Any] = dict(detail or {})
        if cause is not None:
            self.__cause__ = cause

    @property
    def cause(self) -> BaseException | None:
        return self.__cause__

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict form used by :class:`ErrorLogSink` and ``str()``."""
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.detail:
            payload["detail"] = self.detail
        if self.cause is not None:
            payload["cause"] = f"{type(self.cause).__name__}: {self.cause}"
        return payload


__all__ = ["BaseError"]
