"""Schema-tier errors – a body parsed fine but does not have the expected shape."""

from __future__ import annotations

from typing import Any

from mp_fetch.kernel.errors.base import BaseError


class ValidationError(BaseError):
    """Decoded response data failed structural validation.

    ``problems`` is the formatted issue tree produced by the validator;
    ``response_data`` keeps the raw decoded payload for diagnosis.
    """

    default_code = "validation_error"
    label = "ValidationError"

    def __init__(
        self,
        message: str,
        url: str,
        *,
        problems: str,
        response_data: Any = None,
        attempt: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.url = url
        self.problems = problems
        self.response_data = response_data
        self.attempt = attempt

    def __str__(self) -> str:
        suffix = f", Attempt: {self.attempt}" if self.attempt is not None else ""
        return f"{self.label}: {self.message} (URL: {self.url}{suffix})"

    def __repr__(self) -> str:
        return f"ValidationError(message={self.message!r}, url={self.url!r}, attempt={self.attempt!r})"

    def problems_string(self) -> str:
        return self.problems

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["url"] = self.url
        payload["problems"] = self.problems
        if self.attempt is not None:
            payload["attempt"] = self.attempt
        return payload


__all__ = ["ValidationError"]
