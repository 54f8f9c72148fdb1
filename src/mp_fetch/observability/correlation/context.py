"""Observability – RequestContext, CorrelationContext."""
from __future__ import annotations

import dataclasses
from contextvars import ContextVar
from uuid import uuid4


@dataclasses.dataclass(frozen=True)
class RequestContext:
    """Ambient identifiers propagated on outgoing requests."""
    correlation_id: str
    tenant_id: str | None = None
    user_id: str | None = None

    @classmethod
    def new(cls, tenant_id: str | None = None, user_id: str | None = None) -> "RequestContext":
        return cls(correlation_id=str(uuid4()), tenant_id=tenant_id, user_id=user_id)

    def to_headers(self) -> dict[str, str]:
        headers = {"X-Correlation-ID": self.correlation_id}
        if self.tenant_id is not None:
            headers["X-Tenant-ID"] = self.tenant_id
        if self.user_id is not None:
            headers["X-User-ID"] = self.user_id
        return headers


_CTX_VAR: ContextVar[RequestContext | None] = ContextVar("_mp_fetch_request_ctx", default=None)


class CorrelationContext:
    """Ambient correlation context stored in a ``ContextVar``.

    Each asyncio task sees its own copy, so concurrent fetches never
    leak identifiers into each other.
    """

    @staticmethod
    def set(ctx: RequestContext) -> None:
        _CTX_VAR.set(ctx)

    @staticmethod
    def get() -> RequestContext | None:
        return _CTX_VAR.get()

    @staticmethod
    def clear() -> None:
        _CTX_VAR.set(None)


__all__ = ["CorrelationContext", "RequestContext"]
