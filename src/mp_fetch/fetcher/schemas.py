"""Fetcher – reusable envelope schemas for common API shapes."""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Optional

import pydantic


class Pagination(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(populate_by_name=True)

    page: int
    page_size: int = pydantic.Field(alias="pageSize")
    total: int
    total_pages: int = pydantic.Field(alias="totalPages")


def _type_name(item: Any) -> str:
    return getattr(item, "__name__", None) or str(item).replace("typing.", "")


@lru_cache(maxsize=128)
def paginated_schema(item: Any) -> type[pydantic.BaseModel]:
    """Model for ``{"data": [item, ...], "pagination": {...}}`` envelopes.

    Example::

        Page = paginated_schema(Message)
        result = await fetcher.get("/api/messages", FetcherOptions(schema=Page))
    """
    return pydantic.create_model(
        f"Paginated[{_type_name(item)}]",
        __config__=pydantic.ConfigDict(populate_by_name=True),
        data=(list[item], ...),
        pagination=(Pagination, ...),
    )


@lru_cache(maxsize=128)
def api_response_schema(data: Any) -> type[pydantic.BaseModel]:
    """Model for the ``{"success": bool, "data": ..., ...}`` API envelope.

    ``data`` is optional so error envelopes (``success: false``) validate too.
    """
    return pydantic.create_model(
        f"ApiResponse[{_type_name(data)}]",
        success=(bool, ...),
        data=(Optional[data], None),
        error=(str | None, None),
        message=(str | None, None),
        errors=(list[str] | None, None),
    )


__all__ = ["Pagination", "api_response_schema", "paginated_schema"]
