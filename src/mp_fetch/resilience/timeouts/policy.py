"""Resilience – TimeoutPolicy."""
from __future__ import annotations

import asyncio
import dataclasses
from typing import Awaitable, Callable, TypeVar

T = TypeVar("T")


@dataclasses.dataclass(frozen=True)
class TimeoutPolicy:
    """Hard deadline for one awaitable.

    When the deadline passes the awaited coroutine is cancelled (not left
    running in the background) and the exception built by *on_timeout* is
    raised; without *on_timeout* the builtin :class:`TimeoutError` surfaces.
    """
    timeout_seconds: float

    def __post_init__(self) -> None:
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")

    async def execute(
        self,
        func: Callable[[], Awaitable[T]],
        on_timeout: Callable[[], BaseException] | None = None,
    ) -> T:
        try:
            return await asyncio.wait_for(func(), timeout=self.timeout_seconds)
        except TimeoutError as exc:
            if on_timeout is None:
                raise
            raise on_timeout() from exc


__all__ = ["TimeoutPolicy"]
