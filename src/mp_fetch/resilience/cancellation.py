"""Cooperative cancellation for in-flight fetch calls.

A :class:`CancellationToken` is handed to a call through
``FetcherOptions(cancel_token=...)``.  Cancelling it stops the attempt that
is currently on the wire (or the backoff sleep between attempts) and the
call resolves to ``Err(RequestCancelledError)`` without further retries.
"""
from __future__ import annotations

import asyncio


class CancellationToken:
    """Event-backed cancellation signal.

    Examples:
        >>> token = CancellationToken()
        >>> token.is_cancelled()
        False
        >>> token.cancel()
        >>> token.is_cancelled()
        True
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def cancel(self) -> None:
        """Signal that cancellation has been requested; idempotent."""
        self._event.set()

    def is_cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        """Suspend until :meth:`cancel` is called."""
        await self._event.wait()

    def reset(self) -> None:
        """Re-arm the token.

        Only meant for tests or tightly controlled reuse; a token shared by
        concurrent calls must not be reset while they run.
        """
        self._event.clear()


__all__ = ["CancellationToken"]
