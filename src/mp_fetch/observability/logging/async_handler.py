"""Observability – AsyncLogHandler.

A non-blocking :class:`logging.Handler` backed by :class:`asyncio.Queue`.
Records are enqueued without blocking the event loop and a background task
forwards them to a delegate handler.  The owner must call :meth:`stop` (or
:meth:`drain_sync`) on shutdown; nothing is flushed implicitly at exit.
"""
from __future__ import annotations

import asyncio
import logging


class AsyncLogHandler(logging.Handler):
    """Queue-backed handler with an explicit ``start`` / ``stop`` lifecycle.

    Typical usage::

        handler = AsyncLogHandler(maxsize=10_000)
        JsonLoggerFactory.configure(handler=handler)
        await handler.start()
        ...
        await handler.stop()   # flushes what is queued

    Parameters
    ----------
    delegate:
        Handler performing the actual I/O; defaults to a stderr
        :class:`logging.StreamHandler`.
    maxsize:
        Maximum queue depth, ``0`` for unbounded.  When full, new records
        are counted in :attr:`dropped` and discarded.
    """

    def __init__(
        self,
        delegate: logging.Handler | None = None,
        maxsize: int = 0,
        level: int = logging.NOTSET,
    ) -> None:
        super().__init__(level)
        self._delegate = delegate or logging.StreamHandler()
        self._queue: asyncio.Queue[logging.LogRecord | None] = asyncio.Queue(maxsize=maxsize)
        self._task: asyncio.Task[None] | None = None
        self.dropped = 0

    @property
    def delegate(self) -> logging.Handler:
        return self._delegate

    def setFormatter(self, fmt: logging.Formatter | None) -> None:  # noqa: N802
        super().setFormatter(fmt)
        self._delegate.setFormatter(fmt)

    def emit(self, record: logging.LogRecord) -> None:
        if self._task is None:
            # not started: write through so records are never stranded
            self._delegate.handle(record)
            return
        try:
            self._queue.put_nowait(record)
        except asyncio.QueueFull:
            self.dropped += 1

    async def start(self) -> None:
        """Start the background drain task; idempotent."""
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self._drain())

    async def stop(self, timeout: float = 5.0) -> None:
        """Flush queued records, then stop the drain task.

        Records still queued after *timeout* seconds are written
        synchronously so shutdown never loses them.
        """
        if self._task is None:
            return
        try:
            await asyncio.wait_for(self._queue.join(), timeout=timeout)
        except TimeoutError:
            self.drain_sync()
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        self._delegate.flush()

    def flush(self) -> None:
        self._delegate.flush()

    def close(self) -> None:
        self.drain_sync()
        self._delegate.close()
        super().close()

    async def _drain(self) -> None:
        while True:
            record = await self._queue.get()
            try:
                if record is not None:
                    self._delegate.handle(record)
            finally:
                self._queue.task_done()

    def drain_sync(self) -> None:
        """Write every queued record synchronously (tests, non-async shutdown)."""
        while True:
            try:
                record = self._queue.get_nowait()
            except asyncio.QueueEmpty:
                break
            if record is not None:
                self._delegate.handle(record)
            self._queue.task_done()


__all__ = ["AsyncLogHandler"]
