"""
Concurrency Infrastructure.

Fire-and-forget persistence on top of synchronous in-memory updates.

Every state change is applied in memory immediately; durable writes run as
background tasks on the running event loop. A LatestValueWriter keeps at
most one task per storage key and always persists the newest submitted
value, so the durable copy converges on the latest state and never goes
back to an older snapshot.

Usage:
    from notorica.core.concurrency import LatestValueWriter, drain_writers

    writer = LatestValueWriter("notes", storage.save_notes)
    writer.submit(snapshot)        # returns immediately
    await drain_writers(writer)    # during shutdown
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

from notorica.core.exceptions import StorageError
from notorica.core.logging import get_logger, log_with_source

logger = get_logger(__name__)

T = TypeVar("T")


class LatestValueWriter(Generic[T]):
    """Background writer that coalesces submissions to the newest value.

    Write failures (StorageError) are logged and counted, never raised to
    the submitter. The next successful write reconciles durable state.
    """

    def __init__(self, name: str, save: Callable[[T], Awaitable[None]]) -> None:
        self._name = name
        self._save = save
        self._pending: T | None = None
        self._has_pending = False
        self._task: asyncio.Task[None] | None = None
        self.writes = 0
        self.failures = 0

    @property
    def busy(self) -> bool:
        """True while a write task is scheduled or running."""
        return self._task is not None and not self._task.done()

    def submit(self, value: T) -> None:
        """
        Queue value for persistence and return immediately.

        Outside a running event loop the value stays pending until the next
        ``submit`` or ``drain`` made from inside one.
        """
        self._pending = value
        self._has_pending = True
        if not self.busy:
            self._start()

    def _start(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            log_with_source(
                logger, "storage", "warning", "No running event loop, write deferred",
                writer=self._name,
            )
            return
        self._task = loop.create_task(self._run(), name=f"writer:{self._name}")

    async def _run(self) -> None:
        while self._has_pending:
            value = self._pending
            self._pending = None
            self._has_pending = False
            try:
                await self._save(value)
            except StorageError as e:
                self.failures += 1
                log_with_source(
                    logger, "storage", "warning", "Background write failed",
                    writer=self._name, error=e.message,
                )
            else:
                self.writes += 1
                logger.debug("Background write completed", extra={"writer": self._name})

    async def drain(self) -> None:
        """Wait until every submitted value has been handled."""
        if self._has_pending and not self.busy:
            self._start()
        while self.busy:
            await self._task


async def drain_writers(*writers: LatestValueWriter) -> None:
    """Drain several writers. Called during shutdown."""
    for writer in writers:
        await writer.drain()
    logger.debug("Writers drained", extra={"count": len(writers)})
