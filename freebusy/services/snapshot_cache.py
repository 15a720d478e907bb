"""
Holder for the latest free/busy snapshot.

Refresh requests are queued rather than delivered through callbacks; a single
consumer task drains the queue, so two refreshes never interleave and a new
snapshot always replaces the previous state wholesale.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from ..domain.exceptions import FreeBusyError
from ..schemas import FreeBusySnapshot

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = "There was a problem getting availability. Please try again later."

# Sentinel put on the queue to stop run()
_STOP = object()


class SnapshotSourceProtocol(Protocol):
    """Protocol describing a source of free/busy snapshots."""

    async def fetch_snapshot(self) -> FreeBusySnapshot:
        """Return the current snapshot or raise SnapshotError."""


@dataclass(frozen=True)
class SnapshotState:
    snapshot: Optional[FreeBusySnapshot] = None
    error: Optional[str] = None
    refreshes: int = 0

    @property
    def ready(self) -> bool:
        return self.snapshot is not None


class SnapshotCache:
    """
    Keeps the most recent snapshot fetched from a source.

    Usage:
        cache = SnapshotCache(source)
        task = asyncio.create_task(cache.run())
        cache.request_refresh()
        ...
        await cache.stop()
    """

    def __init__(self, source: SnapshotSourceProtocol) -> None:
        self._source = source
        self._state = SnapshotState()
        self._queue: asyncio.Queue = asyncio.Queue()

    @property
    def state(self) -> SnapshotState:
        return self._state

    @property
    def snapshot(self) -> Optional[FreeBusySnapshot]:
        return self._state.snapshot

    @property
    def error(self) -> Optional[str]:
        return self._state.error

    async def refresh(self) -> SnapshotState:
        """
        Fetch a new snapshot and replace the cached state.

        On failure the previous snapshot is discarded and the error message
        is recorded instead.
        """
        refreshes = self._state.refreshes + 1
        try:
            snapshot = await self._source.fetch_snapshot()
        except FreeBusyError as exc:
            logger.warning("Snapshot refresh failed: %s", exc)
            self._state = SnapshotState(error=str(exc) or UNAVAILABLE_MESSAGE, refreshes=refreshes)
            return self._state
        except Exception:
            logger.exception("Unexpected error while refreshing the snapshot")
            self._state = SnapshotState(error=UNAVAILABLE_MESSAGE, refreshes=refreshes)
            return self._state

        logger.debug("Snapshot refreshed (version=%s)", snapshot.version)
        self._state = SnapshotState(snapshot=snapshot, refreshes=refreshes)
        return self._state

    def request_refresh(self) -> None:
        self._queue.put_nowait(None)

    async def stop(self) -> None:
        await self._queue.put(_STOP)

    async def run(self) -> None:
        """Serve queued refresh requests until stop() is called."""
        while True:
            item = await self._queue.get()
            try:
                if item is _STOP:
                    return
                await self.refresh()
            finally:
                self._queue.task_done()

    async def wait_idle(self) -> None:
        """Wait until every queued refresh request has been served."""
        await self._queue.join()
