"""Periodic re-read of the bookmarks file."""

import asyncio
import logging
import os
from typing import Callable, Optional

from .storage.bookmarks_store import BookmarksSnapshot, BookmarksStore

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_SECONDS = 3.0

SnapshotListener = Callable[[BookmarksSnapshot], None]


def _interval_from_env() -> float:
    raw = os.environ.get("BOOKMARKS_MD_REFRESH_SECONDS")
    if not raw:
        return DEFAULT_REFRESH_SECONDS
    try:
        interval = float(raw)
    except ValueError:
        logger.warning("Invalid BOOKMARKS_MD_REFRESH_SECONDS=%r, using %s", raw, DEFAULT_REFRESH_SECONDS)
        return DEFAULT_REFRESH_SECONDS
    if interval <= 0:
        logger.warning("BOOKMARKS_MD_REFRESH_SECONDS must be positive, using %s", DEFAULT_REFRESH_SECONDS)
        return DEFAULT_REFRESH_SECONDS
    return interval


class BookmarksRefresher:
    """Re-parses the bookmarks file on a fixed interval and keeps the latest snapshot."""

    def __init__(self, store: BookmarksStore, interval: Optional[float] = None):
        self.store = store
        if interval is not None and interval > 0:
            self.interval = interval
        else:
            self.interval = _interval_from_env()
        self._snapshot: Optional[BookmarksSnapshot] = None
        self._listeners: list[SnapshotListener] = []

    @property
    def snapshot(self) -> Optional[BookmarksSnapshot]:
        return self._snapshot

    def add_listener(self, listener: SnapshotListener) -> None:
        self._listeners.append(listener)

    def _is_changed(self, snapshot: BookmarksSnapshot) -> bool:
        current = self._snapshot
        if current is None:
            return True
        return (current.found, current.content_hash) != (snapshot.found, snapshot.content_hash)

    def refresh(self) -> bool:
        """
        Reload the bookmarks file once.

        The snapshot is replaced only when the file appeared, disappeared or
        its content changed. Listeners are told about every replacement.

        Returns:
            True if the snapshot was replaced
        """
        snapshot = self.store.load()
        logger.debug("Refreshed %s (found=%s)", snapshot.path, snapshot.found)

        if not self._is_changed(snapshot):
            return False

        self._snapshot = snapshot
        logger.info("Bookmarks replaced from %s", snapshot.path)

        for listener in self._listeners:
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Bookmarks listener failed")
        return True

    async def run(self, stop_event: Optional[asyncio.Event] = None) -> None:
        """Refresh every interval until stop_event is set or the task is cancelled."""
        while stop_event is None or not stop_event.is_set():
            try:
                self.refresh()
            except Exception:
                logger.exception("Bookmarks refresh failed")

            if stop_event is None:
                await asyncio.sleep(self.interval)
                continue
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass
