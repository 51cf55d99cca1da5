"""Tracking of the single open live stream."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from mediaportal_tv.livetv.errors import UnknownStreamIdError
from mediaportal_tv.livetv.models import MediaSourceInfo, StreamingDetails

logger = logging.getLogger(__name__)


class StreamSessionTracker:
    """Holds the currently open stream and arbitrates close requests."""

    def __init__(self):
        self._lock = asyncio.Lock()
        self._current: StreamingDetails | None = None

    @property
    def current(self) -> StreamingDetails | None:
        return self._current

    async def track(self, details: StreamingDetails) -> MediaSourceInfo:
        """Make details the tracked session, replacing any previous one."""
        async with self._lock:
            previous = self._current
            self._current = details

        if previous is not None:
            logger.info(
                "Replacing tracked stream %s with %s without closing it",
                previous.source_info.id,
                details.source_info.id,
            )
        else:
            logger.info("Tracking stream %s", details.source_info.id)
        return details.source_info

    async def close(self, stream_id: str, cancel: Callable[[str], Awaitable[object]]):
        """Cancel the tracked stream if stream_id matches it.

        The lock is held across the cancel call so a stream opened meanwhile
        is never cleared by this close.
        """
        async with self._lock:
            if self._current is None or self._current.source_info.id != stream_id:
                raise UnknownStreamIdError(stream_id)

            await cancel(self._current.stream_identifier)
            self._current = None

        logger.info("Closed stream %s", stream_id)
