"""Last-change timestamp polled by the host."""

import threading
from datetime import datetime, timezone

EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class ChangeClock:
    """Records when timers or recordings were last mutated."""

    def __init__(self):
        self._lock = threading.Lock()
        self._last_change = EPOCH

    @property
    def last_change(self) -> datetime:
        with self._lock:
            return self._last_change

    def touch(self) -> datetime:
        """Advance to the current time and return the new value."""
        now = datetime.now(timezone.utc)
        with self._lock:
            # never move backwards if the wall clock steps back
            if now > self._last_change:
                self._last_change = now
            return self._last_change
