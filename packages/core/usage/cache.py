from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .models import UsageInterval


def _now() -> datetime:
    return datetime.now().astimezone()


@dataclass(frozen=True)
class CacheSnapshot:
    """Consistent copy of the cache. `last_updated` is None until the first cycle completes."""
    interval: Optional[UsageInterval] = None
    last_updated: Optional[datetime] = None
    tool_available: bool = False

    @property
    def has_fetched(self) -> bool:
        return self.last_updated is not None


class SessionCache:
    """
    Single-slot store for the latest fetch result.

    Writers replace the whole record under the lock; readers get a frozen
    snapshot, so nobody sees a new interval paired with an old timestamp.
    """

    def __init__(self, clock: Callable[[], datetime] = _now) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._state = CacheSnapshot()

    def snapshot(self) -> CacheSnapshot:
        with self._lock:
            return self._state

    def replace(self, interval: Optional[UsageInterval], tool_available: bool) -> CacheSnapshot:
        now = self._clock()
        with self._lock:
            self._state = CacheSnapshot(
                interval=interval,
                last_updated=now,
                tool_available=tool_available,
            )
            return self._state
