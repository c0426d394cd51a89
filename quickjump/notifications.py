"""Soft-capped toast log whose oldest entries expire on timers."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

LOG = logging.getLogger(__name__)

DEFAULT_EVICT_DELAY = 5.0
DEFAULT_MAX_COUNT = 5

NotificationListener = Callable[[tuple["NotificationEntry", ...]], None]


@dataclass(frozen=True, slots=True)
class NotificationEntry:
    """Single user-visible status message."""

    message: str
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))


class NotificationLog:
    """Ordered list of transient messages.

    Every append schedules one eviction check. When a check fires and the log
    is longer than ``max_count`` the head entry is dropped, so bursts may
    overshoot the cap until their timers catch up.
    """

    def __init__(
        self,
        *,
        evict_delay: float = DEFAULT_EVICT_DELAY,
        max_count: int = DEFAULT_MAX_COUNT,
    ) -> None:
        self._evict_delay = evict_delay
        self._max_count = max_count
        self._entries: list[NotificationEntry] = []
        self._listeners: set[NotificationListener] = set()
        self._timers: set[asyncio.TimerHandle] = set()

    @property
    def entries(self) -> tuple[NotificationEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def append(
        self,
        message: str,
        *,
        evict_delay: float | None = None,
        max_count: int | None = None,
    ) -> NotificationEntry:
        """Append ``message`` and schedule its eviction check."""

        entry = NotificationEntry(message=message)
        self._entries.append(entry)
        self._notify()
        delay = self._evict_delay if evict_delay is None else evict_delay
        cap = self._max_count if max_count is None else max_count
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            LOG.debug("No running loop; eviction not scheduled", extra={"toast": message})
            return entry
        handle: asyncio.TimerHandle | None = None

        def _check() -> None:
            if handle is not None:
                self._timers.discard(handle)
            self._evict_over(cap)

        handle = loop.call_later(delay, _check)
        self._timers.add(handle)
        return entry

    def subscribe(self, listener: NotificationListener) -> Callable[[], None]:
        """Subscribe to log changes; returns an unsubscribe handle."""

        self._listeners.add(listener)
        listener(self.entries)

        def _unsubscribe() -> None:
            self._listeners.discard(listener)

        return _unsubscribe

    def close(self) -> None:
        """Drop pending eviction timers (app shutdown)."""

        for handle in tuple(self._timers):
            handle.cancel()
        self._timers.clear()

    def _evict_over(self, cap: int) -> None:
        if len(self._entries) > cap:
            del self._entries[0]
            self._notify()

    def _notify(self) -> None:
        snapshot = self.entries
        for listener in tuple(self._listeners):
            listener(snapshot)


__all__ = [
    "DEFAULT_EVICT_DELAY",
    "DEFAULT_MAX_COUNT",
    "NotificationEntry",
    "NotificationListener",
    "NotificationLog",
]
