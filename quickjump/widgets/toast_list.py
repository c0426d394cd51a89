"""Widget rendering the notification log as a stack of toasts."""

from __future__ import annotations

from typing import Callable

from textual.widgets import Static

from quickjump.notifications import NotificationEntry, NotificationLog


class ToastList(Static):
    """Mirrors the notification log, oldest entry first."""

    DEFAULT_CSS = """
    ToastList {
        height: auto;
        min-height: 1;
        padding: 0 1;
        border-top: solid $surface-darken-2;
        color: $text;
    }
    """

    def __init__(self, log: NotificationLog) -> None:
        super().__init__("", id="toast-list", markup=False)
        self._log = log
        self._unsubscribe: Callable[[], None] | None = None

    async def on_mount(self) -> None:
        self._unsubscribe = self._log.subscribe(self._handle_log_update)

    def on_unmount(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    def _handle_log_update(self, entries: tuple[NotificationEntry, ...]) -> None:
        if not entries:
            self.update("")
            return
        rows = [
            f"{entry.created_at.astimezone().strftime('%H:%M:%S')} {entry.message}"
            for entry in entries
        ]
        self.update("\n".join(rows))


__all__ = ["ToastList"]
