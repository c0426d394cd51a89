"""Textual application entry point for quickjump."""

from __future__ import annotations

import logging
from typing import Callable

from textual import on
from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Footer, Header, Input

from .config import AppConfig, load_config, save_config
from .geocoder import GsiReverseGeocoder
from .map_state import MapState
from .models import LatLng
from .notifications import NotificationLog
from .providers import QuickJumpCommandProvider
from .terminal import QuickJumpTerminal
from .widgets import DropZone, FileDropped, MapPanel, SearchBar, StatusBar, ToastList

LOG = logging.getLogger(__name__)


def _load_app_config() -> AppConfig:
    """Load configuration with a small wrapper for future overrides."""

    return load_config()


class QuickJumpApp(App[None]):
    """Map jump terminal: search coordinates, drop photos, watch addresses."""

    COMMANDS = App.COMMANDS | {QuickJumpCommandProvider}
    CSS = """
    Screen {
        layout: vertical;
    }
    #content {
        layout: horizontal;
        height: 1fr;
    }
    #side-column {
        layout: vertical;
        width: 48;
        min-width: 32;
        padding: 0 1;
        border-left: solid $surface-darken-1;
    }
    #toast-list {
        height: 1fr;
    }
    """

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
        ("ctrl+f", "show_search", "Search"),
        ("ctrl+l", "lookup_center", "Address"),
        ("ctrl+p", "command_palette", "Command Palette"),
    ]

    def __init__(self, *, geocoder: GsiReverseGeocoder | None = None) -> None:
        super().__init__()
        self._config = _load_app_config()
        view = self._config.initial_view
        self._map_state = MapState(LatLng(view.lat, view.lng), zoom=view.zoom)
        self._log = NotificationLog(
            evict_delay=self._config.toast_evict_delay,
            max_count=self._config.toast_max_count,
        )
        self._geocoder = geocoder or GsiReverseGeocoder(
            endpoint=self._config.geocoder_url,
            municipality_table_url=self._config.municipality_table_url or None,
            timeout=self._config.request_timeout,
        )
        self._search_bar: SearchBar | None = None
        self._terminal = QuickJumpTerminal(
            self._map_state,
            self._geocoder,
            read_query=self._current_query,
            log=self._log,
            input_wait_interval=self._config.input_wait_interval,
            enter_wait_interval=self._config.enter_wait_interval,
            location_update_wait_interval=self._config.location_update_wait_interval,
            thumbnail_size=self._config.thumbnail_size,
            on_error=self._report_error,
        )
        self._move_end_unsubscribe: Callable[[], None] | None = None
        self._pending_notifications: list[tuple[str, str]] = []

    def compose(self) -> ComposeResult:
        """Compose the root layout."""

        yield Header(show_clock=True)
        search_bar = SearchBar()
        self._search_bar = search_bar
        side = Vertical(ToastList(self._log), search_bar, DropZone(), id="side-column")
        yield Horizontal(MapPanel(self._map_state, pan_step=self._config.pan_step), side, id="content")
        yield StatusBar(self._map_state)
        yield Footer()

    async def on_mount(self) -> None:
        self._move_end_unsubscribe = self._map_state.on_move_end(self._terminal.handle_move_end)
        self.query_one(MapPanel).focus()
        self._flush_pending_notifications()

    @property
    def terminal(self) -> QuickJumpTerminal:
        """Expose the terminal controller for tests and command providers."""

        return self._terminal

    @property
    def map_state(self) -> MapState:
        return self._map_state

    @property
    def notification_log(self) -> NotificationLog:
        return self._log

    def action_show_search(self) -> None:
        if self._search_bar is not None:
            self._search_bar.reveal()

    def action_lookup_center(self) -> None:
        self._terminal.lookup_address_now()

    @on(Input.Changed, "#search-input")
    def _handle_search_changed(self, event: Input.Changed) -> None:
        self._terminal.start_search()
        event.stop()

    @on(Input.Submitted, "#search-input")
    def _handle_search_submitted(self, event: Input.Submitted) -> None:
        self._terminal.submit_search()
        event.stop()

    def on_file_dropped(self, event: FileDropped) -> None:
        self._terminal.drop_file(event.path)
        event.stop()

    async def _shutdown(self) -> None:
        if self._move_end_unsubscribe:
            self._move_end_unsubscribe()
            self._move_end_unsubscribe = None
        self._terminal.cancel_all()
        self._log.close()
        await self._geocoder.aclose()
        self._remember_view()
        await super()._shutdown()

    def _current_query(self) -> str:
        if self._search_bar is None:
            return ""
        return self._search_bar.value

    def _remember_view(self) -> None:
        center = self._map_state.center()
        view = self._config.initial_view
        if (view.lat, view.lng, view.zoom) == (center.lat, center.lng, self._map_state.zoom):
            return
        self._config = self._config.with_view(lat=center.lat, lng=center.lng, zoom=self._map_state.zoom)
        try:
            save_config(self._config)
        except OSError:
            LOG.exception("Failed to persist viewport")

    def _report_error(self, error: BaseException) -> None:
        LOG.error("Quick jump operation failed", exc_info=error)
        self._safe_notify(f"Unexpected error: {error}", severity="error")

    def _safe_notify(self, message: str, *, severity: str = "information") -> None:
        if self.is_running:
            try:
                self.notify(message, severity=severity)
            except Exception:
                LOG.exception("Failed to display notification", extra={"toast": message})
        else:
            self._pending_notifications.append((message, severity))

    def _flush_pending_notifications(self) -> None:
        if not self._pending_notifications:
            return
        pending = list(self._pending_notifications)
        self._pending_notifications.clear()
        for message, severity in pending:
            try:
                self.notify(message, severity=severity)
            except Exception:
                LOG.exception("Failed to display queued notification", extra={"toast": message})


def main() -> None:
    """Invoke the Textual application."""

    QuickJumpApp().run()


if __name__ == "__main__":
    main()
