"""Status bar widget that mirrors the map state."""

from __future__ import annotations

from typing import Callable

from textual.widgets import Static

from quickjump.map_state import MapSnapshot, MapState


class StatusBar(Static):
    """Compact status strip rendered above Textual's footer."""

    DEFAULT_CSS = """
    StatusBar {
        height: 1;
        padding: 0 1;
        background: $surface-darken-3;
        color: $text;
    }
    """

    def __init__(self, map_state: MapState) -> None:
        super().__init__("", id="status-bar")
        self._map_state = map_state
        self._unsubscribe: Callable[[], None] | None = None

    async def on_mount(self) -> None:
        self._unsubscribe = self._map_state.subscribe(self._handle_map_update)

    def on_unmount(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    def _handle_map_update(self, snapshot: MapSnapshot) -> None:
        marker = snapshot.marker
        pin = marker.position.label() if marker.opacity > 0 else "—"
        parts = [
            f"Center: {snapshot.center.label()}",
            f"Zoom: {snapshot.zoom}",
            f"Pin: {pin}",
        ]
        if marker.icon:
            parts.append("Thumbnail: yes")
        self.update(" | ".join(parts))


__all__ = ["StatusBar"]
