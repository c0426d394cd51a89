"""Crosshair view of the map center and main pin."""

from __future__ import annotations

from typing import Callable

from textual.binding import Binding
from textual.widgets import Static

from quickjump.map_state import MapSnapshot, MapState

GRID_WIDTH = 41
GRID_HEIGHT = 13


class MapPanel(Static, can_focus=True):
    """Text rendering of the viewport; arrow keys pan the map."""

    DEFAULT_CSS = """
    MapPanel {
        width: 1fr;
        height: 1fr;
        border: round $primary 40%;
        padding: 0 1;
        content-align: center middle;
    }

    MapPanel:focus {
        border: round $primary;
    }
    """

    BINDINGS = [
        Binding("up", "pan(1, 0)", "North", show=False),
        Binding("down", "pan(-1, 0)", "South", show=False),
        Binding("left", "pan(0, -1)", "West", show=False),
        Binding("right", "pan(0, 1)", "East", show=False),
    ]

    def __init__(self, map_state: MapState, *, pan_step: float = 0.01) -> None:
        super().__init__("", id="map-panel")
        self._map_state = map_state
        self._pan_step = pan_step
        self._unsubscribe: Callable[[], None] | None = None

    async def on_mount(self) -> None:
        self._unsubscribe = self._map_state.subscribe(self._handle_map_update)

    def on_unmount(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    def action_pan(self, rows: int, columns: int) -> None:
        self._map_state.pan(rows * self._pan_step, columns * self._pan_step)

    def _handle_map_update(self, snapshot: MapSnapshot) -> None:
        self.update(render_grid(snapshot, self._pan_step))


def render_grid(snapshot: MapSnapshot, pan_step: float) -> str:
    """Draw the crosshair at the center and the pin when it is in view."""

    rows = [["·"] * GRID_WIDTH for _ in range(GRID_HEIGHT)]
    mid_row, mid_col = GRID_HEIGHT // 2, GRID_WIDTH // 2
    rows[mid_row][mid_col] = "+"
    marker = snapshot.marker
    if marker.opacity > 0:
        lat_per_row = pan_step / 2
        lng_per_col = pan_step / 4
        row = mid_row - round((marker.position.lat - snapshot.center.lat) / lat_per_row)
        col = mid_col + round((marker.position.lng - snapshot.center.lng) / lng_per_col)
        if 0 <= row < GRID_HEIGHT and 0 <= col < GRID_WIDTH:
            rows[row][col] = "●"
    lines = ["".join(row) for row in rows]
    lines.append("")
    lines.append(f"{snapshot.center.lat:.6f}, {snapshot.center.lng:.6f}")
    if marker.opacity > 0 and marker.popup:
        lines.append(f"Pin: {marker.popup}")
    return "\n".join(lines)


__all__ = ["MapPanel", "render_grid"]
