"""In-memory map display state driven by the terminal and the map panel."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Protocol, runtime_checkable

from .models import LatLng

MapListener = Callable[["MapSnapshot"], None]
MoveEndListener = Callable[[], None]


@runtime_checkable
class MapDisplay(Protocol):
    """Operations the terminal needs from a map."""

    def center(self) -> LatLng:
        """Current view center."""

    def set_view(self, coordinate: LatLng) -> None:
        """Recenter the view on ``coordinate``."""

    def set_marker(
        self,
        *,
        position: LatLng | None = None,
        opacity: float | None = None,
        popup: str | None = None,
        icon: str | None = None,
    ) -> None:
        """Update the main marker; ``None`` leaves a field unchanged."""


@dataclass(frozen=True, slots=True)
class MarkerState:
    """Main pin position, visibility, and popup content."""

    position: LatLng = LatLng(0.0, 0.0)
    opacity: float = 0.0
    popup: str = ""
    icon: str | None = None


@dataclass(frozen=True, slots=True)
class MapSnapshot:
    """Immutable view of the map for widgets."""

    center: LatLng
    zoom: int
    marker: MarkerState


class MapState:
    """Headless map model with move-end notifications."""

    def __init__(self, center: LatLng, *, zoom: int = 15) -> None:
        self._center = center
        self._zoom = zoom
        self._marker = MarkerState()
        self._listeners: set[MapListener] = set()
        self._move_end_listeners: list[MoveEndListener] = []

    @property
    def snapshot(self) -> MapSnapshot:
        return MapSnapshot(center=self._center, zoom=self._zoom, marker=self._marker)

    @property
    def zoom(self) -> int:
        return self._zoom

    def center(self) -> LatLng:
        return self._center

    def set_view(self, coordinate: LatLng, zoom: int | None = None) -> None:
        self._center = coordinate
        if zoom is not None:
            self._zoom = zoom
        self._notify()
        self._fire_move_end()

    def pan(self, dlat: float, dlng: float) -> None:
        """Shift the view center by the given deltas."""

        lat = max(-90.0, min(90.0, self._center.lat + dlat))
        lng = (self._center.lng + dlng + 180.0) % 360.0 - 180.0
        self.set_view(LatLng(round(lat, 6), round(lng, 6)))

    def set_marker(
        self,
        *,
        position: LatLng | None = None,
        opacity: float | None = None,
        popup: str | None = None,
        icon: str | None = None,
    ) -> None:
        updates: dict[str, object] = {}
        if position is not None:
            updates["position"] = position
        if opacity is not None:
            updates["opacity"] = opacity
        if popup is not None:
            updates["popup"] = popup
        if icon is not None:
            updates["icon"] = icon
        if not updates:
            return
        self._marker = replace(self._marker, **updates)
        self._notify()

    def subscribe(self, listener: MapListener) -> Callable[[], None]:
        """Subscribe to state changes; returns an unsubscribe handle."""

        self._listeners.add(listener)
        listener(self.snapshot)

        def _unsubscribe() -> None:
            self._listeners.discard(listener)

        return _unsubscribe

    def on_move_end(self, listener: MoveEndListener) -> Callable[[], None]:
        """Register a callback fired after every view change."""

        self._move_end_listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._move_end_listeners:
                self._move_end_listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        snapshot = self.snapshot
        for listener in tuple(self._listeners):
            listener(snapshot)

    def _fire_move_end(self) -> None:
        for listener in tuple(self._move_end_listeners):
            listener()


__all__ = ["MapDisplay", "MapListener", "MapSnapshot", "MapState", "MarkerState", "MoveEndListener"]
