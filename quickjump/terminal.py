"""Quick-jump controller wiring triggers, domain actions, and feedback."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable

from .coordinates import search_coordinate
from .geocoder import ReverseGeocoder
from .image_location import (
    ImageLocationError,
    UnsupportedImageError,
    coordinate_of_image,
    image_thumbnail_url,
)
from .map_state import MapDisplay
from .models import LatLng
from .notifications import NotificationLog
from .supersession import (
    CancellationToken,
    DebouncedPipeline,
    ErrorReporter,
    SupersessionScope,
    log_error,
)

LOG = logging.getLogger(__name__)

CoordinateParser = Callable[[str], LatLng | None]
CoordinateReader = Callable[[Path, CancellationToken], Awaitable[LatLng]]
ThumbnailReader = Callable[[Path, CancellationToken], Awaitable[str]]


class QuickJumpTerminal:
    """Owns the search, location, and file-drop scopes for one map."""

    def __init__(
        self,
        map_display: MapDisplay,
        geocoder: ReverseGeocoder,
        *,
        read_query: Callable[[], str],
        log: NotificationLog | None = None,
        input_wait_interval: float = 3.0,
        enter_wait_interval: float = 0.1,
        location_update_wait_interval: float = 3.0,
        thumbnail_size: int = 48,
        parser: CoordinateParser = search_coordinate,
        read_image_coordinate: CoordinateReader = coordinate_of_image,
        read_thumbnail: ThumbnailReader | None = None,
        on_error: ErrorReporter | None = None,
    ) -> None:
        self._map = map_display
        self._geocoder = geocoder
        self._log = log if log is not None else NotificationLog()
        self._parser = parser
        self._enter_wait_interval = enter_wait_interval
        self._thumbnail_size = thumbnail_size
        self._read_image_coordinate = read_image_coordinate
        self._read_thumbnail = read_thumbnail or self._default_thumbnail
        reporter = on_error or log_error
        self._search = DebouncedPipeline(
            input_wait_interval,
            read_query,
            self._execute_command,
            scope=SupersessionScope("search", on_error=reporter),
        )
        self._location = DebouncedPipeline(
            location_update_wait_interval,
            self._map.center,
            self._report_address,
            scope=SupersessionScope("location", on_error=reporter),
        )
        self._file_drop = SupersessionScope("file-drop", on_error=reporter)

    @property
    def log(self) -> NotificationLog:
        return self._log

    def put(self, message: str) -> None:
        """Append a user-visible message to the notification log."""

        self._log.append(message)

    def start_search(self, wait_interval: float | None = None) -> asyncio.Task[Any]:
        """Debounce a search; called on every keystroke."""

        return self._search.trigger(wait_interval)

    def submit_search(self) -> asyncio.Task[Any]:
        """Search almost immediately (Enter key)."""

        return self._search.trigger(self._enter_wait_interval)

    def handle_move_end(self) -> asyncio.Task[Any]:
        """Debounce an address lookup after the viewport settles."""

        return self._location.trigger()

    def lookup_address_now(self) -> asyncio.Task[Any]:
        """Look up the map center without waiting for the viewport to settle."""

        return self._location.trigger(0.0)

    def drop_file(self, path: Path | None) -> asyncio.Task[Any]:
        """Jump to the location embedded in a dropped image."""

        return self._file_drop.run(lambda token: self._process_dropped_file(path, token))

    def cancel_all(self) -> None:
        self._search.cancel()
        self._location.cancel()
        self._file_drop.cancel()

    def move_to(self, coordinate: LatLng, token: CancellationToken) -> None:
        """Show the main pin at ``coordinate`` and center the view on it."""

        token.raise_if_revoked()
        label = coordinate.label()
        self._map.set_marker(position=coordinate, opacity=1.0, popup=label)
        self.put(f"Moved to {label}")
        self._map.set_view(coordinate)

    async def _execute_command(self, value: str, token: CancellationToken) -> None:
        coordinate = self._parser(value)
        token.raise_if_revoked()
        if coordinate is None:
            self.put(f"No coordinate found in: {value}")
            return
        self.move_to(coordinate, token)

    async def _report_address(self, center: LatLng, token: CancellationToken) -> None:
        address = await self._geocoder.lookup(center.lng, center.lat, token)
        token.raise_if_revoked()
        if address is None:
            self.put(f"{center.lng}, {center.lat}: no address found")
            return
        self.put(center.label())
        self.put(address.label() or address.municipality_code)

    async def _process_dropped_file(self, path: Path | None, token: CancellationToken) -> None:
        token.raise_if_revoked()
        if path is None:
            self.put("No file was dropped.")
            return
        self.put(f"Reading location from image ({path.name})")
        try:
            coordinate = await self._read_image_coordinate(path, token)
        except ImageLocationError as exc:
            token.raise_if_revoked()
            LOG.debug("Image location unavailable", extra={"path": str(path), "reason": str(exc)})
            self.put(f"Failed to read location from image ({path.name})")
            return
        self.move_to(coordinate, token)

        try:
            icon = await self._read_thumbnail(path, token)
        except UnsupportedImageError as exc:
            LOG.debug("Skipping popup thumbnail", extra={"path": str(path), "reason": str(exc)})
            return
        token.raise_if_revoked()
        self._map.set_marker(popup=coordinate.label(), icon=icon)

    async def _default_thumbnail(self, path: Path, token: CancellationToken) -> str:
        return await image_thumbnail_url(path, token, size=self._thumbnail_size)


__all__ = ["QuickJumpTerminal"]
