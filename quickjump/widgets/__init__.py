"""Widget library for the Textual UI."""

from __future__ import annotations

from .map_panel import MapPanel
from .search_bar import DropZone, FileDropped, SearchBar
from .status_bar import StatusBar
from .toast_list import ToastList

__all__ = ["DropZone", "FileDropped", "MapPanel", "SearchBar", "StatusBar", "ToastList"]
