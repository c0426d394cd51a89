"""Search bar input and the file drop zone."""

from __future__ import annotations

from pathlib import Path

from textual import events
from textual.binding import Binding
from textual.message import Message
from textual.widgets import Input


class SearchBar(Input):
    """Coordinate search box, hidden until summoned."""

    DEFAULT_CSS = """
    SearchBar {
        border: heavy $primary;
    }

    SearchBar.hidden {
        display: none;
    }
    """

    BINDINGS = [Binding("escape", "hide", "Hide search", show=False)]

    def __init__(self) -> None:
        super().__init__(
            placeholder="Type coordinates, e.g. 35.6, 139.7",
            id="search-input",
            classes="hidden",
        )

    def reveal(self) -> None:
        self.remove_class("hidden")
        self.focus()
        self.cursor_position = len(self.value)

    def action_hide(self) -> None:
        self.add_class("hidden")


class FileDropped(Message):
    """Posted when the drop zone receives a file path."""

    def __init__(self, path: Path | None) -> None:
        super().__init__()
        self.path = path


class DropZone(Input):
    """Path input that also accepts paths pasted by a terminal drop."""

    DEFAULT_CSS = """
    DropZone {
        border: round $surface-lighten-2;
    }

    DropZone:focus {
        border: round $accent;
    }
    """

    def __init__(self) -> None:
        super().__init__(placeholder="Drop or paste an image path, then Enter", id="drop-zone")

    async def _on_paste(self, event: events.Paste) -> None:
        self.value = event.text.strip()
        self.post_message(FileDropped(parse_dropped_path(event.text)))
        event.stop()

    async def action_submit(self) -> None:
        self.post_message(FileDropped(parse_dropped_path(self.value)))


def parse_dropped_path(text: str) -> Path | None:
    """Normalize the text a terminal pastes for a dropped file."""

    candidate = text.strip().splitlines()[0].strip() if text.strip() else ""
    if len(candidate) >= 2 and candidate[0] == candidate[-1] and candidate[0] in "'\"":
        candidate = candidate[1:-1]
    if candidate.startswith("file://"):
        candidate = candidate[len("file://") :]
    candidate = candidate.replace("\\ ", " ")
    if not candidate:
        return None
    return Path(candidate).expanduser()


__all__ = ["DropZone", "FileDropped", "SearchBar", "parse_dropped_path"]
