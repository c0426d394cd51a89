"""Command palette providers for core app features."""

from __future__ import annotations

from textual.command import DiscoveryHit, Hit, Hits, Provider
from textual.types import IgnoreReturnCallbackType

from .terminal import QuickJumpTerminal


class QuickJumpCommandProvider(Provider):
    """Expose the search bar and an immediate address lookup."""

    _COMMANDS = (
        ("Show search bar", "show_search", "Reveal the coordinate search bar (Ctrl+F)."),
        ("Look up address at map center", "lookup_center", "Reverse-geocode the current view center."),
    )

    async def search(self, query: str) -> Hits:
        if self._terminal is None:
            return
        matcher = self.matcher(query)
        for label, action, help_text in self._COMMANDS:
            score = matcher.match(label)
            if score > 0:
                yield Hit(
                    score=score,
                    match_display=matcher.highlight(label),
                    command=self._build_callback(action),
                    help=help_text,
                )

    async def discover(self) -> Hits:
        if self._terminal is None:
            return
        for label, action, help_text in self._COMMANDS:
            yield DiscoveryHit(
                display=label,
                command=self._build_callback(action),
                help=help_text,
            )

    @property
    def _terminal(self) -> QuickJumpTerminal | None:
        terminal = getattr(self.app, "terminal", None)
        if isinstance(terminal, QuickJumpTerminal):
            return terminal
        return None

    def _build_callback(self, action: str) -> IgnoreReturnCallbackType:
        async def _run() -> None:
            if action == "lookup_center":
                terminal = self._terminal
                if terminal is None:
                    return
                terminal.lookup_address_now()
                return
            handler = getattr(self.app, f"action_{action}", None)
            if handler is None:
                return
            handler()

        return _run


__all__ = ["QuickJumpCommandProvider"]
