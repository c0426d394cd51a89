"""Debounce helper that turns bursts of triggers into one settled action."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Generic, TypeVar

from .delay import delay
from .scope import SupersessionScope
from .token import CancellationToken

T = TypeVar("T")

PipelineAction = Callable[[T, CancellationToken], Awaitable[Any]]


class DebouncedPipeline(Generic[T]):
    """Waits for a quiet period, then runs ``action`` on the freshest value."""

    def __init__(
        self,
        settle_interval: float,
        read_value: Callable[[], T],
        action: PipelineAction[T],
        *,
        scope: SupersessionScope | None = None,
    ) -> None:
        self._settle_interval = settle_interval
        self._read_value = read_value
        self._action = action
        self._scope = scope or SupersessionScope()

    @property
    def scope(self) -> SupersessionScope:
        return self._scope

    @property
    def settle_interval(self) -> float:
        return self._settle_interval

    def trigger(self, settle_interval: float | None = None) -> asyncio.Task[Any]:
        """Restart the quiet-period wait, superseding any pending run."""

        interval = self._settle_interval if settle_interval is None else settle_interval
        return self._scope.run(lambda token: self._runner(token, interval))

    def cancel(self) -> None:
        """Abandon any pending run."""

        self._scope.cancel()

    async def _runner(self, token: CancellationToken, interval: float) -> None:
        await delay(interval, token)
        value = self._read_value()
        await self._action(value, token)


__all__ = ["DebouncedPipeline", "PipelineAction"]
