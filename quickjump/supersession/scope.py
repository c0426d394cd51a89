"""Last-writer-wins owner of a single in-flight operation."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

from .token import Cancelled, CancellationToken

LOG = logging.getLogger(__name__)

TaskFactory = Callable[[CancellationToken], Awaitable[Any]]
ErrorReporter = Callable[[BaseException], None]


def log_error(error: BaseException) -> None:
    """Default process-wide reporter: log the failure with its traceback."""

    LOG.error("Superseding operation failed", exc_info=error)


class SupersessionScope:
    """Runs one operation at a time; starting a new one revokes the last.

    The current token is only written by ``run``'s synchronous prologue, so
    there is never a moment where two operations of the same scope are active.
    """

    def __init__(self, name: str = "scope", *, on_error: ErrorReporter | None = None) -> None:
        self._name = name
        self._on_error = on_error or log_error
        self._token: CancellationToken | None = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def current_token(self) -> CancellationToken | None:
        """Token of the most recently started operation (testing helper)."""

        return self._token

    def run(self, task_factory: TaskFactory) -> asyncio.Task[Any]:
        """Supersede the current operation and launch a new one."""

        if self._token is not None:
            self._token.revoke()
        token = CancellationToken()
        self._token = token
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._invoke(task_factory, token))
        task.add_done_callback(self._settle)
        return task

    def cancel(self) -> None:
        """Revoke the current operation without starting another one."""

        if self._token is not None:
            self._token.revoke()

    async def _invoke(self, task_factory: TaskFactory, token: CancellationToken) -> Any:
        # A later run may have revoked this token before the task got scheduled.
        token.raise_if_revoked()
        return await task_factory(token)

    def _settle(self, task: asyncio.Task[Any]) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is None:
            return
        if isinstance(error, Cancelled):
            LOG.debug("Operation superseded", extra={"scope": self._name})
            return
        try:
            self._on_error(error)
        except Exception:
            LOG.exception("Error reporter failed", extra={"scope": self._name})


__all__ = ["ErrorReporter", "SupersessionScope", "TaskFactory", "log_error"]
