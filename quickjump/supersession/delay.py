"""Suspension points that wake up as soon as their token is revoked."""

from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar

from .token import Cancelled, CancellationToken

T = TypeVar("T")


async def delay(duration: float, token: CancellationToken) -> None:
    """Sleep for ``duration`` seconds unless ``token`` is revoked first.

    Revocation fails the wait with ``Cancelled`` at the moment of revocation,
    not at the original deadline.
    """

    token.raise_if_revoked()
    loop = asyncio.get_running_loop()
    waiter: asyncio.Future[None] = loop.create_future()

    def _elapsed() -> None:
        if not waiter.done():
            waiter.set_result(None)

    def _revoked() -> None:
        if not waiter.done():
            waiter.set_exception(Cancelled())

    handle = loop.call_later(max(duration, 0.0), _elapsed)
    unregister = token.on_revoke(_revoked)
    try:
        await waiter
    finally:
        handle.cancel()
        unregister()


async def guard(awaitable: Awaitable[T], token: CancellationToken) -> T:
    """Await ``awaitable``, cancelling it and raising ``Cancelled`` on revocation."""

    if token.is_revoked():
        if asyncio.iscoroutine(awaitable):
            awaitable.close()
        raise Cancelled()
    task = asyncio.ensure_future(awaitable)
    unregister = token.on_revoke(task.cancel)
    try:
        return await task
    except asyncio.CancelledError:
        if token.is_revoked():
            raise Cancelled() from None
        raise
    finally:
        unregister()


__all__ = ["delay", "guard"]
