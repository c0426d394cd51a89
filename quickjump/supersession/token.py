"""Revocable tokens shared between a scope and the task it launched."""

from __future__ import annotations

from typing import Callable

RevokeCallback = Callable[[], None]


class Cancelled(Exception):
    """Raised at a suspension point once the owning token has been revoked.

    This is the expected outcome of being superseded, never an error.
    """


class CancellationToken:
    """One-way ``active -> revoked`` flag with synchronous revoke callbacks."""

    __slots__ = ("_revoked", "_callbacks")

    def __init__(self) -> None:
        self._revoked = False
        self._callbacks: list[RevokeCallback] = []

    def revoke(self) -> None:
        """Revoke the token (idempotent) and fire pending callbacks."""

        if self._revoked:
            return
        self._revoked = True
        callbacks = self._callbacks
        self._callbacks = []
        for callback in callbacks:
            callback()

    def is_revoked(self) -> bool:
        return self._revoked

    def raise_if_revoked(self) -> None:
        """Checkpoint: raise ``Cancelled`` when the token has been revoked."""

        if self._revoked:
            raise Cancelled()

    def on_revoke(self, callback: RevokeCallback) -> Callable[[], None]:
        """Run ``callback`` on revocation; returns an unregister handle."""

        if self._revoked:
            callback()
            return lambda: None
        self._callbacks.append(callback)

        def _unregister() -> None:
            try:
                self._callbacks.remove(callback)
            except ValueError:
                pass

        return _unregister

    def __repr__(self) -> str:
        state = "revoked" if self._revoked else "active"
        return f"CancellationToken({state})"


__all__ = ["Cancelled", "CancellationToken", "RevokeCallback"]
