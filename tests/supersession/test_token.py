"""Tests for cancellation tokens."""

from __future__ import annotations

import pytest

from quickjump.supersession import Cancelled, CancellationToken


def test_revoke_is_one_way_and_idempotent() -> None:
    token = CancellationToken()
    assert token.is_revoked() is False

    token.revoke()
    token.revoke()

    assert token.is_revoked() is True


def test_callbacks_fire_once_in_registration_order() -> None:
    token = CancellationToken()
    seen: list[str] = []
    token.on_revoke(lambda: seen.append("first"))
    token.on_revoke(lambda: seen.append("second"))

    token.revoke()
    token.revoke()

    assert seen == ["first", "second"]


def test_unregistered_callback_does_not_fire() -> None:
    token = CancellationToken()
    seen: list[str] = []
    unregister = token.on_revoke(lambda: seen.append("called"))

    unregister()
    unregister()
    token.revoke()

    assert seen == []


def test_callback_registered_after_revoke_runs_immediately() -> None:
    token = CancellationToken()
    token.revoke()
    seen: list[str] = []

    token.on_revoke(lambda: seen.append("late"))

    assert seen == ["late"]


def test_raise_if_revoked() -> None:
    token = CancellationToken()
    token.raise_if_revoked()

    token.revoke()

    with pytest.raises(Cancelled):
        token.raise_if_revoked()


def test_repr_shows_state() -> None:
    token = CancellationToken()
    assert repr(token) == "CancellationToken(active)"

    token.revoke()

    assert repr(token) == "CancellationToken(revoked)"
