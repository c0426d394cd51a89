"""Tests for the cancellable delay and guard primitives."""

from __future__ import annotations

import asyncio

import pytest

from quickjump.supersession import Cancelled, CancellationToken, delay, guard


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.mark.anyio
async def test_delay_resolves_after_duration() -> None:
    loop = asyncio.get_running_loop()
    token = CancellationToken()
    started = loop.time()

    await delay(0.05, token)

    assert loop.time() - started >= 0.045


@pytest.mark.anyio
async def test_delay_fails_at_revocation_not_deadline() -> None:
    loop = asyncio.get_running_loop()
    token = CancellationToken()
    loop.call_later(0.05, token.revoke)
    started = loop.time()

    with pytest.raises(Cancelled):
        await delay(5.0, token)

    assert loop.time() - started < 1.0


@pytest.mark.anyio
async def test_delay_on_revoked_token_fails_immediately() -> None:
    token = CancellationToken()
    token.revoke()

    with pytest.raises(Cancelled):
        await delay(5.0, token)


@pytest.mark.anyio
async def test_revoking_after_delay_completed_has_no_effect() -> None:
    token = CancellationToken()

    await delay(0.0, token)
    token.revoke()

    assert token.is_revoked()


@pytest.mark.anyio
async def test_guard_returns_result_when_active() -> None:
    token = CancellationToken()

    async def _work() -> int:
        await asyncio.sleep(0)
        return 42

    assert await guard(_work(), token) == 42


@pytest.mark.anyio
async def test_guard_cancels_inner_work_on_revoke() -> None:
    token = CancellationToken()
    inner_cancelled = asyncio.Event()

    async def _slow() -> None:
        try:
            await asyncio.sleep(5)
        except asyncio.CancelledError:
            inner_cancelled.set()
            raise

    asyncio.get_running_loop().call_later(0.02, token.revoke)

    with pytest.raises(Cancelled):
        await guard(_slow(), token)
    assert inner_cancelled.is_set()


@pytest.mark.anyio
async def test_guard_propagates_real_errors() -> None:
    token = CancellationToken()

    async def _boom() -> None:
        raise RuntimeError("network down")

    with pytest.raises(RuntimeError, match="network down"):
        await guard(_boom(), token)


@pytest.mark.anyio
async def test_guard_refuses_revoked_token() -> None:
    token = CancellationToken()
    token.revoke()

    async def _never() -> None:  # pragma: no cover - must not run
        raise AssertionError("should not start")

    with pytest.raises(Cancelled):
        await guard(_never(), token)
