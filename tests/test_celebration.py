from __future__ import annotations

import asyncio

from flickpick.features.session.celebration import MatchCelebration


def _celebration(delay: float = 3.0) -> tuple[MatchCelebration, list[str]]:
    fired: list[str] = []
    return MatchCelebration(lambda: fired.append("expired"), delay), fired


def test_idle_window_ignores_expire_and_resolve():
    celebration, fired = _celebration()
    assert not celebration.pending
    assert not celebration.expire()
    assert not celebration.resolve()
    assert fired == []


def test_resolve_wins_once():
    celebration, fired = _celebration()
    celebration.arm()
    assert celebration.pending

    assert celebration.resolve()
    assert not celebration.expire()
    assert not celebration.resolve()
    assert fired == []


def test_expire_wins_once():
    celebration, fired = _celebration()
    celebration.arm()

    assert celebration.expire()
    assert not celebration.resolve()
    assert fired == ["expired"]


def test_timer_fires_inside_running_loop():
    celebration, fired = _celebration(delay=0.01)

    async def scenario() -> None:
        celebration.arm()
        await asyncio.sleep(0.05)

    asyncio.run(scenario())

    assert fired == ["expired"]
    assert not celebration.pending


def test_resolving_cancels_scheduled_timer():
    celebration, fired = _celebration(delay=0.01)

    async def scenario() -> None:
        celebration.arm()
        assert celebration.resolve()
        await asyncio.sleep(0.05)

    asyncio.run(scenario())

    assert fired == []


def test_rearming_replaces_previous_timer():
    celebration, fired = _celebration(delay=0.02)

    async def scenario() -> None:
        celebration.arm()
        celebration.arm()
        await asyncio.sleep(0.08)

    asyncio.run(scenario())

    assert fired == ["expired"]


def test_arm_registers_timer_that_resolve_cancels():
    celebration, _ = _celebration(delay=5.0)

    async def scenario() -> None:
        celebration.arm()
        handle = celebration._handle
        assert handle is not None and not handle.cancelled()
        celebration.resolve()
        assert handle.cancelled()
        assert celebration._handle is None

    asyncio.run(scenario())
