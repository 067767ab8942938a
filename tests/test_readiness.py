from __future__ import annotations

import asyncio
import time
from typing import Callable, List, Optional

import pytest

from app.services.readiness import ReadinessGate, ReadinessState


class FakeClock:
    """Virtual time source; sleeping advances the clock and fires due callbacks."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: List[float] = []
        self._at: Optional[float] = None
        self._callback: Optional[Callable[[], None]] = None

    def __call__(self) -> float:
        return self.now

    def call_at(self, when: float, callback: Callable[[], None]) -> None:
        self._at = when
        self._callback = callback

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)
        self.now += delay
        if self._callback is not None and self._at is not None and self.now >= self._at:
            self._callback()
            self._callback = None


def test_state_is_set_once_and_keeps_info() -> None:
    state = ReadinessState()
    assert state.ready is False
    assert state.mark_ready({"pushName": "DM Tours"}) is True
    assert state.mark_ready({"pushName": "other"}) is False
    assert state.ready is True
    assert state.info == {"pushName": "DM Tours"}
    assert state.ready_at is not None


def test_wait_returns_immediately_when_ready() -> None:
    state = ReadinessState()
    state.mark_ready()
    clock = FakeClock()
    gate = ReadinessGate(state, poll_interval=0.5, clock=clock, sleep=clock.sleep)

    assert asyncio.run(gate.wait_until_ready(30)) is True
    assert clock.sleeps == []


def test_flag_set_between_polls_is_seen_at_next_poll() -> None:
    state = ReadinessState()
    clock = FakeClock()
    clock.call_at(0.7, state.mark_ready)
    gate = ReadinessGate(state, poll_interval=0.5, clock=clock, sleep=clock.sleep)

    assert asyncio.run(gate.wait_until_ready(1.0)) is True
    assert clock.now == pytest.approx(1.0)
    assert clock.sleeps == [0.5, 0.5]


def test_timeout_reported_at_first_poll_past_deadline() -> None:
    state = ReadinessState()
    clock = FakeClock()
    gate = ReadinessGate(state, poll_interval=0.5, clock=clock, sleep=clock.sleep)

    assert asyncio.run(gate.wait_until_ready(1.2)) is False
    assert 1.2 <= clock.now <= 1.2 + 0.5
    assert all(delay == 0.5 for delay in clock.sleeps)


def test_wait_does_not_set_flag() -> None:
    state = ReadinessState()
    clock = FakeClock()
    gate = ReadinessGate(state, poll_interval=0.5, clock=clock, sleep=clock.sleep)

    asyncio.run(gate.wait_until_ready(1.0))
    assert state.ready is False


def test_non_positive_timeout_does_not_wait() -> None:
    clock = FakeClock()
    gate = ReadinessGate(ReadinessState(), poll_interval=0.5, clock=clock, sleep=clock.sleep)
    assert asyncio.run(gate.wait_until_ready(0)) is False
    assert clock.sleeps == []


def test_poll_interval_must_be_positive() -> None:
    with pytest.raises(ValueError):
        ReadinessGate(ReadinessState(), poll_interval=0)


def test_real_time_timeout_bounds() -> None:
    gate = ReadinessGate(ReadinessState(), poll_interval=0.05)
    started = time.monotonic()
    assert asyncio.run(gate.wait_until_ready(0.2)) is False
    elapsed = time.monotonic() - started
    assert elapsed >= 0.2
    # one poll interval plus scheduling slack
    assert elapsed < 0.2 + 0.05 + 0.2


def test_real_time_ready_from_other_task() -> None:
    state = ReadinessState()
    gate = ReadinessGate(state, poll_interval=0.05)

    async def scenario() -> bool:
        asyncio.get_running_loop().call_later(0.07, state.mark_ready)
        return await gate.wait_until_ready(1.0)

    started = time.monotonic()
    assert asyncio.run(scenario()) is True
    elapsed = time.monotonic() - started
    assert 0.07 <= elapsed < 0.5
