from __future__ import annotations

import asyncio

import pytest

from lv_controls.core.timers import AsyncioTimerService, ManualTimerService


def test_callbacks_run_in_due_order_when_clock_advances():
    timers = ManualTimerService()
    fired = []

    timers.call_later(0.3, lambda: fired.append("c"))
    timers.call_later(0.1, lambda: fired.append("a"))
    timers.call_later(0.1, lambda: fired.append("b"))

    assert timers.advance(0.05) == 0
    assert timers.advance(0.3) == 3
    assert fired == ["a", "b", "c"]
    assert timers.now == pytest.approx(0.35)


def test_cancelled_callbacks_do_not_run():
    timers = ManualTimerService()
    fired = []

    handle = timers.call_later(0.1, lambda: fired.append("x"))
    assert timers.pending == 1
    handle.cancel()

    assert timers.pending == 0
    timers.advance(1.0)
    assert fired == []


def test_callbacks_scheduled_during_advance_run_if_due_in_window():
    timers = ManualTimerService()
    fired = []

    def first():
        fired.append(("first", timers.now))
        timers.call_later(0.0, lambda: fired.append(("second", timers.now)))
        timers.call_later(5.0, lambda: fired.append(("late", timers.now)))

    timers.call_later(0.1, first)
    timers.advance(1.0)

    assert [name for name, _ in fired] == ["first", "second"]
    assert fired[1][1] == pytest.approx(0.1)
    assert timers.pending == 1


def test_advance_to_and_run_pending():
    timers = ManualTimerService(start=10.0)
    fired = []
    timers.call_later(0.0, lambda: fired.append("now"))
    timers.call_later(2.0, lambda: fired.append("later"))

    assert timers.run_pending() == 1
    assert timers.advance_to(12.0) == 1
    assert fired == ["now", "later"]
    # moving to the past is a no-op
    assert timers.advance_to(3.0) == 0
    assert timers.now == pytest.approx(12.0)


def test_negative_advance_is_rejected():
    with pytest.raises(ValueError):
        ManualTimerService().advance(-1.0)


def test_asyncio_timer_service_uses_the_running_loop():
    async def scenario():
        timers = AsyncioTimerService()
        fired = []
        timers.call_later(0.01, lambda: fired.append("kept"))
        handle = timers.call_later(0.01, lambda: fired.append("cancelled"))
        handle.cancel()
        await asyncio.sleep(0.05)
        return fired

    assert asyncio.run(scenario()) == ["kept"]
