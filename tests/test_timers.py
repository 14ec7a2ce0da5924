import pytest

from airgesture.gestures.timers import ManualScheduler


def test_fires_every_elapsed_interval():
    scheduler = ManualScheduler()
    ticks = []
    scheduler.start_repeating(15, lambda: ticks.append(scheduler.now))
    assert scheduler.advance(14) == 0
    assert scheduler.advance(30) == 2
    assert ticks == [15, 30]
    assert scheduler.now == 44


def test_timers_fire_in_due_order():
    scheduler = ManualScheduler()
    order = []
    scheduler.start_repeating(20, lambda: order.append("slow"))
    scheduler.start_repeating(15, lambda: order.append("fast"))
    scheduler.advance_to(40)
    assert order == ["fast", "slow", "fast", "slow"]


def test_cancelled_timer_never_fires():
    scheduler = ManualScheduler()
    ticks = []
    cancel = scheduler.start_repeating(10, lambda: ticks.append(1))
    scheduler.advance(25)
    cancel()
    scheduler.advance(100)
    assert len(ticks) == 2
    assert scheduler.active_count == 0


def test_cancel_inside_callback_stops_same_advance():
    scheduler = ManualScheduler()
    ticks = []

    def tick():
        ticks.append(scheduler.now)
        cancel()

    cancel = scheduler.start_repeating(10, tick)
    scheduler.advance(100)
    assert ticks == [10]


def test_start_uses_current_clock():
    scheduler = ManualScheduler(now_ms=1000)
    ticks = []
    scheduler.start_repeating(50, lambda: ticks.append(scheduler.now))
    scheduler.advance_to(1100)
    assert ticks == [1050, 1100]


def test_rejects_non_positive_interval():
    with pytest.raises(ValueError):
        ManualScheduler().start_repeating(0, lambda: None)


def test_cancel_all():
    scheduler = ManualScheduler()
    scheduler.start_repeating(10, lambda: None)
    scheduler.start_repeating(20, lambda: None)
    scheduler.cancel_all()
    assert scheduler.advance(100) == 0
