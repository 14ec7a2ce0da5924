"""
Repeating timers with cancellation handles.

Starting a timer returns a callable that stops it. A cancelled timer
never fires again.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List

Cancel = Callable[[], None]


class TimerScheduler(ABC):

    @abstractmethod
    def start_repeating(self, interval_ms: int, callback: Callable[[], None]) -> Cancel:
        """Call `callback` every `interval_ms` until the returned handle is called."""


@dataclass
class _Timer:
    interval_ms: float
    next_due: float
    callback: Callable[[], None]
    active: bool = True


class ManualScheduler(TimerScheduler):
    """
    Timers driven by an explicit clock.

    The owner advances time (from its frame loop, or a test) and every
    interval that elapsed fires in due order on the caller's thread.
    """

    def __init__(self, now_ms: float = 0.0):
        self._now = now_ms
        self._timers: List[_Timer] = []

    @property
    def now(self) -> float:
        return self._now

    @property
    def active_count(self) -> int:
        return sum(1 for t in self._timers if t.active)

    def start_repeating(self, interval_ms: int, callback: Callable[[], None]) -> Cancel:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        timer = _Timer(interval_ms, self._now + interval_ms, callback)
        self._timers.append(timer)

        def cancel():
            timer.active = False

        return cancel

    def advance_to(self, now_ms: float) -> int:
        """Move the clock forward and fire everything due. Returns fire count."""
        fired = 0
        while True:
            due = [t for t in self._timers if t.active and t.next_due <= now_ms]
            if not due:
                break
            timer = min(due, key=lambda t: t.next_due)
            self._now = timer.next_due
            timer.next_due += timer.interval_ms
            timer.callback()
            fired += 1
        self._now = max(self._now, now_ms)
        self._timers = [t for t in self._timers if t.active]
        return fired

    def advance(self, delta_ms: float) -> int:
        return self.advance_to(self._now + delta_ms)

    def cancel_all(self) -> None:
        for timer in self._timers:
            timer.active = False
        self._timers.clear()
