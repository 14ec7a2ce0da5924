"""
QTimer-backed scheduler for the Qt host.
"""
from typing import Callable, Dict
from PyQt5.QtCore import QObject, QTimer

from ..gestures.timers import Cancel, TimerScheduler


class QtTimerScheduler(TimerScheduler):
    """Repeating timers on the Qt event loop. Must be used from the GUI thread."""

    def __init__(self, parent: QObject = None):
        self._parent = parent
        self._timers: Dict[int, QTimer] = {}
        self._next_id = 0

    def start_repeating(self, interval_ms: int, callback: Callable[[], None]) -> Cancel:
        if interval_ms <= 0:
            raise ValueError("Timer interval must be positive")

        timer = QTimer(self._parent)
        timer.setInterval(int(interval_ms))
        timer.timeout.connect(callback)
        timer_id = self._next_id
        self._next_id += 1
        self._timers[timer_id] = timer
        timer.start()

        def cancel() -> None:
            t = self._timers.pop(timer_id, None)
            if t is not None:
                t.stop()
                t.deleteLater()

        return cancel

    @property
    def active_count(self) -> int:
        return len(self._timers)

    def cancel_all(self) -> None:
        for timer in self._timers.values():
            timer.stop()
            timer.deleteLater()
        self._timers.clear()
