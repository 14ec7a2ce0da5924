"""
Continuous timed scrolling driven by gestures.

One direction runs at a time. Its repeating timer is always cancelled
before another one starts.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple
import logging

from .classifier import GestureLabel
from .timers import Cancel, TimerScheduler

logger = logging.getLogger(__name__)

MIN_SPEED = 1
MAX_SPEED = 10
DEFAULT_SPEED = 7


class ScrollDirection(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def unit(self) -> Tuple[int, int]:
        """(dx, dy) sign of one step in this direction."""
        return _UNITS[self]


_UNITS = {
    ScrollDirection.UP: (0, -1),
    ScrollDirection.DOWN: (0, 1),
    ScrollDirection.LEFT: (-1, 0),
    ScrollDirection.RIGHT: (1, 0),
}

GESTURE_DIRECTIONS: Dict[GestureLabel, ScrollDirection] = {
    GestureLabel.OPEN_HAND: ScrollDirection.UP,
    GestureLabel.CLOSED_FIST: ScrollDirection.DOWN,
    GestureLabel.SWIPE_LEFT: ScrollDirection.LEFT,
    GestureLabel.POINT_LEFT: ScrollDirection.LEFT,
    GestureLabel.SWIPE_RIGHT: ScrollDirection.RIGHT,
    GestureLabel.POINT_RIGHT: ScrollDirection.RIGHT,
}


@dataclass(frozen=True)
class ScrollStep:
    amount: int         # Pixels per tick
    interval_ms: int    # Time between ticks


# Bigger steps at shorter intervals as speed goes up
SPEED_TABLE: Dict[int, ScrollStep] = {
    1: ScrollStep(1, 50),
    2: ScrollStep(2, 40),
    3: ScrollStep(3, 35),
    4: ScrollStep(4, 30),
    5: ScrollStep(5, 25),
    6: ScrollStep(7, 20),
    7: ScrollStep(10, 15),
    8: ScrollStep(15, 12),
    9: ScrollStep(20, 10),
    10: ScrollStep(30, 8),
}

SPEED_DESCRIPTIONS: Dict[int, str] = {
    1: "Very Slow", 2: "Slow", 3: "Moderate",
    4: "Medium", 5: "Balanced", 6: "Fast",
    7: "Very Fast", 8: "Ultra Fast", 9: "Extreme", 10: "Maximum",
}


def speed_values(speed: int) -> ScrollStep:
    return SPEED_TABLE.get(speed, SPEED_TABLE[DEFAULT_SPEED])


def describe_speed(speed: int) -> str:
    return SPEED_DESCRIPTIONS.get(speed, "Medium")


def clamp_speed(speed: int) -> int:
    return max(MIN_SPEED, min(MAX_SPEED, int(speed)))


class ScrollViewport(ABC):
    """Accessor for the scrollable document. Offsets are in pixels."""

    @abstractmethod
    def scroll_by(self, dx: int, dy: int) -> None:
        """Move the scroll position by (dx, dy)."""


@dataclass(frozen=True)
class ScrollState:
    direction: Optional[ScrollDirection] = None
    step: Optional[ScrollStep] = None


class ScrollActuator:
    """
    Starts, switches and stops the scroll timer.

    Args:
        viewport: Target of the scroll offsets
        scheduler: Source of repeating timers
        speed: Initial 1-10 speed setting
        nudge_amount: Pixels for a single manual nudge
    """

    def __init__(self, viewport: ScrollViewport, scheduler: TimerScheduler,
                 speed: int = DEFAULT_SPEED, nudge_amount: int = 100):
        self._viewport = viewport
        self._scheduler = scheduler
        self._speed = clamp_speed(speed)
        self.nudge_amount = nudge_amount
        self._state = ScrollState()
        self._cancel: Optional[Cancel] = None

    @property
    def state(self) -> ScrollState:
        return self._state

    @property
    def direction(self) -> Optional[ScrollDirection]:
        return self._state.direction

    @property
    def is_scrolling(self) -> bool:
        return self._cancel is not None

    @property
    def speed(self) -> int:
        return self._speed

    def set_speed(self, speed: int) -> int:
        """Change speed; a running scroll restarts at the new cadence."""
        speed = clamp_speed(speed)
        if speed == self._speed:
            return speed
        self._speed = speed
        direction = self._state.direction
        if direction is not None:
            self.stop()
            self._start(direction)
        return speed

    def increase_speed(self) -> int:
        return self.set_speed(self._speed + 1)

    def decrease_speed(self) -> int:
        return self.set_speed(self._speed - 1)

    def apply(self, label: GestureLabel) -> Optional[ScrollDirection]:
        """Drive the timer from an effective gesture label."""
        self.set_direction(GESTURE_DIRECTIONS.get(label))
        return self._state.direction

    def set_direction(self, direction: Optional[ScrollDirection]) -> bool:
        """Returns True if the running direction changed."""
        if direction == self._state.direction:
            return False
        self.stop()
        if direction is not None:
            self._start(direction)
        return True

    def _start(self, direction: ScrollDirection) -> None:
        # stop() has always run first, so at most one timer is live
        step = speed_values(self._speed)
        self._state = ScrollState(direction, step)
        self._cancel = self._scheduler.start_repeating(step.interval_ms, self._tick)
        logger.debug("Scrolling %s: %dpx every %dms", direction.value, step.amount, step.interval_ms)

    def _tick(self) -> None:
        direction, step = self._state.direction, self._state.step
        if direction is None or step is None:
            return
        ux, uy = direction.unit
        self._viewport.scroll_by(ux * step.amount, uy * step.amount)

    def nudge(self, direction: ScrollDirection, amount: Optional[int] = None) -> None:
        """Single manual scroll step."""
        amount = self.nudge_amount if amount is None else amount
        ux, uy = direction.unit
        self._viewport.scroll_by(ux * amount, uy * amount)

    def stop(self) -> None:
        if self._cancel is not None:
            self._cancel()
            self._cancel = None
            logger.debug("Scrolling stopped")
        self._state = ScrollState()
