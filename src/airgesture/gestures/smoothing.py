"""
Pointer smoothing for the index fingertip.

Exponential moving average whose strength depends on whether an action
is engaged: heavy while drawing or scrolling, light while hovering.
"""
from dataclasses import dataclass
from typing import Optional
import math

from .landmarks import Point


@dataclass(frozen=True)
class PointerState:
    smoothed: Optional[Point] = None
    raw: Optional[Point] = None
    previous: Optional[Point] = None


class PointerSmoother:
    """
    EMA filter: smoothed' = alpha * raw + (1 - alpha) * smoothed.

    The first sample after a reset seeds the filter directly.
    """

    def __init__(self, engaged_alpha: float = 0.65, idle_alpha: float = 0.95):
        for alpha in (engaged_alpha, idle_alpha):
            if not 0.0 < alpha <= 1.0:
                raise ValueError(f"alpha must be in (0, 1], got {alpha}")
        self.engaged_alpha = engaged_alpha
        self.idle_alpha = idle_alpha
        self._state = PointerState()

    @property
    def state(self) -> PointerState:
        return self._state

    @property
    def position(self) -> Optional[Point]:
        return self._state.smoothed

    def update(self, raw: Point, engaged: bool) -> Optional[Point]:
        """Feed one raw pixel position and return the smoothed one."""
        if not (math.isfinite(raw[0]) and math.isfinite(raw[1])):
            return self._state.smoothed

        current = self._state.smoothed
        if current is None:
            self._state = PointerState(smoothed=raw, raw=raw, previous=None)
            return raw

        alpha = self.engaged_alpha if engaged else self.idle_alpha
        smoothed = (
            alpha * raw[0] + (1.0 - alpha) * current[0],
            alpha * raw[1] + (1.0 - alpha) * current[1],
        )
        self._state = PointerState(smoothed=smoothed, raw=raw, previous=current)
        return smoothed

    def reset(self) -> None:
        self._state = PointerState()
