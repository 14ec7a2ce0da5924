"""
Activation timing for virtual controls: pinch, dwell and cooldown.
"""
from dataclasses import dataclass
from typing import Optional
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HoverState:
    identity: Optional[str] = None
    started_at: Optional[float] = None


class ActivationArbiter:
    """
    Decides when a hovered control fires.

    - Pinch over a zone fires at once.
    - Hovering the same zone for `dwell_ms` without pinching fires once,
      then the dwell timer is cleared.
    - Nothing fires within `cooldown_ms` of the previous firing.

    Times are milliseconds on any monotonic clock.
    """

    def __init__(self, cooldown_ms: float = 500.0, dwell_ms: float = 700.0):
        self.cooldown_ms = cooldown_ms
        self.dwell_ms = dwell_ms
        self._hover = HoverState()
        self._last_fire: Optional[float] = None

    @property
    def hover(self) -> HoverState:
        return self._hover

    @property
    def last_fire(self) -> Optional[float]:
        return self._last_fire

    def in_cooldown(self, now_ms: float) -> bool:
        return self._last_fire is not None and now_ms - self._last_fire <= self.cooldown_ms

    def dwell_progress(self, now_ms: float) -> float:
        """Fraction of the dwell time elapsed on the hovered zone, 0-1."""
        if self._hover.started_at is None or self.dwell_ms <= 0:
            return 0.0
        elapsed = now_ms - self._hover.started_at
        return max(0.0, min(1.0, elapsed / self.dwell_ms))

    def _try_fire(self, now_ms: float) -> bool:
        if self.in_cooldown(now_ms):
            return False
        self._last_fire = now_ms
        return True

    def update(self, hit: Optional[str], pinch: bool, now_ms: float) -> Optional[str]:
        """
        Feed the current hit zone identity and pinch signal.

        Returns the identity to fire this frame, or None.
        """
        fired: Optional[str] = None

        if pinch and hit is not None and self._try_fire(now_ms):
            fired = hit

        if hit is None:
            self._hover = HoverState()
        elif self._hover.identity != hit:
            self._hover = HoverState(hit, now_ms)
        elif (self._hover.started_at is not None
              and now_ms - self._hover.started_at >= self.dwell_ms
              and not pinch):
            if self._try_fire(now_ms):
                fired = hit
            self._hover = HoverState()

        if fired is not None:
            logger.debug("Control %s fired (%s)", fired, "pinch" if pinch else "dwell")
        return fired

    def clear_hover(self) -> None:
        self._hover = HoverState()

    def reset(self) -> None:
        self._hover = HoverState()
        self._last_fire = None
