"""
Virtual on-screen controls: layout and hit testing.

Brush and eraser squares sit in the top-right corner with a column of
round color swatches under them. The layout is rebuilt from the canvas
size every frame.
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from ..config import ControlsConfig
from .landmarks import Point

BRUSH = "brush"
ERASER = "eraser"
COLOR_PREFIX = "color:"


def color_identity(index: int) -> str:
    return f"{COLOR_PREFIX}{index}"


def parse_color_index(identity: Optional[str]) -> Optional[int]:
    """Palette index encoded in a color zone identity, or None."""
    if not identity or not identity.startswith(COLOR_PREFIX):
        return None
    try:
        return int(identity[len(COLOR_PREFIX):])
    except ValueError:
        return None


class ZoneShape(Enum):
    RECT = "rect"
    CIRCLE = "circle"


@dataclass(frozen=True)
class ControlZone:
    """One clickable area in unmirrored canvas pixels."""
    identity: str
    x: float
    y: float
    width: float
    height: float
    shape: ZoneShape = ZoneShape.RECT
    color: Optional[str] = None

    def contains(self, px: float, py: float) -> bool:
        # Circles are hit-tested on their bounding square
        return (self.x <= px <= self.x + self.width
                and self.y <= py <= self.y + self.height)

    @property
    def center(self) -> Point:
        return (self.x + self.width / 2.0, self.y + self.height / 2.0)

    @property
    def radius(self) -> float:
        return min(self.width, self.height) / 2.0


@dataclass(frozen=True)
class HitResult:
    zone: Optional[ControlZone]
    layout: Tuple[ControlZone, ...] = ()

    @property
    def identity(self) -> Optional[str]:
        return self.zone.identity if self.zone is not None else None


class VirtualButtonHitTester:
    """
    Builds the control layout and reports which zone is under the pointer.

    The UI overlay is mirrored relative to the drawing canvas, so the
    pointer's x is flipped (width - x) before testing.
    """

    def __init__(self, config: ControlsConfig, enabled: bool = True):
        self._config = config
        self.enabled = enabled

    @property
    def palette(self) -> List[str]:
        return list(self._config.palette)

    def build_layout(self, width: float, height: float) -> Tuple[ControlZone, ...]:
        if not self.enabled or width <= 0 or height <= 0:
            return ()
        cfg = self._config
        size = cfg.button_size
        left = width - size - cfg.margin

        brush = ControlZone(BRUSH, left, cfg.margin, size, size)
        eraser = ControlZone(ERASER, left, cfg.margin + size + cfg.button_gap, size, size)
        zones = [brush, eraser]

        count = max(0, min(cfg.color_count, len(cfg.palette), 4))
        color_left = width - cfg.color_size - cfg.margin
        color_top = eraser.y + eraser.height + cfg.color_top_gap
        for index, color in enumerate(cfg.palette[:count]):
            zones.append(ControlZone(
                identity=color_identity(index),
                x=color_left,
                y=color_top + index * (cfg.color_size + cfg.color_gap),
                width=cfg.color_size,
                height=cfg.color_size,
                shape=ZoneShape.CIRCLE,
                color=color,
            ))
        return tuple(zones)

    @staticmethod
    def find_zone(zones: Sequence[ControlZone], x: float, y: float) -> Optional[ControlZone]:
        """First zone containing (x, y)."""
        for zone in zones:
            if zone.contains(x, y):
                return zone
        return None

    def hit_test(self, pointer: Optional[Point], width: float, height: float) -> HitResult:
        layout = self.build_layout(width, height)
        if pointer is None or not layout:
            return HitResult(None, layout)
        ui_x = width - pointer[0]
        return HitResult(self.find_zone(layout, ui_x, pointer[1]), layout)
