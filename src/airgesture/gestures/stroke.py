"""
Freehand stroke rendering with midpoint quadratic smoothing.

Each new point is joined to the path by a quadratic curve from the
previous midpoint to the new midpoint, with the previous point as the
control point. Consecutive curves share tangents at the midpoints, so
the stroke has no polyline corners.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple
import logging

from .landmarks import Point, distance, midpoint

logger = logging.getLogger(__name__)


class Tool(Enum):
    BRUSH = "brush"
    ERASER = "eraser"


class CompositeMode(Enum):
    NORMAL = "source-over"
    SUBTRACTIVE = "destination-out"


@dataclass(frozen=True)
class StrokeStyle:
    composite: CompositeMode
    width: float
    color: str = "#000000"

    @classmethod
    def for_tool(cls, tool: Tool, brush_width: float, eraser_width: float,
                 color: str) -> "StrokeStyle":
        if tool == Tool.ERASER:
            return cls(CompositeMode.SUBTRACTIVE, eraser_width, "#000000")
        return cls(CompositeMode.NORMAL, max(brush_width, 1.0), color)


class StrokeSurface(ABC):
    """Raster the renderer paints on. The renderer never owns its lifecycle."""

    @abstractmethod
    def draw_dot(self, center: Point, style: StrokeStyle) -> None:
        """Round dot of diameter style.width."""

    @abstractmethod
    def draw_curve(self, start: Point, control: Point, end: Point, style: StrokeStyle) -> None:
        """Quadratic curve from start to end bent towards control."""

    @abstractmethod
    def clear(self) -> None:
        """Erase everything."""


class StrokeOutcome(Enum):
    STARTED = "started"            # First point of a segment, dot painted
    DRAWN = "drawn"                # Curve painted
    ABSORBED = "absorbed"          # Jitter below min distance, nothing painted
    REANCHORED = "reanchored"      # Tracking jump, nothing painted
    OUT_OF_BOUNDS = "out_of_bounds"


@dataclass(frozen=True)
class StrokeState:
    last_point: Optional[Point] = None
    last_mid: Optional[Point] = None


class StrokeRenderer:
    """
    Accumulates smoothed pointer positions into a painted path.

    Args:
        surface: Where curves are drawn
        min_move: Moves at or below this (px) are absorbed without drawing
        max_move: Moves at or above this (px) re-anchor without drawing
    """

    def __init__(self, surface: StrokeSurface, min_move: float = 1.0, max_move: float = 200.0):
        self._surface = surface
        self.min_move = min_move
        self.max_move = max_move
        self._state = StrokeState()

    @property
    def surface(self) -> StrokeSurface:
        return self._surface

    @property
    def state(self) -> StrokeState:
        return self._state

    @property
    def is_drawing(self) -> bool:
        return self._state.last_point is not None

    def add_point(
        self,
        point: Point,
        style: StrokeStyle,
        bounds: Optional[Tuple[float, float]] = None,
    ) -> StrokeOutcome:
        if bounds is not None:
            width, height = bounds
            if not (0 <= point[0] <= width and 0 <= point[1] <= height):
                return StrokeOutcome.OUT_OF_BOUNDS

        last = self._state.last_point
        if last is None:
            self._surface.draw_dot(point, style)
            self._state = StrokeState(point, point)
            return StrokeOutcome.STARTED

        moved = distance(last, point)
        if moved >= self.max_move:
            logger.debug("Stroke re-anchored after %.1fpx jump", moved)
            self._state = StrokeState(point, point)
            return StrokeOutcome.REANCHORED
        if moved <= self.min_move:
            self._state = StrokeState(point, point)
            return StrokeOutcome.ABSORBED

        start = self._state.last_mid or last
        mid = midpoint(last, point)
        self._surface.draw_curve(start, last, mid, style)
        self._state = StrokeState(point, mid)
        return StrokeOutcome.DRAWN

    def clear(self) -> None:
        """Wipe the surface and start over."""
        self._surface.clear()
        self.reset()

    def reset(self) -> None:
        self._state = StrokeState()
