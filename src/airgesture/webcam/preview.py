"""
OpenCV/numpy rendering for the debug window.

CanvasImage is a BGRA stroke raster in pointer space. The camera frame is
shown mirrored, so strokes line up with the hand when the raster is laid
over it unflipped. Control zones live in unmirrored space and are flipped
onto the frame when drawn.
"""
from typing import Optional, Sequence, Tuple
import cv2
import numpy as np

from ..gestures.controls import ControlZone, ZoneShape
from ..gestures.landmarks import Point
from ..gestures.stroke import CompositeMode, StrokeStyle, StrokeSurface

CURVE_SEGMENTS = 12


def hex_to_bgr(color: str) -> Tuple[int, int, int]:
    """'#rrggbb' -> (b, g, r). Unparseable colors become black."""
    value = color.lstrip("#")
    if len(value) == 3:
        value = "".join(c * 2 for c in value)
    try:
        r, g, b = int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)
    except ValueError:
        return (0, 0, 0)
    return (b, g, r)


def quadratic_points(start: Point, control: Point, end: Point,
                     segments: int = CURVE_SEGMENTS) -> np.ndarray:
    """Sample a quadratic Bezier into an int32 polyline."""
    t = np.linspace(0.0, 1.0, segments + 1)[:, None]
    p0, p1, p2 = (np.asarray(p, dtype=np.float64) for p in (start, control, end))
    curve = (1 - t) ** 2 * p0 + 2 * (1 - t) * t * p1 + t ** 2 * p2
    return np.round(curve).astype(np.int32)


class CanvasImage(StrokeSurface):
    """Transparent BGRA raster the stroke renderer paints into."""

    def __init__(self, width: int, height: int):
        self._image = np.zeros((height, width, 4), dtype=np.uint8)

    @property
    def image(self) -> np.ndarray:
        return self._image

    @property
    def size(self) -> Tuple[int, int]:
        h, w = self._image.shape[:2]
        return w, h

    def resize(self, width: int, height: int) -> None:
        """Resize, dropping the current contents."""
        if (width, height) != self.size:
            self._image = np.zeros((height, width, 4), dtype=np.uint8)

    @staticmethod
    def _paint(style: StrokeStyle):
        # Subtractive strokes write fully transparent pixels
        if style.composite == CompositeMode.SUBTRACTIVE:
            return (0, 0, 0, 0), cv2.LINE_8
        return hex_to_bgr(style.color) + (255,), cv2.LINE_AA

    def draw_dot(self, center: Point, style: StrokeStyle) -> None:
        color, line_type = self._paint(style)
        radius = max(1, int(round(style.width / 2.0)))
        cv2.circle(self._image, (int(round(center[0])), int(round(center[1]))),
                   radius, color, -1, line_type)

    def draw_curve(self, start: Point, control: Point, end: Point, style: StrokeStyle) -> None:
        color, line_type = self._paint(style)
        points = quadratic_points(start, control, end)
        cv2.polylines(self._image, [points], False, color,
                      max(1, int(round(style.width))), line_type)

    def clear(self) -> None:
        self._image[:] = 0


def composite(frame: np.ndarray, canvas: np.ndarray) -> np.ndarray:
    """Alpha-blend a BGRA canvas over a BGR frame of the same size."""
    if frame.shape[:2] != canvas.shape[:2]:
        canvas = cv2.resize(canvas, (frame.shape[1], frame.shape[0]),
                            interpolation=cv2.INTER_NEAREST)
    alpha = canvas[:, :, 3:4].astype(np.float32) / 255.0
    blended = frame.astype(np.float32) * (1.0 - alpha) + canvas[:, :, :3].astype(np.float32) * alpha
    return blended.astype(np.uint8)


def zone_on_display(zone: ControlZone, width: float) -> Tuple[int, int, int, int]:
    """Zone rectangle (x, y, w, h) in mirrored display space."""
    x = width - zone.x - zone.width
    return int(round(x)), int(round(zone.y)), int(round(zone.width)), int(round(zone.height))


def draw_controls(
    frame: np.ndarray,
    zones: Sequence[ControlZone],
    hovered: Optional[str] = None,
    progress: float = 0.0,
    active: Optional[str] = None,
) -> None:
    """Draw control zones, highlighting the hovered one with its dwell arc."""
    width = frame.shape[1]
    for zone in zones:
        x, y, w, h = zone_on_display(zone, width)
        is_hovered = zone.identity == hovered
        edge = (0, 255, 255) if is_hovered else (255, 255, 255)
        thickness = 3 if zone.identity == active else 1

        if zone.shape == ZoneShape.CIRCLE:
            center = (x + w // 2, y + h // 2)
            radius = min(w, h) // 2
            cv2.circle(frame, center, radius, hex_to_bgr(zone.color or "#808080"), -1, cv2.LINE_AA)
            cv2.circle(frame, center, radius, edge, thickness, cv2.LINE_AA)
        else:
            cv2.rectangle(frame, (x, y), (x + w, y + h), (40, 40, 40), -1)
            cv2.rectangle(frame, (x, y), (x + w, y + h), edge, thickness)
            cv2.putText(frame, zone.identity, (x + 6, y + h // 2 + 5),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)

        if is_hovered and progress > 0:
            center = (x + w // 2, y + h // 2)
            radius = min(w, h) // 2 + 6
            cv2.ellipse(frame, center, (radius, radius), -90, 0, 360 * progress,
                        (0, 255, 255), 3, cv2.LINE_AA)


def draw_cursor(frame: np.ndarray, pointer: Optional[Point], engaged: bool) -> None:
    """Filled dot while engaged, ring otherwise."""
    if pointer is None:
        return
    center = (int(round(pointer[0])), int(round(pointer[1])))
    if engaged:
        cv2.circle(frame, center, 8, (0, 0, 255), -1, cv2.LINE_AA)
    else:
        cv2.circle(frame, center, 10, (255, 255, 0), 2, cv2.LINE_AA)
