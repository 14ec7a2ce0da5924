"""
Drawing canvas widget: a QImage stroke raster under the control overlay.
"""
from typing import Optional, Sequence
from PyQt5.QtWidgets import QWidget
from PyQt5.QtCore import Qt, QPointF, QRectF
from PyQt5.QtGui import QColor, QImage, QPainter, QPainterPath, QPen, QPixmap
import numpy as np

from ..gestures.controls import ControlZone, ZoneShape
from ..gestures.engine import FrameResult
from ..gestures.landmarks import Point
from ..gestures.stroke import CompositeMode, StrokeStyle, StrokeSurface


class ImageSurface(StrokeSurface):
    """StrokeSurface backed by a transparent QImage."""

    def __init__(self, width: int, height: int):
        self._image = self._blank(max(1, width), max(1, height))

    @staticmethod
    def _blank(width: int, height: int) -> QImage:
        image = QImage(width, height, QImage.Format_ARGB32_Premultiplied)
        image.fill(Qt.transparent)
        return image

    @property
    def image(self) -> QImage:
        return self._image

    def resize(self, width: int, height: int) -> None:
        """Grow or shrink, keeping existing strokes anchored top-left."""
        width, height = max(1, width), max(1, height)
        if width == self._image.width() and height == self._image.height():
            return
        image = self._blank(width, height)
        painter = QPainter(image)
        painter.drawImage(0, 0, self._image)
        painter.end()
        self._image = image

    def _painter(self, style: StrokeStyle) -> QPainter:
        painter = QPainter(self._image)
        painter.setRenderHint(QPainter.Antialiasing)
        if style.composite == CompositeMode.SUBTRACTIVE:
            painter.setCompositionMode(QPainter.CompositionMode_DestinationOut)
        else:
            painter.setCompositionMode(QPainter.CompositionMode_SourceOver)
        return painter

    def draw_dot(self, center: Point, style: StrokeStyle) -> None:
        painter = self._painter(style)
        painter.setPen(Qt.NoPen)
        painter.setBrush(QColor(style.color))
        radius = style.width / 2.0
        painter.drawEllipse(QPointF(center[0], center[1]), radius, radius)
        painter.end()

    def draw_curve(self, start: Point, control: Point, end: Point, style: StrokeStyle) -> None:
        painter = self._painter(style)
        pen = QPen(QColor(style.color))
        pen.setWidthF(style.width)
        pen.setCapStyle(Qt.RoundCap)
        pen.setJoinStyle(Qt.RoundJoin)
        painter.setPen(pen)
        painter.setBrush(Qt.NoBrush)

        path = QPainterPath(QPointF(start[0], start[1]))
        path.quadTo(QPointF(control[0], control[1]), QPointF(end[0], end[1]))
        painter.drawPath(path)
        painter.end()

    def clear(self) -> None:
        self._image.fill(Qt.transparent)


class PaintCanvas(QWidget):
    """
    Shows the stroke raster over an optional mirrored camera frame, with
    the control zones and pointer cursor on top.

    Zones are laid out in unmirrored space and flipped when painted so
    they sit under the pointer that hits them.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setMinimumSize(320, 240)
        self.surface = ImageSurface(self.width(), self.height())
        self._background: Optional[QPixmap] = None
        self._result = FrameResult()
        self._active_control: Optional[str] = None

    def set_camera_frame(self, frame: Optional[np.ndarray]) -> None:
        """BGR frame, already mirrored by the tracker."""
        if frame is None:
            self._background = None
        else:
            rgb = frame[:, :, ::-1].copy()
            h, w, ch = rgb.shape
            qimg = QImage(rgb.data, w, h, ch * w, QImage.Format_RGB888)
            self._background = QPixmap.fromImage(qimg)
        self.update()

    def set_frame_result(self, result: FrameResult) -> None:
        self._result = result
        self.update()

    def set_active_control(self, identity: Optional[str]) -> None:
        self._active_control = identity
        self.update()

    def resizeEvent(self, event):
        self.surface.resize(self.width(), self.height())
        super().resizeEvent(event)

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)

        if self._background is not None:
            painter.drawPixmap(self.rect(), self._background)
        else:
            painter.fillRect(self.rect(), QColor(250, 250, 250))

        painter.drawImage(0, 0, self.surface.image)
        self._paint_zones(painter, self._result.zones)
        self._paint_cursor(painter)

    def _paint_zones(self, painter: QPainter, zones: Sequence[ControlZone]):
        w = self.width()
        result = self._result
        for zone in zones:
            rect = QRectF(w - zone.x - zone.width, zone.y, zone.width, zone.height)
            hovered = zone.identity == result.hovered
            edge = QColor(255, 200, 0) if hovered else QColor(255, 255, 255)
            pen = QPen(edge, 4 if zone.identity == self._active_control else 2)

            if zone.shape == ZoneShape.CIRCLE:
                painter.setBrush(QColor(zone.color or "#808080"))
                painter.setPen(pen)
                painter.drawEllipse(rect)
            else:
                painter.setBrush(QColor(30, 30, 30, 200))
                painter.setPen(pen)
                painter.drawRoundedRect(rect, 8, 8)
                painter.setPen(QColor(255, 255, 255))
                painter.drawText(rect, Qt.AlignCenter, zone.identity.capitalize())

            if hovered and result.dwell_progress > 0:
                ring = rect.adjusted(-6, -6, 6, 6)
                painter.setBrush(Qt.NoBrush)
                painter.setPen(QPen(QColor(255, 200, 0), 4))
                # Qt angles are in 1/16 degree, counter-clockwise from 3 o'clock
                painter.drawArc(ring, 90 * 16, int(-360 * 16 * result.dwell_progress))

    def _paint_cursor(self, painter: QPainter):
        pointer = self._result.pointer
        if pointer is None:
            return
        center = QPointF(pointer[0], pointer[1])
        if self._result.engaged:
            painter.setBrush(QColor(255, 80, 80, 220))
            painter.setPen(QPen(QColor(255, 255, 255), 2))
            painter.drawEllipse(center, 8, 8)
        else:
            painter.setBrush(Qt.NoBrush)
            painter.setPen(QPen(QColor(255, 200, 100, 200), 3))
            painter.drawEllipse(center, 12, 12)
