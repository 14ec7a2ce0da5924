"""
Main window - hosts the gesture engine on the GUI thread.

Samples arrive from the webcam worker through a queued connection, so
every engine call, stroke and scroll tick happens on the Qt event loop.
"""
from pathlib import Path
from typing import Optional
from PyQt5.QtWidgets import (
    QCheckBox, QHBoxLayout, QLabel, QMainWindow, QPushButton, QSlider,
    QStackedWidget, QVBoxLayout, QWidget,
)
from PyQt5.QtCore import Qt
from PyQt5.QtGui import QImage, QPixmap
import logging
import numpy as np

from ..config import Config
from ..gestures.engine import DRAW, SCROLL, FrameResult, GestureEngine
from ..gestures.scroll import MAX_SPEED, MIN_SPEED, ScrollDirection, describe_speed
from ..gestures.stroke import Tool
from .paint_canvas import PaintCanvas
from .qt_timer import QtTimerScheduler
from .scroll_view import DocumentView

logger = logging.getLogger(__name__)

NUDGE_KEYS = {
    Qt.Key_Up: ScrollDirection.UP,
    Qt.Key_Down: ScrollDirection.DOWN,
    Qt.Key_Left: ScrollDirection.LEFT,
    Qt.Key_Right: ScrollDirection.RIGHT,
}


class MainWindow(QMainWindow):
    """
    Draw mode shows the paint canvas; scroll mode shows the document.

    Keys: M toggles mode, C clears, B/E pick brush/eraser, Space toggles
    manual drawing, +/- change scroll speed, arrows nudge the document.
    """

    def __init__(self, config: Config, document: Optional[Path] = None, parent=None):
        super().__init__(parent)
        self._config = config
        self.setWindowTitle("AirGesture")
        self.resize(1100, 720)

        self.canvas = PaintCanvas()
        self.document = DocumentView(document)
        self.scheduler = QtTimerScheduler(self)
        self.engine = GestureEngine(
            config,
            surface=self.canvas.surface,
            viewport=self.document.viewport_adapter,
            scheduler=self.scheduler,
            on_control=self._on_control,
        )
        self._last_label = None

        self._setup_ui()
        self._sync_mode_widgets()

    def _setup_ui(self):
        central = QWidget()
        layout = QHBoxLayout(central)
        self.setCentralWidget(central)

        self.stack = QStackedWidget()
        self.stack.addWidget(self.canvas)
        self.stack.addWidget(self.document)
        layout.addWidget(self.stack, stretch=1)

        panel = QVBoxLayout()
        layout.addLayout(panel)

        self.camera_preview = QLabel()
        self.camera_preview.setFixedSize(240, 180)
        self.camera_preview.setStyleSheet("background: black;")
        panel.addWidget(self.camera_preview)

        self.mode_button = QPushButton()
        self.mode_button.clicked.connect(self.toggle_mode)
        panel.addWidget(self.mode_button)

        self.clear_button = QPushButton("Clear canvas")
        self.clear_button.clicked.connect(self.engine.clear_canvas)
        self.clear_button.clicked.connect(self.canvas.update)
        panel.addWidget(self.clear_button)

        self.manual_check = QCheckBox("Manual drawing control")
        self.manual_check.setChecked(self.engine.settings.control_mode == "manual")
        self.manual_check.toggled.connect(self._on_manual_toggled)
        panel.addWidget(self.manual_check)

        self.speed_label = QLabel()
        panel.addWidget(self.speed_label)
        self.speed_slider = QSlider(Qt.Horizontal)
        self.speed_slider.setRange(MIN_SPEED, MAX_SPEED)
        self.speed_slider.setValue(self.engine.settings.scroll_speed)
        self.speed_slider.valueChanged.connect(self.set_speed)
        panel.addWidget(self.speed_slider)
        self._update_speed_label()

        self.status_label = QLabel("Waiting for camera...")
        self.status_label.setWordWrap(True)
        panel.addWidget(self.status_label)
        panel.addStretch(1)

    # ------------------------------------------------------------------
    # Worker slots
    # ------------------------------------------------------------------
    def handle_sample(self, sample):
        """Run one engine frame. Connected with Qt.QueuedConnection."""
        result = self.engine.process(sample, (self.canvas.width(), self.canvas.height()))
        if self.engine.mode == DRAW:
            self.canvas.set_frame_result(result)
        self._update_status(result)

    def handle_frame(self, frame: np.ndarray):
        if frame is None:
            self.camera_preview.clear()
            return
        if self.engine.mode == DRAW:
            self.canvas.set_camera_frame(frame)
        rgb = frame[:, :, ::-1].copy()
        h, w, ch = rgb.shape
        qimg = QImage(rgb.data, w, h, ch * w, QImage.Format_RGB888)
        pixmap = QPixmap.fromImage(qimg).scaled(
            self.camera_preview.size(), Qt.KeepAspectRatio, Qt.SmoothTransformation
        )
        self.camera_preview.setPixmap(pixmap)

    def handle_error(self, message: str):
        """Provider failure is terminal for the session."""
        logger.error("Worker error: %s", message)
        self.engine.shutdown()
        self.canvas.set_frame_result(FrameResult())
        self.status_label.setText(f"Tracking stopped: {message}")

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------
    def toggle_mode(self):
        self.engine.set_mode(SCROLL if self.engine.mode == DRAW else DRAW)
        self._sync_mode_widgets()

    def set_speed(self, speed: int):
        speed = self.engine.set_scroll_speed(speed)
        if self.speed_slider.value() != speed:
            self.speed_slider.setValue(speed)
        self._update_speed_label()

    def _on_manual_toggled(self, checked: bool):
        self.engine.set_control_mode("manual" if checked else "gesture")

    def _on_control(self, identity: str):
        self.canvas.set_active_control(identity)

    def _sync_mode_widgets(self):
        draw = self.engine.mode == DRAW
        self.stack.setCurrentWidget(self.canvas if draw else self.document)
        self.mode_button.setText("Switch to scroll mode" if draw else "Switch to draw mode")
        self.clear_button.setEnabled(draw)
        self.manual_check.setEnabled(draw)
        self.speed_slider.setEnabled(not draw)
        self.canvas.set_frame_result(FrameResult())

    def _update_speed_label(self):
        speed = self.engine.settings.scroll_speed
        self.speed_label.setText(f"Scroll speed: {speed} ({describe_speed(speed)})")

    def _update_status(self, result: FrameResult):
        if result.label != self._last_label:
            self._last_label = result.label
            logger.debug("Effective gesture: %s", result.label.value)

        if not result.hand_present:
            text = "No hand detected"
        elif self.engine.mode == SCROLL:
            direction = result.scroll_direction.value if result.scroll_direction else "stopped"
            text = f"Gesture: {result.label.value}\nScrolling: {direction}"
        else:
            tool = self.engine.settings.tool.value
            state = "drawing" if result.engaged else "idle"
            text = f"Gesture: {result.label.value}\nTool: {tool} ({state})"
            if result.hovered:
                text += f"\nOver: {result.hovered} {int(result.dwell_progress * 100)}%"
        self.status_label.setText(text)

    # ------------------------------------------------------------------
    # Keyboard
    # ------------------------------------------------------------------
    def keyPressEvent(self, event):
        key = event.key()
        if key == Qt.Key_M:
            self.toggle_mode()
        elif key == Qt.Key_C:
            self.engine.clear_canvas()
            self.canvas.update()
        elif key == Qt.Key_B:
            self.engine.set_tool(Tool.BRUSH)
        elif key == Qt.Key_E:
            self.engine.set_tool(Tool.ERASER)
        elif key == Qt.Key_Space and self.engine.settings.control_mode == "manual":
            self.engine.set_manual_drawing(not self.engine.settings.manual_drawing)
        elif key in (Qt.Key_Plus, Qt.Key_Equal):
            self.set_speed(self.engine.settings.scroll_speed + 1)
        elif key == Qt.Key_Minus:
            self.set_speed(self.engine.settings.scroll_speed - 1)
        elif key in NUDGE_KEYS and self.engine.mode == SCROLL:
            self.engine.nudge(NUDGE_KEYS[key])
        else:
            super().keyPressEvent(event)

    def closeEvent(self, event):
        self.engine.shutdown()
        self.scheduler.cancel_all()
        super().closeEvent(event)
