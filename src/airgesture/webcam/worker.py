"""
Background worker for MediaPipe hand tracking.
Runs in a separate QThread so camera reads never block the UI; the
gesture engine itself runs on the UI thread from the emitted samples.
"""
import logging
import time
from typing import Optional
from PyQt5.QtCore import QObject, pyqtSignal

from ..config import Config
from .hand_tracker import HandTracker

logger = logging.getLogger(__name__)


class WebcamWorker(QObject):
    """
    Pulls one LandmarkSample (or None) per camera frame and emits it.

    Provider failures are terminal: `error` is emitted and the loop ends.
    """
    # Signals
    sample_ready = pyqtSignal(object)  # LandmarkSample or None
    frame_ready = pyqtSignal(object)   # BGR preview frame (numpy array)
    error = pyqtSignal(str)
    finished = pyqtSignal()

    def __init__(self, config: Config, preview_fps: float = 15.0, parent=None):
        super().__init__(parent)
        self._config = config
        self._tracker: Optional[HandTracker] = None
        self._is_running = False
        self._preview_interval = 1.0 / preview_fps if preview_fps > 0 else None

    @property
    def is_running(self) -> bool:
        return self._is_running

    def start_process(self):
        """Main capture loop. Runs in the worker thread."""
        self._tracker = HandTracker(self._config)

        if not self._tracker.start():
            self.error.emit("Could not start hand tracking (camera or model unavailable)")
            self.finished.emit()
            return

        self._is_running = True
        last_preview = 0.0
        show_landmarks = self._config.app.show_landmarks

        try:
            while self._is_running:
                # cap.read() paces the loop at the camera frame rate
                sample = self._tracker.get_landmarks()
                self.sample_ready.emit(sample)

                now = time.perf_counter()
                if self._preview_interval is not None and now - last_preview >= self._preview_interval:
                    frame = self._tracker.get_frame_with_landmarks(
                        sample if show_landmarks else None
                    )
                    if frame is not None:
                        self.frame_ready.emit(frame)
                    last_preview = now

        except Exception as e:
            logger.exception("Hand tracking failed")
            self.error.emit(f"Hand tracking failed: {e}")
        finally:
            self._is_running = False
            self._tracker.stop()
            self.finished.emit()

    def stop_process(self):
        """Signal the loop to stop; resources are released in the worker thread."""
        self._is_running = False
