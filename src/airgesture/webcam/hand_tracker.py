"""
MediaPipe hand landmark provider using the Tasks API.
Handles camera capture and yields at most one LandmarkSample per frame.
"""
from pathlib import Path
from typing import Optional
import logging
import time
import cv2
import numpy as np
import mediapipe as mp

from ..config import Config, CameraConfig, MediaPipeConfig
from ..gestures.landmarks import LandmarkSample

logger = logging.getLogger(__name__)

# MediaPipe Tasks API imports
BaseOptions = mp.tasks.BaseOptions
HandLandmarker = mp.tasks.vision.HandLandmarker
HandLandmarkerOptions = mp.tasks.vision.HandLandmarkerOptions
VisionRunningMode = mp.tasks.vision.RunningMode

MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/hand_landmarker/"
    "hand_landmarker/float16/1/hand_landmarker.task"
)

# Hand connections for drawing (same as MediaPipe's HAND_CONNECTIONS)
HAND_CONNECTIONS = [
    (0, 1), (1, 2), (2, 3), (3, 4),      # Thumb
    (0, 5), (5, 6), (6, 7), (7, 8),      # Index
    (0, 9), (9, 10), (10, 11), (11, 12), # Middle
    (0, 13), (13, 14), (14, 15), (15, 16), # Ring
    (0, 17), (17, 18), (18, 19), (19, 20), # Pinky
    (5, 9), (9, 13), (13, 17),           # Palm
]


class HandTracker:
    """
    Camera + MediaPipe HandLandmarker in VIDEO mode.

    Only the first detected hand is reported. Landmarks come from the raw
    (unmirrored) camera frame; mirroring happens on display.
    """

    # Default model path relative to project root
    DEFAULT_MODEL_PATH = Path(__file__).parent.parent.parent.parent / "models" / "hand_landmarker.task"

    def __init__(self, config: Config, model_path: Optional[Path] = None):
        """
        Initialize hand tracker.

        Args:
            config: AirGesture configuration
            model_path: Path to hand_landmarker.task model file
        """
        self._camera_config: CameraConfig = config.camera
        self._mp_config: MediaPipeConfig = config.mediapipe
        if model_path is None and self._mp_config.model_path:
            model_path = Path(self._mp_config.model_path)
        self._model_path = Path(model_path) if model_path else self.DEFAULT_MODEL_PATH

        # Lazy initialization
        self._cap: Optional[cv2.VideoCapture] = None
        self._landmarker: Optional[HandLandmarker] = None

        # State
        self._is_running = False
        self._last_frame: Optional[np.ndarray] = None
        self._frame_count = 0
        self._start_perf: float = 0
        self._last_timestamp_ms: int = -1

    def start(self) -> bool:
        """
        Start camera capture and MediaPipe.

        Returns:
            True if started successfully, False otherwise.
        """
        if self._is_running:
            return True

        if not self._model_path.exists():
            logger.error("Model file not found: %s (download from %s)", self._model_path, MODEL_URL)
            return False

        self._cap = cv2.VideoCapture(self._camera_config.device_id)
        if not self._cap.isOpened():
            logger.error("Could not open camera %d", self._camera_config.device_id)
            self._cap = None
            return False

        self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, self._camera_config.width)
        self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self._camera_config.height)
        self._cap.set(cv2.CAP_PROP_FPS, self._camera_config.fps)

        options = HandLandmarkerOptions(
            base_options=BaseOptions(model_asset_path=str(self._model_path)),
            running_mode=VisionRunningMode.VIDEO,
            num_hands=self._mp_config.max_num_hands,
            min_hand_detection_confidence=self._mp_config.min_detection_confidence,
            min_tracking_confidence=self._mp_config.min_tracking_confidence,
        )

        try:
            self._landmarker = HandLandmarker.create_from_options(options)
        except (RuntimeError, ValueError) as e:
            logger.error("MediaPipe HandLandmarker failed to load: %s", e)
            self._cap.release()
            self._cap = None
            return False

        self._start_perf = time.perf_counter()
        self._last_timestamp_ms = -1
        self._is_running = True
        logger.info("Hand tracker started (camera %d)", self._camera_config.device_id)
        return True

    def stop(self) -> None:
        """Stop camera capture and release resources."""
        self._is_running = False

        if self._landmarker:
            self._landmarker.close()
            self._landmarker = None

        if self._cap:
            self._cap.release()
            self._cap = None

        self._last_frame = None

    def get_landmarks(self) -> Optional[LandmarkSample]:
        """
        Capture one frame and detect the first hand in it.

        Returns None when no hand is visible or no frame could be read.
        """
        if not self._is_running or self._cap is None or self._landmarker is None:
            return None

        ret, frame = self._cap.read()
        if not ret:
            return None

        self._frame_count += 1

        self._last_frame = frame

        rgb_frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        rgb_frame.flags.writeable = False
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb_frame)

        # Strictly monotonic timestamp required by VIDEO mode
        timestamp_ms = int((time.perf_counter() - self._start_perf) * 1000)
        if timestamp_ms <= self._last_timestamp_ms:
            timestamp_ms = self._last_timestamp_ms + 1
        self._last_timestamp_ms = timestamp_ms

        result = self._landmarker.detect_for_video(mp_image, timestamp_ms)

        if not result.hand_landmarks:
            return None

        hand_landmarks = result.hand_landmarks[0]
        handedness = result.handedness[0][0]

        return LandmarkSample.from_points(
            [(lm.x, lm.y) for lm in hand_landmarks],
            handedness=handedness.category_name,
            confidence=handedness.score,
        )

    def get_frame_with_landmarks(
        self,
        sample: Optional[LandmarkSample] = None,
        black_background: bool = False,
        mirror: bool = True,
    ) -> Optional[np.ndarray]:
        """
        Get last frame with optional landmark overlay.

        Args:
            sample: If provided, draw its landmarks on the frame.
            black_background: If True, draw on black instead of camera image.
            mirror: Flip horizontally for display.

        Returns:
            Frame with landmarks drawn, or None if no frame available.
        """
        if self._last_frame is None:
            return None

        if black_background:
            frame = np.zeros_like(self._last_frame)
        else:
            frame = self._last_frame.copy()

        if sample is not None:
            draw_landmarks(frame, sample)
        if mirror:
            frame = cv2.flip(frame, 1)
        return frame

    @property
    def last_frame(self) -> Optional[np.ndarray]:
        return self._last_frame

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def frame_count(self) -> int:
        return self._frame_count


def draw_landmarks(frame: np.ndarray, sample: LandmarkSample,
                   color=(0, 255, 0), joint_color=(0, 0, 255)) -> None:
    """Draw the hand skeleton onto a BGR frame in place."""
    h, w = frame.shape[:2]
    points = sample.points
    for start_idx, end_idx in HAND_CONNECTIONS:
        if end_idx >= len(points):
            continue
        start, end = points[start_idx], points[end_idx]
        cv2.line(frame, (int(start[0] * w), int(start[1] * h)),
                 (int(end[0] * w), int(end[1] * h)), color, 2)
    for x, y in points:
        cv2.circle(frame, (int(x * w), int(y * h)), 3, joint_color, -1)
