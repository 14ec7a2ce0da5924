"""
Hand landmark samples and fail-closed geometry helpers.

Every helper here returns a safe negative (False / None) on a short or
non-finite sample instead of raising, so one bad frame can never take
down the frame loop.
"""
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple
import math

Point = Tuple[float, float]

NUM_LANDMARKS = 21

# MediaPipe hand landmark indices
WRIST = 0
THUMB_CMC = 1
THUMB_MCP = 2
THUMB_IP = 3
THUMB_TIP = 4
INDEX_MCP = 5
INDEX_PIP = 6
INDEX_DIP = 7
INDEX_TIP = 8
MIDDLE_MCP = 9
MIDDLE_PIP = 10
MIDDLE_DIP = 11
MIDDLE_TIP = 12
RING_MCP = 13
RING_PIP = 14
RING_DIP = 15
RING_TIP = 16
PINKY_MCP = 17
PINKY_PIP = 18
PINKY_DIP = 19
PINKY_TIP = 20

# (tip, pip) pairs for the four non-thumb fingers
FINGER_JOINTS = (
    (INDEX_TIP, INDEX_PIP),
    (MIDDLE_TIP, MIDDLE_PIP),
    (RING_TIP, RING_PIP),
    (PINKY_TIP, PINKY_PIP),
)


def _to_point(raw) -> Point:
    try:
        return (float(raw[0]), float(raw[1]))
    except (IndexError, TypeError, ValueError):
        return (math.nan, math.nan)


@dataclass(frozen=True)
class LandmarkSample:
    """
    One detected hand for one video frame.

    Attributes:
        points: Normalized (x, y) landmarks, 0-1, indexed as in MediaPipe
        handedness: 'Left', 'Right' or 'Unknown'
        confidence: Detection confidence 0-1
    """
    points: Tuple[Point, ...]
    handedness: str = "Unknown"
    confidence: float = 1.0

    @classmethod
    def from_points(
        cls,
        points: Iterable[Sequence[float]],
        handedness: str = "Unknown",
        confidence: float = 1.0,
    ) -> "LandmarkSample":
        """
        Build a sample from (x, y) or (x, y, z) tuples. z is dropped.

        A point without two numeric coordinates becomes (nan, nan), which
        keeps landmark indices aligned and marks the sample incomplete.
        """
        converted = tuple(_to_point(p) for p in points)
        return cls(points=converted, handedness=handedness, confidence=confidence)

    @property
    def is_complete(self) -> bool:
        """True when all 21 landmarks are present and finite."""
        if len(self.points) < NUM_LANDMARKS:
            return False
        return all(math.isfinite(x) and math.isfinite(y) for x, y in self.points)

    def get(self, index: int) -> Optional[Point]:
        """Landmark by index, or None if the sample is too short."""
        if 0 <= index < len(self.points):
            return self.points[index]
        return None

    @property
    def wrist(self) -> Optional[Point]:
        return self.get(WRIST)

    @property
    def thumb_tip(self) -> Optional[Point]:
        return self.get(THUMB_TIP)

    @property
    def index_tip(self) -> Optional[Point]:
        return self.get(INDEX_TIP)


class LandmarkBuffer:
    """
    Most recent sample (or "no hand") plus the one before it.

    Lets the engine tell a fresh loss of tracking apart from a hand that
    has been absent for a while.
    """

    def __init__(self):
        self._current: Optional[LandmarkSample] = None
        self._previous: Optional[LandmarkSample] = None

    def push(self, sample: Optional[LandmarkSample]) -> None:
        self._previous = self._current
        self._current = sample

    @property
    def current(self) -> Optional[LandmarkSample]:
        return self._current

    @property
    def previous(self) -> Optional[LandmarkSample]:
        return self._previous

    @property
    def hand_present(self) -> bool:
        return self._current is not None

    @property
    def tracking_lost(self) -> bool:
        """True on the first frame without a hand after one with a hand."""
        return self._current is None and self._previous is not None

    def clear(self) -> None:
        self._current = None
        self._previous = None


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between two 2D points."""
    return math.hypot(a[0] - b[0], a[1] - b[1])


def midpoint(a: Point, b: Point) -> Point:
    return ((a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0)


def pinch_distance(sample: Optional[LandmarkSample]) -> Optional[float]:
    """Thumb tip to index tip distance, or None for an unusable sample."""
    if sample is None or not sample.is_complete:
        return None
    return distance(sample.points[THUMB_TIP], sample.points[INDEX_TIP])


def is_pinch(sample: Optional[LandmarkSample], threshold: float = 0.05) -> bool:
    """Thumb tip within `threshold` (normalized units) of the index tip."""
    dist = pinch_distance(sample)
    return dist is not None and dist < threshold


def fingertip_to_canvas(
    sample: Optional[LandmarkSample],
    width: float,
    height: float,
    mirror: bool = True,
) -> Optional[Point]:
    """
    Index fingertip in canvas pixels.

    The camera feed is flipped relative to the canvas, so x is mirrored
    by default. Returns None for degenerate canvases or unusable samples.
    """
    if width <= 0 or height <= 0:
        return None
    if sample is None or not sample.is_complete:
        return None
    x, y = sample.points[INDEX_TIP]
    if mirror:
        x = 1.0 - x
    return (x * width, y * height)
