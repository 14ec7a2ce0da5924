"""
Gesture classification from hand landmarks.

Two raw detectors share one debounced classifier:
- Draw mode: closed fist with the thumb tucked in
- Scroll mode: open hand, closed fist, pointing and horizontal swipes
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional
import logging

from ..config import ClassifierConfig
from .landmarks import (
    LandmarkSample, FINGER_JOINTS, distance,
    WRIST, THUMB_IP, THUMB_TIP,
    INDEX_MCP, INDEX_DIP, INDEX_TIP, MIDDLE_MCP,
)

logger = logging.getLogger(__name__)


class GestureLabel(Enum):
    """Discrete gesture labels."""
    NONE = "none"
    OPEN_HAND = "openHand"
    CLOSED_FIST = "closedFist"
    FIST_THUMB_TUCKED = "fistThumbTucked"
    SWIPE_LEFT = "swipeLeft"
    SWIPE_RIGHT = "swipeRight"
    POINT_LEFT = "pointLeft"
    POINT_RIGHT = "pointRight"

    @property
    def is_active(self) -> bool:
        return self is not GestureLabel.NONE


@dataclass(frozen=True)
class Classification:
    """Raw per-frame label plus the debounced label actually acted on."""
    raw: GestureLabel
    effective: GestureLabel
    changed: bool = False

    @property
    def engaged(self) -> bool:
        return self.effective.is_active


class FistThumbTuckedDetector:
    """
    Draw-mode detector: a fist with the thumb folded over or into the palm.

    At least `min_closed_fingers` of index/middle/ring/pinky must be curled,
    and any one of three thumb tests must hold while the thumb tip stays
    near the index knuckle. The inclusive-or tolerates hand rotation.
    """

    def __init__(self, config: ClassifierConfig):
        self._config = config

    def closed_fingers(self, sample: LandmarkSample) -> int:
        """Count curled non-thumb fingers (tip not meaningfully above its PIP)."""
        if not sample.is_complete:
            return 0
        pts = sample.points
        eps = self._config.finger_closed_tolerance
        count = 0
        for tip, pip in FINGER_JOINTS:
            closed = pts[tip][1] > pts[pip][1] - eps
            if tip == INDEX_TIP:
                # Index also has to be below its DIP, it is the finger most
                # likely to be half-raised while pointing.
                closed = closed and pts[tip][1] > pts[INDEX_DIP][1] - eps
            if closed:
                count += 1
        return count

    def is_thumb_tucked(self, sample: LandmarkSample) -> bool:
        if not sample.is_complete:
            return False
        pts = sample.points
        cfg = self._config
        thumb_tip = pts[THUMB_TIP]

        near_palm = distance(thumb_tip, pts[INDEX_MCP]) < cfg.thumb_palm_radius
        if not near_palm:
            return False

        below_knuckles = (
            thumb_tip[1] > pts[INDEX_MCP][1] - cfg.thumb_below_margin
            and thumb_tip[1] > pts[MIDDLE_MCP][1] - cfg.thumb_below_margin
        )
        bent = thumb_tip[1] > pts[THUMB_IP][1]
        wrist = pts[WRIST]
        closer_to_wrist = (
            distance(thumb_tip, wrist) < distance(pts[INDEX_TIP], wrist) * cfg.thumb_wrist_ratio
        )
        return below_knuckles or bent or closer_to_wrist

    def classify(self, sample: LandmarkSample) -> GestureLabel:
        if self.closed_fingers(sample) < self._config.min_closed_fingers:
            return GestureLabel.NONE
        if not self.is_thumb_tucked(sample):
            return GestureLabel.NONE
        return GestureLabel.FIST_THUMB_TUCKED

    def reset(self) -> None:
        pass


class ScrollGestureDetector:
    """
    Scroll-mode detector.

    A horizontal wrist jump between consecutive frames wins over every
    finger-based label. The previous wrist x is refreshed on every usable
    frame, whatever label comes out.
    """

    def __init__(self, config: ClassifierConfig):
        self._config = config
        self._prev_wrist_x: Optional[float] = None

    @property
    def previous_wrist_x(self) -> Optional[float]:
        return self._prev_wrist_x

    def finger_states(self, sample: LandmarkSample):
        """
        Per-finger (extended, closed) flags for index, middle, ring, pinky.

        A finger between the two thresholds is neither.
        """
        pts = sample.points
        margin = self._config.finger_extended_margin
        states = []
        for tip, pip in FINGER_JOINTS:
            tip_y, pip_y = pts[tip][1], pts[pip][1]
            states.append((tip_y < pip_y - margin, tip_y > pip_y))
        return states

    @staticmethod
    def is_thumb_extended(sample: LandmarkSample) -> bool:
        if not sample.is_complete:
            return False
        return sample.points[THUMB_TIP][0] < sample.points[THUMB_IP][0]

    def classify(self, sample: LandmarkSample) -> GestureLabel:
        if not sample.is_complete:
            return GestureLabel.NONE
        cfg = self._config

        wrist_x = sample.points[WRIST][0]
        prev_x = self._prev_wrist_x
        self._prev_wrist_x = wrist_x
        if prev_x is not None:
            delta = wrist_x - prev_x
            if delta > cfg.swipe_threshold:
                return GestureLabel.SWIPE_RIGHT
            if delta < -cfg.swipe_threshold:
                return GestureLabel.SWIPE_LEFT

        states = self.finger_states(sample)
        extended = [ext for ext, _ in states]
        index_ext, middle_ext, ring_ext, pinky_ext = extended
        n_extended = sum(extended)
        n_closed = sum(closed for _, closed in states)
        thumb_ext = self.is_thumb_extended(sample)

        if n_extended >= cfg.min_extended_fingers and not thumb_ext:
            return GestureLabel.OPEN_HAND
        if n_closed >= cfg.min_fist_fingers:
            return GestureLabel.CLOSED_FIST
        if thumb_ext and index_ext and not (middle_ext or ring_ext or pinky_ext):
            return GestureLabel.POINT_LEFT
        if not thumb_ext and index_ext and middle_ext and not (ring_ext or pinky_ext):
            return GestureLabel.POINT_RIGHT
        return GestureLabel.NONE

    def reset(self) -> None:
        self._prev_wrist_x = None


class GestureDebouncer:
    """
    Hysteresis on top of a raw label stream.

    A label (active or none) has to be seen for `frames` consecutive
    frames before the effective label switches to it.
    """

    def __init__(self, frames: int = 3):
        if frames < 1:
            raise ValueError("frames must be at least 1")
        self._frames = frames
        self._effective = GestureLabel.NONE
        self._candidate: Optional[GestureLabel] = None
        self._count = 0

    @property
    def effective(self) -> GestureLabel:
        return self._effective

    @property
    def pending(self) -> int:
        """Frames the current candidate has been seen so far."""
        return self._count

    def update(self, raw: GestureLabel) -> bool:
        """Feed one raw label. Returns True if the effective label changed."""
        if raw == self._effective:
            self._candidate = None
            self._count = 0
            return False

        if raw == self._candidate:
            self._count += 1
        else:
            self._candidate = raw
            self._count = 1

        if self._count >= self._frames:
            self._effective = raw
            self._candidate = None
            self._count = 0
            return True
        return False

    def reset(self) -> None:
        self._effective = GestureLabel.NONE
        self._candidate = None
        self._count = 0


class GestureClassifier:
    """
    Maps one landmark sample per frame to a debounced gesture label.

    States are Inactive (effective NONE) and Active(label). Losing the
    hand drops straight back to Inactive with clean counters.
    """

    def __init__(self, config: ClassifierConfig, mode: str = "draw"):
        self._config = config
        self._mode = mode
        if mode == "scroll":
            self._detector = ScrollGestureDetector(config)
        else:
            self._detector = FistThumbTuckedDetector(config)
        self._debouncer = GestureDebouncer(config.debounce_frames)

    @property
    def mode(self) -> str:
        return self._mode

    @property
    def detector(self):
        return self._detector

    @property
    def effective(self) -> GestureLabel:
        return self._debouncer.effective

    def classify_raw(self, sample: Optional[LandmarkSample]) -> GestureLabel:
        """Undebounced label for one sample. Never raises."""
        if sample is None:
            return GestureLabel.NONE
        if not sample.is_complete:
            logger.warning("Malformed landmark sample (%d points), treating as no gesture",
                           len(sample.points))
            return GestureLabel.NONE
        return self._detector.classify(sample)

    def update(self, sample: Optional[LandmarkSample]) -> Classification:
        if sample is None:
            was_engaged = self._debouncer.effective.is_active
            self.reset()
            return Classification(GestureLabel.NONE, GestureLabel.NONE, changed=was_engaged)

        raw = self.classify_raw(sample)
        changed = self._debouncer.update(raw)
        effective = self._debouncer.effective
        if changed:
            logger.debug("Gesture %s -> effective %s", raw.value, effective.value)
        return Classification(raw, effective, changed)

    def reset(self) -> None:
        self._debouncer.reset()
        self._detector.reset()
