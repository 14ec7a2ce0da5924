import pytest

from airgesture.config import Config
from airgesture.gestures.landmarks import LandmarkSample
from airgesture.gestures.scroll import ScrollViewport
from airgesture.gestures.stroke import StrokeSurface


WRIST = (0.50, 0.80)

# Knuckle (MCP) positions of index, middle, ring, pinky
FINGER_MCPS = [(0.44, 0.60), (0.50, 0.58), (0.56, 0.60), (0.61, 0.63)]

# y offsets from the MCP for (PIP, DIP, TIP)
FINGER_POSES = {
    "up": (-0.10, -0.15, -0.20),
    "down": (-0.05, 0.00, 0.02),
    "half": (-0.08, -0.09, -0.10),
}

# CMC, MCP, IP, TIP
THUMB_POSES = {
    "out": [(0.43, 0.76), (0.36, 0.70), (0.29, 0.62), (0.22, 0.55)],
    "tucked": [(0.43, 0.76), (0.40, 0.70), (0.42, 0.64), (0.47, 0.63)],
}


def build_hand(fingers="up", thumb="tucked", offset=(0.0, 0.0)):
    """
    Synthetic 21-point hand in normalized image coordinates.

    `fingers` is one pose for all four fingers or a list of four poses
    (index, middle, ring, pinky). `offset` shifts the whole hand.
    """
    if isinstance(fingers, str):
        fingers = [fingers] * 4
    points = [WRIST] + list(THUMB_POSES[thumb])
    for (mx, my), pose in zip(FINGER_MCPS, fingers):
        points.append((mx, my))
        for dy in FINGER_POSES[pose]:
            points.append((mx, my + dy))
    dx, dy = offset
    return LandmarkSample.from_points([(x + dx, y + dy) for x, y in points])


@pytest.fixture
def make_hand():
    return build_hand


@pytest.fixture
def config():
    return Config()


class RecordingSurface(StrokeSurface):
    def __init__(self):
        self.calls = []

    def draw_dot(self, center, style):
        self.calls.append(("dot", center, style))

    def draw_curve(self, start, control, end, style):
        self.calls.append(("curve", start, control, end, style))

    def clear(self):
        self.calls.append(("clear",))

    def kinds(self):
        return [call[0] for call in self.calls]


class RecordingViewport(ScrollViewport):
    def __init__(self):
        self.calls = []

    def scroll_by(self, dx, dy):
        self.calls.append((dx, dy))

    @property
    def total(self):
        return (sum(dx for dx, _ in self.calls), sum(dy for _, dy in self.calls))


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def viewport():
    return RecordingViewport()
