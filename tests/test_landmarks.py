import math

import pytest

from airgesture.gestures.landmarks import (
    INDEX_TIP, THUMB_TIP, LandmarkBuffer, LandmarkSample,
    fingertip_to_canvas, is_pinch, midpoint, pinch_distance,
)


def test_from_points_drops_z():
    sample = LandmarkSample.from_points([(0.1, 0.2, -0.5)] * 21, handedness="Right")
    assert sample.points[0] == (0.1, 0.2)
    assert sample.handedness == "Right"
    assert sample.is_complete


def test_short_sample_is_incomplete():
    sample = LandmarkSample.from_points([(0.5, 0.5)] * 8)
    assert not sample.is_complete
    assert sample.get(INDEX_TIP) is None
    assert sample.get(3) == (0.5, 0.5)


def test_malformed_points_fail_closed():
    sample = LandmarkSample.from_points([(0.5,)] * 21)
    assert len(sample.points) == 21
    assert not sample.is_complete
    assert not is_pinch(sample)
    assert fingertip_to_canvas(sample, 640, 480) is None

    points = [(0.5, 0.5)] * 21
    points[INDEX_TIP] = ("x", None)
    assert not LandmarkSample.from_points(points).is_complete


def test_non_finite_sample_is_incomplete(make_hand):
    points = list(make_hand().points)
    points[5] = (math.nan, 0.5)
    assert not LandmarkSample.from_points(points).is_complete


def test_pinch_uses_strict_threshold():
    points = [(0.5, 0.5)] * 21
    points[THUMB_TIP] = (0.50, 0.50)
    points[INDEX_TIP] = (0.53, 0.54)     # distance 0.05
    sample = LandmarkSample.from_points(points)
    assert pinch_distance(sample) == pytest.approx(0.05)
    assert not is_pinch(sample, 0.05)
    assert is_pinch(sample, 0.051)


def test_tucked_fist_pinches(make_hand):
    assert is_pinch(make_hand(fingers="down", thumb="tucked"))
    assert not is_pinch(make_hand(fingers="up", thumb="out"))


def test_pinch_fails_closed():
    assert not is_pinch(None)
    assert not is_pinch(LandmarkSample.from_points([(0.5, 0.5)] * 4))


def test_fingertip_is_mirrored_into_canvas_pixels(make_hand):
    sample = make_hand(fingers="up")     # index tip at (0.44, 0.40)
    x, y = fingertip_to_canvas(sample, 640, 480)
    assert x == pytest.approx((1 - 0.44) * 640)
    assert y == pytest.approx(0.40 * 480)

    x, _ = fingertip_to_canvas(sample, 640, 480, mirror=False)
    assert x == pytest.approx(0.44 * 640)


def test_fingertip_on_degenerate_canvas(make_hand):
    assert fingertip_to_canvas(make_hand(), 0, 480) is None
    assert fingertip_to_canvas(make_hand(), 640, -1) is None
    assert fingertip_to_canvas(None, 640, 480) is None


def test_midpoint():
    assert midpoint((0, 0), (10, 4)) == (5.0, 2.0)


def test_buffer_reports_fresh_tracking_loss(make_hand):
    buffer = LandmarkBuffer()
    buffer.push(make_hand())
    assert buffer.hand_present
    assert not buffer.tracking_lost

    buffer.push(None)
    assert buffer.tracking_lost
    assert buffer.previous is not None

    buffer.push(None)
    assert not buffer.tracking_lost
    assert not buffer.hand_present
