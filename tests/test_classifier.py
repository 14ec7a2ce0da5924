import pytest

from airgesture.config import ClassifierConfig
from airgesture.gestures.classifier import (
    FistThumbTuckedDetector, GestureClassifier, GestureDebouncer,
    GestureLabel, ScrollGestureDetector,
)
from airgesture.gestures.landmarks import LandmarkSample

L = GestureLabel


@pytest.fixture
def draw_detector():
    return FistThumbTuckedDetector(ClassifierConfig())


@pytest.fixture
def scroll_detector():
    return ScrollGestureDetector(ClassifierConfig())


# ----------------------------------------------------------------------
# Draw mode
# ----------------------------------------------------------------------
def test_fist_with_tucked_thumb(draw_detector, make_hand):
    sample = make_hand(fingers="down", thumb="tucked")
    assert draw_detector.closed_fingers(sample) == 4
    assert draw_detector.is_thumb_tucked(sample)
    assert draw_detector.classify(sample) == L.FIST_THUMB_TUCKED


def test_fist_with_thumb_out_is_not_drawing(draw_detector, make_hand):
    sample = make_hand(fingers="down", thumb="out")
    assert not draw_detector.is_thumb_tucked(sample)
    assert draw_detector.classify(sample) == L.NONE


def test_two_closed_fingers_are_enough(draw_detector, make_hand):
    sample = make_hand(fingers=["down", "down", "up", "up"], thumb="tucked")
    assert draw_detector.closed_fingers(sample) == 2
    assert draw_detector.classify(sample) == L.FIST_THUMB_TUCKED


def test_open_hand_is_not_drawing(draw_detector, make_hand):
    assert draw_detector.classify(make_hand(fingers="up", thumb="tucked")) == L.NONE


def test_thumb_tuck_requires_palm_proximity(make_hand):
    tight = FistThumbTuckedDetector(ClassifierConfig(thumb_palm_radius=0.01))
    assert not tight.is_thumb_tucked(make_hand(fingers="down", thumb="tucked"))


def test_draw_detector_fails_closed_on_short_sample(draw_detector):
    sample = LandmarkSample.from_points([(0.5, 0.5)] * 8)
    assert draw_detector.closed_fingers(sample) == 0
    assert draw_detector.classify(sample) == L.NONE


# ----------------------------------------------------------------------
# Scroll mode
# ----------------------------------------------------------------------
@pytest.mark.parametrize("fingers, thumb, expected", [
    ("up", "tucked", L.OPEN_HAND),
    ("down", "tucked", L.CLOSED_FIST),
    (["up", "down", "half", "half"], "out", L.POINT_LEFT),
    (["up", "up", "down", "down"], "tucked", L.POINT_RIGHT),
    ("half", "out", L.NONE),
])
def test_scroll_finger_shapes(scroll_detector, make_hand, fingers, thumb, expected):
    assert scroll_detector.classify(make_hand(fingers=fingers, thumb=thumb)) == expected


def test_open_hand_needs_thumb_in(scroll_detector, make_hand):
    # All four fingers up with the thumb out is neither open hand nor a point
    assert scroll_detector.classify(make_hand(fingers="up", thumb="out")) == L.NONE


def test_swipe_overrides_hand_shape(scroll_detector, make_hand):
    assert scroll_detector.classify(make_hand(fingers="down")) == L.CLOSED_FIST
    assert scroll_detector.classify(make_hand(fingers="down", offset=(0.10, 0))) == L.SWIPE_RIGHT
    assert scroll_detector.classify(make_hand(fingers="down", offset=(0.0, 0))) == L.SWIPE_LEFT


def test_small_wrist_motion_is_not_a_swipe(scroll_detector, make_hand):
    scroll_detector.classify(make_hand(fingers="up"))
    assert scroll_detector.classify(make_hand(fingers="up", offset=(0.05, 0))) == L.OPEN_HAND


def test_previous_wrist_updates_every_frame(scroll_detector, make_hand):
    scroll_detector.classify(make_hand(offset=(0.0, 0)))
    scroll_detector.classify(make_hand(offset=(0.06, 0)))
    # 0.12 from the first frame but only 0.06 from the previous one
    assert scroll_detector.classify(make_hand(offset=(0.12, 0))) == L.OPEN_HAND
    assert scroll_detector.previous_wrist_x == pytest.approx(0.62)


def test_first_frame_cannot_swipe(scroll_detector, make_hand):
    assert scroll_detector.classify(make_hand(offset=(0.3, 0))) == L.OPEN_HAND


def test_incomplete_sample_keeps_previous_wrist(scroll_detector, make_hand):
    scroll_detector.classify(make_hand())
    assert scroll_detector.classify(LandmarkSample.from_points([(0.9, 0.5)] * 5)) == L.NONE
    assert scroll_detector.previous_wrist_x == pytest.approx(0.5)


# ----------------------------------------------------------------------
# Debouncing
# ----------------------------------------------------------------------
def test_debouncer_needs_consecutive_frames():
    debouncer = GestureDebouncer(3)
    fist, none = L.FIST_THUMB_TUCKED, L.NONE
    effective = []
    for label in [none, fist, fist, fist, none, none, none]:
        debouncer.update(label)
        effective.append(debouncer.effective)
    assert effective == [none, none, none, fist, fist, fist, none]


def test_debouncer_flicker_never_switches():
    debouncer = GestureDebouncer(3)
    for label in [L.NONE, L.FIST_THUMB_TUCKED, L.NONE, L.OPEN_HAND, L.OPEN_HAND, L.NONE]:
        assert not debouncer.update(label)
    assert debouncer.effective == L.NONE


def test_debouncer_reports_change_once():
    debouncer = GestureDebouncer(2)
    assert not debouncer.update(L.CLOSED_FIST)
    assert debouncer.update(L.CLOSED_FIST)
    assert not debouncer.update(L.CLOSED_FIST)


def test_debouncer_rejects_zero_frames():
    with pytest.raises(ValueError):
        GestureDebouncer(0)


def test_classifier_engages_after_debounce(make_hand):
    classifier = GestureClassifier(ClassifierConfig(), mode="draw")
    fist = make_hand(fingers="down", thumb="tucked")
    results = [classifier.update(fist) for _ in range(3)]
    assert [r.engaged for r in results] == [False, False, True]
    assert results[0].raw == L.FIST_THUMB_TUCKED
    assert results[2].changed


def test_classifier_resets_on_hand_loss(make_hand):
    classifier = GestureClassifier(ClassifierConfig(), mode="scroll")
    for _ in range(3):
        classifier.update(make_hand(fingers="up"))
    assert classifier.effective == L.OPEN_HAND

    lost = classifier.update(None)
    assert lost.effective == L.NONE
    assert lost.changed
    assert classifier.detector.previous_wrist_x is None

    # Re-acquiring needs the full debounce again
    assert not classifier.update(make_hand(fingers="up")).engaged


def test_classifier_treats_malformed_sample_as_none(make_hand, caplog):
    classifier = GestureClassifier(ClassifierConfig(), mode="draw")
    result = classifier.update(LandmarkSample.from_points([(0.5, 0.5)] * 3))
    assert result.raw == L.NONE
    assert "Malformed" in caplog.text
