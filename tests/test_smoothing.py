import math

import pytest

from airgesture.gestures.smoothing import PointerSmoother


def test_first_sample_seeds_filter():
    smoother = PointerSmoother()
    assert smoother.update((100.0, 50.0), engaged=True) == (100.0, 50.0)


def test_engaged_alpha_is_heavier():
    engaged = PointerSmoother(0.65, 0.95)
    idle = PointerSmoother(0.65, 0.95)
    for s in (engaged, idle):
        s.update((0.0, 0.0), engaged=False)

    ex, _ = engaged.update((100.0, 0.0), engaged=True)
    ix, _ = idle.update((100.0, 0.0), engaged=False)
    assert ex == pytest.approx(65.0)
    assert ix == pytest.approx(95.0)


def test_converges_on_steady_input():
    smoother = PointerSmoother()
    smoother.update((0.0, 0.0), engaged=True)
    for _ in range(30):
        x, y = smoother.update((200.0, 100.0), engaged=True)
    assert x == pytest.approx(200.0, abs=1e-6)
    assert y == pytest.approx(100.0, abs=1e-6)


def test_state_tracks_raw_and_previous():
    smoother = PointerSmoother()
    smoother.update((10.0, 10.0), engaged=False)
    smoother.update((20.0, 10.0), engaged=False)
    state = smoother.state
    assert state.raw == (20.0, 10.0)
    assert state.previous == (10.0, 10.0)
    assert state.smoothed == smoother.position


def test_reset_reseeds():
    smoother = PointerSmoother()
    smoother.update((10.0, 10.0), engaged=True)
    smoother.reset()
    assert smoother.position is None
    assert smoother.update((300.0, 300.0), engaged=True) == (300.0, 300.0)


def test_non_finite_input_keeps_position():
    smoother = PointerSmoother()
    smoother.update((10.0, 10.0), engaged=True)
    assert smoother.update((math.nan, 5.0), engaged=True) == (10.0, 10.0)


@pytest.mark.parametrize("alpha", [0.0, -0.1, 1.5])
def test_rejects_bad_alpha(alpha):
    with pytest.raises(ValueError):
        PointerSmoother(engaged_alpha=alpha)
