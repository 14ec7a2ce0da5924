import numpy as np

from airgesture.gestures.stroke import CompositeMode, StrokeStyle
from airgesture.webcam.preview import CanvasImage, composite, hex_to_bgr, quadratic_points

RED = StrokeStyle(CompositeMode.NORMAL, 6, "#ff0000")
ERASE = StrokeStyle(CompositeMode.SUBTRACTIVE, 20)


def test_hex_to_bgr():
    assert hex_to_bgr("#ff0000") == (0, 0, 255)
    assert hex_to_bgr("#0f0") == (0, 255, 0)
    assert hex_to_bgr("bogus") == (0, 0, 0)


def test_quadratic_points_hit_endpoints():
    points = quadratic_points((0, 0), (10, 0), (10, 10), segments=4)
    assert tuple(points[0]) == (0, 0)
    assert tuple(points[-1]) == (10, 10)
    assert len(points) == 5


def test_dot_and_curve_paint_opaque_pixels():
    canvas = CanvasImage(100, 100)
    canvas.draw_dot((20, 20), RED)
    assert tuple(canvas.image[20, 20]) == (0, 0, 255, 255)

    canvas.draw_curve((30, 50), (50, 50), (70, 50), RED)
    assert canvas.image[50, 50, 3] == 255


def test_eraser_clears_alpha():
    canvas = CanvasImage(100, 100)
    canvas.draw_curve((10, 50), (50, 50), (90, 50), RED)
    canvas.draw_dot((50, 50), ERASE)
    assert canvas.image[50, 50, 3] == 0
    assert canvas.image[50, 15, 3] == 255


def test_clear_and_resize():
    canvas = CanvasImage(50, 40)
    canvas.draw_dot((10, 10), RED)
    canvas.clear()
    assert not canvas.image.any()
    canvas.resize(80, 60)
    assert canvas.size == (80, 60)
    assert canvas.image.shape == (60, 80, 4)


def test_composite_uses_canvas_alpha():
    frame = np.full((10, 10, 3), 100, dtype=np.uint8)
    canvas = CanvasImage(10, 10)
    canvas.image[2, 2] = (0, 0, 255, 255)
    out = composite(frame, canvas.image)
    assert tuple(out[2, 2]) == (0, 0, 255)
    assert tuple(out[5, 5]) == (100, 100, 100)
