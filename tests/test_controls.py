import pytest

from airgesture.config import ControlsConfig
from airgesture.gestures.controls import (
    BRUSH, ERASER, VirtualButtonHitTester, ZoneShape,
    color_identity, parse_color_index,
)


@pytest.fixture
def tester():
    return VirtualButtonHitTester(ControlsConfig())


def test_layout_positions(tester):
    zones = tester.build_layout(640, 480)
    by_id = {z.identity: z for z in zones}

    brush = by_id[BRUSH]
    assert (brush.x, brush.y, brush.width, brush.height) == (540, 20, 80, 80)
    eraser = by_id[ERASER]
    assert (eraser.x, eraser.y) == (540, 110)

    first = by_id[color_identity(0)]
    assert first.shape == ZoneShape.CIRCLE
    assert (first.x, first.y, first.width) == (640 - 54 - 20, 210, 54)
    assert by_id[color_identity(1)].y == 210 + 66
    assert first.color == "#ff5c8d"


def test_color_count_capped_at_four():
    tester = VirtualButtonHitTester(ControlsConfig(color_count=9))
    colors = [z for z in tester.build_layout(800, 600) if z.shape == ZoneShape.CIRCLE]
    assert len(colors) == 4


def test_color_count_limited_by_palette():
    tester = VirtualButtonHitTester(ControlsConfig(palette=["#000000"]))
    assert len(tester.build_layout(800, 600)) == 3


def test_hit_test_flips_pointer_x(tester):
    # Zone spans ui x 540..620, so the mirrored pointer x is 20..100
    assert tester.hit_test((60, 50), 640, 480).identity == BRUSH
    assert tester.hit_test((580, 50), 640, 480).identity is None


def test_hit_test_edges_are_inclusive(tester):
    assert tester.hit_test((100, 20), 640, 480).identity == BRUSH
    assert tester.hit_test((20, 100), 640, 480).identity == BRUSH
    assert tester.hit_test((101, 20), 640, 480).identity is None


def test_gap_between_buttons_hits_nothing(tester):
    assert tester.hit_test((60, 105), 640, 480).identity is None
    assert tester.hit_test((60, 150), 640, 480).identity == ERASER


def test_hit_test_without_pointer_still_reports_layout(tester):
    result = tester.hit_test(None, 640, 480)
    assert result.zone is None
    assert len(result.layout) == 6


def test_degenerate_or_disabled_layout_is_empty(tester):
    assert tester.build_layout(0, 480) == ()
    tester.enabled = False
    assert tester.build_layout(640, 480) == ()
    assert tester.hit_test((60, 50), 640, 480).identity is None


def test_color_identity_round_trip():
    assert parse_color_index(color_identity(3)) == 3
    assert parse_color_index(BRUSH) is None
    assert parse_color_index("color:x") is None
    assert parse_color_index(None) is None
