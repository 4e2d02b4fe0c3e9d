import math

import pytest

from votemap.geometry.boxes import (
    Box,
    boxes_overlap,
    combine_boxes,
    envelope,
    fit_box,
    map_corners,
    screen_box,
    visible_envelope,
)
from votemap.geometry.transform import Transform, apply


def test_fit_box_scales_wide_box_to_outer_width_and_centres_it():
    inner = Box.from_rect(0, 0, 100, 50)
    outer = screen_box(200, 200)

    transform = fit_box(inner, outer)

    assert transform.scale == 2
    assert transform.rotate == 0
    fitted = envelope(apply(transform, corner) for corner in inner.corners())
    assert fitted.min_x == pytest.approx(0.0)
    assert fitted.max_x == pytest.approx(200.0)
    assert fitted.min_y == pytest.approx(50.0)
    assert fitted.max_y == pytest.approx(150.0)
    assert fitted.center == pytest.approx(outer.center)


def test_fit_box_scales_tall_box_to_outer_height():
    inner = Box.from_rect(10, 20, 50, 100)

    transform = fit_box(inner, screen_box(200, 200))

    assert transform.scale == 2
    assert apply(transform, (10, 20)) == pytest.approx((50.0, 0.0))
    assert apply(transform, (60, 120)) == pytest.approx((150.0, 200.0))


def test_fit_box_rejects_empty_inner_box():
    with pytest.raises(ValueError):
        fit_box(Box(0, 0, 0, 10), screen_box(100, 100))


def test_combine_boxes_returns_containing_box_itself():
    a = Box(0, 0, 10, 10)
    b = Box(2, 2, 5, 5)

    assert combine_boxes(a, b) is a
    assert combine_boxes(b, a) is a


def test_combine_boxes_encloses_disjoint_boxes():
    a = Box(0, 0, 1, 1)
    b = Box(5, 4, 6, 7)

    combined = combine_boxes(a, b)

    assert combined == Box(0, 0, 6, 7)
    assert combined is not a
    assert combined is not b


def test_boxes_overlap():
    assert boxes_overlap(Box(0, 0, 10, 10), Box(5, 5, 15, 15))
    assert boxes_overlap(Box(0, 0, 10, 10), Box(2, 2, 3, 3))
    assert not boxes_overlap(Box(0, 0, 10, 10), Box(11, 0, 20, 10))
    assert not boxes_overlap(Box(0, 0, 10, 10), Box(0, 11, 10, 20))


def test_map_corners_inverts_screen_corners():
    transform = Transform(scale=2.0, translate_x=10.0)

    corners = map_corners(100, 50, transform)

    assert corners[0] == pytest.approx((-5.0, 0.0))
    assert corners[2] == pytest.approx((45.0, 25.0))


def test_visible_envelope_of_rotated_view_encloses_diamond():
    transform = Transform(rotate=math.pi / 4)

    visible = visible_envelope(100, 100, transform)

    assert visible.width == pytest.approx(100 * math.sqrt(2))
    assert visible.height == pytest.approx(100 * math.sqrt(2))
    assert visible.min_y == pytest.approx(0.0, abs=1e-9)


def test_envelope_requires_points():
    with pytest.raises(ValueError):
        envelope([])
