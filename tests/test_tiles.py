import numpy as np
import pytest

from votemap.geometry.boxes import Box
from votemap.geometry.transform import Transform
from votemap.services.tiles import (
    TileRequest,
    cull_triangles,
    tile_request_for,
    units_per_pixel_bucket,
)


@pytest.mark.parametrize(
    "scale, expected",
    [(1.0, 1.0), (0.5, 2.0), (0.3, 4.0), (2.0, 0.5), (0.0001, 16384.0)],
)
def test_units_per_pixel_bucket_rounds_up_to_power_of_two(scale, expected):
    assert units_per_pixel_bucket(scale) == expected


def test_units_per_pixel_bucket_rejects_non_positive_scale():
    with pytest.raises(ValueError):
        units_per_pixel_bucket(0.0)


def test_tile_request_covers_visible_region():
    assert tile_request_for(Transform(), 800, 600, margin=0.0) == TileRequest(
        0.0, 0.0, 800.0, 600.0, 1.0
    )
    padded = tile_request_for(Transform(), 800, 600)
    assert padded.box == Box(-200.0, -150.0, 1000.0, 750.0)


def test_tile_request_only_changes_bucket_across_power_of_two():
    a = tile_request_for(Transform(0.3), 800, 600)
    b = tile_request_for(Transform(0.26), 800, 600)
    c = tile_request_for(Transform(0.24), 800, 600)

    assert a.units_per_pixel == b.units_per_pixel == 4.0
    assert c.units_per_pixel == 8.0


def test_covers_requires_same_bucket_and_containment():
    outer = TileRequest(0, 0, 100, 100, 2.0)

    assert outer.covers(TileRequest(10, 10, 90, 90, 2.0))
    assert not outer.covers(TileRequest(10, 10, 90, 90, 4.0))
    assert not outer.covers(TileRequest(10, 10, 110, 90, 2.0))


def _triangle(x: float, y: float) -> np.ndarray:
    return np.array(
        [[x, y, 1, 0, 0, 1], [x + 10, y, 1, 0, 0, 1], [x, y + 10, 1, 0, 0, 1]],
        dtype=np.float32,
    )


def test_cull_triangles_keeps_triangles_meeting_box():
    vertices = np.vstack([_triangle(0, 0), _triangle(500, 500), _triangle(95, 95)])

    kept = cull_triangles(vertices, Box(0, 0, 100, 100))

    assert kept.shape == (6, 6)
    assert kept[3, 0] == 95.0


def test_cull_triangles_of_nothing():
    assert cull_triangles(np.zeros((0, 6), dtype=np.float32), Box(0, 0, 1, 1)).shape == (0, 6)
