import pytest

from votemap.config import PresetLocation, ViewerSettings
from votemap.geometry.boxes import Box, fit_box, screen_box
from votemap.geometry.transform import Transform, apply, inverse
from votemap.labels.placement import Label
from votemap.model.animation import AnimationKind
from votemap.viewer import MapViewer

MOUSE = -1


def _viewer(**kwargs) -> MapViewer:
    settings = ViewerSettings(presets={}, max_scale=8.0, **kwargs)
    viewer = MapViewer(settings, measure_text=lambda text: 8.0 * len(text))
    viewer.resize(800, 600)
    return viewer


def test_resize_fits_first_preset():
    viewer = MapViewer()
    viewer.resize(800, 600)

    home = viewer.settings.home_box()
    assert viewer.transform == fit_box(home, screen_box(800, 600))


def test_resize_without_presets_keeps_identity():
    viewer = _viewer()

    assert viewer.transform == Transform()
    assert viewer.tile_request() is not None


def test_drag_then_wheel_zoom():
    viewer = _viewer()

    viewer.input.pointer_down(MOUSE, 400.0, 300.0)
    viewer.tick(0.0)
    viewer.input.pointer_move(MOUSE, 500.0, 300.0)
    viewer.tick(16.0)

    assert viewer.transform.translate_x == pytest.approx(100.0)
    assert viewer.transform.translate_y == pytest.approx(0.0)

    viewer.input.pointer_up(MOUSE, 500.0, 300.0)
    viewer.tick(32.0)
    before = viewer.transform

    viewer.input.add_scroll(-100.0)
    viewer.tick(48.0)
    (animation,) = viewer.state.animations
    assert animation.kind is AnimationKind.SCROLL
    assert animation.duration == pytest.approx(100.0)
    assert viewer.animating()

    viewer.tick(200.0)
    after = viewer.transform
    assert not viewer.animating()
    assert after.scale > before.scale
    anchor = inverse(before, (500.0, 300.0))
    assert apply(after, anchor) == pytest.approx((500.0, 300.0))


def test_input_is_cleared_after_each_tick():
    viewer = _viewer()
    viewer.input.add_scroll(50.0)
    viewer.input.press_key("F1")

    viewer.tick(0.0)

    assert viewer.input.scroll == 0.0
    assert viewer.input.pressed_keys == set()


def test_preset_key_animates_to_preset():
    home = Box.from_rect(0, 0, 800, 600)
    target = Box.from_rect(0, 0, 400, 300)
    settings = ViewerSettings(
        presets={
            "0": PresetLocation("0", "Home", home),
            "7": PresetLocation("7", "Inner", target),
        },
        max_scale=8.0,
        jump_duration_ms=500.0,
    )
    viewer = MapViewer(settings)
    viewer.resize(800, 600)
    assert viewer.transform == fit_box(home, screen_box(800, 600))

    viewer.input.press_key("7")
    viewer.tick(0.0)
    assert viewer.animating()
    viewer.tick(500.0)

    assert not viewer.animating()
    assert viewer.transform == fit_box(target, screen_box(800, 600))


def test_labels_are_placed_each_tick():
    viewer = _viewer()
    viewer.set_labels([Label("Melbourne", 200.0, 200.0), Label("Far", -5000.0, 0.0)])

    viewer.tick(0.0)

    assert [placed.text for placed in viewer.placements] == ["Melbourne"]
    assert viewer.placements[0].width == 72.0


def test_reserved_panel_hides_labels():
    viewer = _viewer()
    viewer.set_labels([Label("Melbourne", 200.0, 200.0)])
    viewer.reserved.append(Box(0, 0, 300, 300))

    viewer.tick(0.0)

    assert viewer.placements == []


def test_degenerate_transform_skips_label_placement():
    viewer = _viewer()
    viewer.set_labels([Label("Melbourne", 200.0, 200.0)])
    viewer.state.transform = Transform(scale=0.0)

    viewer.tick(0.0)

    assert viewer.placements == []


def test_small_home_preset_is_shown_at_max_scale_and_centred():
    home = Box.from_rect(0, 0, 100, 100)
    viewer = MapViewer(ViewerSettings(presets={"0": PresetLocation("0", "Tiny", home)}))
    viewer.resize(800, 600)

    assert viewer.transform.scale == viewer.settings.max_scale
    assert apply(viewer.transform, home.center) == pytest.approx((400.0, 300.0))

    before = viewer.transform.scale
    viewer.input.pointer_move(MOUSE, 400.0, 300.0)
    viewer.input.add_scroll(-100.0)
    viewer.tick(0.0)
    viewer.tick(200.0)

    assert viewer.transform.scale >= before


def test_degenerate_transform_skips_tile_request():
    viewer = _viewer()
    viewer.state.transform = Transform(scale=0.0)

    assert viewer.tile_request() is None


def test_degenerate_transform_drops_pointer_input_for_the_frame():
    viewer = _viewer()
    viewer.state.transform = Transform(scale=0.0)
    viewer.input.pointer_down(MOUSE, 10.0, 10.0)
    viewer.input.press_key("F1")

    viewer.tick(0.0)

    assert not viewer.state.locks[0].locked
    assert viewer.input.pressed_keys == set()
    assert viewer.placements == []
