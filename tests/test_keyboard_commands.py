import pytest

from votemap.geometry.boxes import Box, fit_box, screen_box
from votemap.geometry.transform import Transform, apply
from votemap.interaction.animation_scheduler import advance
from votemap.interaction.keyboard import handle_keys, jump_to_box
from votemap.model.animation import AnimationKind
from votemap.model.input_state import InputState
from votemap.model.view_state import ViewerState

WIDTH, HEIGHT = 800, 600
SCREEN = screen_box(WIDTH, HEIGHT)
HOME = Box.from_rect(0, 0, 100, 100)


def _state() -> ViewerState:
    return ViewerState(
        transform=fit_box(HOME, SCREEN), min_scale=0.0001, max_scale=100.0
    )


def test_jump_into_visible_region_uses_one_leg():
    state = _state()
    target = Box.from_rect(10, 10, 20, 20)

    legs = jump_to_box(state, target, WIDTH, HEIGHT, 0.0, duration=1000.0)

    assert legs == 1
    (animation,) = state.animations
    assert animation.kind is AnimationKind.JUMP
    assert animation.duration == 1000.0
    assert animation.end == fit_box(target, SCREEN)


def test_jump_to_overlapping_box_uses_one_leg():
    state = _state()

    assert jump_to_box(state, Box.from_rect(50, 50, 200, 200), WIDTH, HEIGHT, 0.0) == 1


def test_jump_to_disjoint_box_pulls_out_first():
    state = _state()
    start = state.transform
    target = Box.from_rect(10000, 10000, 100, 100)

    legs = jump_to_box(state, target, WIDTH, HEIGHT, 50.0, leg_duration=750.0)

    assert legs == 2
    out, back_in = state.animations
    assert out.start is start
    assert out.end.scale < start.scale
    assert back_in.start is out.end
    assert back_in.end == fit_box(target, SCREEN)
    assert (out.start_time, out.end_time) == (50.0, 800.0)
    assert (back_in.start_time, back_in.end_time) == (800.0, 1550.0)

    advance(state, 2000.0)
    assert state.transform == fit_box(target, SCREEN)


def test_preset_key_queues_jump_and_is_consumed():
    state = _state()
    input_state = InputState()
    input_state.press_key("2")
    presets = {"1": HOME, "2": Box.from_rect(30, 30, 10, 10)}

    acted = handle_keys(state, input_state, WIDTH, HEIGHT, 0.0, presets)

    assert acted is True
    assert "2" not in input_state.pressed_keys
    assert state.animations[-1].end == fit_box(presets["2"], SCREEN)


def test_unbound_key_does_nothing():
    state = _state()
    input_state = InputState()
    input_state.press_key("9")

    assert handle_keys(state, input_state, WIDTH, HEIGHT, 0.0, {"1": HOME}) is False
    assert state.animations == []


def test_save_and_restore_view_slot():
    state = _state()
    saved = Transform(0.2, 0.5, 13.0, -7.0)
    state.transform = saved
    input_state = InputState()
    input_state.press_key("Ctrl+F1")
    handle_keys(state, input_state, WIDTH, HEIGHT, 0.0, {})
    assert state.saved_transform("F1") == saved

    state.transform = Transform(1.0)
    input_state.press_key("F1")
    assert handle_keys(state, input_state, WIDTH, HEIGHT, 100.0, {}, duration=500.0)

    (animation,) = state.animations
    assert animation.end == saved
    assert animation.end_time == pytest.approx(600.0)
    advance(state, 700.0)
    assert state.transform == saved


def test_restore_empty_slot_is_ignored():
    state = _state()
    input_state = InputState()
    input_state.press_key("F3")

    assert handle_keys(state, input_state, WIDTH, HEIGHT, 0.0, {}) is False
    assert state.animations == []


def test_jump_to_tiny_box_stays_within_scale_limits():
    state = ViewerState(transform=fit_box(HOME, SCREEN), max_scale=2.0)
    target = Box.from_rect(40, 40, 5, 5)

    jump_to_box(state, target, WIDTH, HEIGHT, 0.0)
    advance(state, 5000.0)

    assert state.transform.scale == 2.0
    assert apply(state.transform, target.center) == pytest.approx((400.0, 300.0))


def test_fit_uses_fit_box_when_scale_is_allowed():
    state = _state()

    assert state.fit(HOME, WIDTH, HEIGHT) == fit_box(HOME, SCREEN)


def test_fit_clamps_huge_box_to_min_scale():
    state = ViewerState(min_scale=0.001, max_scale=1.0)
    huge = Box.from_rect(-1e7, -1e7, 2e7, 2e7)

    transform = state.fit(huge, WIDTH, HEIGHT)

    assert transform.scale == 0.001
    assert apply(transform, huge.center) == pytest.approx((400.0, 300.0))
