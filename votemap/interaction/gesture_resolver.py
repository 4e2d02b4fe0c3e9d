"""Turn pointer and wheel input into view transform changes."""
from __future__ import annotations

import logging
import math

from votemap.common import constants
from votemap.geometry.transform import Transform, apply, inverse, normalize_angle
from votemap.model.animation import Animation, AnimationKind
from votemap.model.input_state import InputState, Pointer
from votemap.model.view_state import PointerLock, ViewerState

logger = logging.getLogger(__name__)

# Below this separation two contacts are treated as coincident.
_MIN_PINCH_DISTANCE = 1e-9


def _pin(transform: Transform, lock: PointerLock, pointer: Pointer) -> Transform:
    """Translate ``transform`` so the locked map point sits under ``pointer``."""
    lock_x, lock_y = apply(transform, lock.point)
    return transform.translated(pointer.x - lock_x, pointer.y - lock_y)


def update_locks(state: ViewerState, input_state: InputState) -> None:
    for pointer, lock in zip(input_state.pointers, state.locks):
        if pointer.pressed and not lock.locked:
            lock.lock(inverse(state.transform, pointer.position))
            # Direct manipulation always wins over queued animations.
            state.cancel_animations()
        if not pointer.down:
            lock.release()


def _pinch(state: ViewerState, input_state: InputState) -> Transform:
    lock0, lock1 = state.locks
    ptr0, ptr1 = input_state.pointers
    current = state.transform

    map_dx = lock1.map_x - lock0.map_x
    map_dy = lock1.map_y - lock0.map_y
    map_distance = math.hypot(map_dx, map_dy)

    screen_dx = ptr1.x - ptr0.x
    screen_dy = ptr1.y - ptr0.y
    screen_distance = math.hypot(screen_dx, screen_dy)

    if map_distance < _MIN_PINCH_DISTANCE or screen_distance < _MIN_PINCH_DISTANCE:
        return _pin(current, lock0, ptr0)

    scale = state.clamp_scale(screen_distance / map_distance)
    map_angle = math.atan2(map_dy, map_dx)
    screen_angle = math.atan2(screen_dy, screen_dx)
    rotate = normalize_angle(map_angle - screen_angle)

    rotated = Transform(scale, rotate, current.translate_x, current.translate_y)
    return _pin(rotated, lock0, ptr0)


def resolve_pointers(state: ViewerState, input_state: InputState) -> None:
    """Apply drag and pinch gestures directly to the view transform."""
    update_locks(state, input_state)
    lock0, lock1 = state.locks

    if lock0.locked and lock1.locked:
        state.transform = _pinch(state, input_state)
        return

    for pointer, lock, other in (
        (input_state.pointers[0], lock0, lock1),
        (input_state.pointers[1], lock1, lock0),
    ):
        if lock.locked and not other.locked:
            state.transform = _pin(state.transform, lock, pointer)
            return


def handle_scroll(
    state: ViewerState,
    input_state: InputState,
    now: float,
    duration: float = constants.SCROLL_DURATION_MS,
) -> bool:
    """Queue a short zoom animation anchored at the mouse pointer.

    Returns True when a wheel delta was consumed.
    """
    if not input_state.scroll:
        return False

    current = state.transform
    if not state.scroll_animation_active():
        state.scroll_offset = state.scale_to_scroll_offset(current.scale)

    offset = state.scroll_offset - input_state.scroll
    state.scroll_offset = max(0.0, min(state.max_scroll, offset))

    target = Transform(
        state.scroll_offset_to_scale(state.scroll_offset),
        current.rotate,
        current.translate_x,
        current.translate_y,
    )

    # Keep the map point under the mouse where it is on screen.
    mouse = input_state.pointers[0]
    origin = inverse(current, mouse.position)
    origin_x, origin_y = apply(target, origin)
    target = target.translated(mouse.x - origin_x, mouse.y - origin_y)

    state.animations[:] = [
        Animation(AnimationKind.SCROLL, now, now + duration, current, target)
    ]
    logger.debug(
        "Scroll zoom: offset=%.1f scale %.6g -> %.6g",
        state.scroll_offset,
        current.scale,
        target.scale,
    )
    return True
