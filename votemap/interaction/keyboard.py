"""Keyboard commands: jump to preset locations and saved view slots."""
from __future__ import annotations

import logging
from typing import Mapping

from votemap.common import constants
from votemap.geometry.boxes import Box, boxes_overlap, combine_boxes, visible_envelope
from votemap.geometry.transform import Transform
from votemap.model.animation import Animation, AnimationKind
from votemap.model.input_state import InputState
from votemap.model.view_state import ViewerState

logger = logging.getLogger(__name__)


def jump_to_transform(
    state: ViewerState,
    target: Transform,
    now: float,
    duration: float = constants.JUMP_DURATION_MS,
) -> None:
    state.animations[:] = [
        Animation(AnimationKind.JUMP, now, now + duration, state.transform, target)
    ]


def jump_to_box(
    state: ViewerState,
    target: Box,
    width: float,
    height: float,
    now: float,
    *,
    duration: float = constants.JUMP_DURATION_MS,
    leg_duration: float = constants.JUMP_LEG_DURATION_MS,
) -> int:
    """Animate the view to show ``target``; returns the number of legs queued.

    When the visible region and the target are disjoint the camera first pulls
    out to a box enclosing both, then moves in, so it never cuts across.
    """
    visible = visible_envelope(width, height, state.transform)
    combined = combine_boxes(target, visible)

    simple = combined is target or combined is visible or boxes_overlap(target, visible)
    if simple:
        jump_to_transform(state, state.fit(target, width, height), now, duration)
        logger.debug("Jump to %s in one leg", target)
        return 1

    via = state.fit(combined, width, height)
    final = state.fit(target, width, height)
    state.animations[:] = [
        Animation(AnimationKind.JUMP, now, now + leg_duration, state.transform, via),
        Animation(
            AnimationKind.JUMP, now + leg_duration, now + 2 * leg_duration, via, final
        ),
    ]
    logger.debug("Jump to %s via %s", target, combined)
    return 2


def handle_keys(
    state: ViewerState,
    input_state: InputState,
    width: float,
    height: float,
    now: float,
    presets: Mapping[str, Box],
    *,
    duration: float = constants.JUMP_DURATION_MS,
    leg_duration: float = constants.JUMP_LEG_DURATION_MS,
) -> bool:
    """Consume key presses for this frame. Returns True if any key acted."""
    acted = False

    for key, box in presets.items():
        if input_state.consume_key(key):
            jump_to_box(
                state, box, width, height, now,
                duration=duration, leg_duration=leg_duration,
            )
            acted = True

    for key, slot in constants.SAVE_SLOT_KEYS.items():
        if input_state.consume_key(key):
            state.save_transform(slot)
            logger.info("Saved view to slot %s", slot)
            acted = True

    for slot in constants.RESTORE_SLOT_KEYS:
        if not input_state.consume_key(slot):
            continue
        saved = state.saved_transform(slot)
        if saved is None:
            logger.info("No view saved in slot %s", slot)
            continue
        jump_to_transform(state, saved, now, duration)
        acted = True

    return acted
