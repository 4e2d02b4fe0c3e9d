"""Advance queued view animations once per frame."""
from __future__ import annotations

import logging
import math
from typing import Tuple

from votemap.geometry.transform import Point, Transform, apply, lerp, normalize_angle
from votemap.model.view_state import ViewerState

logger = logging.getLogger(__name__)

_PIVOT_EPSILON = 1e-12


def shortest_arc(start: float, end: float) -> float:
    """Signed rotation from ``start`` to ``end`` along the shorter way round."""
    delta = end - start
    if delta > math.pi:
        delta -= 2 * math.pi
    elif delta < -math.pi:
        delta += 2 * math.pi
    return delta


def _nearly_equal(a: Transform, b: Transform) -> bool:
    return (
        math.isclose(a.scale, b.scale, rel_tol=1e-12)
        and math.isclose(a.rotate, b.rotate, rel_tol=1e-12, abs_tol=1e-12)
        and math.isclose(a.translate_x, b.translate_x, rel_tol=1e-12, abs_tol=1e-9)
        and math.isclose(a.translate_y, b.translate_y, rel_tol=1e-12, abs_tol=1e-9)
    )


def pivot_point(start: Transform, end: Transform) -> Tuple[Point, Point] | None:
    """Map point that both transforms put on the same screen position.

    Returns ``(map_point, screen_point)``, or ``None`` when the transforms
    differ by a pure translation and no such point exists.
    """
    a = start.scale * math.cos(start.rotate) - end.scale * math.cos(end.rotate)
    b = start.scale * math.sin(start.rotate) - end.scale * math.sin(end.rotate)
    det = a * a + b * b
    if det <= _PIVOT_EPSILON * max(start.scale, end.scale) ** 2:
        return None

    u = end.translate_x - start.translate_x
    v = end.translate_y - start.translate_y
    map_point = ((a * u - b * v) / det, (b * u + a * v) / det)
    return map_point, apply(start, map_point)


def interpolate(start: Transform, end: Transform, t: float) -> Transform:
    """Transform at progress ``t`` of the transition from ``start`` to ``end``.

    Scale moves exponentially and rotation takes the shortest arc. Translation
    is derived so the pivot point stays fixed on screen, which makes the
    transition read as one zoom/rotate about a visual anchor.
    """
    if t <= 0:
        return start
    if t >= 1:
        return end
    if _nearly_equal(start, end):
        return end

    delta_rotate = shortest_arc(start.rotate, end.rotate)

    if start.scale == end.scale and delta_rotate == 0:
        return Transform(
            start.scale,
            start.rotate,
            lerp(start.translate_x, end.translate_x, t),
            lerp(start.translate_y, end.translate_y, t),
        )

    scale = 2.0 ** lerp(math.log2(start.scale), math.log2(end.scale), t)
    rotate = normalize_angle(start.rotate + t * delta_rotate)

    pivot = pivot_point(start, end)
    if pivot is None:
        return Transform(
            scale,
            rotate,
            lerp(start.translate_x, end.translate_x, t),
            lerp(start.translate_y, end.translate_y, t),
        )

    (map_x, map_y), (screen_x, screen_y) = pivot
    untranslated_x, untranslated_y = apply(Transform(scale, rotate), (map_x, map_y))
    return Transform(scale, rotate, screen_x - untranslated_x, screen_y - untranslated_y)


def advance(state: ViewerState, now: float) -> bool:
    """Apply the head of the animation queue at time ``now``.

    Finished animations snap the transform exactly to their end and are popped;
    the next one is checked in the same call. Returns True while animations
    remain queued.
    """
    while state.animations:
        animation = state.animations[0]
        if now < animation.start_time:
            break
        if now < animation.end_time:
            state.transform = interpolate(
                animation.start, animation.end, animation.progress(now)
            )
            break
        state.transform = animation.end
        state.animations.pop(0)
        logger.debug("Finished %s animation at t=%.1f", animation.kind.value, now)
    return bool(state.animations)
