"""View-state container for the map viewer.

This module sits in the model layer as a transient state holder owned by the
viewer driver. It does not load data, render, or persist anything; gesture
resolution, animation and label placement receive it as an argument.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, List

from votemap.common import constants
from votemap.geometry.boxes import Box, fit_box, screen_box
from votemap.geometry.transform import Transform
from votemap.model.animation import Animation, AnimationKind


@dataclass
class PointerLock:
    """Map-space point pinned under a pointer while it is held down."""

    locked: bool = False
    map_x: float = 0.0
    map_y: float = 0.0

    def lock(self, point: tuple[float, float]) -> None:
        self.locked = True
        self.map_x, self.map_y = point

    def release(self) -> None:
        self.locked = False

    @property
    def point(self) -> tuple[float, float]:
        return (self.map_x, self.map_y)


def _two_locks() -> List[PointerLock]:
    return [PointerLock(), PointerLock()]


@dataclass
class ViewerState:
    """Mutable map view state, written only by the per-frame update."""

    transform: Transform = field(default_factory=Transform)
    locks: List[PointerLock] = field(default_factory=_two_locks)
    animations: List[Animation] = field(default_factory=list)
    # Only valid while a scroll animation is at the head of the queue;
    # otherwise it is recomputed from the transform's scale.
    scroll_offset: float = 0.0
    saved_transforms: Dict[str, Transform] = field(default_factory=dict)
    min_scale: float = constants.MIN_SCALE
    max_scale: float = constants.MAX_SCALE
    max_scroll: float = constants.MAX_SCROLL

    def __post_init__(self) -> None:
        if not 0 < self.min_scale < self.max_scale:
            raise ValueError(
                f"Invalid scale range [{self.min_scale}, {self.max_scale}]"
            )
        if self.max_scroll <= 0:
            raise ValueError(f"max_scroll must be positive, got {self.max_scroll}")

    def clamp_scale(self, scale: float) -> float:
        return max(self.min_scale, min(self.max_scale, scale))

    def fit(self, box: Box, width: float, height: float) -> Transform:
        """Transform showing ``box`` centred on screen, within the scale limits.

        A box too small or too large to fill the screen at an allowed scale is
        shown at the nearest limit, still centred.
        """
        fitted = fit_box(box, screen_box(width, height))
        scale = self.clamp_scale(fitted.scale)
        if scale == fitted.scale:
            return fitted
        center_x, center_y = box.center
        return Transform(
            scale, 0.0, width / 2 - scale * center_x, height / 2 - scale * center_y
        )

    def cancel_animations(self) -> None:
        self.animations.clear()

    def scroll_animation_active(self) -> bool:
        return bool(self.animations) and self.animations[0].kind is AnimationKind.SCROLL

    def scale_to_scroll_offset(self, scale: float) -> float:
        """Position of ``scale`` along the log-linear scroll range."""
        exp0 = math.log2(self.min_scale)
        exp1 = math.log2(self.max_scale)
        t = (math.log2(self.clamp_scale(scale)) - exp0) / (exp1 - exp0)
        return self.max_scroll * t

    def scroll_offset_to_scale(self, offset: float) -> float:
        exp0 = math.log2(self.min_scale)
        exp1 = math.log2(self.max_scale)
        t = offset / self.max_scroll
        return 2.0 ** ((1 - t) * exp0 + t * exp1)

    def save_transform(self, slot: str) -> None:
        self.saved_transforms[slot] = self.transform

    def saved_transform(self, slot: str) -> Transform | None:
        return self.saved_transforms.get(slot)
