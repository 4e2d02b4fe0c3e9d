"""Axis-aligned box helpers for viewport queries and camera jumps."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

from votemap.geometry.transform import Point, Transform, inverse


@dataclass(frozen=True)
class Box:
    """Axis-aligned rectangle given by its min and max corners."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def from_rect(cls, x: float, y: float, width: float, height: float) -> "Box":
        return cls(x, y, x + width, y + height)

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Point:
        return ((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    def corners(self) -> List[Point]:
        """Corners in drawing order: top-left, bottom-left, bottom-right, top-right."""
        return [
            (self.min_x, self.min_y),
            (self.min_x, self.max_y),
            (self.max_x, self.max_y),
            (self.max_x, self.min_y),
        ]


def screen_box(width: float, height: float) -> Box:
    return Box(0.0, 0.0, float(width), float(height))


def map_corners(width: float, height: float, transform: Transform) -> List[Point]:
    """The screen's four corners in map space (a diamond when rotated)."""
    return [inverse(transform, corner) for corner in screen_box(width, height).corners()]


def envelope(points: Iterable[Point]) -> Box:
    """Axis-aligned bounding box of ``points``."""
    iterator = iter(points)
    try:
        first_x, first_y = next(iterator)
    except StopIteration:
        raise ValueError("Cannot compute the envelope of no points") from None
    min_x = max_x = first_x
    min_y = max_y = first_y
    for x, y in iterator:
        if x < min_x:
            min_x = x
        elif x > max_x:
            max_x = x
        if y < min_y:
            min_y = y
        elif y > max_y:
            max_y = y
    return Box(min_x, min_y, max_x, max_y)


def visible_envelope(width: float, height: float, transform: Transform) -> Box:
    return envelope(map_corners(width, height, transform))


def fit_box(inner: Box, outer: Box) -> Transform:
    """Transform that fits ``inner`` centred inside ``outer``, preserving aspect."""
    if inner.width <= 0 or inner.height <= 0:
        raise ValueError(f"Cannot fit an empty box: {inner}")

    inner_ratio = inner.width / inner.height
    outer_ratio = outer.width / outer.height

    if inner_ratio < outer_ratio:
        scale = outer.height / inner.height
    else:
        scale = outer.width / inner.width

    translate_x = outer.min_x - scale * inner.min_x + (outer.width - scale * inner.width) / 2
    translate_y = outer.min_y - scale * inner.min_y + (outer.height - scale * inner.height) / 2
    return Transform(scale, 0.0, translate_x, translate_y)


def box_contains(outer: Box, inner: Box) -> bool:
    return (
        outer.min_x <= inner.min_x
        and outer.min_y <= inner.min_y
        and outer.max_x >= inner.max_x
        and outer.max_y >= inner.max_y
    )


def combine_boxes(a: Box, b: Box) -> Box:
    """Smallest box enclosing both.

    When one box contains the other, that box object itself is returned (not a
    copy) so callers can detect the simple case with ``is``.
    """
    if box_contains(a, b):
        return a
    if box_contains(b, a):
        return b
    return Box(
        min(a.min_x, b.min_x),
        min(a.min_y, b.min_y),
        max(a.max_x, b.max_x),
        max(a.max_y, b.max_y),
    )


def boxes_overlap(a: Box, b: Box) -> bool:
    return (
        a.min_x <= b.max_x
        and b.min_x <= a.max_x
        and a.min_y <= b.max_y
        and b.min_y <= a.max_y
    )
