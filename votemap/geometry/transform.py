"""Similarity transforms between map space and screen space.

A transform maps a map point onto the screen as
``screen = scale * R(rotate) * map + translate``. The rotation is
counter-clockwise as seen on screen, which (because screen y grows downward)
shows up as a sign flip on the y-term of ``R``.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

Point = Tuple[float, float]


class DegenerateTransformError(ValueError):
    """Raised when a transform with zero scale is inverted."""


@dataclass(frozen=True)
class Transform:
    scale: float = 1.0
    rotate: float = 0.0
    translate_x: float = 0.0
    translate_y: float = 0.0

    def translated(self, dx: float, dy: float) -> "Transform":
        return Transform(
            self.scale, self.rotate, self.translate_x + dx, self.translate_y + dy
        )


def lerp(a: float, b: float, t: float) -> float:
    return (1 - t) * a + t * b


def normalize_angle(angle: float) -> float:
    """Wrap an angle in radians into ``[-pi, pi)``."""
    wrapped = math.fmod(angle + math.pi, 2 * math.pi)
    if wrapped < 0:
        wrapped += 2 * math.pi
    return wrapped - math.pi


def apply(transform: Transform, point: Point) -> Point:
    """Map-space point to screen space."""
    x, y = point
    sin = math.sin(transform.rotate)
    cos = math.cos(transform.rotate)
    scale = transform.scale
    return (
        scale * (x * cos + y * sin) + transform.translate_x,
        scale * (y * cos - x * sin) + transform.translate_y,
    )


def inverse(transform: Transform, point: Point) -> Point:
    """Screen-space point to map space."""
    x, y = point
    sin = math.sin(transform.rotate)
    cos = math.cos(transform.rotate)
    scale = transform.scale

    det = scale * scale * (cos * cos + sin * sin)
    if det == 0:
        raise DegenerateTransformError(
            f"Cannot invert transform with scale {scale!r}"
        )

    x1 = x - transform.translate_x
    y1 = y - transform.translate_y
    return (
        (scale / det) * (x1 * cos - y1 * sin),
        (scale / det) * (x1 * sin + y1 * cos),
    )


def view_matrix(transform: Transform) -> np.ndarray:
    """Row-major 3x3 matrix applying ``transform`` to homogeneous map points."""
    scale = transform.scale
    cos = math.cos(transform.rotate)
    sin = math.sin(transform.rotate)
    return np.array(
        [
            [scale * cos, scale * sin, transform.translate_x],
            [-scale * sin, scale * cos, transform.translate_y],
            [0.0, 0.0, 1.0],
        ]
    )


def projection_matrix(width: float, height: float) -> np.ndarray:
    """Pixel space to clip space, flipping y for a top-left origin."""
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid viewport size {width}x{height}")
    return np.array(
        [
            [2.0 / width, 0.0, -1.0],
            [0.0, -2.0 / height, 1.0],
            [0.0, 0.0, 1.0],
        ]
    )
