"""Tile fetch parameters and vertex culling.

A tile request is a pure function of the view transform and screen size: the
visible map envelope plus a power-of-two "map units per pixel" bucket, so
continuous zooming only changes the request when a bucket boundary is crossed.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from votemap.common.constants import VERTEX_STRIDE
from votemap.geometry.boxes import Box, box_contains, visible_envelope
from votemap.geometry.transform import Transform


@dataclass(frozen=True)
class TileRequest:
    x0: float
    y0: float
    x1: float
    y1: float
    units_per_pixel: float

    @property
    def box(self) -> Box:
        return Box(self.x0, self.y0, self.x1, self.y1)

    def covers(self, other: "TileRequest") -> bool:
        """True when this request's data can stand in for ``other``."""
        return self.units_per_pixel == other.units_per_pixel and box_contains(
            self.box, other.box
        )


def units_per_pixel_bucket(scale: float) -> float:
    """``1 / scale`` rounded up to a power of two."""
    if scale <= 0:
        raise ValueError(f"Scale must be positive, got {scale}")
    return 2.0 ** math.ceil(math.log2(1.0 / scale))


def tile_request_for(
    transform: Transform, width: float, height: float, *, margin: float = 0.25
) -> TileRequest:
    """Request covering the visible region, padded by ``margin`` of its size."""
    visible = visible_envelope(width, height, transform)
    pad_x = visible.width * margin
    pad_y = visible.height * margin
    return TileRequest(
        visible.min_x - pad_x,
        visible.min_y - pad_y,
        visible.max_x + pad_x,
        visible.max_y + pad_y,
        units_per_pixel_bucket(transform.scale),
    )


def cull_triangles(vertices: np.ndarray, box: Box) -> np.ndarray:
    """Triangles whose bounding box intersects ``box``."""
    if vertices.size == 0:
        return vertices.reshape(0, VERTEX_STRIDE)
    triangles = vertices.reshape(-1, 3, VERTEX_STRIDE)
    xs = triangles[:, :, 0]
    ys = triangles[:, :, 1]
    keep = (
        (xs.max(axis=1) >= box.min_x)
        & (xs.min(axis=1) <= box.max_x)
        & (ys.max(axis=1) >= box.min_y)
        & (ys.min(axis=1) <= box.max_y)
    )
    return triangles[keep].reshape(-1, VERTEX_STRIDE)
