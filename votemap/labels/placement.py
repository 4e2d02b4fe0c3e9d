"""Stable per-frame label placement on a map-aligned occlusion grid.

The visible region is covered by a grid of square cells aligned with the map's
axes. Labels are tried in order; a label is drawn only if every cell under its
text box is still free, and then it claims those cells. Cell size is rounded
up to a power of two and the grid origin snaps to cell multiples, so the grid
does not shift while panning or jitter while zooming, and a label either
appears in the same place every frame or not at all.

When the map is rotated, the screen becomes a diamond in map space and the
text boxes become diagonal, so both are widened to their enclosing axis-aligned
boxes. This wastes cells (and hides some labels) at non-zero rotation.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Sequence, Tuple

import numpy as np

from votemap.common import constants
from votemap.geometry.boxes import Box, boxes_overlap, envelope, visible_envelope
from votemap.geometry.transform import Transform, apply, inverse

logger = logging.getLogger(__name__)

CellRange = Tuple[int, int, int, int]


class PlacementPolicy(Enum):
    """What to do after a label is rejected for lack of space."""

    CONTINUE = "continue"
    STOP = "stop"


@dataclass(frozen=True)
class Label:
    text: str
    x: float
    y: float


@dataclass(frozen=True)
class PlacedLabel:
    """An accepted label; ``x``/``y`` is the screen top-left of its text box."""

    label: Label
    index: int
    x: float
    y: float
    width: float
    height: float

    @property
    def text(self) -> str:
        return self.label.text

    @property
    def box(self) -> Box:
        return Box(self.x, self.y, self.x + self.width, self.y + self.height)


@dataclass
class LabelGrid:
    """Occupancy grid in map units, indexed ``used[row, col]``."""

    origin_x: float
    origin_y: float
    cell_size: float
    used: np.ndarray

    @classmethod
    def covering(cls, area: Box, resolution: int) -> "LabelGrid":
        if area.width <= 0 or area.height <= 0:
            raise ValueError(f"Cannot build a label grid over {area}")
        if resolution < 1:
            raise ValueError(f"Grid resolution must be positive, got {resolution}")

        ratio = area.width / area.height
        num_rows = math.sqrt(resolution / ratio)
        row_height = area.height / num_rows
        cell_size = 2.0 ** math.ceil(math.log2(row_height))

        origin_x = math.floor(area.min_x / cell_size) * cell_size
        origin_y = math.floor(area.min_y / cell_size) * cell_size
        cols = max(1, math.ceil((area.max_x - origin_x) / cell_size))
        rows = max(1, math.ceil((area.max_y - origin_y) / cell_size))
        return cls(origin_x, origin_y, cell_size, np.zeros((rows, cols), dtype=bool))

    @property
    def rows(self) -> int:
        return self.used.shape[0]

    @property
    def cols(self) -> int:
        return self.used.shape[1]

    @property
    def bounds(self) -> Box:
        return Box(
            self.origin_x,
            self.origin_y,
            self.origin_x + self.cols * self.cell_size,
            self.origin_y + self.rows * self.cell_size,
        )

    def cell_range(self, box: Box) -> CellRange | None:
        """Rows/cols ``(row0, row1, col0, col1)`` covered by ``box``, clipped.

        Returns None when the box lies entirely outside the grid.
        """
        bounds = self.bounds
        if not boxes_overlap(box, bounds):
            return None

        size = self.cell_size
        col0 = max(0, math.floor((box.min_x - self.origin_x) / size))
        row0 = max(0, math.floor((box.min_y - self.origin_y) / size))
        col1 = min(self.cols, max(col0 + 1, math.ceil((box.max_x - self.origin_x) / size)))
        row1 = min(self.rows, max(row0 + 1, math.ceil((box.max_y - self.origin_y) / size)))
        if col0 >= col1 or row0 >= row1:
            return None
        return row0, row1, col0, col1

    def is_free(self, cells: CellRange) -> bool:
        row0, row1, col0, col1 = cells
        return not self.used[row0:row1, col0:col1].any()

    def reserve(self, cells: CellRange) -> None:
        row0, row1, col0, col1 = cells
        self.used[row0:row1, col0:col1] = True


def text_box(transform: Transform, label: Label, width: float, height: float) -> Box:
    """Screen-space box of a label's text, centred on its anchor."""
    x, y = apply(transform, (label.x, label.y))
    return Box(x - width / 2, y - height / 2, x + width / 2, y + height / 2)


def place_labels(
    transform: Transform,
    width: float,
    height: float,
    labels: Sequence[Label],
    measure_text: Callable[[str], float],
    *,
    text_height: float = constants.LABEL_TEXT_HEIGHT,
    resolution: int = constants.LABEL_GRID_RESOLUTION,
    policy: PlacementPolicy = PlacementPolicy.CONTINUE,
    reserved: Iterable[Box] = (),
) -> List[PlacedLabel]:
    """Choose which labels to draw this frame.

    Earlier labels win. ``reserved`` holds screen rectangles covered by UI
    chrome; labels touching them are not drawn. The result depends only on the
    arguments.
    """
    if not labels or width <= 0 or height <= 0:
        return []

    grid = LabelGrid.covering(visible_envelope(width, height, transform), resolution)
    reserved = list(reserved)
    placed: List[PlacedLabel] = []

    for index, label in enumerate(labels):
        text_width = measure_text(label.text)
        screen_box = text_box(transform, label, text_width, text_height)
        if any(boxes_overlap(screen_box, chrome) for chrome in reserved):
            continue

        map_box = envelope(inverse(transform, corner) for corner in screen_box.corners())
        cells = grid.cell_range(map_box)
        if cells is None:
            continue

        if not grid.is_free(cells):
            if policy is PlacementPolicy.STOP:
                break
            continue

        grid.reserve(cells)
        placed.append(
            PlacedLabel(
                label, index, screen_box.min_x, screen_box.min_y, text_width, text_height
            )
        )

    logger.debug("Placed %d of %d labels", len(placed), len(labels))
    return placed
