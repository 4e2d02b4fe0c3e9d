"""QPainter rendering of map triangles and placed labels."""
from __future__ import annotations

from typing import Sequence

import numpy as np
from PyQt5 import QtCore, QtGui

from votemap.common import constants
from votemap.geometry.transform import Transform, projection_matrix, view_matrix
from votemap.labels.placement import PlacedLabel


def screen_points(transform: Transform, points: np.ndarray) -> np.ndarray:
    """Apply the view matrix to map points of shape ``(..., 2)``."""
    matrix = view_matrix(transform)
    return points @ matrix[:2, :2].T + matrix[:2, 2]


def on_screen(screen: np.ndarray, width: float, height: float) -> np.ndarray:
    """Mask of triangles ``(n, 3, 2)`` whose clip-space bounds meet the viewport."""
    proj = projection_matrix(width, height)
    clip = screen @ proj[:2, :2].T + proj[:2, 2]
    low = clip.min(axis=1)
    high = clip.max(axis=1)
    return (high >= -1.0).all(axis=1) & (low <= 1.0).all(axis=1)


def label_font(text_height: int) -> QtGui.QFont:
    font = QtGui.QFont(constants.LABEL_FONT_FAMILY)
    font.setPixelSize(text_height)
    return font


class MapRenderer:
    """Draw the vertex buffer and labels for the current frame."""

    def __init__(self, text_height: int = constants.LABEL_TEXT_HEIGHT) -> None:
        self._font = label_font(text_height)
        self._metrics = QtGui.QFontMetricsF(self._font)
        self._outline_pen = QtGui.QPen(QtGui.QColor(0, 0, 0, 200), 3.0)
        self._outline_pen.setJoinStyle(QtCore.Qt.RoundJoin)

    def measure_text(self, text: str) -> float:
        return self._metrics.horizontalAdvance(text)

    def paint(
        self,
        painter: QtGui.QPainter,
        size: QtCore.QSize,
        transform: Transform,
        vertices: np.ndarray,
        placements: Sequence[PlacedLabel],
    ) -> None:
        painter.fillRect(
            QtCore.QRect(QtCore.QPoint(0, 0), size),
            QtGui.QColor(constants.BACKGROUND_COLOR),
        )
        self.draw_triangles(painter, size, transform, vertices)
        self.draw_labels(painter, placements)

    def draw_triangles(
        self,
        painter: QtGui.QPainter,
        size: QtCore.QSize,
        transform: Transform,
        vertices: np.ndarray,
    ) -> None:
        if vertices.size == 0 or size.width() <= 0 or size.height() <= 0:
            return
        triangles = vertices.reshape(-1, 3, constants.VERTEX_STRIDE)
        screen = screen_points(transform, triangles[:, :, :2].astype(np.float64))
        visible = on_screen(screen, size.width(), size.height())
        if not visible.any():
            return

        # Colour the whole triangle from its first vertex.
        colors = np.clip(triangles[visible, 0, 2:6] * 255.0, 0, 255).astype(np.int32)
        palette, groups = np.unique(colors, axis=0, return_inverse=True)
        groups = groups.reshape(-1)
        visible_screen = screen[visible]

        painter.save()
        painter.setRenderHint(QtGui.QPainter.Antialiasing, False)
        painter.setPen(QtCore.Qt.NoPen)
        # One brush change per distinct colour.
        for group, (r, g, b, a) in enumerate(palette):
            painter.setBrush(QtGui.QColor(int(r), int(g), int(b), int(a)))
            for corners in visible_screen[groups == group]:
                painter.drawPolygon(
                    QtGui.QPolygonF(
                        [QtCore.QPointF(float(x), float(y)) for x, y in corners]
                    )
                )
        painter.restore()

    def draw_labels(
        self, painter: QtGui.QPainter, placements: Sequence[PlacedLabel]
    ) -> None:
        if not placements:
            return
        painter.save()
        painter.setRenderHint(QtGui.QPainter.Antialiasing, True)
        ascent = self._metrics.ascent()
        for placed in placements:
            path = QtGui.QPainterPath()
            path.addText(QtCore.QPointF(placed.x, placed.y + ascent), self._font, placed.text)
            # Stroke first so the fill sits on top as an outline.
            painter.strokePath(path, self._outline_pen)
            painter.fillPath(path, QtGui.QColor("white"))
        painter.restore()
