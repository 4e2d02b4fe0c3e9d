"""Qt widget that hosts the map surface and input wiring.

This module lives in the UI layer. It records Qt input events into the
viewer's input state, drives the per-frame tick from a timer, and hands a
QPainter to the renderer. It never changes the view transform itself.
"""
from __future__ import annotations

from pathlib import Path

from PyQt5 import QtCore, QtGui, QtWidgets

from votemap.common import constants
from votemap.config import ViewerSettings
from votemap.rendering.map_renderer import MapRenderer
from votemap.services.io_service import load_labels
from votemap.services.tile_loader import FileVertexSource, TileLoader
from votemap.viewer import MapViewer

MOUSE_POINTER_ID = -1


def key_name(event: QtGui.QKeyEvent) -> str:
    """Name a key press the way keyboard commands are bound, e.g. ``"Ctrl+F1"``."""
    name = QtGui.QKeySequence(event.key()).toString()
    if event.modifiers() & QtCore.Qt.ControlModifier:
        return f"Ctrl+{name}"
    return name


class MapWidget(QtWidgets.QWidget):
    """UI widget that wires paint, input, and the frame timer."""

    transformChanged = QtCore.pyqtSignal(object)

    def __init__(self, settings: ViewerSettings | None = None) -> None:
        super().__init__()
        self.setMinimumSize(320, 240)
        self.setMouseTracking(True)
        self.setFocusPolicy(QtCore.Qt.StrongFocus)
        self.setAttribute(QtCore.Qt.WA_AcceptTouchEvents)
        self.setAttribute(QtCore.Qt.WA_OpaquePaintEvent)

        self._settings = settings or ViewerSettings()
        self._renderer = MapRenderer(self._settings.label_text_height)
        self._viewer = MapViewer(self._settings, self._renderer.measure_text)
        self._tiles = TileLoader(FileVertexSource(self._settings.vertices_path))
        self._tiles.tilesLoaded.connect(self.update)
        self._last_transform = self._viewer.transform

        self._clock = QtCore.QElapsedTimer()
        self._clock.start()
        self._frame_timer = QtCore.QTimer(self)
        self._frame_timer.setInterval(constants.FRAME_INTERVAL_MS)
        self._frame_timer.setTimerType(QtCore.Qt.PreciseTimer)
        self._frame_timer.timeout.connect(self._step)
        self._frame_timer.start()

    @property
    def viewer(self) -> MapViewer:
        return self._viewer

    def load_labels(self, path: Path | None) -> None:
        self._viewer.set_labels(load_labels(path))

    # ------------------------------------------------------------------
    # Frame loop
    # ------------------------------------------------------------------
    def _step(self) -> None:
        now = self._clock.nsecsElapsed() / 1_000_000
        self._viewer.tick(now)
        request = self._viewer.tile_request()
        if request is not None:
            self._tiles.request(request)
        transform = self._viewer.transform
        if transform != self._last_transform:
            self._last_transform = transform
            self.transformChanged.emit(transform)
        self.update()

    # ------------------------------------------------------------------
    # Qt events
    # ------------------------------------------------------------------
    def paintEvent(self, event: QtGui.QPaintEvent) -> None:  # noqa: D401 - Qt signature
        painter = QtGui.QPainter(self)
        self._renderer.paint(
            painter,
            self.size(),
            self._viewer.transform,
            self._tiles.vertices,
            self._viewer.placements,
        )
        painter.end()

    def resizeEvent(self, event: QtGui.QResizeEvent) -> None:  # noqa: D401 - Qt signature
        self._viewer.resize(self.width(), self.height())
        super().resizeEvent(event)

    def _from_touch(self, event: QtGui.QMouseEvent) -> bool:
        return event.source() != QtCore.Qt.MouseEventNotSynthesized

    def mousePressEvent(self, event: QtGui.QMouseEvent) -> None:  # noqa: D401 - Qt signature
        if event.button() == QtCore.Qt.LeftButton and not self._from_touch(event):
            self._viewer.input.pointer_down(MOUSE_POINTER_ID, event.x(), event.y())
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QtGui.QMouseEvent) -> None:  # noqa: D401 - Qt signature
        if not self._from_touch(event):
            self._viewer.input.pointer_move(MOUSE_POINTER_ID, event.x(), event.y())
            event.accept()
            return
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QtGui.QMouseEvent) -> None:  # noqa: D401 - Qt signature
        if event.button() == QtCore.Qt.LeftButton and not self._from_touch(event):
            self._viewer.input.pointer_up(MOUSE_POINTER_ID, event.x(), event.y())
            event.accept()
            return
        super().mouseReleaseEvent(event)

    def wheelEvent(self, event: QtGui.QWheelEvent) -> None:  # noqa: D401 - Qt signature
        delta = event.angleDelta().y()
        if delta == 0:
            super().wheelEvent(event)
            return
        position = event.pos()
        self._viewer.input.pointer_move(MOUSE_POINTER_ID, position.x(), position.y())
        notches = delta / constants.WHEEL_UNITS_PER_NOTCH
        # Wheel away from the user zooms in, which lowers the scroll offset.
        self._viewer.input.add_scroll(-notches * constants.SCROLL_PIXELS_PER_NOTCH)
        event.accept()

    def keyPressEvent(self, event: QtGui.QKeyEvent) -> None:  # noqa: D401 - Qt signature
        if event.isAutoRepeat():
            event.accept()
            return
        self._viewer.input.press_key(key_name(event))
        event.accept()

    def event(self, event: QtCore.QEvent) -> bool:  # noqa: D401 - Qt signature
        kind = event.type()
        if kind in (
            QtCore.QEvent.TouchBegin,
            QtCore.QEvent.TouchUpdate,
            QtCore.QEvent.TouchEnd,
        ):
            self._handle_touch(event)
            return True
        if kind == QtCore.QEvent.TouchCancel:
            self._viewer.input.release_all()
            return True
        return super().event(event)

    def _handle_touch(self, event: QtGui.QTouchEvent) -> None:
        input_state = self._viewer.input
        for point in event.touchPoints():
            pos = point.pos()
            state = point.state()
            if state == QtCore.Qt.TouchPointPressed:
                input_state.pointer_down(point.id(), pos.x(), pos.y())
            elif state == QtCore.Qt.TouchPointReleased:
                input_state.pointer_up(point.id(), pos.x(), pos.y())
            elif state == QtCore.Qt.TouchPointMoved:
                input_state.pointer_move(point.id(), pos.x(), pos.y())
        event.accept()
