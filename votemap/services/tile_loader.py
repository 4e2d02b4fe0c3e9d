"""Background loading of map triangles for the visible region."""
from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from PyQt5 import QtCore

from votemap.services.io_service import empty_vertices, load_vertices
from votemap.services.tiles import TileRequest, cull_triangles

logger = logging.getLogger(__name__)


class FileVertexSource:
    """Serve tile requests from one vertex buffer file on disk.

    The file is read on the first fetch. The loader never runs two fetches at
    once, so the lazy read needs no locking.
    """

    def __init__(self, path: Path | None) -> None:
        self._path = path
        self._vertices: np.ndarray | None = None

    def fetch(self, request: TileRequest) -> np.ndarray:
        if self._vertices is None:
            self._vertices = load_vertices(self._path)
        return cull_triangles(self._vertices, request.box)


class TileLoadSignals(QtCore.QObject):
    loaded = QtCore.pyqtSignal(int, object, object)


class TileLoadTask(QtCore.QRunnable):
    def __init__(self, generation: int, request: TileRequest, source) -> None:
        super().__init__()
        self.setAutoDelete(True)
        self.signals = TileLoadSignals()
        self._generation = generation
        self._request = request
        self._source = source

    def run(self) -> None:
        try:
            vertices = self._source.fetch(self._request)
        except Exception:
            logger.exception("Tile fetch failed for %s", self._request)
            vertices = empty_vertices()
        self.signals.loaded.emit(self._generation, self._request, vertices)


class TileLoader(QtCore.QObject):
    """Fire-and-forget tile fetches guarded against request storms.

    Only one fetch is in flight at a time; requests made meanwhile are
    dropped and the next frame asks again. Results replace the current
    vertex buffer when they arrive.
    """

    tilesLoaded = QtCore.pyqtSignal()

    def __init__(self, source, thread_pool: QtCore.QThreadPool | None = None) -> None:
        super().__init__()
        self._source = source
        self._thread_pool = thread_pool or QtCore.QThreadPool.globalInstance()
        self._vertices = empty_vertices()
        self._generation = 0
        self._pending = False
        self._loaded_request: TileRequest | None = None

    @property
    def vertices(self) -> np.ndarray:
        return self._vertices

    @property
    def pending(self) -> bool:
        return self._pending

    def request(self, tile_request: TileRequest) -> bool:
        """Start a fetch unless one is pending or the loaded data covers it."""
        if self._pending:
            return False
        if self._loaded_request is not None and self._loaded_request.covers(tile_request):
            return False
        self._pending = True
        task = TileLoadTask(self._generation, tile_request, self._source)
        task.signals.loaded.connect(self._handle_loaded)
        self._thread_pool.start(task)
        logger.debug("Requested tiles %s", tile_request)
        return True

    def reset(self, source=None) -> None:
        """Drop loaded data; results of fetches already in flight are ignored."""
        if source is not None:
            self._source = source
        self._generation += 1
        self._pending = False
        self._loaded_request = None
        self._vertices = empty_vertices()

    def _handle_loaded(
        self, generation: int, request: TileRequest, vertices: np.ndarray
    ) -> None:
        if generation != self._generation:
            return
        self._pending = False
        self._loaded_request = request
        self._vertices = vertices
        self.tilesLoaded.emit()
