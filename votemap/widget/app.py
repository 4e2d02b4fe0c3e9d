"""Main window for the map viewer."""
from __future__ import annotations

import math

from PyQt5 import QtWidgets

from votemap.config import ViewerSettings
from votemap.geometry.transform import Transform
from votemap.widget.map_widget import MapWidget


class MapViewerWindow(QtWidgets.QMainWindow):
    """Top-level window hosting the map widget and a status bar."""

    def __init__(self, settings: ViewerSettings | None = None) -> None:
        super().__init__()
        self.setWindowTitle("Electorate Map")
        self.resize(1200, 800)

        self._settings = settings or ViewerSettings()
        self._map = MapWidget(self._settings)
        self._map.load_labels(self._settings.labels_path)
        self._map.transformChanged.connect(self._show_transform)
        self.setCentralWidget(self._map)

        presets = ", ".join(
            f"{preset.key}: {preset.name}" for preset in self._settings.presets.values()
        )
        self.statusBar().showMessage(f"Presets - {presets}" if presets else "Ready")

    @property
    def map_widget(self) -> MapWidget:
        return self._map

    def _show_transform(self, transform: Transform) -> None:
        self.statusBar().showMessage(
            f"Scale {transform.scale:.6g}  Rotation {math.degrees(transform.rotate):.1f}°"
        )
