"""Entry point for the electorate map viewer."""
from __future__ import annotations

import logging
import os
from pathlib import Path
import sys

from PyQt5 import QtWidgets

from votemap.config import load_settings
from votemap.widget.app import MapViewerWindow

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    base_dir = os.path.dirname(sys.argv[0])
    log_path = os.path.join(base_dir, "votemap_log.txt")

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(log_path, mode="a", encoding="utf-8"),
            logging.StreamHandler(sys.stdout),
        ],
    )


def main() -> None:
    configure_logging()
    logger.info("Starting electorate map viewer")

    app = QtWidgets.QApplication(sys.argv)
    settings = load_settings(Path(__file__).resolve())

    window = MapViewerWindow(settings)
    window.show()

    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
