"""Load label and vertex data for the map viewer.

Missing or malformed files are treated as "no data yet": the loaders log the
problem and return empty results so the viewer keeps running.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List

import numpy as np

from votemap.common.constants import VERTEX_STRIDE
from votemap.labels.placement import Label

logger = logging.getLogger(__name__)


def empty_vertices() -> np.ndarray:
    return np.zeros((0, VERTEX_STRIDE), dtype=np.float32)


def parse_labels(payload: object) -> List[Label]:
    """Labels from ``{"labels": [{"text": ..., "pos": [x, y]}, ...]}``.

    Entries without text or a two-number position are skipped.
    """
    if not isinstance(payload, dict):
        return []
    entries = payload.get("labels")
    if not isinstance(entries, list):
        return []

    labels: List[Label] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        text = entry.get("text")
        pos = entry.get("pos")
        if not isinstance(text, str) or not text:
            continue
        if not isinstance(pos, (list, tuple)) or len(pos) != 2:
            continue
        try:
            labels.append(Label(text, float(pos[0]), float(pos[1])))
        except (TypeError, ValueError):
            continue
    return labels


def load_labels(path: Path | None) -> List[Label]:
    if path is None:
        return []
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except (OSError, ValueError) as exc:
        logger.warning("Could not load labels from %s: %s", path, exc)
        return []
    labels = parse_labels(payload)
    logger.info("Loaded %d labels from %s", len(labels), path)
    return labels


def parse_vertices(data: bytes) -> np.ndarray:
    """Vertex rows ``(x, y, r, g, b, a)`` from a raw little-endian float32 buffer.

    Trailing values that do not form a whole triangle are dropped.
    """
    values = np.frombuffer(data[: len(data) - len(data) % 4], dtype="<f4")
    per_triangle = 3 * VERTEX_STRIDE
    usable = (values.size // per_triangle) * per_triangle
    if usable != values.size:
        logger.warning(
            "Dropping %d trailing floats from vertex buffer", values.size - usable
        )
    return values[:usable].astype(np.float32).reshape(-1, VERTEX_STRIDE)


def load_vertices(path: Path | None) -> np.ndarray:
    if path is None:
        return empty_vertices()
    try:
        data = path.read_bytes()
    except OSError as exc:
        logger.warning("Could not load vertices from %s: %s", path, exc)
        return empty_vertices()
    vertices = parse_vertices(data)
    logger.info("Loaded %d triangles from %s", len(vertices) // 3, path)
    return vertices
