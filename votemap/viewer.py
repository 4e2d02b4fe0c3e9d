"""Non-Qt driver that owns the view state and runs the per-frame update."""
from __future__ import annotations

import logging
from typing import Callable, List, Sequence

from votemap.config import ViewerSettings
from votemap.geometry.boxes import Box
from votemap.geometry.transform import DegenerateTransformError, Transform
from votemap.interaction import animation_scheduler, gesture_resolver, keyboard
from votemap.labels.placement import Label, PlacedLabel, place_labels
from votemap.model.input_state import InputState
from votemap.model.view_state import ViewerState
from votemap.services.tiles import TileRequest, tile_request_for

logger = logging.getLogger(__name__)


def _no_measure(text: str) -> float:
    return 0.0


class MapViewer:
    """Single writer of the view transform.

    Event handlers record input into :attr:`input`; :meth:`tick` consumes it
    once per frame, advances animations and recomputes label placement.
    """

    def __init__(
        self,
        settings: ViewerSettings | None = None,
        measure_text: Callable[[str], float] = _no_measure,
    ) -> None:
        self.settings = settings or ViewerSettings()
        self.state = ViewerState(
            min_scale=self.settings.min_scale,
            max_scale=self.settings.max_scale,
            max_scroll=self.settings.max_scroll,
        )
        self.input = InputState()
        self.labels: List[Label] = []
        self.placements: List[PlacedLabel] = []
        self.reserved: List[Box] = []
        self.width = 0
        self.height = 0
        self._measure_text = measure_text
        self._fitted = False

    @property
    def transform(self) -> Transform:
        return self.state.transform

    def set_labels(self, labels: Sequence[Label]) -> None:
        self.labels = list(labels)

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        if not self._fitted and width > 0 and height > 0:
            home = self.settings.home_box()
            if home is not None:
                self.fit_to_box(home)

    def fit_to_box(self, box: Box) -> None:
        """Show ``box`` immediately, without animating."""
        if self.width <= 0 or self.height <= 0:
            return
        self.state.transform = self.state.fit(box, self.width, self.height)
        self.state.cancel_animations()
        self._fitted = True

    def animating(self) -> bool:
        return bool(self.state.animations)

    def tile_request(self) -> TileRequest | None:
        if self.width <= 0 or self.height <= 0:
            return None
        try:
            return tile_request_for(self.state.transform, self.width, self.height)
        except DegenerateTransformError:
            logger.exception("Skipping tile request for this frame")
            return None

    def tick(self, now: float) -> None:
        """Run one frame at time ``now`` (milliseconds)."""
        try:
            self._apply_input(now)
        except DegenerateTransformError:
            logger.exception("Dropping input for this frame")
        animation_scheduler.advance(self.state, now)
        self.input.end_frame()
        self.placements = self._place_labels()

    def _apply_input(self, now: float) -> None:
        settings = self.settings
        gesture_resolver.resolve_pointers(self.state, self.input)
        gesture_resolver.handle_scroll(
            self.state, self.input, now, settings.scroll_duration_ms
        )
        if self.width > 0 and self.height > 0:
            keyboard.handle_keys(
                self.state,
                self.input,
                self.width,
                self.height,
                now,
                settings.preset_boxes(),
                duration=settings.jump_duration_ms,
                leg_duration=settings.jump_leg_duration_ms,
            )

    def _place_labels(self) -> List[PlacedLabel]:
        try:
            return place_labels(
                self.state.transform,
                self.width,
                self.height,
                self.labels,
                self._measure_text,
                text_height=self.settings.label_text_height,
                resolution=self.settings.label_grid_resolution,
                policy=self.settings.label_policy,
                reserved=self.reserved,
            )
        except DegenerateTransformError:
            logger.exception("Skipping label placement for this frame")
            return []
