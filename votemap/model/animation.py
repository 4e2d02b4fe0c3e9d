"""Queued transform-to-transform transitions."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from votemap.geometry.transform import Transform


class AnimationKind(Enum):
    """Why an animation was queued."""

    # Wheel zoom; while one is running the stored scroll offset is trusted.
    SCROLL = "scroll"
    JUMP = "jump"


@dataclass(frozen=True)
class Animation:
    kind: AnimationKind
    start_time: float
    end_time: float
    start: Transform
    end: Transform

    def __post_init__(self) -> None:
        if not self.start_time < self.end_time:
            raise ValueError(
                f"Animation must end after it starts: {self.start_time} >= {self.end_time}"
            )

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    def progress(self, now: float) -> float:
        return (now - self.start_time) / (self.end_time - self.start_time)
