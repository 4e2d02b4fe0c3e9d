"""Raw input record shared between Qt event handlers and the frame tick.

Event handlers only write to this record; the per-frame update is the sole
reader, and the only code that mutates the view transform.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Set


@dataclass
class Pointer:
    """One mouse or touch contact, in screen coordinates."""

    id: int = 0
    x: float = 0.0
    y: float = 0.0
    down: bool = False
    pressed: bool = False

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.y)


def _two_pointers() -> List[Pointer]:
    return [Pointer(), Pointer()]


@dataclass
class InputState:
    """Pointer, wheel and key state collected between two frames.

    ``pointers[0]`` is the mouse or the first finger on the screen,
    ``pointers[1]`` the second finger. ``scroll`` accumulates wheel deltas in
    "scroll pixels" where positive values zoom out.
    """

    pointers: List[Pointer] = field(default_factory=_two_pointers)
    scroll: float = 0.0
    pressed_keys: Set[str] = field(default_factory=set)

    def pointer_down(self, pointer_id: int, x: float, y: float) -> bool:
        """Assign the contact to the first free pointer slot."""
        for pointer in self.pointers:
            if pointer.down:
                continue
            pointer.id = pointer_id
            pointer.down = True
            pointer.pressed = True
            pointer.x = x
            pointer.y = y
            return True
        return False

    def pointer_up(self, pointer_id: int, x: float, y: float) -> bool:
        for pointer in self.pointers:
            if pointer.id != pointer_id or not pointer.down:
                continue
            pointer.down = False
            pointer.x = x
            pointer.y = y
            return True
        return False

    def pointer_move(self, pointer_id: int, x: float, y: float) -> None:
        first, second = self.pointers
        if not first.down and not second.down:
            # A hovering mouse still anchors wheel zoom.
            first.x = x
            first.y = y
            return
        for pointer in self.pointers:
            if pointer.id != pointer_id or not pointer.down:
                continue
            pointer.x = x
            pointer.y = y
            return

    def release_all(self) -> None:
        for pointer in self.pointers:
            pointer.down = False

    def add_scroll(self, delta: float) -> None:
        self.scroll += delta

    def press_key(self, key: str) -> None:
        self.pressed_keys.add(key)

    def consume_key(self, key: str) -> bool:
        if key in self.pressed_keys:
            self.pressed_keys.discard(key)
            return True
        return False

    def end_frame(self) -> None:
        """Clear edge-triggered state once the frame has consumed it."""
        for pointer in self.pointers:
            pointer.pressed = False
        self.scroll = 0.0
        self.pressed_keys.clear()
