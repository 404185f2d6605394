from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Protocol


class Viewport(Protocol):
    """Anything that scrolls vertically: a pygame panel, a test double, ..."""
    scroll_offset: float

    @property
    def content_height(self) -> float: ...
    @property
    def viewport_height(self) -> float: ...


@dataclass(frozen=True)
class ScrollSnapshot:
    scroll_offset: float
    content_height: float
    viewport_height: float

    @property
    def bottom_offset(self) -> float:
        return max(0.0, float(self.content_height - self.viewport_height))

    @property
    def distance_from_bottom(self) -> float:
        return self.content_height - self.scroll_offset - self.viewport_height


def read_snapshot(vp: Optional[Viewport]) -> Optional[ScrollSnapshot]:
    if vp is None:
        return None
    return ScrollSnapshot(float(vp.scroll_offset), float(vp.content_height), float(vp.viewport_height))


@dataclass
class ScrollModel:
    content_h: int = 0
    viewport_h: int = 0
    offset: float = 0.0

    def max(self) -> float: return max(0.0, float(self.content_h - self.viewport_h))
    def clamp(self): self.offset = max(0.0, min(self.max(), self.offset))
    def scroll(self, dy: float): self.offset += dy; self.clamp()
    def to_top(self): self.offset = 0.0
    def to_bottom(self): self.offset = self.max()

    # --- Viewport protocol (writes clamp like a browser's scrollTop) ---
    @property
    def scroll_offset(self) -> float:
        return self.offset

    @scroll_offset.setter
    def scroll_offset(self, value: float) -> None:
        self.offset = float(value)
        self.clamp()

    @property
    def content_height(self) -> float:
        return float(self.content_h)

    @property
    def viewport_height(self) -> float:
        return float(self.viewport_h)
