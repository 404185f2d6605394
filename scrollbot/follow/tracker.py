from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from scrollbot.ui.scroll_model import Viewport, read_snapshot


@dataclass
class FollowState:
    is_at_bottom: bool = True
    pending_new_messages: bool = False


class ScrollTracker:
    """
    Classifies the viewport as "at bottom" on every scroll event.
    Never scrolls by itself; only reads.
    """
    def __init__(self, state: FollowState, threshold_px: float = 20.0) -> None:
        self.state = state
        self.threshold_px = float(threshold_px)

    def on_scroll(self, vp: Optional[Viewport]) -> bool:
        snap = read_snapshot(vp)
        if snap is None:
            return self.state.is_at_bottom
        at_bottom = snap.distance_from_bottom < self.threshold_px
        self.state.is_at_bottom = at_bottom
        if at_bottom:
            self.state.pending_new_messages = False
        return at_bottom
