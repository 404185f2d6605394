from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from scrollbot.follow.arrival import Arrival, ArrivalClassifier
from scrollbot.follow.policy import FollowAction, decide
from scrollbot.follow.spring import FrameScheduler, SpringParams, SpringScroller
from scrollbot.follow.tracker import FollowState, ScrollTracker
from scrollbot.transcript.types import Message
from scrollbot.ui.scroll_model import Viewport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InteractionHandlers:
    on_wheel: Callable[[], None]
    on_touch_start: Callable[[], None]
    on_pointer_down: Callable[[], None]


class ScrollFollowController:
    """
    Keeps a chat transcript pinned to its newest message without fighting the user.

    Wiring expected from the hosting view:
      - update(messages, composing) after every transcript change
      - on_scroll() after every scroll offset change made by the user
      - interaction_handlers.* on raw wheel / touch / pointer-down input,
        before the input itself is applied
      - dispose() on teardown
    """
    def __init__(
        self,
        viewport: Callable[[], Optional[Viewport]],
        frames: FrameScheduler,
        *,
        threshold_px: float = 20.0,
        spring: Optional[SpringParams] = None,
        messages: Sequence[Message] = (),
    ) -> None:
        self._viewport = viewport
        self.state = FollowState()
        self.tracker = ScrollTracker(self.state, threshold_px)
        self.classifier = ArrivalClassifier(messages)
        self.scroller = SpringScroller(viewport, frames, spring, on_write=self.on_scroll)
        self.interaction_handlers = InteractionHandlers(
            on_wheel=self.stop,
            on_touch_start=self.stop,
            on_pointer_down=self.stop,
        )

    # --- outputs ------------------------------------------------------------
    @property
    def is_at_bottom(self) -> bool:
        return self.state.is_at_bottom

    @property
    def show_jump_to_latest(self) -> bool:
        return self.state.pending_new_messages

    @property
    def animating(self) -> bool:
        return self.scroller.animating

    # --- operations ---------------------------------------------------------
    def update(self, messages: Sequence[Message], composing: bool = False) -> FollowAction:
        """React to a transcript change. Returns the action taken."""
        arrival: Arrival = self.classifier.classify(messages, composing)
        # a reply landing during the send animation is followed as if at bottom
        following = self.state.is_at_bottom or self.scroller.animating
        action = decide(arrival, following)
        if action is FollowAction.SCROLL:
            self.scroll_to_bottom()
        elif action is FollowAction.SHOW_JUMP:
            self.state.pending_new_messages = True
        if action is not FollowAction.NONE:
            logger.debug("arrival=%s author=%s -> %s", arrival.kind.value,
                         arrival.author.value if arrival.author else None, action.value)
        return action

    def scroll_to_bottom(self) -> None:
        self.scroller.scroll_to_bottom()

    def on_scroll(self) -> bool:
        return self.tracker.on_scroll(self._viewport())

    def stop(self) -> None:
        self.scroller.stop()

    def dispose(self) -> None:
        self.scroller.stop()
