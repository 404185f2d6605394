from __future__ import annotations
from enum import Enum

from scrollbot.follow.arrival import Arrival, ArrivalKind
from scrollbot.transcript.types import Author


class FollowAction(Enum):
    NONE = "none"
    SCROLL = "scroll"
    SHOW_JUMP = "show_jump"


def decide(arrival: Arrival, is_at_bottom: bool) -> FollowAction:
    """
    Rules:
      - only a new trailing message can move the view
      - the user's own message always scrolls
      - assistant activity scrolls only while following the bottom,
        otherwise it raises the "new messages" affordance
    """
    if arrival.kind is not ArrivalKind.NEW_TRAILING:
        return FollowAction.NONE
    if arrival.author is Author.USER:
        return FollowAction.SCROLL
    assistant_activity = arrival.composing or arrival.author is Author.ASSISTANT
    if not assistant_activity:
        return FollowAction.NONE
    return FollowAction.SCROLL if is_at_bottom else FollowAction.SHOW_JUMP
