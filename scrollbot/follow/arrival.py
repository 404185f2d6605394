from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from scrollbot.transcript.types import Author, Message


class ArrivalKind(Enum):
    EMPTY = "empty"
    HISTORY_PREPEND = "history_prepend"   # trailing message unchanged (older page, or in-place token growth)
    NEW_TRAILING = "new_trailing"


@dataclass(frozen=True)
class Arrival:
    kind: ArrivalKind
    author: Optional[Author] = None
    composing: bool = False


def classify_arrival(messages: Sequence[Message], previous_last_id: Optional[str],
                     composing: bool) -> Arrival:
    if not messages:
        return Arrival(ArrivalKind.EMPTY, composing=composing)
    last = messages[-1]
    if last.id == previous_last_id:
        return Arrival(ArrivalKind.HISTORY_PREPEND, author=last.author, composing=composing)
    return Arrival(ArrivalKind.NEW_TRAILING, author=last.author, composing=composing)


class ArrivalClassifier:
    """Remembers the trailing identifier between updates."""
    def __init__(self, messages: Sequence[Message] = ()) -> None:
        self.previous_last_id: Optional[str] = messages[-1].id if messages else None

    def classify(self, messages: Sequence[Message], composing: bool = False) -> Arrival:
        arrival = classify_arrival(messages, self.previous_last_id, composing)
        if arrival.kind is not ArrivalKind.EMPTY:
            self.previous_last_id = messages[-1].id
        return arrival
