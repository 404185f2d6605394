from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, List, Optional, Set


class Author(Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"

    @classmethod
    def parse(cls, raw: object) -> "Author":
        s = str(raw or "").strip().lower()
        if s == "tufti":  # persona name used for assistant rows
            return cls.ASSISTANT
        return cls(s)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(eq=False)
class Message:
    id: str                     # opaque, unique within a transcript, never reused
    author: Author
    content: str = ""
    timestamp: datetime = field(default_factory=_now)


class Transcript:
    """
    Ordered messages. Live chat appends at the tail; loading older history
    extends the head. Streaming tokens grow the trailing message in place.
    """
    def __init__(self, messages: Iterable[Message] = ()) -> None:
        self._messages: List[Message] = []
        self._ids: Set[str] = set()
        self.append_many(messages)

    # ---------- authoring ----------
    def append(self, msg: Message) -> Message:
        self._claim([msg])
        self._messages.append(msg)
        return msg

    def append_many(self, msgs: Iterable[Message]) -> None:
        for m in msgs:
            self.append(m)

    def prepend(self, older: Iterable[Message]) -> int:
        """Insert a batch of older messages (oldest first) at the head."""
        batch = list(older)
        self._claim(batch)
        self._messages[:0] = batch
        return len(batch)

    def clear(self) -> None:
        self._messages.clear()
        self._ids.clear()

    # ---------- queries ----------
    @property
    def messages(self) -> List[Message]:
        return self._messages

    @property
    def last(self) -> Optional[Message]:
        return self._messages[-1] if self._messages else None

    @property
    def last_id(self) -> Optional[str]:
        return self._messages[-1].id if self._messages else None

    def __len__(self) -> int:
        return len(self._messages)

    def __contains__(self, msg_id: object) -> bool:
        return msg_id in self._ids

    # ---------- internals ----------
    def _claim(self, batch: List[Message]) -> None:
        seen: Set[str] = set()
        for m in batch:
            if m.id in self._ids or m.id in seen:
                raise ValueError(f"duplicate message id: {m.id!r}")
            seen.add(m.id)
        self._ids.update(seen)


@dataclass(eq=False)
class ScriptTurn:
    user: str                   # what the demo "types" when Enter is pressed
    reply: str                  # streamed back token by token


@dataclass
class ChatScript:
    history: List[Message]      # oldest first; the pager serves it newest-first
    turns: List[ScriptTurn]
