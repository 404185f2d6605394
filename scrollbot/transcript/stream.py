from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from scrollbot.transcript.types import Author, Message, Transcript

logger = logging.getLogger(__name__)

DONE = "[DONE]"


class StreamError(RuntimeError):
    """
    The server pushed an error payload into the event stream.
    `events` holds whatever the same chunk decoded before the error line.
    """
    def __init__(self, message: str, events: Optional[List["StreamEvent"]] = None) -> None:
        super().__init__(message)
        self.events: List[StreamEvent] = list(events or [])


@dataclass(frozen=True)
class StreamEvent:
    token: str = ""
    conversation_id: Optional[str] = None
    done: bool = False


class SSEDecoder:
    """
    Incremental decoder for `data: {...}` server-sent-event lines.

    Chunks may split lines anywhere; incomplete tails are buffered until the
    next feed(). Lines that are not `data:` lines (comments, blank separators,
    `event:` fields) are ignored.
    """
    def __init__(self) -> None:
        self._buf = ""
        self.finished = False

    def feed(self, chunk: str) -> List[StreamEvent]:
        if self.finished:
            return []
        self._buf += chunk or ""
        out: List[StreamEvent] = []
        while "\n" in self._buf:
            line, self._buf = self._buf.split("\n", 1)
            try:
                ev = self._parse_line(line.strip())
            except StreamError as ex:
                self.finished = True
                self._buf = ""
                ex.events = out + ex.events
                raise
            if ev is None:
                continue
            out.append(ev)
            if ev.done:
                self.finished = True
                self._buf = ""
                break
        return out

    def close(self) -> List[StreamEvent]:
        """Flush a final unterminated line, if any."""
        if self.finished or not self._buf.strip():
            self._buf = ""
            return []
        return self.feed("\n")

    def _parse_line(self, line: str) -> Optional[StreamEvent]:
        if not line.startswith("data:"):
            return None
        payload = line[5:].strip()
        if payload == DONE:
            return StreamEvent(done=True)
        try:
            data = json.loads(payload)
        except json.JSONDecodeError:
            logger.warning("skipping malformed stream line: %r", payload[:80])
            return None
        if not isinstance(data, dict):
            logger.warning("skipping non-object stream payload: %r", payload[:80])
            return None
        if data.get("error"):
            raise StreamError(str(data["error"]))
        token = data.get("token", data.get("content", "")) or ""
        return StreamEvent(token=str(token), conversation_id=data.get("conversationId"))


class StreamAppender:
    """
    Applies a streamed reply to a transcript.

    begin() appends an empty assistant placeholder (a new trailing message);
    later tokens grow it in place, so the trailing id never changes mid-reply.
    """
    def __init__(self, transcript: Transcript, make_id: Callable[[], str]) -> None:
        self.transcript = transcript
        self._make_id = make_id
        self.decoder = SSEDecoder()
        self.composing = False
        self.conversation_id: Optional[str] = None
        self.message: Optional[Message] = None

    def begin(self) -> Message:
        self.decoder = SSEDecoder()
        self.message = self.transcript.append(Message(id=self._make_id(), author=Author.ASSISTANT))
        self.composing = True
        return self.message

    def feed(self, chunk: str) -> int:
        """Decode `chunk` and append its tokens. Returns the number of characters added."""
        if not self.composing:
            return 0
        try:
            events = self.decoder.feed(chunk)
        except StreamError as ex:
            # keep the tokens that arrived ahead of the error line
            self._apply(ex.events)
            self.composing = False
            raise
        return self._apply(events)

    def finish(self) -> None:
        try:
            self._apply(self.decoder.close())
        except StreamError as ex:
            self._apply(ex.events)
            raise
        finally:
            self.composing = False

    def _apply(self, events: List[StreamEvent]) -> int:
        added = 0
        for ev in events:
            if ev.conversation_id and not self.conversation_id:
                self.conversation_id = ev.conversation_id
            if ev.token and self.message is not None:
                self.message.content += ev.token
                added += len(ev.token)
            if ev.done:
                self.composing = False
        return added
