from __future__ import annotations

import json
import logging
import re
from collections import deque
from typing import Deque, List, Optional

from scrollbot.transcript.types import ScriptTurn

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"\S+\s*|\s+")


def sse_line(payload: dict | str) -> str:
    body = payload if isinstance(payload, str) else json.dumps(payload)
    return f"data: {body}\n\n"


class ScriptedAssistant:
    """
    Offline stand-in for the hosted chat endpoint.

    Replies come from the content script and are pushed out as the same
    server-sent-event text the real endpoint produces: a conversationId
    event, one `{"token": ...}` event per word, then `[DONE]`.
    """
    def __init__(self, turns: List[ScriptTurn], tokens_per_sec: float = 24.0,
                 composing_delay_s: float = 0.6, conversation_id: str = "demo") -> None:
        self.turns = list(turns)
        self.tokens_per_sec = max(1e-3, float(tokens_per_sec))
        self.composing_delay_s = max(0.0, float(composing_delay_s))
        self.conversation_id = conversation_id
        self._turn = 0
        self._queue: Deque[str] = deque()
        self._delay = 0.0
        self._budget = 0.0
        self._started = False

    # ---------- script ----------
    def next_user_line(self) -> str:
        """The user line of the next turn (cycles through the script)."""
        return self.turns[self._turn % len(self.turns)].user

    def reply_to_current(self) -> None:
        """Queue the reply of the current turn and advance to the next one."""
        turn = self.turns[self._turn % len(self.turns)]
        self._turn += 1
        self._queue = deque(sse_line({"token": tok}) for tok in _TOKEN_RE.findall(turn.reply))
        self._queue.appendleft(sse_line({"conversationId": self.conversation_id}))
        self._queue.append(sse_line("[DONE]"))
        self._delay = self.composing_delay_s
        self._budget = 0.0
        self._started = False
        logger.debug("scripted reply queued: %d events", len(self._queue))

    # ---------- streaming ----------
    def cancel(self) -> None:
        self._queue.clear()
        self._started = False

    @property
    def streaming(self) -> bool:
        return bool(self._queue)

    def update(self, dt: float) -> Optional[str]:
        """Returns the SSE text released during this frame, or None."""
        if not self._queue:
            return None
        if self._delay > 0.0:
            self._delay -= dt
            if self._delay > 0.0:
                return None
            dt = -self._delay
        self._budget += dt * self.tokens_per_sec
        if not self._started:
            self._budget = max(self._budget, 2.0)   # conversationId + first token together

        out: List[str] = []
        while self._queue and self._budget >= 1.0:
            out.append(self._queue.popleft())
            self._budget -= 1.0
        if not out:
            return None
        self._started = True
        return "".join(out)
