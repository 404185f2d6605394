from __future__ import annotations
from typing import List, Sequence

from scrollbot.transcript.types import Message, Transcript


class HistoryPager:
    """
    Serves stored history newest-first in fixed-size pages, the way the
    message table is queried (`ORDER BY created_at DESC LIMIT n OFFSET k`).
    Each page is returned oldest-first, ready to prepend.
    """
    def __init__(self, history: Sequence[Message], page_size: int = 50) -> None:
        self._history: List[Message] = list(history)   # oldest first
        self.page_size = max(1, int(page_size))
        self._served = 0                                 # how many of the newest are out

    @property
    def has_more(self) -> bool:
        return self._served < len(self._history)

    def next_page(self) -> List[Message]:
        if not self.has_more:
            return []
        end = len(self._history) - self._served
        start = max(0, end - self.page_size)
        self._served += end - start
        return self._history[start:end]

    def load_older(self, transcript: Transcript) -> int:
        """
        Prepend the next older page; returns how many messages were added.
        Pages already fully present (e.g. restored from a backup) are skipped.
        """
        while self.has_more:
            page = [m for m in self.next_page() if m.id not in transcript]
            if page:
                return transcript.prepend(page)
        return 0
