from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Sequence

import yaml

from scrollbot.transcript.loader import message_from_dict
from scrollbot.transcript.types import Message

logger = logging.getLogger(__name__)

MAX_BACKUP_MESSAGES = 100


class MessageBackup:
    """
    Local fallback copy of the most recent messages, kept in a YAML file.

    The hosted store is the source of truth; this only exists so a restart
    without connectivity still shows the last conversation. Every failure is
    logged and degrades to "no backup".
    """
    def __init__(self, path: str | Path, max_messages: int = MAX_BACKUP_MESSAGES) -> None:
        self.path = Path(path)
        self.max_messages = max(1, int(max_messages))

    def save(self, messages: Sequence[Message]) -> int:
        keep = list(messages)[-self.max_messages:]
        rows = [
            {
                "id": m.id,
                "author": m.author.value,
                "content": m.content,
                "timestamp": m.timestamp.isoformat(),
            }
            for m in keep
        ]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8") as f:
                yaml.safe_dump({"messages": rows}, f, allow_unicode=True, sort_keys=False)
        except OSError as ex:
            logger.error("failed to save message backup to %s: %s", self.path, ex)
            return 0
        logger.info("saved %d messages to %s", len(rows), self.path)
        return len(rows)

    def load(self) -> List[Message]:
        if not self.path.exists():
            return []
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as ex:
            logger.error("failed to read message backup %s: %s", self.path, ex)
            return []

        rows = data.get("messages") if isinstance(data, dict) else None
        if not isinstance(rows, list):
            if rows is not None:
                logger.warning("ignoring message backup %s: 'messages' is not a list", self.path)
            rows = []
        out: List[Message] = []
        seen = set()
        fallback_ts = datetime.now(timezone.utc)
        for idx, row in enumerate(rows):
            if not isinstance(row, dict):
                continue
            try:
                msg = message_from_dict(row, f"backup{idx}", fallback_ts)
            except ValueError as ex:
                logger.warning("skipping backup row %d: %s", idx, ex)
                continue
            if msg.id in seen:
                continue
            seen.add(msg.id)
            out.append(msg)
        logger.info("loaded %d messages from %s", len(out), self.path)
        return out

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as ex:
            logger.error("failed to clear message backup %s: %s", self.path, ex)
            return
        logger.info("cleared message backup %s", self.path)

    def exists(self) -> bool:
        try:
            return self.path.is_file() and self.path.stat().st_size > 0
        except OSError:
            return False
