from __future__ import annotations
from datetime import datetime, timedelta, timezone
from typing import Any, List
import yaml

from scrollbot.transcript.types import Author, ChatScript, Message, ScriptTurn

_EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _text(raw: Any) -> str:
    # allow str or list[str] (joined into one block)
    if isinstance(raw, list):
        return "\n".join(str(s) for s in raw)
    if not isinstance(raw, str):
        return str(raw or "")
    return raw


def message_from_dict(d: dict, fallback_id: str, fallback_ts: datetime) -> Message:
    ts = d.get("timestamp")
    if isinstance(ts, str):
        ts = datetime.fromisoformat(ts)
    elif not isinstance(ts, datetime):
        ts = fallback_ts
    return Message(
        id=str(d.get("id") or fallback_id),
        author=Author.parse(d.get("author", d.get("sender"))),
        content=_text(d.get("content", d.get("text", ""))),
        timestamp=ts,
    )


def load_chat_script(path: str) -> ChatScript:
    """
    Loads a YAML file containing:
        history: [ {id, author, content}, ... ]      (oldest first, optional)
        script:  [ {user: <str>, reply: <str or list>}, ... ]
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level must be a mapping")

    raw_history = data.get("history", []) or []
    if not isinstance(raw_history, list):
        raise ValueError(f"{path}: 'history' must be a list")

    history: List[Message] = []
    for idx, row in enumerate(raw_history):
        if not isinstance(row, dict):
            raise ValueError(f"{path}: history[{idx}] must be a mapping")
        try:
            history.append(message_from_dict(row, f"h{idx}", _EPOCH + timedelta(minutes=idx)))
        except ValueError as ex:
            raise ValueError(f"{path}: history[{idx}]: {ex}") from ex

    turns: List[ScriptTurn] = []
    for idx, row in enumerate(data.get("script", []) or []):
        if not isinstance(row, dict):
            continue
        turns.append(ScriptTurn(user=_text(row.get("user")), reply=_text(row.get("reply"))))
    if not turns:
        raise ValueError(f"{path}: 'script' must contain at least one turn")

    return ChatScript(history=history, turns=turns)
