# reunion/services/conversations.py
# "Funny moments" from a Facebook Messenger export (message_1.json).
#
# Messenger exports store UTF-8 bytes as Latin-1 code points ("ðŸ˜†" for 😆),
# so every string is repaired before matching.
from __future__ import annotations

from datetime import datetime, tzinfo
from pathlib import Path
import json
import re
from typing import Any, Dict, List, Optional

from reunion.core.errors import EmptyResultError, ParseError
from reunion.core.logging import get_logger
from reunion.schemas.media import ConversationMessage, ConversationMoment

log = get_logger("conversations")

# 😂 🤣 😆 😹 in text; 😆 😂 🤣 as a reaction ("Haha")
_LAUGH_TEXT = re.compile("[\U0001F602\U0001F923\U0001F606\U0001F639]")
_LAUGH_REACTION = re.compile("[\U0001F606\U0001F602\U0001F923]")

# context kept around a funny message: one before, two after
_BEFORE, _AFTER = 1, 2


def decode_mojibake(text: Optional[str]) -> Optional[str]:
    if not text:
        return text
    try:
        return text.encode("latin-1").decode("utf-8")
    except (UnicodeEncodeError, UnicodeDecodeError):
        return text


def format_timestamp(ms: int, tz: Optional[tzinfo] = None) -> str:
    """en-US style: '7/10/2024, 8:08:42 PM'."""
    dt = datetime.fromtimestamp(ms / 1000, tz=tz)
    hour = dt.hour % 12 or 12
    return f"{dt.month}/{dt.day}/{dt.year}, {hour}:{dt:%M:%S} {dt:%p}"


def clean_messages(export: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Decoded, non-empty, not-unsent messages in chronological order (exports are newest first)."""
    out = []
    for msg in export.get("messages") or []:
        content = decode_mojibake(msg.get("content"))
        if not content or msg.get("is_unsent"):
            continue
        out.append({
            "sender": decode_mojibake(msg.get("sender_name")) or "Unknown Friend",
            "content": content,
            "timestamp_ms": int(msg.get("timestamp_ms") or 0),
            "reactions": [decode_mojibake(r.get("reaction")) or "" for r in msg.get("reactions") or []],
        })
    out.reverse()
    return out


def is_funny(msg: Dict[str, Any]) -> bool:
    if _LAUGH_TEXT.search(msg["content"]):
        return True
    return any(_LAUGH_REACTION.search(r) for r in msg["reactions"])


def extract_moments(export: Dict[str, Any], limit: int = 50,
                    tz: Optional[tzinfo] = None) -> List[ConversationMoment]:
    """
    Each funny message becomes a moment holding the not-yet-used messages in
    [i-1, i+3). A message belongs to at most one moment.
    """
    messages = clean_messages(export)
    used: set = set()
    moments: List[ConversationMoment] = []

    for i, msg in enumerate(messages):
        if i in used or not is_funny(msg):
            continue
        window = []
        for k in range(max(0, i - _BEFORE), min(len(messages), i + _AFTER + 1)):
            if k in used:
                continue
            used.add(k)
            m = messages[k]
            window.append(ConversationMessage(
                sender=m["sender"],
                timestamp=format_timestamp(m["timestamp_ms"], tz=tz),
                content=m["content"],
            ))
        if window:
            moments.append(ConversationMoment(
                category="funny", summary="Funny moment detected", messages=window,
            ))

    log.info("Found %d funny moments in %d messages", len(moments), len(messages))
    return moments[:limit]


def load_moments(path: Path) -> List[ConversationMoment]:
    """Read the JSON written by scripts/extract_conversations.py."""
    if not path.is_file():
        raise EmptyResultError("No funny moments found yet.")
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        return [ConversationMoment.model_validate(m) for m in raw]
    except ValueError as e:  # JSONDecodeError and pydantic ValidationError
        raise ParseError(f"Invalid conversations file {path.name}: {e}") from e
