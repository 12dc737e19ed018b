"""Session data model and its wire projections."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List

ROLES = ("user", "assistant")
DEFAULT_TITLE_PREFIX = "チャット"
TITLE_MAX_CHARS = 30


@dataclass(slots=True)
class ChatMessage:
    role: str  # user|assistant
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(slots=True)
class Session:
    id: str
    title: str
    created_at: int  # ms since epoch, same value the id is derived from
    messages: List[ChatMessage] = field(default_factory=list)

    def summary(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "createdAt": self.created_at,
            "messageCount": len(self.messages),
        }

    def detail(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "messages": [m.to_dict() for m in self.messages],
        }


def format_ja_timestamp(created_at_ms: int) -> str:
    """Local time rendered like ``toLocaleString('ja-JP')``: 2023/11/15 7:13:20."""
    d = datetime.fromtimestamp(created_at_ms / 1000)
    return (
        f"{d.year}/{d.month}/{d.day} "
        f"{d.hour}:{d.minute:02d}:{d.second:02d}"
    )


def default_title(created_at_ms: int) -> str:
    return f"{DEFAULT_TITLE_PREFIX} {format_ja_timestamp(created_at_ms)}"


def title_from_message(message: str) -> str:
    head = message[:TITLE_MAX_CHARS]
    return head + "..." if len(head) < len(message) else head


__all__ = [
    "ROLES",
    "DEFAULT_TITLE_PREFIX",
    "ChatMessage",
    "Session",
    "default_title",
    "format_ja_timestamp",
    "title_from_message",
]
