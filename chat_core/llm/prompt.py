"""Flat-text prompt construction from a session transcript."""
from __future__ import annotations

from typing import Iterable

from chat_core.sessions.models import ChatMessage

PREAMBLE = (
    "以下は日本語での会話です。ユーザーの質問に対して、丁寧に回答してください。"
)
ROLE_LABELS = {
    "user": "ユーザー",
    "assistant": "アシスタント",
}


def build_prompt(messages: Iterable[ChatMessage]) -> str:
    transcript = "\n".join(
        f"{ROLE_LABELS[m.role]}: {m.content}" for m in messages
    )
    return f"{PREAMBLE}\n\n{transcript}\n{ROLE_LABELS['assistant']}:"


__all__ = ["build_prompt", "PREAMBLE", "ROLE_LABELS"]
