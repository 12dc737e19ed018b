"""In-memory chat sessions: data model, store, lifecycle manager."""

from .models import ChatMessage, Session  # noqa: F401
from .store import SessionStore, InMemorySessionStore  # noqa: F401
from .manager import SessionManager  # noqa: F401

__all__ = [
    "ChatMessage",
    "Session",
    "SessionStore",
    "InMemorySessionStore",
    "SessionManager",
]
