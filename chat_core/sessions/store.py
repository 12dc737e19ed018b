"""Session storage.

``SessionStore`` is the seam for a persistent backend; the only shipped
implementation keeps everything in a dict and loses it on restart.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from threading import RLock
from typing import Dict, List

from .models import Session


class SessionStore(ABC):
    @abstractmethod
    def get(self, session_id: str) -> Session | None:
        """Return the session or None."""

    @abstractmethod
    def put(self, session: Session) -> None:
        """Insert or replace a session keyed by its id."""

    @abstractmethod
    def delete(self, session_id: str) -> bool:
        """Remove a session; True if it existed."""

    @abstractmethod
    def list(self) -> List[Session]:
        """Return all sessions (no particular order)."""

    def __contains__(self, session_id: object) -> bool:
        return isinstance(session_id, str) and self.get(session_id) is not None

    def __len__(self) -> int:
        return len(self.list())


class InMemorySessionStore(SessionStore):
    """Unbounded dict guarded by a single lock; no TTL, no eviction."""

    def __init__(self) -> None:
        self._sessions: Dict[str, Session] = {}
        self._lock = RLock()

    def get(self, session_id: str) -> Session | None:
        with self._lock:
            return self._sessions.get(session_id)

    def put(self, session: Session) -> None:
        with self._lock:
            self._sessions[session.id] = session

    def delete(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def list(self) -> List[Session]:
        with self._lock:
            return list(self._sessions.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


__all__ = ["SessionStore", "InMemorySessionStore"]
