"""Session lifecycle: create / list / switch / delete / resolve.

The manager owns the process-wide "current session" pointer. It is set to a
seeded session at construction, overwritten on every create, switch and
chat, and never torn down, so it always names a session present in the
store.
"""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from time import time
from typing import Any, Callable, Dict

from chat_core import metrics
from chat_core.errors import SessionNotFoundError

from .models import (
    DEFAULT_TITLE_PREFIX,
    ROLES,
    ChatMessage,
    Session,
    default_title,
    title_from_message,
)
from .store import InMemorySessionStore, SessionStore

logger = logging.getLogger("chat_core.sessions")


class SessionManager:
    def __init__(
        self,
        store: SessionStore | None = None,
        clock: Callable[[], float] = time,
    ) -> None:
        self.store = store if store is not None else InMemorySessionStore()
        self._clock = clock
        self._lock = threading.RLock()
        self._session_locks: Dict[str, threading.Lock] = {}
        self._last_id_ms = 0
        self._current_id = self.create(reason="startup").id

    @property
    def current_session_id(self) -> str:
        return self._current_id

    def _next_id_ms(self) -> int:
        # ms timestamps; bump past the last issued value so ids stay unique
        now_ms = int(self._clock() * 1000)
        if now_ms <= self._last_id_ms:
            now_ms = self._last_id_ms + 1
        while str(now_ms) in self.store:
            now_ms += 1
        self._last_id_ms = now_ms
        return now_ms

    def create(self, make_current: bool = True, reason: str = "explicit") -> Session:
        with self._lock:
            created_at = self._next_id_ms()
            session = Session(
                id=str(created_at),
                title=default_title(created_at),
                created_at=created_at,
            )
            self.store.put(session)
            if make_current:
                self._current_id = session.id
        metrics.inc("sessions_created_total", {"reason": reason})
        logger.debug("session created id=%s reason=%s", session.id, reason)
        return session

    def get(self, session_id: str) -> Session:
        session = self.store.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def list(self) -> Dict[str, Any]:
        sessions = sorted(
            self.store.list(), key=lambda s: s.created_at, reverse=True
        )
        return {
            "sessions": [s.summary() for s in sessions],
            "currentSessionId": self._current_id,
        }

    def switch(self, session_id: str) -> Session:
        with self._lock:
            session = self.get(session_id)
            self._current_id = session.id
        return session

    def delete(self, session_id: str) -> str | None:
        """Delete a session; return the replacement id if it was current."""
        with self._lock:
            if not self.store.delete(session_id):
                raise SessionNotFoundError(session_id)
            self._session_locks.pop(session_id, None)
            was_current = session_id == self._current_id
            metrics.inc("sessions_deleted_total", {"current": was_current})
            if not was_current:
                return None
            replacement = self.create(reason="replacement")
            logger.info(
                "current session %s deleted; replaced by %s",
                session_id,
                replacement.id,
            )
            return replacement.id

    def resolve_or_create(self, session_id: str | None) -> Session:
        with self._lock:
            session = (
                self.store.get(session_id)
                if isinstance(session_id, str)
                else None
            )
            if session is None:
                return self.create(reason="chat")
            self._current_id = session.id
            return session

    def clear_current(self) -> None:
        session = self.store.get(self._current_id)
        if session is not None:
            session.messages.clear()

    def append(self, session: Session, role: str, content: str) -> ChatMessage:
        if role not in ROLES:
            raise ValueError(f"unknown role '{role}'")
        message = ChatMessage(role=role, content=content)
        session.messages.append(message)
        return message

    def derive_title(self, session: Session, first_message: str) -> None:
        """Replace the default title after the first full exchange."""
        if (
            session.title.startswith(DEFAULT_TITLE_PREFIX)
            and len(session.messages) == 2
        ):
            session.title = title_from_message(first_message)

    def session_lock(self, session_id: str) -> threading.Lock:
        """Lock serializing chat exchanges on one session."""
        with self._lock:
            lock = self._session_locks.get(session_id)
            if lock is None:
                lock = self._session_locks[session_id] = threading.Lock()
            return lock

    @contextmanager
    def serialized(self, session_id: str):
        """Hold the session lock; drop its entry if the session is gone after."""
        lock = self.session_lock(session_id)
        with lock:
            try:
                yield
            finally:
                with self._lock:
                    if (
                        session_id not in self.store
                        and self._session_locks.get(session_id) is lock
                    ):
                        del self._session_locks[session_id]


__all__ = ["SessionManager"]
