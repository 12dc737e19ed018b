"""Session CRUD routes and history clearing."""
from __future__ import annotations

from fastapi import APIRouter, Request

from chat_core.sessions import SessionManager

router = APIRouter(prefix="/api")

DELETED_MESSAGE = "セッションを削除しました"
CLEARED_MESSAGE = "チャット履歴をクリアしました"


def _manager(request: Request) -> SessionManager:
    return request.app.state.sessions


@router.get("/sessions")
def list_sessions(request: Request):  # noqa: D401
    return _manager(request).list()


@router.post("/sessions")
def create_session(request: Request):  # noqa: D401
    session = _manager(request).create()
    return {"id": session.id, "title": session.title}


@router.post("/sessions/{session_id}/switch")
def switch_session(session_id: str, request: Request):  # noqa: D401
    return _manager(request).switch(session_id).detail()


@router.delete("/sessions/{session_id}")
def delete_session(session_id: str, request: Request):  # noqa: D401
    new_id = _manager(request).delete(session_id)
    if new_id is None:
        return {"message": DELETED_MESSAGE}
    return {"message": DELETED_MESSAGE, "newSessionId": new_id}


@router.post("/clear")
def clear_history(request: Request):  # noqa: D401
    """Clear the current session's messages (no-op if it vanished)."""
    _manager(request).clear_current()
    return {"message": CLEARED_MESSAGE}
