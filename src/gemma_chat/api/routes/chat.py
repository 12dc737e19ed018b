"""/api/chat route: one user turn -> one inference call -> one assistant turn."""
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Request

from chat_core import metrics
from chat_core.errors import ChatError, InvalidMessageError
from chat_core.llm import ModelProvider, build_prompt
from chat_core.sessions import SessionManager

router = APIRouter(prefix="/api")
logger = logging.getLogger("gemma_chat.api")


@router.post("/chat")
def chat(request: Request, payload: Any = Body(None)):  # noqa: D401
    manager: SessionManager = request.app.state.sessions
    provider: ModelProvider = request.app.state.provider

    body = payload if isinstance(payload, dict) else {}
    message = body.get("message")
    if not message or not isinstance(message, str):
        metrics.inc("chat_turns_total", {"status": "invalid-params"})
        raise InvalidMessageError()

    session = manager.resolve_or_create(body.get("sessionId"))
    try:
        with manager.serialized(session.id):
            # user turn stays in history even if inference fails below
            manager.append(session, "user", message)
            prompt = build_prompt(session.messages)
            result = provider.generate(prompt)
            answer = result.raise_for_status()
            manager.append(session, "assistant", answer)
            manager.derive_title(session, message)
    except ChatError as e:
        metrics.inc("chat_turns_total", {"status": e.error_type})
        logger.error(
            "chat failed session=%s type=%s detail=%s",
            session.id,
            e.error_type,
            getattr(e, "detail", None),
        )
        raise
    except Exception as e:  # noqa: BLE001
        metrics.inc("chat_turns_total", {"status": "internal"})
        logger.exception("chat failed session=%s", session.id)
        raise ChatError(error_type="internal") from e

    metrics.inc("chat_turns_total", {"status": "ok"})
    logger.info(
        "chat ok session=%s prompt_chars=%d response_chars=%d ms=%d",
        session.id,
        len(prompt),
        len(answer),
        result.timings.total_ms,
    )
    return {"response": answer, "sessionId": session.id}
