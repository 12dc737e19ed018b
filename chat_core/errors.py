"""Central error taxonomy.

Every failure surfaced to an HTTP caller carries one of the codes below.
The API layer renders ``ChatError`` instances as ``{"error": message}``
with the mapped status code.
"""
from __future__ import annotations

_ALLOWED_ERROR_TYPES = {
    # request
    "invalid-params",
    "session-not-found",
    # inference
    "backend-unavailable",
    "model-not-found",
    "provider-error",
    # config
    "config-invalid",
    "config-out-of-range",
    # catch-all
    "internal",
}

_HTTP_STATUS = {
    "invalid-params": 400,
    "session-not-found": 404,
    "backend-unavailable": 503,
    "model-not-found": 404,
    "provider-error": 500,
    "config-invalid": 500,
    "config-out-of-range": 500,
    "internal": 500,
}

# Messages shown to the end user (the UI is Japanese).
MESSAGES = {
    "invalid-params": "メッセージが必要です",
    "session-not-found": "セッションが見つかりません",
    "backend-unavailable": (
        "Ollamaサーバーに接続できません。"
        "Ollamaが起動していることを確認してください。"
    ),
    "model-not-found": (
        "Gemmaモデルが見つかりません。ollama pull gemmaを実行してください。"
    ),
    "provider-error": "内部サーバーエラーが発生しました",
    "internal": "内部サーバーエラーが発生しました",
}


def validate_error_type(code: str) -> str:
    assert (
        code in _ALLOWED_ERROR_TYPES
    ), f"Unknown error_type '{code}' (not in taxonomy)"
    return code


def http_status(code: str) -> int:
    return _HTTP_STATUS[validate_error_type(code)]


def default_message(code: str) -> str:
    return MESSAGES.get(validate_error_type(code), MESSAGES["internal"])


class ChatError(Exception):
    """Base for errors that terminate a request with a taxonomy code."""

    error_type = "internal"

    def __init__(self, message: str | None = None, error_type: str | None = None):
        if error_type is not None:
            self.error_type = validate_error_type(error_type)
        self.message = message or default_message(self.error_type)
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return http_status(self.error_type)


class InvalidMessageError(ChatError):
    error_type = "invalid-params"


class SessionNotFoundError(ChatError):
    error_type = "session-not-found"

    def __init__(self, session_id: str | None = None, message: str | None = None):
        self.session_id = session_id
        super().__init__(message)


__all__ = [
    "validate_error_type",
    "http_status",
    "default_message",
    "ChatError",
    "InvalidMessageError",
    "SessionNotFoundError",
    "MESSAGES",
]
