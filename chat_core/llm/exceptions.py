"""Inference related exception hierarchy."""
from __future__ import annotations

from chat_core.errors import ChatError


class InferenceError(ChatError):
    """Raised when the backend call fails for an uncategorized reason.

    ``detail`` keeps the transport/backend message for logs; the
    user-facing ``message`` stays the localized default.
    """

    error_type = "provider-error"

    def __init__(self, message: str | None = None, detail: str | None = None):
        self.detail = detail
        super().__init__(message)


class InferenceUnavailableError(InferenceError):
    """Raised when the inference server cannot be reached."""

    error_type = "backend-unavailable"


class ModelNotFoundError(InferenceError):
    """Raised when the backend reports the model is not available (404)."""

    error_type = "model-not-found"
