"""LLM shared result types."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from chat_core.errors import validate_error_type

from .exceptions import (
    InferenceError,
    InferenceUnavailableError,
    ModelNotFoundError,
)


@dataclass(slots=True)
class GenerationTimings:
    total_ms: int


@dataclass(slots=True)
class GenerationError:
    type: str  # backend-unavailable | model-not-found | provider-error
    message: str | None = None


@dataclass(slots=True)
class GenerationResult:
    status: str  # ok | error
    text: str
    timings: GenerationTimings
    model_id: str
    error: Optional[GenerationError] = None

    @property
    def is_ok(self) -> bool:
        return self.status == "ok"

    @staticmethod
    def ok(text: str, total_ms: int, model_id: str) -> "GenerationResult":
        return GenerationResult(
            status="ok",
            text=text,
            timings=GenerationTimings(total_ms=total_ms),
            model_id=model_id,
        )

    @staticmethod
    def failure(
        err_type: str,
        message: str | None,
        total_ms: int,
        model_id: str,
    ) -> "GenerationResult":
        return GenerationResult(
            status="error",
            text="",
            timings=GenerationTimings(total_ms=total_ms),
            model_id=model_id,
            error=GenerationError(
                type=validate_error_type(err_type), message=message
            ),
        )

    def raise_for_status(self) -> str:
        """Return the text, or raise the exception matching the error type."""
        if self.error is None:
            return self.text
        detail = self.error.message
        if self.error.type == "backend-unavailable":
            raise InferenceUnavailableError(detail=detail)
        if self.error.type == "model-not-found":
            raise ModelNotFoundError(detail=detail)
        raise InferenceError(detail=detail)
