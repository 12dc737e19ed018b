"""ModelProvider interface.

Providers perform exactly one backend call per ``generate``; retries and
streaming are deliberately absent.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict

from .types import GenerationResult


@dataclass(frozen=True)
class ModelInfo:
    id: str
    backend: str
    endpoint: str | None = None
    metadata: Dict[str, Any] | None = None


class ModelProvider(ABC):
    @abstractmethod
    def generate(self, prompt: str) -> GenerationResult:
        """Return GenerationResult for prompt (never raises on backend errors)."""

    @abstractmethod
    def info(self) -> ModelInfo:
        """Return static model information."""

    def close(self) -> None:  # optional hook
        """Release resources (default no-op)."""
        return None
