"""LLM gateway exports.

The HTTP layer only sees ``ModelProvider`` and ``GenerationResult``;
transport-specific error inspection stays inside the providers.
"""

from .provider import ModelProvider, ModelInfo  # noqa: F401
from .types import GenerationResult, GenerationError  # noqa: F401
from .exceptions import (  # noqa: F401
    InferenceError,
    InferenceUnavailableError,
    ModelNotFoundError,
)
from .ollama_provider import OllamaProvider  # noqa: F401
from .prompt import build_prompt  # noqa: F401

__all__ = [
    "ModelProvider",
    "ModelInfo",
    "GenerationResult",
    "GenerationError",
    "InferenceError",
    "InferenceUnavailableError",
    "ModelNotFoundError",
    "OllamaProvider",
    "build_prompt",
]
