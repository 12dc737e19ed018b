"""Inference backend (Ollama) config schema.

No side effects / globals. ``api_url`` may still be replaced by the
``OLLAMA_API_URL`` environment variable at load time.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

DEFAULT_API_URL = "http://localhost:11434/api/generate"


class OllamaConfig(BaseModel):
    api_url: str = DEFAULT_API_URL
    model: str = "gemma"
    temperature: float = 0.7
    # None -> wait for the backend indefinitely
    timeout_s: float | None = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("temperature")
    @classmethod
    def _temp_range(cls, v: float) -> float:  # noqa: D401
        if not (0 <= v <= 2):
            raise ValueError("temperature out of range 0..2")
        return v

    @field_validator("api_url")
    @classmethod
    def _url_scheme(cls, v: str) -> str:  # noqa: D401
        if not v.startswith(("http://", "https://")):
            raise ValueError("api_url must be an http(s) URL")
        return v
