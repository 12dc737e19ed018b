"""Observability schemas (logging)."""
from __future__ import annotations

from pydantic import BaseModel, Field, ConfigDict


class LoggingConfig(BaseModel):
    level: str = Field("info", pattern="^(debug|info|warn|error)$")
    format: str = Field("text", pattern="^(json|text)$")

    model_config = ConfigDict(extra="forbid")
