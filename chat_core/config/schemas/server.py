"""HTTP server config schema."""
from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 3000
    # Relative paths resolve against the working directory.
    static_dir: str = "public"
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    model_config = ConfigDict(extra="forbid")
