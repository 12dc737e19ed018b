"""Provider construction from the ``ollama`` config section."""
from __future__ import annotations

from functools import lru_cache

from chat_core.config import get_config

from .ollama_provider import OllamaProvider
from .provider import ModelProvider


@lru_cache(maxsize=1)
def get_provider() -> ModelProvider:  # noqa: D401
    cfg = get_config().ollama
    return OllamaProvider(
        api_url=cfg.api_url,
        model=cfg.model,
        temperature=cfg.temperature,
        timeout_s=cfg.timeout_s,
    )


def clear_provider_cache() -> None:
    """Close and forget the cached provider (config changes, tests)."""
    if get_provider.cache_info().currsize:
        get_provider().close()
    get_provider.cache_clear()
