"""Config subsystem public API.

Provides:
    get_config() -> AggregatedConfig (server, ollama, logging sections)
    as_dict()    -> dict representation
    ConfigError  -> raised on validation / unknown key
    project_path -> relative path anchored at the project root
"""

from .loader import (  # noqa: F401
    AggregatedConfig,
    get_config,
    as_dict,
    ConfigError,
    clear_config_cache,
    project_path,
)


__all__ = [
    "AggregatedConfig",
    "get_config",
    "as_dict",
    "ConfigError",
    "clear_config_cache",
    "project_path",
]
