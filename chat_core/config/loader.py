"""Configuration loading & validation.

Precedence (last wins):
    base.yaml → overrides.local.yaml → ENV (CHAT__*) → OLLAMA_API_URL

Each section is validated by its own schema (`chat_core.config.schemas.*`);
unknown keys are rejected at both the top level and inside sections.
"""
from __future__ import annotations

import logging
import os
import pathlib
import threading
from functools import lru_cache
from typing import Any, Dict, Type

import yaml
from chat_core import metrics
from chat_core.errors import validate_error_type
from pydantic import BaseModel, ConfigDict

from .schemas.observability import LoggingConfig
from .schemas.ollama import OllamaConfig
from .schemas.server import ServerConfig

logger = logging.getLogger("chat_core.config")


class AggregatedConfig(BaseModel):
    server: ServerConfig = ServerConfig()
    ollama: OllamaConfig = OllamaConfig()
    logging: LoggingConfig = LoggingConfig()

    model_config = ConfigDict(extra="forbid")


DEFAULT_CONFIG_DIR = "configs"
CONFIG_DIR_ENV = "CHAT_CONFIG_DIR"
# Checkout root; relative config and static paths resolve against it.
PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[2]
ENV_PREFIX = "CHAT__"
OLLAMA_URL_ENV = "OLLAMA_API_URL"

SUB_SCHEMA_CLASSES: Dict[str, Type[BaseModel]] = {
    "server": ServerConfig,
    "ollama": OllamaConfig,
    "logging": LoggingConfig,
}


class ConfigError(Exception):
    pass


def _load_yaml_if_exists(path: pathlib.Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Cannot parse {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    return data


def _merge_dict(
    base: Dict[str, Any], override: Dict[str, Any]
) -> Dict[str, Any]:
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            base[k] = _merge_dict(base[k], v)
        else:
            base[k] = v
    return base


def _cast_env_value(value: str) -> Any:
    if value.lower() in {"true", "false"}:
        return value.lower() == "true"
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        return value


def _apply_env(cfg: Dict[str, Any]) -> None:
    prefix_len = len(ENV_PREFIX)
    for env_key, value in os.environ.items():
        if not env_key.startswith(ENV_PREFIX):
            continue
        path_parts = env_key[prefix_len:].lower().split("__")
        target = cfg
        for part in path_parts[:-1]:
            if part not in target or not isinstance(target[part], dict):
                target[part] = {}
            target = target[part]
        target[path_parts[-1]] = _cast_env_value(value)
        dotted_path = ".".join(path_parts)
        metrics.inc("env_override_total", {"path": dotted_path})
        logger.info(
            "config-env-override path=%s value=*** source=env", dotted_path
        )
    api_url = os.environ.get(OLLAMA_URL_ENV)
    if api_url:
        cfg.setdefault("ollama", {})["api_url"] = api_url
        metrics.inc("env_override_total", {"path": "ollama.api_url"})
        logger.info(
            "config-env-override path=ollama.api_url source=%s", OLLAMA_URL_ENV
        )


_lock = threading.Lock()


def project_path(path: str | os.PathLike) -> pathlib.Path:
    """Anchor a relative path at the project root instead of the cwd."""
    p = pathlib.Path(path)
    return p if p.is_absolute() else PROJECT_ROOT / p


def _resolve_config_dir() -> pathlib.Path:
    """Resolve config directory each call honoring env var changes."""
    return project_path(os.getenv(CONFIG_DIR_ENV) or DEFAULT_CONFIG_DIR)


def _normalize_and_validate(raw: Dict[str, Any]) -> None:
    """Apply bounds validation the schemas do not express.

    Validations (error → raise):
      - server.port in 1..65535
      - ollama.timeout_s > 0 when set
    Temperature range is validated by the schema.
    """
    errors: list[tuple[str, str, str]] = []  # (path, code, msg)
    server = raw.get("server")
    if isinstance(server, dict):
        port = server.get("port")
        if isinstance(port, int) and not (0 < port < 65536):
            errors.append(
                ("server.port", "config-out-of-range", "port must be 1..65535")
            )
    ollama = raw.get("ollama")
    if isinstance(ollama, dict):
        timeout = ollama.get("timeout_s")
        if isinstance(timeout, (int, float)) and timeout <= 0:
            errors.append(
                ("ollama.timeout_s", "config-out-of-range", ">0 required")
            )

    if errors:
        for path, code, _ in errors:
            validate_error_type(code)
            metrics.inc(
                "config_validation_errors_total",
                {"path": path, "code": code},
            )
        details = ", ".join(f"{p}:{c}:{m}" for p, c, m in errors)
        raise ConfigError(f"config validation failed: {details}")


def _validate_sub_schemas(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Validate each known section via its schema class."""
    validated: Dict[str, Any] = {}
    for name, cls in SUB_SCHEMA_CLASSES.items():
        if name in raw:
            try:
                validated[name] = cls.model_validate(raw[name] or {})
            except Exception as e:  # noqa: BLE001
                metrics.inc(
                    "config_validation_errors_total",
                    {"path": name, "code": "config-invalid"},
                )
                raise ConfigError(
                    f"Validation failed for section '{name}': {e}"
                ) from e
    return validated


@lru_cache(maxsize=1)
def get_config() -> AggregatedConfig:  # noqa: D401
    with _lock:
        cfg_dir = _resolve_config_dir()
        base_cfg = _load_yaml_if_exists(cfg_dir / "base.yaml")
        overrides_cfg = _load_yaml_if_exists(cfg_dir / "overrides.local.yaml")
        merged = _merge_dict(base_cfg, overrides_cfg)
        _apply_env(merged)
        _normalize_and_validate(merged)
        unknown = sorted(set(merged) - set(SUB_SCHEMA_CLASSES))
        if unknown:
            raise ConfigError(f"Unknown config sections: {', '.join(unknown)}")
        validated = _validate_sub_schemas(merged)
        try:
            return AggregatedConfig(**validated)
        except Exception as e:  # noqa: BLE001
            raise ConfigError(str(e)) from e


def clear_config_cache() -> None:
    """Clear cached config (primarily for tests)."""
    get_config.cache_clear()


def as_dict() -> Dict[str, Any]:
    return get_config().model_dump()
