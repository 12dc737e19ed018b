"""Root logging configuration driven by the ``logging`` config section."""
from __future__ import annotations

import json
import logging
from time import gmtime, strftime

from chat_core.config.schemas.observability import LoggingConfig

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

TEXT_FORMAT = "[%(asctime)s] %(levelname)s %(name)s - %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload = {
            "ts": strftime("%Y-%m-%dT%H:%M:%SZ", gmtime(record.created)),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(cfg: LoggingConfig | None = None) -> None:
    cfg = cfg or LoggingConfig()
    handler = logging.StreamHandler()
    if cfg.format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    root = logging.getLogger()
    # replace handlers installed by an earlier call
    for h in list(root.handlers):
        if getattr(h, "_chat_core", False):
            root.removeHandler(h)
    handler._chat_core = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(_LEVELS[cfg.level])


__all__ = ["configure_logging", "JsonFormatter"]
