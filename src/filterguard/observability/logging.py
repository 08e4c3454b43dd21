"""Logging setup for applications embedding the sanitizers."""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..settings import SanitizerSettings

# LogRecord attributes copied into JSON payloads when a caller passes them via `extra=`.
_CONTEXT_FIELDS = ("max_depth", "trace_id", "request_path")


class JsonLogFormatter(logging.Formatter):
    """Serialize logs as line-delimited JSON."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in _CONTEXT_FIELDS:
            if hasattr(record, field):
                payload[field] = getattr(record, field)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


def configure_logging(
    level: str = "WARNING",
    *,
    json_format: bool = False,
    log_file: str | None = None,
    logger_name: str | None = None,
) -> None:
    """
    Configure logging handlers.

    With ``logger_name`` unset the root logger is configured; pass
    ``"filterguard"`` to only route this library's records.
    """
    formatter = "json" if json_format else "text"
    formatters = {
        "json": {"()": "filterguard.observability.logging.JsonLogFormatter"},
        "text": {
            "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
            "datefmt": "%Y-%m-%dT%H:%M:%S%z",
        },
    }

    handlers: dict[str, dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": formatter,
        }
    }
    if log_file:
        file_path = Path(log_file).expanduser().resolve()
        file_path.parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": str(file_path),
            "maxBytes": 5 * 1024 * 1024,
            "backupCount": 3,
            "formatter": formatter,
            "encoding": "utf-8",
        }

    target = {"level": level.upper(), "handlers": list(handlers)}
    config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "handlers": handlers,
    }
    if logger_name:
        config["loggers"] = {logger_name: {**target, "propagate": False}}
    else:
        config["root"] = target
    logging.config.dictConfig(config)


def configure_logging_from_settings(
    settings: SanitizerSettings,
    *,
    logger_name: str | None = "filterguard",
) -> None:
    configure_logging(
        settings.log_level,
        json_format=settings.log_json,
        log_file=settings.log_file,
        logger_name=logger_name,
    )
