"""Runtime configuration for the sanitizers."""

from __future__ import annotations

import codecs
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache

from .environment import parse_env_bool, parse_env_int, parse_env_str

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 100
MAX_DEPTH_CEILING = 200
DEFAULT_ENCODING = "UTF-8"
DEFAULT_LOG_LEVEL = "WARNING"

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


@dataclass(frozen=True)
class SanitizerSettings:
    max_depth: int = DEFAULT_MAX_DEPTH
    default_encoding: str = DEFAULT_ENCODING
    log_level: str = DEFAULT_LOG_LEVEL
    log_json: bool = False
    log_file: str | None = None

    @classmethod
    def from_env(cls, *, environ: Mapping[str, str] | None = None) -> "SanitizerSettings":
        encoding = parse_env_str("ENCODING", DEFAULT_ENCODING, environ=environ) or DEFAULT_ENCODING
        try:
            codecs.lookup(encoding)
        except LookupError:
            logger.warning(f"Ignoring unknown FILTERGUARD_ENCODING {encoding!r}; using {DEFAULT_ENCODING}")
            encoding = DEFAULT_ENCODING

        level = parse_env_str("LOG_LEVEL", DEFAULT_LOG_LEVEL, environ=environ).upper()
        if level not in _LOG_LEVELS:
            level = DEFAULT_LOG_LEVEL

        log_file = parse_env_str("LOG_FILE", "", environ=environ)

        return cls(
            max_depth=parse_env_int(
                "MAX_DEPTH",
                DEFAULT_MAX_DEPTH,
                1,
                MAX_DEPTH_CEILING,
                environ=environ,
            ),
            default_encoding=encoding,
            log_level=level,
            log_json=parse_env_bool("LOG_JSON", False, environ=environ),
            log_file=log_file or None,
        )


@lru_cache(maxsize=1)
def _cached_settings() -> SanitizerSettings:
    return SanitizerSettings.from_env()


def load_settings(*, environ: Mapping[str, str] | None = None) -> SanitizerSettings:
    """Settings from the process environment (cached) or from ``environ`` (uncached)."""
    if environ is None:
        return _cached_settings()
    return SanitizerSettings.from_env(environ=environ)


def reset_settings_cache() -> None:
    """Drop cached settings so the next :func:`load_settings` re-reads the environment."""
    _cached_settings.cache_clear()
