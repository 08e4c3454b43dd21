"""Observability helpers for logging."""

from .logging import JsonLogFormatter, configure_logging, configure_logging_from_settings

__all__ = [
    "JsonLogFormatter",
    "configure_logging",
    "configure_logging_from_settings",
]
