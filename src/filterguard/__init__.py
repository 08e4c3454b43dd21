"""
filterguard - type-dispatching input sanitization.

Classifies loosely-typed values (often strings from external input) as
integer, float, boolean, text, sequence or record and applies the matching
sanitization rule, recursing into containers.
"""

from __future__ import annotations

__version__ = "1.0.0"

from .classifier import classify, classify_text
from .dispatch import (
    sanitize_auto,
    sanitize_frame,
    sanitize_record,
    sanitize_sequence,
)
from .errors import NestingDepthError, SanitizationError, UnsupportedEncodingError
from .observability import JsonLogFormatter, configure_logging, configure_logging_from_settings
from .rules import (
    add_slashes,
    escape_html,
    sanitize_boolean,
    sanitize_float,
    sanitize_integer,
    sanitize_text,
    strip_tags,
)
from .settings import SanitizerSettings, load_settings, reset_settings_cache
from .types import UNDETERMINED, Undetermined, ValueKind

__all__ = [
    "__version__",
    # Dispatch
    "sanitize_auto",
    "sanitize_sequence",
    "sanitize_record",
    "sanitize_frame",
    # Scalar rules
    "sanitize_text",
    "sanitize_integer",
    "sanitize_float",
    "sanitize_boolean",
    "strip_tags",
    "escape_html",
    "add_slashes",
    # Classification
    "classify",
    "classify_text",
    "ValueKind",
    "Undetermined",
    "UNDETERMINED",
    # Errors
    "SanitizationError",
    "NestingDepthError",
    "UnsupportedEncodingError",
    # Configuration
    "SanitizerSettings",
    "load_settings",
    "reset_settings_cache",
    "JsonLogFormatter",
    "configure_logging",
    "configure_logging_from_settings",
]
