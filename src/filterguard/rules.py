"""Scalar sanitization rules.

Each rule accepts any input and degrades instead of failing: unparseable
numbers become zero, unrecognized boolean words become ``UNDETERMINED``.
Every rule is idempotent.
"""

from __future__ import annotations

import codecs
import logging
import math
import re
from collections.abc import Mapping
from functools import lru_cache
from numbers import Number
from typing import Any

import numpy as np
import pandas as pd

from .classifier import is_record, is_sequence
from .errors import UnsupportedEncodingError
from .settings import DEFAULT_ENCODING
from .types import UNDETERMINED, Undetermined

logger = logging.getLogger(__name__)

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
_INT64_DIGITS = 19

# Comments, then anything opening like a tag: "<" + letter, "/", "!" or "?".
# An unterminated construct runs to the end of the text.
_TAG_RE = re.compile(r"<!--.*?(?:-->|\Z)|<[A-Za-z/!?][^>]*(?:>|\Z)", re.DOTALL)

# "&" that does not already start a character reference.
_BARE_AMPERSAND_RE = re.compile(r"&(?![A-Za-z][A-Za-z0-9]*;|#[0-9]+;|#[xX][0-9A-Fa-f]+;)")

_SPECIAL_CHARS = str.maketrans(
    {
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&#039;",
    }
)

# Existing two-character escapes are matched first and kept.
_SLASH_RE = re.compile(r"\\[\\'\"0]|[\\'\"\x00]")

_INT_PREFIX_RE = re.compile(r"\s*([+-]?)([0-9]+)")
_FLOAT_PREFIX_RE = re.compile(r"\s*([+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)")

_TRUE_WORDS = frozenset({"true", "1", "yes", "on"})
_FALSE_WORDS = frozenset({"false", "0", "no", "off", ""})


@lru_cache(maxsize=32)
def _check_encoding(encoding: str) -> str:
    try:
        return codecs.lookup(encoding).name
    except LookupError as exc:
        raise UnsupportedEncodingError(encoding) from exc


def _as_text(value: Any, encoding: str) -> str:
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode(encoding, errors="replace")
    return str(value)


def strip_tags(text: str) -> str:
    """Remove markup tags and comments, keeping the text between them."""
    return _TAG_RE.sub("", text)


def escape_html(text: str) -> str:
    """Replace ``& < > " '`` with character references.

    Ampersands that already open a character reference are left alone, so
    escaping an escaped string changes nothing.
    """
    return _BARE_AMPERSAND_RE.sub("&amp;", text).translate(_SPECIAL_CHARS)


def _slash(match: re.Match[str]) -> str:
    token = match.group(0)
    if len(token) == 2:
        return token
    if token == "\x00":
        return "\\0"
    return "\\" + token


def add_slashes(text: str) -> str:
    """Backslash-escape quotes, backslashes and NUL bytes.

    Pairs that already form an escape (``\\\\``, ``\\'``, ``\\"``, ``\\0``) are
    kept as they are, so a literal backslash followed by ``0`` reads as an
    escaped NUL and is not escaped again.
    """
    return _SLASH_RE.sub(_slash, text)


def sanitize_text(value: Any, encoding: str = DEFAULT_ENCODING) -> str:
    """Make free text safe to embed in HTML.

    Strips tags, entity-escapes the HTML-significant characters, trims
    surrounding whitespace and finally adds slashes::

        >>> sanitize_text("<script>alert('Hacked')</script>")
        'alert(&#039;Hacked&#039;)'

    ``bytes`` input is decoded with ``encoding``; undecodable sequences are
    replaced rather than rejected. An unknown codec name raises
    :class:`~filterguard.errors.UnsupportedEncodingError`.
    """
    codec = _check_encoding(encoding)
    text = _as_text(value, codec)
    text = strip_tags(text)
    text = escape_html(text)
    text = text.strip()
    return add_slashes(text)


def _container_flag(value: Any) -> int | None:
    if isinstance(value, (pd.DataFrame, pd.Series)):
        return 0 if value.empty else 1
    if is_sequence(value) or isinstance(value, Mapping):
        return 1 if len(value) else 0
    if is_record(value):
        return 1
    return None


def _saturate(sign: str, digits: str) -> int:
    digits = digits.lstrip("0") or "0"
    if len(digits) > _INT64_DIGITS:
        return INT64_MIN if sign == "-" else INT64_MAX
    number = -int(digits) if sign == "-" else int(digits)
    return max(INT64_MIN, min(number, INT64_MAX))


def sanitize_integer(value: Any) -> int:
    """Coerce ``value`` to an int, reading the longest leading integer of strings.

    ``"63.73"`` gives ``63``; text without a leading integer gives ``0``.
    Results saturate at the signed 64-bit range.
    """
    if isinstance(value, (bool, np.bool_)):
        return int(bool(value))
    if isinstance(value, (int, np.integer)):
        number = int(value)
        return max(INT64_MIN, min(number, INT64_MAX))
    if isinstance(value, (float, np.floating)):
        as_float = float(value)
        if not math.isfinite(as_float):
            logger.debug("Non-finite float sanitized to integer 0")
            return 0
        return max(INT64_MIN, min(int(as_float), INT64_MAX))
    if isinstance(value, Number):
        # Decimal, Fraction and friends; NaN/infinite Decimals refuse int().
        try:
            return max(INT64_MIN, min(int(value), INT64_MAX))
        except (TypeError, ValueError, ArithmeticError):
            logger.debug(f"Non-integral {type(value).__name__} sanitized to integer 0")
            return 0
    if value is None:
        return 0
    flag = _container_flag(value)
    if flag is not None:
        return flag

    match = _INT_PREFIX_RE.match(_as_text(value, DEFAULT_ENCODING))
    if match is None:
        logger.debug(f"No integer prefix in {type(value).__name__} input; using 0")
        return 0
    return _saturate(match.group(1), match.group(2))


def _finite_or_zero(number: float) -> float:
    if math.isfinite(number):
        return number
    logger.debug("Non-finite float sanitized to 0.0")
    return 0.0


def sanitize_float(value: Any) -> float:
    """Coerce ``value`` to a finite float, reading the longest leading float of strings.

    ``"10.xyz"`` gives ``10.0`` and ``"736"`` gives ``736.0``. NaN, infinities
    and text without a numeric prefix give ``0.0``.
    """
    if isinstance(value, (bool, np.bool_)):
        return float(bool(value))
    if isinstance(value, (int, float, np.integer, np.floating, Number)):
        try:
            return _finite_or_zero(float(value))
        except (TypeError, ValueError, ArithmeticError):
            logger.debug(f"{type(value).__name__} not representable as a finite float; using 0.0")
            return 0.0
    if value is None:
        return 0.0
    flag = _container_flag(value)
    if flag is not None:
        return float(flag)

    match = _FLOAT_PREFIX_RE.match(_as_text(value, DEFAULT_ENCODING))
    if match is None:
        logger.debug(f"No float prefix in {type(value).__name__} input; using 0.0")
        return 0.0
    return _finite_or_zero(float(match.group(1)))


def sanitize_boolean(value: Any) -> bool | Undetermined:
    """Map ``value`` onto ``True``, ``False`` or ``UNDETERMINED``.

    Strings are matched case-insensitively after trimming against
    ``true/1/yes/on`` and ``false/0/no/off/""``. Numbers are true when
    non-zero. Anything else is ``UNDETERMINED``, never a guessed ``False``.
    """
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if value is UNDETERMINED:
        return UNDETERMINED
    if value is None:
        return False
    if isinstance(value, (int, float, np.integer, np.floating, Number)):
        try:
            # NaN is the only value unequal to itself; signaling NaNs raise instead.
            if value != value:
                return UNDETERMINED
            return bool(value != 0)
        except (TypeError, ValueError, ArithmeticError):
            return UNDETERMINED
    if isinstance(value, (str, bytes, bytearray, memoryview)):
        word = _as_text(value, DEFAULT_ENCODING).strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    logger.debug(f"Unrecognized boolean {type(value).__name__} input; returning UNDETERMINED")
    return UNDETERMINED
