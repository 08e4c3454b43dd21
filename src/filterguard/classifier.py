"""Type inference for loosely-typed input values."""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Mapping, Sequence
from types import SimpleNamespace
from typing import Any

import numpy as np
import pandas as pd

from .types import ValueKind

# Checked in this order against the trimmed string; first match wins.
_INTEGER_TEXT_RE = re.compile(r"[0-9]+")
_FLOAT_TEXT_RE = re.compile(r"[0-9]+\.[0-9]+")
_BOOLEAN_TEXT = frozenset({"true", "false"})

_BYTES_TYPES = (bytes, bytearray, memoryview)


def classify_text(text: str) -> ValueKind:
    """Infer the kind a string encodes: integer, float, boolean or plain text."""
    trimmed = text.strip()
    if _INTEGER_TEXT_RE.fullmatch(trimmed):
        return ValueKind.INTEGER
    if _FLOAT_TEXT_RE.fullmatch(trimmed):
        return ValueKind.FLOAT
    if trimmed in _BOOLEAN_TEXT:
        return ValueKind.BOOLEAN
    return ValueKind.TEXT


def is_record(value: Any) -> bool:
    if isinstance(value, Mapping) or isinstance(value, SimpleNamespace):
        return True
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def is_sequence(value: Any) -> bool:
    if isinstance(value, np.ndarray):
        return value.ndim > 0
    return isinstance(value, Sequence) and not isinstance(value, (str, *_BYTES_TYPES))


def classify(value: Any) -> ValueKind:
    """Decide which sanitization rule applies to ``value``.

    Native booleans are tested ahead of native integers because ``bool``
    subclasses ``int``; strings are inferred by :func:`classify_text`. Raw
    bytes are TEXT: their encoding is only known to the text rule.
    """
    if isinstance(value, (bool, np.bool_)):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, np.integer)):
        return ValueKind.INTEGER
    if isinstance(value, (float, np.floating)):
        return ValueKind.FLOAT
    if isinstance(value, str):
        return classify_text(value)
    if isinstance(value, _BYTES_TYPES):
        return ValueKind.TEXT
    if isinstance(value, (pd.DataFrame, pd.Series)):
        return ValueKind.FRAME
    if is_sequence(value):
        return ValueKind.SEQUENCE
    if is_record(value):
        return ValueKind.RECORD
    return ValueKind.OTHER
