"""Container rules and the type-dispatching entry point."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Mapping
from types import SimpleNamespace
from typing import Any

import numpy as np
import pandas as pd

from .classifier import classify, classify_text, is_record, is_sequence
from .errors import NestingDepthError
from .rules import sanitize_boolean, sanitize_float, sanitize_integer, sanitize_text
from .settings import MAX_DEPTH_CEILING, load_settings
from .types import ValueKind

logger = logging.getLogger(__name__)

_SCALAR_RULES: dict[ValueKind, Callable[[Any], Any]] = {
    ValueKind.INTEGER: sanitize_integer,
    ValueKind.FLOAT: sanitize_float,
    ValueKind.BOOLEAN: sanitize_boolean,
}


@dataclasses.dataclass(frozen=True)
class _Walk:
    """Per-call recursion parameters."""

    max_depth: int
    encoding: str

    def enter(self, depth: int) -> None:
        if depth > self.max_depth:
            logger.warning(
                f"Rejected input nested deeper than {self.max_depth} levels",
                extra={"max_depth": self.max_depth},
            )
            raise NestingDepthError(self.max_depth)


def _walk_for(max_depth: int | None, encoding: str | None) -> _Walk:
    settings = load_settings()
    # Explicit limits are capped like FILTERGUARD_MAX_DEPTH.
    limit = settings.max_depth if max_depth is None else min(MAX_DEPTH_CEILING, max(1, int(max_depth)))
    return _Walk(
        max_depth=limit,
        encoding=settings.default_encoding if encoding is None else encoding,
    )


def _text(value: Any, walk: _Walk) -> Any:
    cleaned = sanitize_text(value, walk.encoding)
    # Markup can hide a literal: "<b>7</b>" cleans to "7", which must end up as 7.
    kind = classify_text(cleaned)
    if kind is ValueKind.TEXT:
        return cleaned
    return _SCALAR_RULES[kind](cleaned)


def _dispatch(value: Any, depth: int, walk: _Walk) -> Any:
    kind = classify(value)
    if kind in _SCALAR_RULES:
        return _SCALAR_RULES[kind](value)
    if kind is ValueKind.TEXT:
        return _text(value, walk)
    if kind is ValueKind.SEQUENCE:
        return _sequence(value, depth + 1, walk)
    if kind is ValueKind.RECORD:
        return _record(value, depth + 1, walk)
    if kind is ValueKind.FRAME:
        return _frame(value, depth + 1, walk)
    return value


def _sequence(value: Any, depth: int, walk: _Walk) -> list[Any] | tuple[Any, ...]:
    walk.enter(depth)
    items = value.tolist() if isinstance(value, np.ndarray) else value
    cleaned = [_dispatch(item, depth, walk) for item in items]
    if isinstance(value, tuple):
        if hasattr(type(value), "_fields"):
            return type(value)(*cleaned)
        return tuple(cleaned)
    return cleaned


def _record(value: Any, depth: int, walk: _Walk) -> Any:
    walk.enter(depth)
    if isinstance(value, Mapping):
        return {key: _dispatch(item, depth, walk) for key, item in value.items()}
    if isinstance(value, SimpleNamespace):
        return SimpleNamespace(**{key: _dispatch(item, depth, walk) for key, item in vars(value).items()})
    changes = {
        field.name: _dispatch(getattr(value, field.name), depth, walk)
        for field in dataclasses.fields(value)
        if field.init
    }
    return dataclasses.replace(value, **changes)


def _frame(frame: pd.DataFrame | pd.Series, depth: int, walk: _Walk) -> pd.DataFrame | pd.Series:
    walk.enter(depth)

    def cell(item: Any) -> Any:
        return _dispatch(item, depth, walk)

    if isinstance(frame, pd.Series):
        return frame.map(cell)
    if frame.empty:
        return frame.copy()
    return frame.apply(lambda column: column.map(cell))


def sanitize_sequence(
    value: Any,
    *,
    max_depth: int | None = None,
    encoding: str | None = None,
) -> Any:
    """Sanitize every element of an ordered container.

    Length and order are preserved. Tuples (and named tuples) keep their
    type; lists, arrays and other sequences come back as lists. Elements go
    through :func:`sanitize_auto`, so nested containers are handled too.
    """
    walk = _walk_for(max_depth, encoding)
    if not is_sequence(value):
        logger.debug(f"sanitize_sequence got {type(value).__name__}; dispatching by type")
        return _dispatch(value, 0, walk)
    return _sequence(value, 1, walk)


def sanitize_record(
    value: Any,
    *,
    max_depth: int | None = None,
    encoding: str | None = None,
) -> Any:
    """Sanitize every value of a key-value container, leaving keys untouched.

    Mappings come back as dicts in the same key order. Dataclass instances
    are copied with ``dataclasses.replace``; namespaces are rebuilt.
    """
    walk = _walk_for(max_depth, encoding)
    if not is_record(value):
        logger.debug(f"sanitize_record got {type(value).__name__}; dispatching by type")
        return _dispatch(value, 0, walk)
    return _record(value, 1, walk)


def sanitize_frame(
    frame: pd.DataFrame | pd.Series,
    *,
    max_depth: int | None = None,
    encoding: str | None = None,
) -> pd.DataFrame | pd.Series:
    """Return a copy of ``frame`` with every cell passed through :func:`sanitize_auto`.

    Index, columns and shape are preserved; column dtypes follow the
    sanitized values.
    """
    walk = _walk_for(max_depth, encoding)
    if not isinstance(frame, (pd.DataFrame, pd.Series)):
        logger.debug(f"sanitize_frame got {type(frame).__name__}; dispatching by type")
        return _dispatch(frame, 0, walk)
    return _frame(frame, 1, walk)


def sanitize_auto(
    value: Any,
    *,
    max_depth: int | None = None,
    encoding: str | None = None,
) -> Any:
    """Classify ``value`` and apply the matching rule.

    This is the entry point for heterogeneous, untrusted input::

        >>> sanitize_auto({"int": "7335", "float": "67.09", "bool": "true"})
        {'int': 7335, 'float': 67.09, 'bool': True}

    Bytes are decoded with ``encoding`` and treated as text. Values of
    unsupported types (``None``, arbitrary objects) are returned unchanged.
    Nesting deeper than ``max_depth`` container levels (default from
    :class:`~filterguard.settings.SanitizerSettings`, never above
    ``MAX_DEPTH_CEILING``) raises :class:`~filterguard.errors.NestingDepthError`.
    """
    return _dispatch(value, 0, _walk_for(max_depth, encoding))
