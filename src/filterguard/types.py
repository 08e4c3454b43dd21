"""Value tags and the undetermined boolean sentinel."""

from __future__ import annotations

from enum import Enum
from typing import Any


class ValueKind(str, Enum):
    """Tag returned by :func:`filterguard.classifier.classify`."""

    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    TEXT = "text"
    SEQUENCE = "sequence"
    RECORD = "record"
    FRAME = "frame"
    OTHER = "other"

    def __str__(self) -> str:
        return self.value


class Undetermined:
    """Third boolean state: the input matched no boolean vocabulary.

    There is exactly one instance, :data:`UNDETERMINED`. It has no truth
    value, so it cannot be mistaken for ``False`` in a conditional; compare
    with ``is UNDETERMINED`` instead.
    """

    _instance: "Undetermined | None" = None

    def __new__(cls) -> "Undetermined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        raise TypeError("undetermined boolean has no truth value; compare with `is UNDETERMINED`")

    def __repr__(self) -> str:
        return "UNDETERMINED"

    def __str__(self) -> str:
        return "undetermined"

    def __reduce__(self) -> str:
        return "UNDETERMINED"

    def __copy__(self) -> "Undetermined":
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> "Undetermined":
        return self


UNDETERMINED = Undetermined()
