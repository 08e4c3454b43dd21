from __future__ import annotations


class SanitizationError(RuntimeError):
    """Base class for library-level sanitization errors."""

    code = "SANITIZATION_ERROR"

    def __init__(self, message: str, *, user_message: str | None = None) -> None:
        super().__init__(message)
        self.user_message = user_message or message


class NestingDepthError(SanitizationError, RecursionError):
    """Raised when container nesting exceeds the configured depth limit."""

    code = "NESTING_TOO_DEEP"

    def __init__(self, max_depth: int) -> None:
        super().__init__(
            f"input too deeply nested: more than {max_depth} container levels",
            user_message="Input too deeply nested.",
        )
        self.max_depth = max_depth


class UnsupportedEncodingError(SanitizationError, LookupError):
    """Raised when text sanitization is asked for an unknown codec."""

    code = "UNSUPPORTED_ENCODING"

    def __init__(self, encoding: str) -> None:
        super().__init__(
            f"unknown text encoding: {encoding!r}",
            user_message="Unsupported character encoding.",
        )
        self.encoding = encoding
