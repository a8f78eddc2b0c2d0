"""
Error taxonomy for the argumentation core.

Configuration problems (an unknown semantics tag) and structural problems
(an attack whose endpoints are not part of the framework) fail fast at the
point where they are detected. Both also derive from ValueError so that
callers treating bad input generically keep working.
"""

from __future__ import annotations


class ArgumentationError(Exception):
    """Base class for all errors raised by serialis.argumentation."""


class UnsupportedSemanticsError(ArgumentationError, ValueError):
    """A semantics tag is unknown or not supported by the chosen reasoner."""

    def __init__(self, semantics: object, supported: list[str] | None = None):
        self.semantics = semantics
        self.supported = supported or []
        tag = getattr(semantics, "value", semantics)
        message = f"Unsupported semantics: {tag!r}"
        if self.supported:
            message += f" (supported: {', '.join(self.supported)})"
        super().__init__(message)


class InvalidFrameworkError(ArgumentationError, ValueError):
    """A framework would violate its structural invariants."""


class FrameworkParseError(InvalidFrameworkError):
    """Textual framework input could not be parsed."""

    def __init__(self, message: str, line: int | None = None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class FrameworkTooLargeError(ArgumentationError):
    """The framework exceeds the size an exhaustive computation accepts."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(
            f"Framework has {size} arguments, limit is {limit}"
        )
