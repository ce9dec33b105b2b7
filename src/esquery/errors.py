"""Errors raised while rendering a query document.

Rendering is all-or-nothing: any of these raised at any depth of the clause
tree aborts the render of the whole document.
"""

from typing import Any


class QueryRenderError(Exception):
    """Base class for every failure to render a query document."""


class UnsupportedKindError(QueryRenderError, ValueError):
    """A clause carries a kind outside the supported set."""

    def __init__(self, kind: Any) -> None:
        """Keep the offending kind for diagnostics."""
        self.kind: Any = kind
        super().__init__(f"Clause kind {kind!r} not supported")


class TypeMismatchError(QueryRenderError, TypeError):
    """A container clause's value does not have the shape its kind requires."""

    def __init__(self, kind: str, expected: str, actual: Any) -> None:
        """Record which kind expected what, and what it got instead."""
        self.kind: str = kind
        self.expected: str = expected
        self.actual: Any = actual
        super().__init__(
            f"{kind} clause value must be {expected}, got {type(actual).__name__}"
        )


class QueryDepthError(QueryRenderError, RecursionError):
    """Nested or has-child clauses are nested deeper than allowed."""

    def __init__(self, limit: int) -> None:
        """Keep the configured limit."""
        self.limit: int = limit
        super().__init__(f"Clause tree exceeds the maximum depth of {limit}")
