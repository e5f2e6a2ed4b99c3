"""Exceptions raised by tracestack."""

from __future__ import annotations


class TraceStackError(Exception):
    """Base exception for tracestack errors."""


class UnknownSpanNameError(TraceStackError, ValueError):
    """Span name is not part of the allowed set for this trace."""

    def __init__(self, name: str, allowed: frozenset[str]) -> None:
        self.name = name
        self.allowed = allowed
        super().__init__(f"Unknown span name {name!r}; expected one of {sorted(allowed)}")


class UnknownAttributeKeyError(TraceStackError, ValueError):
    """Attribute key is not part of the allowed set for this trace."""

    def __init__(self, key: str, allowed: frozenset[str]) -> None:
        self.key = key
        self.allowed = allowed
        super().__init__(f"Unknown attribute key {key!r}; expected one of {sorted(allowed)}")
