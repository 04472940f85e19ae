"""
Exceptions raised by the store engine.

`PermissionDeniedError` is the hard failure for a disallowed field access.
Reading through a missing value is not an error; it resolves to ``None``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .policies import Access


class StoreError(Exception):
    """Base class for all permstore errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class PermissionDeniedError(StoreError):
    """A read or write was attempted on a field whose policy disallows it."""

    def __init__(self, field: str, access: Access) -> None:
        super().__init__(f"Cannot {access.value} field {field!r}")
        self.field = field
        self.access = access


class InvalidPathError(StoreError):
    """The path cannot be resolved or assigned into."""

    def __init__(self, message: str, *, path: Any = None) -> None:
        super().__init__(message)
        self.path = path


class InvalidPolicyError(StoreError, ValueError):
    """An unknown field policy value was supplied."""

    def __init__(self, message: str, *, value: Any = None) -> None:
        super().__init__(message)
        self.value = value


class StoreConfigError(StoreError):
    """A store document could not be loaded or validated."""
