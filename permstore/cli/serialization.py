"""Conversion of store values into JSON-safe data for CLI output."""

from __future__ import annotations

from typing import Any

from permstore.lazy import LazyAccessor
from permstore.store import Store

LAZY_MARKER = "<lazy>"


def serialize_value(value: Any) -> Any:
    """
    Make a resolved value JSON-safe.

    Nested stores are shown through their own `entries()`, so fields a nested
    store hides stay hidden. Lazy accessors are not invoked.
    """
    if isinstance(value, Store):
        return {key: serialize_value(v) for key, v in value.entries().items()}
    if isinstance(value, LazyAccessor):
        return LAZY_MARKER
    if isinstance(value, dict):
        return {str(key): serialize_value(v) for key, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_value(v) for v in value]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return repr(value)
