"""
Type aliases for values held by a store.

A store field holds plain JSON-like data, a nested store, or a lazy accessor
producing a store result on demand.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeAlias, Union

if TYPE_CHECKING:
    from .lazy import LazyAccessor
    from .store import Store

JSONPrimitive: TypeAlias = Union[str, int, float, bool, None]
JSONObject: TypeAlias = dict[str, Any]
JSONArray: TypeAlias = list[Any]

# What a read can resolve to.
StoreResult: TypeAlias = Union["Store", JSONPrimitive, JSONObject, JSONArray]

# What a field can hold.
StoreValue: TypeAlias = Union[StoreResult, "LazyAccessor"]

PATH_SEPARATOR = ":"
