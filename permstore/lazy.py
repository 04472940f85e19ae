"""
Lazy accessors: zero-argument producers resolved on access.

An accessor is invoked each time a traversal step meets it. Its result is never
cached, so state captured by the producer is observed fresh on every read.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any


class LazyAccessor:
    __slots__ = ("_fn",)

    def __init__(self, fn: Callable[[], Any]) -> None:
        if not callable(fn):
            raise TypeError(f"lazy() expects a zero-argument callable, got {type(fn).__name__}")
        self._fn = fn

    def __call__(self) -> Any:
        return self._fn()

    def __repr__(self) -> str:
        name = getattr(self._fn, "__qualname__", None) or repr(self._fn)
        return f"LazyAccessor({name})"


def lazy(fn: Callable[[], Any]) -> LazyAccessor:
    """
    Wrap a producer so stores resolve it on access.

    Example:
        ```python
        class Session(Store):
            token: LazyAccessor = restrict("r", default=lazy(make_token_store))
        ```

    Also usable as a decorator on a module-level or nested function.
    """
    return LazyAccessor(fn)
