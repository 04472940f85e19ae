"""
Sample store shapes.

`AdminStore` denies everything by default and opens up only the fields it
declares with an override; `UserStore` is fully read-write.
"""

from __future__ import annotations

from typing import Any

from .lazy import LazyAccessor, lazy
from .policies import FieldPolicy
from .store import Store, restrict


class UserStore(Store):
    name: str = restrict(FieldPolicy.READ_WRITE, default="John Doe")

    def __init__(self, **values: Any) -> None:
        super().__init__(default_policy=FieldPolicy.READ_WRITE, **values)


def _credentials() -> Store:
    credentials = Store()
    credentials.write_entries({"username": "user1"})
    return credentials


class AdminStore(Store):
    user: UserStore = restrict(FieldPolicy.READ_ONLY)
    name: str = "John Doe"
    get_credentials: LazyAccessor = restrict(FieldPolicy.READ_WRITE, default=lazy(_credentials))

    def __init__(self, user: UserStore) -> None:
        super().__init__(default_policy=FieldPolicy.NONE, user=user)


def sample_store() -> AdminStore:
    """Admin store wrapping a fresh user store."""
    return AdminStore(UserStore())
