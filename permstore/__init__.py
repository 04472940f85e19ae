"""
permstore: a hierarchical, permission-gated key-value store.

Example:
    ```python
    from permstore import FieldPolicy, Store, lazy, restrict

    class Account(Store):
        owner: str = restrict("r", default="alice")
        balance: int = 0

    account = Account(default_policy=FieldPolicy.NONE)
    account.read("owner")      # "alice"
    account.entries()          # {"owner": "alice"}
    ```
"""

from __future__ import annotations

from .exceptions import (
    InvalidPathError,
    InvalidPolicyError,
    PermissionDeniedError,
    StoreConfigError,
    StoreError,
)
from .lazy import LazyAccessor, lazy
from .policies import READ_ALLOWED, WRITE_ALLOWED, Access, FieldPolicy
from .store import FieldSpec, Store, restrict

__version__ = "0.1.0"

__all__ = [
    "READ_ALLOWED",
    "WRITE_ALLOWED",
    "Access",
    "FieldPolicy",
    "FieldSpec",
    "InvalidPathError",
    "InvalidPolicyError",
    "LazyAccessor",
    "PermissionDeniedError",
    "Store",
    "StoreConfigError",
    "StoreError",
    "__version__",
    "lazy",
    "restrict",
]
