"""
Field policies (per-field access controls).

A policy says whether a field may be read and/or written. Stores resolve the
effective policy of a field from the class-level override table, falling back
to the store's own default.
"""

from __future__ import annotations

from enum import Enum

from .exceptions import InvalidPolicyError


class Access(Enum):
    """Direction of an attempted field access."""

    READ = "read"
    WRITE = "write"


class FieldPolicy(Enum):
    """Whether a field may be read and/or written."""

    READ_ONLY = "r"
    WRITE_ONLY = "w"
    READ_WRITE = "rw"
    NONE = "none"

    @classmethod
    def coerce(cls, value: FieldPolicy | str) -> FieldPolicy:
        """
        Normalize a policy given as a member, its short value, or its long name.

        Accepts "r", "w", "rw", "none" as well as "read-only", "write-only",
        "read-write" (case-insensitive, underscores allowed).
        """
        if isinstance(value, FieldPolicy):
            return value
        if isinstance(value, str):
            text = value.strip().lower().replace("_", "-")
            policy = _POLICY_ALIASES.get(text)
            if policy is not None:
                return policy
        raise InvalidPolicyError(f"Unknown field policy: {value!r}", value=value)

    def allows(self, access: Access) -> bool:
        if access is Access.READ:
            return self in READ_ALLOWED
        return self in WRITE_ALLOWED

    @property
    def readable(self) -> bool:
        return self in READ_ALLOWED

    @property
    def writable(self) -> bool:
        return self in WRITE_ALLOWED


READ_ALLOWED: frozenset[FieldPolicy] = frozenset({FieldPolicy.READ_ONLY, FieldPolicy.READ_WRITE})
WRITE_ALLOWED: frozenset[FieldPolicy] = frozenset({FieldPolicy.WRITE_ONLY, FieldPolicy.READ_WRITE})

_POLICY_ALIASES: dict[str, FieldPolicy] = {
    "r": FieldPolicy.READ_ONLY,
    "read-only": FieldPolicy.READ_ONLY,
    "w": FieldPolicy.WRITE_ONLY,
    "write-only": FieldPolicy.WRITE_ONLY,
    "rw": FieldPolicy.READ_WRITE,
    "read-write": FieldPolicy.READ_WRITE,
    "none": FieldPolicy.NONE,
}
