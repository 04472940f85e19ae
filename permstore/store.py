"""
Permission-gated hierarchical store.

A `Store` holds named fields and enforces a per-field policy before any value
is exposed or mutated. Fields are addressed with colon-delimited paths that may
cross nested stores, plain containers and lazy accessors.

Example:
    ```python
    from permstore import FieldPolicy, Store, restrict

    class Profile(Store):
        email: str = restrict("r", default="a@example.com")
        nickname: str = "anon"

    profile = Profile(default_policy=FieldPolicy.NONE)
    profile.read("email")          # "a@example.com"
    profile.read("nickname")       # PermissionDeniedError (falls back to NONE)
    ```
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Mapping, MutableMapping
from dataclasses import dataclass
from enum import Enum, auto
from types import MappingProxyType
from typing import Any, ClassVar

from .exceptions import InvalidPathError, PermissionDeniedError
from .lazy import LazyAccessor
from .policies import Access, FieldPolicy
from .types import PATH_SEPARATOR, StoreResult, StoreValue

logger = logging.getLogger(__name__)


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """Declaration of a store field: optional policy override plus initial value."""

    policy: FieldPolicy | None = None
    default: Any = MISSING
    default_factory: Callable[[], Any] | None = None

    def initial_value(self) -> Any:
        if self.default_factory is not None:
            return self.default_factory()
        return self.default


def restrict(
    policy: FieldPolicy | str,
    *,
    default: Any = MISSING,
    default_factory: Callable[[], Any] | None = None,
) -> Any:
    """
    Declare a field with an explicit policy override.

    Used in a store class body the way `dataclasses.field` is used:

        class AdminStore(Store):
            user: UserStore = restrict("r")
            tags: list[str] = restrict("rw", default_factory=list)

    The override applies to every instance of the class and wins over the
    instance's `default_policy`.
    """
    if default is not MISSING and default_factory is not None:
        raise ValueError("cannot specify both default and default_factory")
    return FieldSpec(
        policy=FieldPolicy.coerce(policy),
        default=default,
        default_factory=default_factory,
    )


def _is_classvar(annotation: Any) -> bool:
    text = annotation if isinstance(annotation, str) else repr(annotation)
    return text.startswith(("ClassVar", "typing.ClassVar"))


class _Kind(Enum):
    STORE = auto()
    LAZY = auto()
    PLAIN = auto()


def _classify(target: Any) -> _Kind:
    # Order matters: a store is never treated as an accessor or a plain value.
    if isinstance(target, Store):
        return _Kind.STORE
    if isinstance(target, LazyAccessor):
        return _Kind.LAZY
    return _Kind.PLAIN


def _split_path(path: Any) -> list[str]:
    if not isinstance(path, str):
        raise InvalidPathError(f"Path must be a string, got {type(path).__name__}", path=path)
    return path.split(PATH_SEPARATOR)


def _list_index(key: str) -> int | None:
    return int(key) if key.isascii() and key.isdigit() else None


def _get_field(target: Any, key: str) -> Any:
    """Direct field access with no permission check. Missing fields resolve to None."""
    if target is None:
        return None
    if isinstance(target, Store):
        return target._fields.get(key)
    if isinstance(target, Mapping):
        return target.get(key)
    if isinstance(target, (list, tuple)):
        index = _list_index(key)
        if index is None or index >= len(target):
            return None
        return target[index]
    if isinstance(target, (str, bytes, int, float, bool)):
        return None
    return getattr(target, key, None)


def _set_field(target: Any, key: str, value: Any, *, path: str) -> None:
    """Direct field assignment with no permission check."""
    if isinstance(target, Store):
        target._fields[key] = value
        return
    if isinstance(target, MutableMapping):
        target[key] = value
        return
    if isinstance(target, list):
        index = _list_index(key)
        if index is not None and index < len(target):
            target[index] = value
            return
        if index is not None and index == len(target):
            target.append(value)
            return
        raise InvalidPathError(f"Cannot assign list index {key!r} in path {path!r}", path=path)
    if target is None or isinstance(target, (str, bytes, int, float, bool, tuple)):
        raise InvalidPathError(
            f"Cannot assign field {key!r} on {type(target).__name__} in path {path!r}",
            path=path,
        )
    try:
        setattr(target, key, value)
    except (AttributeError, TypeError) as e:
        raise InvalidPathError(
            f"Cannot assign field {key!r} on {type(target).__name__} in path {path!r}",
            path=path,
        ) from e


class Store:
    """
    A node in a tree of permissioned stores.

    Subclasses declare fields as annotated class attributes. A field declared
    with `restrict(...)` carries a policy override; any other field is governed
    by the instance's `default_policy`. The override table is built once per
    class and shared by all of its instances.

    Args:
        default_policy: Policy for fields without an override. Fixed for the
            lifetime of the instance.
        **values: Initial field values. Applied without permission checks and
            taking precedence over declared defaults.
    """

    __field_policies__: ClassVar[Mapping[str, FieldPolicy]] = MappingProxyType({})
    __field_defaults__: ClassVar[Mapping[str, FieldSpec]] = MappingProxyType({})

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)

        policies: dict[str, FieldPolicy] = {}
        defaults: dict[str, FieldSpec] = {}
        for base in reversed(cls.__mro__[1:]):
            if issubclass(base, Store):
                policies.update(base.__dict__.get("__field_policies__", {}))
                defaults.update(base.__dict__.get("__field_defaults__", {}))

        annotations = inspect.get_annotations(cls)
        for name, value in cls.__dict__.items():
            if isinstance(value, FieldSpec) and name not in annotations:
                raise TypeError(
                    f"field {name!r} of {cls.__name__} uses restrict() without an annotation"
                )

        for name, annotation in annotations.items():
            if _is_classvar(annotation):
                continue
            declared = cls.__dict__.get(name, MISSING)
            if isinstance(declared, FieldSpec):
                spec = declared
                delattr(cls, name)
            else:
                spec = FieldSpec(default=declared)
            if isinstance(spec.default, (list, dict, set)):
                raise ValueError(
                    f"mutable default {type(spec.default).__name__} for field {name!r} "
                    "is not allowed: use default_factory"
                )

            defaults[name] = spec
            if spec.policy is None:
                policies.pop(name, None)
            else:
                policies[name] = spec.policy

        cls.__field_policies__ = MappingProxyType(policies)
        cls.__field_defaults__ = MappingProxyType(defaults)

    def __init__(
        self,
        *,
        default_policy: FieldPolicy | str = FieldPolicy.READ_WRITE,
        **values: Any,
    ) -> None:
        self._default_policy = FieldPolicy.coerce(default_policy)
        self._fields: dict[str, Any] = {}
        for name, spec in type(self).__field_defaults__.items():
            if name in values:
                self._fields[name] = values.pop(name)
                continue
            initial = spec.initial_value()
            if initial is not MISSING:
                self._fields[name] = initial
        self._fields.update(values)

    @property
    def default_policy(self) -> FieldPolicy:
        return self._default_policy

    @classmethod
    def field_policy(cls, field: str) -> FieldPolicy | None:
        """Class-level override for `field`, or None when the field has none."""
        return cls.__field_policies__.get(field)

    def effective_policy(self, field: str) -> FieldPolicy:
        policy = self.field_policy(field)
        return policy if policy is not None else self._default_policy

    def allowed_to_read(self, field: str) -> bool:
        return self.effective_policy(field).readable

    def allowed_to_write(self, field: str) -> bool:
        return self.effective_policy(field).writable

    def _check(self, field: str, access: Access) -> None:
        if not self.effective_policy(field).allows(access):
            logger.debug(f"Denied {access.value} of field {field!r} on {type(self).__name__}")
            raise PermissionDeniedError(field, access)

    def read(self, path: str) -> StoreResult | None:
        """
        Resolve `path` and return its value.

        Each store met along the way checks read permission for the segment
        being stepped through. A missing intermediate resolves to None rather
        than raising.

        Raises:
            PermissionDeniedError: If a segment is not readable on its store.
            InvalidPathError: If `path` is not a string.
        """
        target: Any = self
        for key in _split_path(path):
            if target is None:
                return None
            kind = _classify(target)
            if kind is _Kind.STORE:
                target._check(key, Access.READ)
                target = target._fields.get(key)
            elif kind is _Kind.LAZY:
                logger.debug(f"Reading {key!r} from lazy accessor result without a policy check")
                target = _get_field(target(), key)
            else:
                target = _get_field(target, key)

        if isinstance(target, LazyAccessor):
            target = target()
        return target

    def write(self, path: str, value: StoreValue) -> StoreValue:
        """
        Assign `value` at `path` and return it.

        Stores along the way check write permission for each segment. Missing
        intermediates are created as empty dicts.

        Raises:
            PermissionDeniedError: If a segment is not writable on its store.
            InvalidPathError: If `path` is not a string or ends on a value that
                cannot hold fields.
        """
        keys = _split_path(path)
        target_key = keys.pop()

        target: Any = self
        for key in keys:
            kind = _classify(target)
            if kind is _Kind.STORE:
                target._check(key, Access.WRITE)
                parent = target
            elif kind is _Kind.LAZY:
                logger.debug(f"Writing through {key!r} on lazy accessor result without a check")
                parent = target()
            else:
                parent = target

            target = _get_field(parent, key)
            if target is None:
                target = {}
                _set_field(parent, key, target, path=path)
                logger.debug(f"Created empty container at {key!r} while writing {path!r}")

        kind = _classify(target)
        if kind is _Kind.STORE:
            target._check(target_key, Access.WRITE)
        elif kind is _Kind.LAZY:
            target = target()

        _set_field(target, target_key, value, path=path)
        return value

    def write_entries(self, entries: Mapping[str, StoreValue]) -> None:
        """
        Write each `path: value` pair in order.

        Not atomic: if an entry fails, the entries before it stay written.
        """
        for path, value in entries.items():
            self.write(path, value)

    def entries(self) -> dict[str, StoreValue]:
        """Own fields that are readable, in declaration order."""
        return {key: value for key, value in self._fields.items() if self.allowed_to_read(key)}

    def __repr__(self) -> str:
        names = ", ".join(self._fields)
        policy = self._default_policy.value
        return f"{type(self).__name__}(default_policy={policy!r}, fields=[{names}])"
