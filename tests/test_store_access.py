"""Tests for path-based read/write traversal."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest

from permstore import (
    Access,
    FieldPolicy,
    InvalidPathError,
    LazyAccessor,
    PermissionDeniedError,
    Store,
    lazy,
    restrict,
)


class Inner(Store):
    name: str = "X"
    hidden: str = restrict("none", default="nope")


class Outer(Store):
    user: Inner = restrict("r")
    open: dict[str, Any] = restrict("rw", default_factory=dict)
    sealed: str = restrict("none", default="sealed")


@pytest.fixture
def outer() -> Outer:
    return Outer(user=Inner())


# =============================================================================
# read
# =============================================================================


def test_read_through_read_only_field_into_nested_store(outer: Outer) -> None:
    assert outer.read("user:name") == "X"


def test_write_denied_on_read_only_hop_even_if_nested_store_allows(outer: Outer) -> None:
    with pytest.raises(PermissionDeniedError) as exc_info:
        outer.write("user:name", "Y")
    assert exc_info.value.field == "user"
    assert exc_info.value.access is Access.WRITE
    assert outer.read("user:name") == "X"


def test_nested_store_checks_its_own_policy(outer: Outer) -> None:
    with pytest.raises(PermissionDeniedError) as exc_info:
        outer.read("user:hidden")
    assert exc_info.value.field == "hidden"
    assert exc_info.value.access is Access.READ
    assert str(exc_info.value) == "Cannot read field 'hidden'"


def test_read_missing_intermediate_returns_none(outer: Outer) -> None:
    assert outer.read("missing") is None
    assert outer.read("missing:deeper:still") is None
    assert outer.read("open:nothing:here") is None


def test_read_soft_miss_happens_before_later_violations() -> None:
    store = Store()
    store.write("box", None)
    assert store.read("box:sealed") is None


@pytest.mark.parametrize("path", ["sealed", "sealed:anything", "sealed:a:b"])
def test_none_policy_always_denies(outer: Outer, path: str) -> None:
    with pytest.raises(PermissionDeniedError):
        outer.read(path)
    with pytest.raises(PermissionDeniedError):
        outer.write(path, 1)


def test_read_plain_containers_without_checks() -> None:
    store = Store(
        default_policy=FieldPolicy.READ_ONLY,
        data={"rows": [{"id": 1}, {"id": 2}], "meta": SimpleNamespace(total=2)},
    )
    assert store.read("data:rows:1:id") == 2
    assert store.read("data:rows:5:id") is None
    assert store.read("data:rows:x") is None
    assert store.read("data:meta:total") == 2
    assert store.read("data:meta:absent") is None


def test_read_through_primitive_resolves_to_none() -> None:
    store = Store(title="hello")
    assert store.read("title:length") is None


def test_read_rejects_non_string_path() -> None:
    with pytest.raises(InvalidPathError):
        Store().read(["a", "b"])  # type: ignore[arg-type]


def test_read_returns_nested_store_itself(outer: Outer) -> None:
    assert isinstance(outer.read("user"), Inner)


def test_nested_stores_are_shared_by_reference() -> None:
    shared = Inner()
    first, second = Outer(user=shared), Outer(user=shared)
    shared.write("name", "changed")
    assert first.read("user:name") == "changed"
    assert second.read("user:name") == "changed"


# =============================================================================
# Lazy accessors
# =============================================================================


def test_lazy_accessor_is_invoked_on_every_read() -> None:
    state = {"value": 1}

    def make_token() -> Store:
        return Store(value=state["value"])

    store = Store()
    store.write("getToken", lazy(make_token))

    assert store.read("getToken:value") == 1
    state["value"] = 2
    assert store.read("getToken:value") == 2


def test_lazy_accessor_at_path_end_is_resolved() -> None:
    calls: list[int] = []

    def produce() -> str:
        calls.append(1)
        return "fresh"

    store = Store(token=lazy(produce))
    assert store.read("token") == "fresh"
    assert store.read("token") == "fresh"
    assert len(calls) == 2


def test_lazy_result_first_hop_skips_permission_check() -> None:
    def produce() -> Store:
        return Store(default_policy=FieldPolicy.NONE, key="k", deep=Inner())

    store = Store(secret=lazy(produce))
    assert store.read("secret:key") == "k"
    assert store.read("secret:deep:name") == "X"
    with pytest.raises(PermissionDeniedError) as exc_info:
        store.read("secret:deep:hidden")
    assert exc_info.value.field == "hidden"


def test_lazy_field_itself_is_permission_checked() -> None:
    class Guarded(Store):
        token: LazyAccessor = restrict("none", default=lazy(lambda: "never"))

    with pytest.raises(PermissionDeniedError):
        Guarded().read("token")


def test_plain_callables_are_values_not_accessors() -> None:
    store = Store(handler=len)
    assert store.read("handler") is len


def test_lazy_requires_callable() -> None:
    with pytest.raises(TypeError):
        lazy("not callable")  # type: ignore[arg-type]


def test_lazy_works_as_decorator() -> None:
    @lazy
    def produce() -> int:
        return 5

    assert isinstance(produce, LazyAccessor)
    assert Store(n=produce).read("n") == 5


# =============================================================================
# write
# =============================================================================


def test_write_then_read_round_trips() -> None:
    store = Store()
    assert store.write("name", "Ada") == "Ada"
    assert store.read("name") == "Ada"
    store.write("profile:address:city", "Paris")
    assert store.read("profile:address:city") == "Paris"


def test_write_materializes_missing_containers() -> None:
    store = Store()
    store.write("a:b:c", 5)
    assert store.read("a") == {"b": {"c": 5}}
    assert store.read("a:b:c") == 5


def test_write_materialization_requires_write_permission() -> None:
    class Partial(Store):
        a: dict[str, Any] = restrict("r")

    store = Partial()
    with pytest.raises(PermissionDeniedError) as exc_info:
        store.write("a:b:c", 5)
    assert exc_info.value.field == "a"
    assert store.entries() == {}


def test_write_replaces_none_intermediate() -> None:
    store = Store(slot=None)
    store.write("slot:x", 1)
    assert store.read("slot") == {"x": 1}


def test_write_into_nested_store_checks_nested_policy() -> None:
    class Holder(Store):
        inner: Inner = restrict("rw", default_factory=Inner)

    holder = Holder()
    holder.write("inner:name", "Y")
    assert holder.read("inner:name") == "Y"
    with pytest.raises(PermissionDeniedError) as exc_info:
        holder.write("inner:hidden", "Z")
    assert exc_info.value.field == "hidden"


def test_write_only_field_can_be_written_but_not_read() -> None:
    class Drop(Store):
        inbox: str = restrict("w")

    drop = Drop()
    drop.write("inbox", "letter")
    assert drop._fields["inbox"] == "letter"
    with pytest.raises(PermissionDeniedError):
        drop.read("inbox")


def test_write_through_lazy_accessor_targets_produced_store() -> None:
    produced = Store(default_policy=FieldPolicy.NONE)
    store = Store(factory=lazy(lambda: produced))

    store.write("factory:token", "t")
    assert produced._fields["token"] == "t"

    store.write("factory:box:item", 1)
    assert produced._fields["box"] == {"item": 1}


def test_write_sibling_inside_fresh_lazy_store_is_not_kept() -> None:
    store = Store(fresh=lazy(lambda: Store(value=1)))
    store.write("fresh:other", 2)
    assert store.read("fresh:value") == 1
    assert store.read("fresh:other") is None


def test_write_into_list_positions() -> None:
    store = Store(items=["a"])
    store.write("items:0", "A")
    store.write("items:1", "B")
    assert store.read("items") == ["A", "B"]
    with pytest.raises(InvalidPathError):
        store.write("items:9", "Z")


def test_write_into_primitive_is_invalid() -> None:
    store = Store(title="hello")
    with pytest.raises(InvalidPathError):
        store.write("title:size", 3)


def test_write_onto_plain_object_sets_attribute() -> None:
    target = SimpleNamespace(size=1)
    store = Store(obj=target)
    store.write("obj:size", 2)
    assert target.size == 2


def test_write_rejects_non_string_path() -> None:
    with pytest.raises(InvalidPathError):
        Store().write(1, "x")  # type: ignore[arg-type]


def test_field_named_like_a_method_does_not_shadow_it() -> None:
    store = Store()
    store.write("read", "value")
    assert store.read("read") == "value"


# =============================================================================
# write_entries / entries
# =============================================================================


def test_write_entries_writes_in_order() -> None:
    store = Store()
    store.write_entries({"a": 1, "b:c": 2, "d": 3})
    assert store.entries() == {"a": 1, "b": {"c": 2}, "d": 3}
    assert list(store.entries()) == ["a", "b", "d"]


def test_write_entries_is_not_atomic() -> None:
    class Mixed(Store):
        blocked: str = restrict("r")

    store = Mixed()
    with pytest.raises(PermissionDeniedError):
        store.write_entries({"first": 1, "blocked": 2, "last": 3})
    assert store.read("first") == 1
    assert store.read("last") is None


def test_entries_excludes_unreadable_fields_with_values(outer: Outer) -> None:
    entries = outer.entries()
    assert list(entries) == ["user", "open"]
    assert "sealed" not in entries


def test_entries_uses_default_policy_for_written_fields() -> None:
    store = Store(default_policy=FieldPolicy.WRITE_ONLY)
    store.write("note", "x")
    assert store.entries() == {}


def test_entries_does_not_recurse(outer: Outer) -> None:
    assert outer.entries()["user"] is outer.read("user")


@pytest.mark.parametrize("key", ["²", "٣", "-1", "1.0"])
def test_non_ascii_or_signed_indices_are_soft_misses(key: str) -> None:
    store = Store(items=["a", "b"])
    assert store.read(f"items:{key}") is None
    with pytest.raises(InvalidPathError):
        store.write(f"items:{key}", "z")
