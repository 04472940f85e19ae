"""
Declarative store documents.

A store tree can be described as JSON and built into live stores. Each
document gets its own `Store` subclass, so the field policy table is still
fixed per shape.

Example document:
    {
      "default_policy": "none",
      "fields": {
        "name": {"value": "John Doe"},
        "user": {"policy": "r", "store": {"fields": {"name": {"value": "Jane"}}}}
      }
    }
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .exceptions import StoreConfigError
from .policies import FieldPolicy
from .store import FieldSpec, Store
from .types import PATH_SEPARATOR

logger = logging.getLogger(__name__)

STORE_FILE_ENV = "PERMSTORE_FILE"


class _DocumentModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class FieldDocument(_DocumentModel):
    policy: FieldPolicy | None = None
    value: Any = None
    store: StoreDocument | None = None

    @field_validator("policy", mode="before")
    @classmethod
    def _coerce_policy(cls, value: Any) -> FieldPolicy | None:
        if value is None:
            return None
        return FieldPolicy.coerce(value)

    @model_validator(mode="after")
    def _value_or_store(self) -> FieldDocument:
        if self.store is not None and "value" in self.model_fields_set:
            raise ValueError("a field may hold either 'value' or 'store', not both")
        return self

    @property
    def has_initial_value(self) -> bool:
        return self.store is not None or "value" in self.model_fields_set


class StoreDocument(_DocumentModel):
    name: str | None = None
    default_policy: FieldPolicy = FieldPolicy.READ_WRITE
    fields: dict[str, FieldDocument] = Field(default_factory=dict)

    @field_validator("default_policy", mode="before")
    @classmethod
    def _coerce_default_policy(cls, value: Any) -> FieldPolicy:
        return FieldPolicy.coerce(value)

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str | None) -> str | None:
        if value is not None and not value.isidentifier():
            raise ValueError(f"store name must be a Python identifier, got {value!r}")
        return value

    @field_validator("fields")
    @classmethod
    def _check_field_names(cls, value: dict[str, FieldDocument]) -> dict[str, FieldDocument]:
        for name in value:
            if not name or PATH_SEPARATOR in name:
                raise ValueError(f"invalid field name {name!r}")
        return value


FieldDocument.model_rebuild()


def build_store(document: StoreDocument | Mapping[str, Any]) -> Store:
    """
    Build a live store tree from a document.

    Raises:
        StoreConfigError: If a mapping is given and fails validation.
    """
    if not isinstance(document, StoreDocument):
        try:
            document = StoreDocument.model_validate(document)
        except ValidationError as e:
            raise StoreConfigError(f"Invalid store document: {e}") from e

    # Field names stay out of the class namespace.
    shape = type(document.name or "DocumentStore", (Store,), {})
    shape.__field_policies__ = MappingProxyType(
        {name: field.policy for name, field in document.fields.items() if field.policy is not None}
    )
    shape.__field_defaults__ = MappingProxyType(
        {name: FieldSpec(policy=field.policy) for name, field in document.fields.items()}
    )

    store = shape(default_policy=document.default_policy)
    for name, field in document.fields.items():
        if not field.has_initial_value:
            continue
        if field.store is not None:
            store._fields[name] = build_store(field.store)
        else:
            store._fields[name] = copy.deepcopy(field.value)
    return store


def load_document(path: str | Path) -> StoreDocument:
    """
    Read and validate a JSON store document.

    Raises:
        StoreConfigError: If the file is unreadable or not a valid document.
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise StoreConfigError(f"Cannot read store document {path}: {e.strerror or e}") from e
    try:
        document = StoreDocument.model_validate_json(raw)
    except ValidationError as e:
        raise StoreConfigError(f"Invalid store document {path}: {e}") from e
    logger.debug(f"Loaded store document {path} with {len(document.fields)} field(s)")
    return document


def load_store(path: str | Path) -> Store:
    """Load a JSON store document and build it."""
    return build_store(load_document(path))
