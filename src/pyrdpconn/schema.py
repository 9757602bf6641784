"""Declarative field metadata for connection property sets.

A property set is a :class:`PropertySet` subclass which lists its fields in
an explicit ``declared_fields`` table and is marked with the
:func:`property_set` decorator.  The decorator builds the class's immutable
:class:`Schema` once, when the class is defined, and :func:`schema_for`
returns that same object for the lifetime of the process.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field as dataclass_field
from threading import Lock
from typing import Any, ClassVar, TypeVar

from .codec import KIND_REGISTRY
from .errors import SchemaError

logger = logging.getLogger("pyrdpconn.schema")

_CONTRACT_ATTR = "_rdp_property_set"

######################
##### FIELD SPEC #####
######################


@dataclass(frozen=True)
class FieldSpec:
    """Specification for a single connection property."""

    name: str
    key: str | None
    kind: str
    allowed: frozenset[Any] | None = None
    minimum: int | None = None
    maximum: int | None = None
    default: Any | None = None
    ignored: bool = False
    primary: bool = False
    protected: bool = False
    label: str | None = None
    description: str | None = None

    def __post_init__(self) -> None:
        if self.kind not in KIND_REGISTRY:
            raise SchemaError(f"unknown kind {self.kind!r} for field {self.name!r}")
        if self.allowed is not None:
            object.__setattr__(self, "allowed", frozenset(self.allowed))
        if (self.minimum is not None or self.maximum is not None) and self.kind != "integer":
            raise SchemaError(f"range on non-integer field {self.name!r}")
        if (
            self.minimum is not None
            and self.maximum is not None
            and self.minimum > self.maximum
        ):
            raise SchemaError(f"empty range on field {self.name!r}")
        if self.protected and self.kind != "bytes":
            raise SchemaError(f"protected field {self.name!r} must hold bytes")

    @property
    def has_key(self) -> bool:
        return bool(self.key and self.key.strip())

    @property
    def has_range(self) -> bool:
        return self.minimum is not None or self.maximum is not None

    @property
    def display_name(self) -> str:
        return self.label or self.name


##################
##### SCHEMA #####
##################


@dataclass(frozen=True)
class Schema:
    """Ordered field descriptors of one property-set type."""

    owner: type
    fields: tuple[FieldSpec, ...]
    by_key: Mapping[str, FieldSpec] = dataclass_field(init=False, repr=False)
    by_name: Mapping[str, FieldSpec] = dataclass_field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))
        by_key: dict[str, FieldSpec] = {}
        by_name: dict[str, FieldSpec] = {}
        primary: FieldSpec | None = None
        for spec in self.fields:
            if spec.name in by_name:
                raise SchemaError(f"duplicate field name {spec.name!r} in {self.owner.__name__}")
            by_name[spec.name] = spec
            if spec.primary:
                if primary is not None:
                    raise SchemaError(
                        f"{self.owner.__name__} declares more than one primary field"
                    )
                primary = spec
            if spec.ignored or not spec.has_key:
                continue
            if spec.key in by_key:
                raise SchemaError(
                    f"duplicate serialized key {spec.key!r} in {self.owner.__name__}"
                )
            by_key[spec.key] = spec
        object.__setattr__(self, "by_key", by_key)
        object.__setattr__(self, "by_name", by_name)

    def __iter__(self) -> Iterator[FieldSpec]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def field(self, name: str) -> FieldSpec:
        try:
            return self.by_name[name]
        except KeyError:
            raise KeyError(f"{self.owner.__name__} has no field {name!r}") from None

    def lookup(self, key: str) -> FieldSpec | None:
        return self.by_key.get(key)

    @property
    def primary(self) -> FieldSpec | None:
        for spec in self.fields:
            if spec.primary:
                return spec
        return None

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(self.by_key)


########################
##### PROPERTY SET #####
########################


class PropertySet:
    """Bag of optional typed values keyed by field name.

    ``None`` means the field is absent.  Field names declared in the schema
    are available as attributes as well as through item access.
    """

    declared_fields: ClassVar[tuple[FieldSpec, ...]] = ()

    __slots__ = ("_values",)

    def __init__(self, **values: Any) -> None:
        object.__setattr__(self, "_values", {})
        for name, value in values.items():
            try:
                self[name] = value
            except KeyError:
                raise TypeError(
                    f"{type(self).__name__}() got an unexpected field {name!r}"
                ) from None

    @classmethod
    def schema(cls) -> Schema:
        return schema_for(cls)

    def _spec(self, name: str) -> FieldSpec:
        return schema_for(type(self)).field(name)

    def __getitem__(self, name: str) -> Any:
        self._spec(name)
        return self._values.get(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self._spec(name)
        if value is None:
            self._values.pop(name, None)
        else:
            self._values[name] = value

    def __delitem__(self, name: str) -> None:
        self[name] = None

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self[name]
        except KeyError:
            raise AttributeError(
                f"{type(self).__name__!r} object has no attribute {name!r}"
            ) from None

    def __setattr__(self, name: str, value: Any) -> None:
        if hasattr(type(self), name):
            object.__setattr__(self, name, value)
            return
        try:
            self[name] = value
        except KeyError:
            raise AttributeError(
                f"{type(self).__name__!r} object has no field {name!r}"
            ) from None

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._values == other._values  # type: ignore[attr-defined]

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        body = ", ".join(f"{k}={v!r}" for k, v in self.to_dict().items())
        return f"{type(self).__name__}({body})"

    def present(self) -> Iterator[tuple[FieldSpec, Any]]:
        """Yield ``(spec, value)`` for every present field in schema order."""

        for spec in schema_for(type(self)):
            value = self._values.get(spec.name)
            if value is not None:
                yield spec, value

    def to_dict(self) -> dict[str, Any]:
        return {spec.name: value for spec, value in self.present()}

    def clear(self) -> None:
        self._values.clear()


P = TypeVar("P", bound=type[PropertySet])

####################
##### REGISTRY #####
####################

_SCHEMAS: dict[type, Schema] = {}
_LOCK = Lock()


def _collect_fields(cls: type[PropertySet]) -> list[FieldSpec]:
    specs: list[FieldSpec] = []
    positions: dict[str, int] = {}
    for klass in reversed(cls.__mro__):
        declared: Iterable[FieldSpec] = klass.__dict__.get("declared_fields", ())
        for spec in declared:
            if not isinstance(spec, FieldSpec):
                raise SchemaError(
                    f"{klass.__name__}.declared_fields contains {spec!r}"
                )
            if spec.name in positions:
                specs[positions[spec.name]] = spec
            else:
                positions[spec.name] = len(specs)
                specs.append(spec)
    return specs


def property_set(cls: P) -> P:
    """Mark *cls* as a valid property set and publish its schema.

    The schema is built here, when the class is defined, and never changes
    afterwards.  An inconsistent schema raises :class:`SchemaError` and
    leaves the class unmarked.  The marker is stored on the class itself and
    is not inherited.
    """

    if not (isinstance(cls, type) and issubclass(cls, PropertySet)):
        raise SchemaError(f"{cls!r} is not a PropertySet subclass")
    schema = Schema(cls, tuple(_collect_fields(cls)))
    with _LOCK:
        type.__setattr__(cls, _CONTRACT_ATTR, True)
        _SCHEMAS[cls] = schema
    logger.debug("published schema for %s with %d fields", cls.__name__, len(schema))
    return cls


def is_property_set(cls: type) -> bool:
    return (
        isinstance(cls, type)
        and issubclass(cls, PropertySet)
        and cls.__dict__.get(_CONTRACT_ATTR, False) is True
    )


def schema_for(cls: type) -> Schema:
    """Return the schema published for *cls* by :func:`property_set`."""

    schema = _SCHEMAS.get(cls)
    if schema is None:
        name = getattr(cls, "__name__", repr(cls))
        raise SchemaError(f"Selected type '{name}' is not marked as a property set.")
    return schema


__all__ = [
    "FieldSpec",
    "Schema",
    "PropertySet",
    "property_set",
    "is_property_set",
    "schema_for",
]
