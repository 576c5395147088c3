"""
Record type descriptions and the metadata extractor.

A record type is described once, when it is declared (`Entity` subclasses)
or registered (`register_record` for plain classes). The description holds
one `FieldDescriptor` per declared field, in declaration order, with the
field's role, semantic type, and a getter/setter pair. `extract` partitions
that description into the primary key and the ordered mapped columns.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from minimapper.domain.errors import ConfigurationError
from minimapper.domain.types import SemanticType

ROLE_KEY = "minimapper_role"


class Role(str, Enum):
    PRIMARY_KEY = "primary_key"
    COLUMN = "column"
    NONE = "none"


@dataclass(frozen=True)
class FieldSpec:
    """Static mapping entry for one field of a registered record type."""

    name: str
    semantic_type: Optional[SemanticType] = None
    role: Role = Role.COLUMN
    type_name: Optional[str] = None


@dataclass(frozen=True)
class FieldDescriptor:
    name: str
    semantic_type: Optional[SemanticType]
    role: Role
    type_name: str
    getter: Callable[[Any], Any] = field(repr=False, compare=False)
    setter: Callable[[Any, Any], None] = field(repr=False, compare=False)


@dataclass(frozen=True)
class RecordDescription:
    record_type: type
    table: str
    fields: Tuple[FieldDescriptor, ...]
    factory: Callable[[], Any] = field(repr=False, compare=False)


@dataclass(frozen=True)
class FieldMetadata:
    """Result of `extract`: the identity column plus the mapped columns in declaration order."""

    record_type: type
    table: str
    primary_key: FieldDescriptor
    columns: Tuple[FieldDescriptor, ...]
    factory: Callable[[], Any] = field(repr=False, compare=False)

    @property
    def record_name(self) -> str:
        return self.record_type.__name__


# Holds strong references: a registered class lives until `unregister_record`
# drops it. Weak keys would not help since each description refers back to
# its class through `record_type` and `factory`.
_REGISTRY: Dict[type, RecordDescription] = {}


def _make_setter(name: str) -> Callable[[Any, Any], None]:
    def setter(instance: Any, value: Any) -> None:
        setattr(instance, name, value)

    return setter


def _descriptor(spec: FieldSpec) -> FieldDescriptor:
    type_name = spec.type_name
    if type_name is None:
        type_name = spec.semantic_type.value if spec.semantic_type else "unknown"
    return FieldDescriptor(
        name=spec.name,
        semantic_type=spec.semantic_type,
        role=Role(spec.role),
        type_name=type_name,
        getter=operator.attrgetter(spec.name),
        setter=_make_setter(spec.name),
    )


def register_record(
    record_type: type,
    fields: Iterable[FieldSpec],
    *,
    table: Optional[str] = None,
    factory: Optional[Callable[[], Any]] = None,
) -> RecordDescription:
    """
    Register a record type with an explicit field mapping table.

    Parameters
    ----------
    record_type : type
        The class whose instances will be written and read.
    fields : iterable of FieldSpec
        Every field of the type in declaration order. Fields with
        `Role.NONE` are kept in the description but never mapped.
    table : str, optional
        Table name. Defaults to the type's simple name.
    factory : callable, optional
        No-argument constructor used to build instances on read. Defaults to
        the type itself.

    Raises
    ------
    ConfigurationError
        If more than one field is tagged as primary key or a field name repeats.
    """
    descriptors = tuple(_descriptor(spec) for spec in fields)

    names = [d.name for d in descriptors]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ConfigurationError(
            f"Record type '{record_type.__name__}' declares duplicate fields: {', '.join(duplicates)}",
            details={"record_type": record_type.__name__, "fields": duplicates},
        )

    primary_keys = [d.name for d in descriptors if d.role is Role.PRIMARY_KEY]
    if len(primary_keys) > 1:
        raise ConfigurationError(
            f"Record type '{record_type.__name__}' declares more than one primary key: "
            f"{', '.join(primary_keys)}",
            details={"record_type": record_type.__name__, "primary_keys": primary_keys},
        )

    description = RecordDescription(
        record_type=record_type,
        table=table or record_type.__name__,
        fields=descriptors,
        factory=factory or record_type,
    )
    _REGISTRY[record_type] = description
    return description


def unregister_record(record_type: type) -> None:
    _REGISTRY.pop(record_type, None)


def describe(record_type: type) -> RecordDescription:
    """Return the registered description of a record type."""
    try:
        return _REGISTRY[record_type]
    except KeyError:
        name = getattr(record_type, "__name__", repr(record_type))
        raise ConfigurationError(
            f"'{name}' is not a registered record type",
            details={"record_type": name},
        ) from None


def extract(record_type: type) -> FieldMetadata:
    """
    Classify the fields of a record type into primary key and mapped columns.

    Columns keep declaration order; it fixes the positional binding order of
    inserts. Untagged fields are omitted.

    Raises
    ------
    ConfigurationError
        If the type is not registered or declares no primary key.
    """
    description = describe(record_type)

    primary_key: Optional[FieldDescriptor] = None
    columns = []
    for descriptor in description.fields:
        if descriptor.role is Role.PRIMARY_KEY:
            primary_key = descriptor
        elif descriptor.role is Role.COLUMN:
            columns.append(descriptor)

    if primary_key is None:
        raise ConfigurationError(
            f"Record type '{record_type.__name__}' has no primary key field",
            details={"record_type": record_type.__name__},
        )

    return FieldMetadata(
        record_type=record_type,
        table=description.table,
        primary_key=primary_key,
        columns=tuple(columns),
        factory=description.factory,
    )


__all__ = [
    "ROLE_KEY",
    "Role",
    "FieldSpec",
    "FieldDescriptor",
    "RecordDescription",
    "FieldMetadata",
    "register_record",
    "unregister_record",
    "describe",
    "extract",
]
