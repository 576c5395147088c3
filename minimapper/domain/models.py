"""
Declarative record types for minimapper.

Subclass `Entity` and tag fields with `PrimaryKey()` / `Column()`; the
semantic type comes from the annotation (`Int64`, `Int32`, `Text`). The
class is registered with the metadata extractor as soon as pydantic has
built it.

    class Account(Entity):
        id: Int64 = PrimaryKey()
        balance: Int32 = Column(0)
        owner: Text = Column("")
        nickname: str = ""  # not mapped
"""
from __future__ import annotations

from typing import Any, ClassVar, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.fields import FieldInfo

from minimapper.domain.metadata import ROLE_KEY, FieldSpec, Role, register_record
from minimapper.domain.types import SemanticType


def PrimaryKey(default: int = 0, **kwargs: Any) -> Any:
    """Declare the field that identifies a row."""
    return Field(default, json_schema_extra={ROLE_KEY: Role.PRIMARY_KEY.value}, **kwargs)


def Column(default: Any = ..., **kwargs: Any) -> Any:
    """Declare a field persisted as an ordinary column."""
    return Field(default, json_schema_extra={ROLE_KEY: Role.COLUMN.value}, **kwargs)


def _role(info: FieldInfo) -> Role:
    extra = info.json_schema_extra
    if isinstance(extra, dict):
        return Role(extra.get(ROLE_KEY, Role.NONE.value))
    return Role.NONE


def _semantic_type(info: FieldInfo) -> Optional[SemanticType]:
    return next((m for m in info.metadata if isinstance(m, SemanticType)), None)


def model_field_specs(model: type[BaseModel]) -> List[FieldSpec]:
    """Build the static mapping table of a pydantic model from its field declarations."""
    specs = []
    for name, info in model.model_fields.items():
        annotation = info.annotation
        specs.append(
            FieldSpec(
                name=name,
                semantic_type=_semantic_type(info),
                role=_role(info),
                type_name=getattr(annotation, "__name__", repr(annotation)),
            )
        )
    return specs


class Entity(BaseModel):
    """
    Base class for mapped record types.

    Instances are mutable and validated on assignment, so values set by the
    mapper go through the same checks as values set by callers. Set
    `__table_name__` to map to a table whose name differs from the class name.
    """

    __table_name__: ClassVar[Optional[str]] = None

    model_config = ConfigDict(
        validate_assignment=True,
        populate_by_name=True,
        arbitrary_types_allowed=False,
    )

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        register_record(cls, model_field_specs(cls), table=cls.__table_name__)


__all__ = ["Entity", "PrimaryKey", "Column", "model_field_specs"]
