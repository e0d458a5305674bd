"""Field Descriptors - per-field persistence metadata consumed by table descriptors.

Invariants:
    - FieldConfig allows at most one identity option (id, generated_id, generated_id_sequence)
    - foreign_auto_create requires foreign
    - FieldType is frozen: once resolved against a dialect it never changes
    - column_name is the dialect-normalised name; field_name is the Python attribute name

Design Decisions:
    - FieldConfig is a Pydantic model: declarative options from dataclass metadata or
      SQLAlchemy column info are validated the same way
    - Value extraction/assignment is plain attribute access; type coercion lives in the dao
"""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ormtable.core.domain_types import IdRole
from ormtable.core.protocols import DatabaseType


class FieldConfig(BaseModel):
    """Unresolved field options, validated before any dialect is known."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    field_name: str = Field(min_length=1)
    column_name: str | None = None
    id: bool = False
    generated_id: bool = False
    generated_id_sequence: str | None = None
    foreign: bool = False
    foreign_auto_create: bool = False
    nullable: bool = True

    @field_validator("field_name")
    @classmethod
    def check_identifier(cls, v: str) -> str:
        if not v.isidentifier():
            raise ValueError(f"field_name '{v}' is not a valid attribute name")
        return v

    @field_validator("column_name")
    @classmethod
    def strip_column_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("column_name cannot be empty or whitespace")
        return v

    @model_validator(mode="after")
    def check_options(self) -> "FieldConfig":
        chosen = [
            name for name, on in (
                ("id", self.id),
                ("generated_id", self.generated_id),
                ("generated_id_sequence", self.generated_id_sequence is not None),
            ) if on
        ]
        if len(chosen) > 1:
            raise ValueError(
                f"Must specify at most one of id, generated_id, and "
                f"generated_id_sequence on field '{self.field_name}' (got {', '.join(chosen)})"
            )
        if self.foreign_auto_create and not self.foreign:
            raise ValueError(
                f"Field '{self.field_name}' must be foreign to use foreign_auto_create"
            )
        return self

    @property
    def resolved_column_name(self) -> str:
        return self.column_name or self.field_name

    @property
    def id_role(self) -> IdRole:
        if self.id:
            return IdRole.ID
        if self.generated_id:
            return IdRole.GENERATED_ID
        if self.generated_id_sequence is not None:
            return IdRole.GENERATED_ID_SEQUENCE
        return IdRole.NONE


@dataclass(frozen=True)
class FieldType:
    """Resolved descriptor for one persistent attribute of a mapped class."""

    owner: type
    field_name: str
    column_name: str
    id_role: IdRole = IdRole.NONE
    sequence_name: str | None = None
    foreign: bool = False
    foreign_auto_create: bool = False
    nullable: bool = True

    @classmethod
    def from_config(
        cls, owner: type, config: FieldConfig, database_type: DatabaseType,
    ) -> "FieldType":
        """Resolve a FieldConfig against a dialect."""
        return cls(
            owner=owner,
            field_name=config.field_name,
            column_name=database_type.normalize_entity_name(config.resolved_column_name),
            id_role=config.id_role,
            sequence_name=config.generated_id_sequence,
            foreign=config.foreign,
            foreign_auto_create=config.foreign_auto_create,
            nullable=config.nullable,
        )

    @property
    def is_id(self) -> bool:
        return self.id_role is IdRole.ID

    @property
    def is_generated_id(self) -> bool:
        return self.id_role is IdRole.GENERATED_ID

    @property
    def is_generated_id_sequence(self) -> bool:
        return self.id_role is IdRole.GENERATED_ID_SEQUENCE

    @property
    def is_identity(self) -> bool:
        return self.id_role.is_identity

    @property
    def is_foreign_auto_create(self) -> bool:
        return self.foreign_auto_create

    def extract_value(self, obj: Any) -> Any:
        return getattr(obj, self.field_name)

    def assign_value(self, obj: Any, value: Any) -> None:
        setattr(obj, self.field_name, value)

    def __str__(self) -> str:
        return f"{self.owner.__name__}.{self.field_name}"
