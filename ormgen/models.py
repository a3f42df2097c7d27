# File: ormgen/models.py
"""
ormgen - Core Data Models
==========================
Pydantic V2 models describing a schema request (fields, relations, flags)
and the small value objects produced by the generators.

Every descriptor is frozen: it is built once from parsed DSL tokens, read
during generation, and discarded when the generator call returns.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from ormgen.utils import to_plural, to_snake_case

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("ormgen.models")

# ---------------------------------------------------------------------------
# Enums - closed vocabularies
# ---------------------------------------------------------------------------


class DatabaseDriver(str, Enum):
    """Target SQL dialects."""

    POSTGRES = "postgres"
    MYSQL = "mysql"
    SQLITE = "sqlite"
    OTHER = "other"

    @classmethod
    def parse(cls, value: str) -> "DatabaseDriver":
        """Resolve a driver name, accepting common aliases."""
        key: str = value.strip().lower()
        key = _DRIVER_ALIASES.get(key, key)
        return cls(key)


_DRIVER_ALIASES: Dict[str, str] = {
    "postgresql": "postgres",
    "pg": "postgres",
    "mariadb": "mysql",
    "sqlite3": "sqlite",
}


class LogicalType(str, Enum):
    """Canonical logical field types understood by the type mapping table."""

    STRING = "string"
    TEXT = "text"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    BOOL = "bool"
    DATETIME = "datetime"
    DATE = "date"
    TIME = "time"
    UUID = "uuid"
    JSON = "json"
    JSONB = "jsonb"
    DECIMAL = "decimal"
    BYTES = "bytes"


# DSL spellings → canonical type.  Lookup is case-insensitive.
_LOGICAL_TYPE_ALIASES: Dict[str, LogicalType] = {
    "string": LogicalType.STRING,
    "varchar": LogicalType.STRING,
    "text": LogicalType.TEXT,
    "int8": LogicalType.INT8,
    "i8": LogicalType.INT8,
    "tinyint": LogicalType.INT8,
    "int16": LogicalType.INT16,
    "i16": LogicalType.INT16,
    "smallint": LogicalType.INT16,
    "int32": LogicalType.INT32,
    "i32": LogicalType.INT32,
    "int": LogicalType.INT32,
    "integer": LogicalType.INT32,
    "int64": LogicalType.INT64,
    "i64": LogicalType.INT64,
    "bigint": LogicalType.INT64,
    "float32": LogicalType.FLOAT32,
    "f32": LogicalType.FLOAT32,
    "float": LogicalType.FLOAT32,
    "float64": LogicalType.FLOAT64,
    "f64": LogicalType.FLOAT64,
    "double": LogicalType.FLOAT64,
    "bool": LogicalType.BOOL,
    "boolean": LogicalType.BOOL,
    "datetime": LogicalType.DATETIME,
    "timestamp": LogicalType.DATETIME,
    "date": LogicalType.DATE,
    "time": LogicalType.TIME,
    "uuid": LogicalType.UUID,
    "json": LogicalType.JSON,
    "jsonb": LogicalType.JSONB,
    "decimal": LogicalType.DECIMAL,
    "bytes": LogicalType.BYTES,
    "blob": LogicalType.BYTES,
    "binary": LogicalType.BYTES,
}


def resolve_logical_type(token: str) -> Optional[LogicalType]:
    """Return the canonical type for a DSL type token, or None if unknown."""
    return _LOGICAL_TYPE_ALIASES.get(token.strip().lower())


class RelationType(str, Enum):
    """Association kinds."""

    BELONGS_TO = "belongs_to"
    HAS_ONE = "has_one"
    HAS_MANY = "has_many"


# ---------------------------------------------------------------------------
# Shared model configuration
# ---------------------------------------------------------------------------

_FROZEN_CONFIG: ConfigDict = ConfigDict(
    frozen=True,
    extra="forbid",
    populate_by_name=True,
)


# ---------------------------------------------------------------------------
# Field & relation descriptors
# ---------------------------------------------------------------------------


class FieldDefinition(BaseModel):
    """
    One column of an entity.

    ``logical_type`` is the DSL token exactly as written (``"i32"``,
    ``"string"``, ``"Money"``).  Unknown tokens are extension types and
    pass through the type mapping table unchanged.
    """

    model_config = _FROZEN_CONFIG

    name: str = Field(..., min_length=1, description="Column / attribute name.")
    logical_type: str = Field(..., min_length=1, description="DSL type token.")
    nullable: bool = False
    unique: bool = False
    indexed: bool = False
    default: Optional[str] = Field(
        default=None, description="Literal SQL default, emitted verbatim."
    )

    @property
    def resolved_type(self) -> Optional[LogicalType]:
        return resolve_logical_type(self.logical_type)

    @property
    def is_extension_type(self) -> bool:
        return self.resolved_type is None

    def __repr__(self) -> str:
        flags: List[str] = [
            flag
            for flag, on in (
                ("nullable", self.nullable),
                ("unique", self.unique),
                ("indexed", self.indexed),
            )
            if on
        ]
        suffix: str = f" [{', '.join(flags)}]" if flags else ""
        return f"<FieldDefinition {self.name}:{self.logical_type}{suffix}>"


class RelationDefinition(BaseModel):
    """One association from the owning entity to ``related_entity``."""

    model_config = _FROZEN_CONFIG

    name: str = Field(..., min_length=1, description="Attribute holding the relation.")
    relation_type: RelationType
    related_entity: str = Field(..., min_length=1, description="PascalCase entity name.")
    foreign_key: Optional[str] = Field(
        default=None, description="Explicit foreign-key column."
    )

    def resolve_foreign_key(self, owning_entity: str) -> str:
        """
        Return the foreign-key column for this relation.

        BelongsTo keys live on the owning table and are named after the
        related entity; HasOne / HasMany keys live on the related table and
        are named after the owner.
        """
        if self.foreign_key:
            return self.foreign_key
        if self.relation_type == RelationType.BELONGS_TO:
            return f"{to_snake_case(self.related_entity)}_id"
        return f"{to_snake_case(owning_entity)}_id"

    def __repr__(self) -> str:
        return (
            f"<RelationDefinition {self.name}: "
            f"{self.relation_type.value} {self.related_entity}>"
        )


# ---------------------------------------------------------------------------
# Aggregate: SchemaDescriptor
# ---------------------------------------------------------------------------


class SchemaDescriptor(BaseModel):
    """
    Everything a generator needs to know about one entity.

    Name sets (``indexed``, ``unique``, ``nullable``) override the inline
    modifiers of the field with the same name; they may also name columns
    that are not declared fields (timestamps, foreign keys).
    """

    model_config = _FROZEN_CONFIG

    name: str = Field(default="", description="Entity name (PascalCase).")
    table: Optional[str] = Field(default=None, description="Table-name override.")
    fields: Tuple[FieldDefinition, ...] = ()
    relations: Tuple[RelationDefinition, ...] = ()
    translatable: Tuple[str, ...] = ()
    attachments_single: Tuple[str, ...] = ()
    attachments_multi: Tuple[str, ...] = ()
    indexed: Tuple[str, ...] = ()
    unique: Tuple[str, ...] = ()
    nullable: Tuple[str, ...] = ()
    soft_deletes: bool = False
    timestamps: bool = True
    tokenize: bool = False

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        return v.strip()

    @computed_field  # type: ignore[misc]
    @property
    def table_name(self) -> str:
        if self.table:
            return self.table
        return to_plural(to_snake_case(self.name))

    @property
    def has_attachments(self) -> bool:
        return bool(self.attachments_single or self.attachments_multi)

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> Optional[FieldDefinition]:
        for fld in self.fields:
            if fld.name == name:
                return fld
        return None

    def is_nullable(self, fld: FieldDefinition) -> bool:
        return fld.nullable or fld.name in self.nullable

    def is_unique(self, fld: FieldDefinition) -> bool:
        return fld.unique or fld.name in self.unique

    def is_indexed(self, fld: FieldDefinition) -> bool:
        return fld.indexed or fld.name in self.indexed

    def unique_fields(self) -> List[FieldDefinition]:
        return [f for f in self.fields if self.is_unique(f)]

    def __repr__(self) -> str:
        return (
            f"<SchemaDescriptor {self.name} table={self.table_name} "
            f"fields={len(self.fields)} relations={len(self.relations)}>"
        )


# ---------------------------------------------------------------------------
# Generator output
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RegistryEntry:
    """Instruction to add one module to a per-kind index file."""

    index_path: Path
    module_token: str
    export_token: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ArtifactSpec:
    """A rendered artifact: where it goes, what it says, how to register it."""

    file_path: Path
    content: str
    registry_entry: RegistryEntry


__all__: List[str] = [
    "DatabaseDriver",
    "LogicalType",
    "RelationType",
    "resolve_logical_type",
    "FieldDefinition",
    "RelationDefinition",
    "SchemaDescriptor",
    "RegistryEntry",
    "ArtifactSpec",
]

logger.debug("ormgen.models loaded.")
