# File: ormgen/validators.py
"""
ormgen - Schema Descriptor Validators
======================================
Semantic checks on a ``SchemaDescriptor`` before a model is generated.

Pydantic already guarantees the structural shape of descriptors.  This
module adds the cross-field rules: identifier validity, duplicates,
collisions between fields, relations and implicit columns, foreign keys
and override name sets.

Usage:
    from ormgen.validators import validate_descriptor
    result = validate_descriptor(descriptor, primary_key="id")
    if result.has_errors:
        ...
"""

from __future__ import annotations

import keyword
import logging
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Set

from ormgen.models import RelationType, SchemaDescriptor

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("ormgen.validators")

# ---------------------------------------------------------------------------
# Validation result container
# ---------------------------------------------------------------------------


class ValidationError:
    """Lightweight issue descriptor (no Pydantic overhead)."""

    __slots__ = ("level", "code", "message", "context")

    def __init__(
        self,
        level: str,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.level: str = level  # "error" | "warning" | "info"
        self.code: str = code
        self.message: str = message
        self.context: Dict[str, Any] = context or {}

    @property
    def is_error(self) -> bool:
        return self.level == "error"

    @property
    def is_warning(self) -> bool:
        return self.level == "warning"

    @property
    def is_info(self) -> bool:
        return self.level == "info"

    def __repr__(self) -> str:
        return f"[{self.level.upper()}] {self.code}: {self.message}"

    def __str__(self) -> str:
        return self.__repr__()


class ValidationResult:
    """Accumulates ``ValidationError`` instances produced by the validators."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: List[ValidationError] = []

    # -- Mutation -----------------------------------------------------------

    def add_error(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationError("error", code, message, context))

    def add_warning(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationError("warning", code, message, context))

    def add_info(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationError("info", code, message, context))

    def merge(self, other: "ValidationResult") -> None:
        self._items.extend(other._items)

    # -- Query --------------------------------------------------------------

    @property
    def errors(self) -> List[ValidationError]:
        return [e for e in self._items if e.is_error]

    @property
    def warnings(self) -> List[ValidationError]:
        return [e for e in self._items if e.is_warning]

    @property
    def infos(self) -> List[ValidationError]:
        return [e for e in self._items if e.is_info]

    @property
    def all_items(self) -> List[ValidationError]:
        return list(self._items)

    @property
    def codes(self) -> List[str]:
        return [e.code for e in self._items]

    @property
    def has_errors(self) -> bool:
        return any(e.is_error for e in self._items)

    @property
    def has_warnings(self) -> bool:
        return any(e.is_warning for e in self._items)

    @property
    def error_count(self) -> int:
        return sum(1 for e in self._items if e.is_error)

    @property
    def warning_count(self) -> int:
        return sum(1 for e in self._items if e.is_warning)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    def summary(self) -> str:
        return (
            f"Validation: {self.error_count} error(s), "
            f"{self.warning_count} warning(s), "
            f"{len(self._items)} total item(s)."
        )

    def __repr__(self) -> str:
        return f"<ValidationResult {self.summary()}>"

    def __bool__(self) -> bool:
        """Truthy when there are NO errors (i.e. valid)."""
        return self.is_valid

    def __len__(self) -> int:
        return len(self._items)

    def format_report(self, include_info: bool = False) -> str:
        """Human-readable multi-line report."""
        lines: List[str] = [self.summary(), ""]
        for item in self._items:
            if not include_info and item.is_info:
                continue
            prefix: str = {
                "error": "✗",
                "warning": "⚠",
                "info": "ℹ",
            }.get(item.level, "•")
            lines.append(f"  {prefix} [{item.code}] {item.message}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Reserved names
# ---------------------------------------------------------------------------

# Attribute names SQLAlchemy's declarative base reserves on mapped classes
_DECLARATIVE_RESERVED: FrozenSet[str] = frozenset({
    "metadata", "registry", "query", "__tablename__", "__table__",
    "__table_args__", "__mapper__", "__mapper_args__",
})

_SQL_RESERVED_WORDS: FrozenSet[str] = frozenset({
    "select", "insert", "update", "delete", "drop", "create", "alter",
    "table", "column", "index", "from", "where", "join", "order", "group",
    "by", "limit", "offset", "union", "primary", "foreign", "key",
    "references", "constraint", "check", "default", "unique", "values",
    "user", "role", "schema", "database", "trigger", "view", "type",
})


def _is_identifier(name: str) -> bool:
    return name.isidentifier() and not keyword.iskeyword(name)


def implicit_columns(descriptor: SchemaDescriptor, primary_key: str = "id") -> List[str]:
    """Columns the model generator adds on top of the declared fields."""
    columns: List[str] = [primary_key]
    if descriptor.has_attachments:
        columns.append("files")
    if descriptor.timestamps:
        columns.extend(["created_at", "updated_at"])
    if descriptor.soft_deletes:
        columns.append("deleted_at")
    return columns


# ---------------------------------------------------------------------------
# Individual validation functions
# ---------------------------------------------------------------------------


def validate_entity_name(descriptor: SchemaDescriptor) -> ValidationResult:
    """Entity name must be present and usable as a class name."""
    result: ValidationResult = ValidationResult()
    name: str = descriptor.name

    if not name:
        result.add_error("MISSING_NAME", "An entity name is required.")
        return result

    if not _is_identifier(name):
        result.add_error(
            "INVALID_ENTITY_NAME",
            f"Entity name '{name}' is not a valid Python identifier.",
            {"entity": name},
        )

    if descriptor.table is not None and not _is_identifier(descriptor.table):
        result.add_warning(
            "TABLE_NAME_NOT_IDENTIFIER",
            f"Table name '{descriptor.table}' is not a plain identifier; "
            f"it will need quoting in raw SQL.",
            {"table": descriptor.table},
        )
    return result


def validate_field_names(
    descriptor: SchemaDescriptor, primary_key: str = "id"
) -> ValidationResult:
    """
    Field names must be valid, unique identifiers that do not shadow the
    columns the generator adds itself.
    """
    result: ValidationResult = ValidationResult()
    seen: Set[str] = set()
    implicit: List[str] = implicit_columns(descriptor, primary_key)

    for fld in descriptor.fields:
        ctx: Dict[str, Any] = {"entity": descriptor.name, "field": fld.name}

        if fld.name in seen:
            result.add_error(
                "DUPLICATE_FIELD_NAME",
                f"Field '{fld.name}' is declared more than once.",
                ctx,
            )
        seen.add(fld.name)

        if not _is_identifier(fld.name):
            result.add_error(
                "INVALID_FIELD_NAME",
                f"Field '{fld.name}' is not a valid Python identifier.",
                ctx,
            )
            continue

        if fld.name in _DECLARATIVE_RESERVED:
            result.add_error(
                "FIELD_NAME_RESERVED",
                f"Field '{fld.name}' is reserved on declarative classes.",
                ctx,
            )

        if fld.name in implicit:
            result.add_error(
                "FIELD_SHADOWS_IMPLICIT_COLUMN",
                f"Field '{fld.name}' collides with a column the model "
                f"generator adds automatically.",
                ctx,
            )

        if fld.name.lower() in _SQL_RESERVED_WORDS:
            result.add_warning(
                "FIELD_NAME_SQL_RESERVED",
                f"Field '{fld.name}' is a SQL reserved word; raw migration "
                f"SQL may need quoting.",
                ctx,
            )

    return result


def validate_field_types(descriptor: SchemaDescriptor) -> ValidationResult:
    """Unknown logical types pass through; report them for visibility."""
    result: ValidationResult = ValidationResult()
    for fld in descriptor.fields:
        if fld.is_extension_type:
            result.add_info(
                "EXTENSION_TYPE",
                f"Field '{fld.name}' uses unrecognised type "
                f"'{fld.logical_type}'; it is emitted verbatim.",
                {"field": fld.name, "type": fld.logical_type},
            )
    return result


def validate_relations(descriptor: SchemaDescriptor) -> ValidationResult:
    """
    Relation names must be unique identifiers distinct from field names.

    A BelongsTo foreign key that matches a declared field is that field's
    column; one that matches nothing is reported so the column can be
    added to the field list.
    """
    result: ValidationResult = ValidationResult()
    field_names: Set[str] = set(descriptor.field_names)
    seen: Set[str] = set()

    for rel in descriptor.relations:
        ctx: Dict[str, Any] = {"entity": descriptor.name, "relation": rel.name}

        if rel.name in seen:
            result.add_error(
                "DUPLICATE_RELATION_NAME",
                f"Relation '{rel.name}' is declared more than once.",
                ctx,
            )
        seen.add(rel.name)

        if not _is_identifier(rel.name):
            result.add_error(
                "INVALID_RELATION_NAME",
                f"Relation '{rel.name}' is not a valid Python identifier.",
                ctx,
            )

        if not _is_identifier(rel.related_entity):
            result.add_error(
                "INVALID_RELATED_ENTITY",
                f"Relation '{rel.name}' targets '{rel.related_entity}', "
                f"which is not a valid class name.",
                ctx,
            )

        if rel.name in field_names:
            result.add_error(
                "RELATION_FIELD_COLLISION",
                f"Relation '{rel.name}' has the same name as a field.",
                ctx,
            )

        fk: str = rel.resolve_foreign_key(descriptor.name)
        if not _is_identifier(fk):
            result.add_error(
                "INVALID_FOREIGN_KEY",
                f"Foreign key '{fk}' of relation '{rel.name}' is not a "
                f"valid identifier.",
                ctx,
            )
            continue

        if rel.relation_type != RelationType.BELONGS_TO:
            continue

        if fk in field_names:
            result.add_info(
                "FOREIGN_KEY_DECLARED",
                f"Relation '{rel.name}' uses declared field '{fk}' as its "
                f"foreign key.",
                {**ctx, "foreign_key": fk},
            )
        else:
            result.add_warning(
                "FOREIGN_KEY_NOT_DECLARED",
                f"Relation '{rel.name}' expects foreign key column '{fk}', "
                f"which is not a declared field; an implicit column is added.",
                {**ctx, "foreign_key": fk},
            )

    return result


def validate_overrides(
    descriptor: SchemaDescriptor, primary_key: str = "id"
) -> ValidationResult:
    """Override name sets should refer to columns that will exist."""
    result: ValidationResult = ValidationResult()
    field_names: Set[str] = set(descriptor.field_names)
    known: Set[str] = field_names | set(implicit_columns(descriptor, primary_key))
    known.update(
        rel.resolve_foreign_key(descriptor.name)
        for rel in descriptor.relations
        if rel.relation_type == RelationType.BELONGS_TO
    )

    checks = (
        ("indexed", descriptor.indexed, known),
        ("unique", descriptor.unique, known),
        ("nullable", descriptor.nullable, field_names),
        ("translatable", descriptor.translatable, field_names),
    )
    for label, names, allowed in checks:
        for name in names:
            if name not in allowed:
                result.add_warning(
                    "OVERRIDE_UNKNOWN_FIELD",
                    f"'{name}' in the {label} list matches no field.",
                    {"set": label, "name": name},
                )

    for name in (*descriptor.attachments_single, *descriptor.attachments_multi):
        if not _is_identifier(name):
            result.add_error(
                "INVALID_ATTACHMENT_NAME",
                f"Attachment name '{name}' is not a valid identifier.",
                {"name": name},
            )
    return result


# ---------------------------------------------------------------------------
# Composite validation
# ---------------------------------------------------------------------------


def validate_descriptor(
    descriptor: SchemaDescriptor,
    primary_key: str = "id",
) -> ValidationResult:
    """
    **Entry point** run by the model generator before rendering.

    Errors abort generation; warnings and infos are logged.
    """
    result: ValidationResult = ValidationResult()

    validators: List[Callable[[], ValidationResult]] = [
        lambda: validate_entity_name(descriptor),
        lambda: validate_field_names(descriptor, primary_key),
        lambda: validate_field_types(descriptor),
        lambda: validate_relations(descriptor),
        lambda: validate_overrides(descriptor, primary_key),
    ]
    for validator_fn in validators:
        result.merge(validator_fn())

    if result.has_errors:
        logger.error(
            "Validation of '%s' FAILED. %s", descriptor.name, result.summary()
        )
    else:
        logger.info("Validation of '%s' passed. %s", descriptor.name, result.summary())
    return result


__all__: List[str] = [
    "ValidationError",
    "ValidationResult",
    "implicit_columns",
    "validate_entity_name",
    "validate_field_names",
    "validate_field_types",
    "validate_relations",
    "validate_overrides",
    "validate_descriptor",
]

logger.debug("ormgen.validators loaded - %d public symbols.", len(__all__))
