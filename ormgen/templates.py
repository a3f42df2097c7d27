# File: ormgen/templates.py
"""
ormgen - Code Template Engine
==============================
Turns descriptors into Python source text for:

    1. SQLAlchemy 2.0 models (``Mapped[]`` / ``mapped_column()``)
    2. Migrations with raw, driver-specific SQL in ``up`` / ``down``
    3. Seeders and factories (placeholder bodies)
    4. Request handlers (resource, model-backed, basic)
    5. The shared declarative base and per-kind index modules

Every document has the same shape: header docstring, imports, primary
declaration, then an optional test scaffold.

**Performance contract:**
    - All string assembly uses ``List[str]`` + ``"\\n".join()``.
    - Renderers are stateless; the same input always yields the same text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from ormgen.models import (
    DatabaseDriver,
    FieldDefinition,
    LogicalType,
    RelationDefinition,
    RelationType,
    SchemaDescriptor,
    resolve_logical_type,
)
from ormgen.typemap import (
    auto_increment_suffix,
    now_function,
    orm_column_type,
    primary_key_type,
    sql_type,
    target_type,
    target_type_imports,
    timestamp_type,
    wrap_optional,
)
from ormgen.utils import (
    build_import_block,
    indent_lines,
    merge_import_dicts,
    python_string_literal,
    safe_identifier,
    to_plural,
    to_snake_case,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("ormgen.templates")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_INDENT: str = "    "
_DOUBLE_INDENT: str = _INDENT * 2
_TRIPLE_INDENT: str = _INDENT * 3

_INTEGER_TYPES = frozenset({
    LogicalType.INT8, LogicalType.INT16, LogicalType.INT32, LogicalType.INT64,
})

_POSTGRES_SERIAL_TYPES: Dict[LogicalType, str] = {
    LogicalType.INT8: "SMALLSERIAL",
    LogicalType.INT16: "SMALLSERIAL",
    LogicalType.INT32: "SERIAL",
}

_FAKE_NAMES: Tuple[str, ...] = (
    "Alice", "Bob", "Charlie", "Diana", "Eve", "Frank",
    "Grace", "Henry", "Ivy", "Jack", "Kate", "Leo",
)

_LOREM: str = (
    "Lorem ipsum dolor sit amet consectetur adipiscing elit sed do eiusmod "
    "tempor incididunt ut labore et dolore magna aliqua"
)

ImportMap = Dict[str, Set[str]]


def _module_header(title: str, *body: str) -> List[str]:
    lines: List[str] = ['"""', title]
    if body:
        lines.append("")
        lines.extend(body)
    lines += ["", "Generated by ormgen.", '"""', "", "from __future__ import annotations", ""]
    return lines


def _import_section(*groups: ImportMap) -> List[str]:
    """One import block per non-empty group, separated by blank lines."""
    lines: List[str] = []
    for group in groups:
        if not group:
            continue
        if lines:
            lines.append("")
        lines.append(build_import_block(group))
    return lines


def _section_banner(title: str) -> List[str]:
    rule: str = "# " + "-" * 75
    return [rule, f"# {title}", rule]


def relation_foreign_keys(rel: RelationDefinition, owner: str) -> str:
    """
    ``Model.column`` holding the foreign key of *rel* declared on *owner*.

    BelongsTo keys live on the owner, HasOne and HasMany keys on the
    related model.
    """
    fk: str = rel.resolve_foreign_key(owner)
    if rel.relation_type == RelationType.BELONGS_TO:
        return f"{owner}.{fk}"
    return f"{rel.related_entity}.{fk}"


# ===========================================================================
# Migration plans
# ===========================================================================


class MigrationMode(str, Enum):
    CREATE_TABLE = "create_table"
    ALTER_TABLE = "alter_table"
    EMPTY = "empty"


@dataclass(frozen=True, slots=True)
class MigrationPlan:
    """The SQL a migration runs, in execution order."""

    mode: MigrationMode
    table: Optional[str]
    up_statements: Tuple[str, ...]
    down_statements: Tuple[str, ...]


def column_definition(fld: FieldDefinition, driver: DatabaseDriver) -> str:
    """
    One SQL column definition.

    Example:
        >>> column_definition(FieldDefinition(name="age", logical_type="i32"), DatabaseDriver.MYSQL)
        'age INTEGER NOT NULL'
    """
    parts: List[str] = [fld.name, sql_type(fld.logical_type, driver)]
    if not fld.nullable:
        parts.append("NOT NULL")
    if fld.unique:
        parts.append("UNIQUE")
    if fld.default is not None:
        parts.append(f"DEFAULT {fld.default}")
    return " ".join(parts)


def primary_key_definition(name: str, logical_type: str, driver: DatabaseDriver) -> str:
    """
    Primary-key column definition.

    ``int64`` uses the driver's auto-increment key.  Narrower integers
    auto-increment at their own width (SQLite only auto-increments
    ``INTEGER``); any other type is declared with its plain SQL type.

    Examples:
        >>> primary_key_definition("id", "i64", DatabaseDriver.SQLITE)
        'id INTEGER PRIMARY KEY AUTOINCREMENT'
        >>> primary_key_definition("id", "i32", DatabaseDriver.POSTGRES)
        'id SERIAL PRIMARY KEY'
        >>> primary_key_definition("id", "uuid", DatabaseDriver.POSTGRES)
        'id UUID PRIMARY KEY'
    """
    resolved: Optional[LogicalType] = resolve_logical_type(logical_type)
    if resolved == LogicalType.INT64 or (
        resolved in _INTEGER_TYPES and driver == DatabaseDriver.SQLITE
    ):
        return f"{name} {primary_key_type(driver)} PRIMARY KEY{auto_increment_suffix(driver)}"
    if resolved in _POSTGRES_SERIAL_TYPES and driver == DatabaseDriver.POSTGRES:
        return f"{name} {_POSTGRES_SERIAL_TYPES[resolved]} PRIMARY KEY"
    if resolved in _INTEGER_TYPES and driver == DatabaseDriver.MYSQL:
        return f"{name} {sql_type(logical_type, driver)} AUTO_INCREMENT PRIMARY KEY"
    return f"{name} {sql_type(logical_type, driver)} PRIMARY KEY"


def build_create_table_plan(
    table: str,
    fields: Sequence[FieldDefinition],
    driver: DatabaseDriver,
    *,
    primary_key: str = "id",
    primary_key_logical_type: str = "i64",
    timestamps: bool = True,
    soft_deletes: bool = False,
) -> MigrationPlan:
    """Primary key, declared fields, then the implicit timestamp columns."""
    ts_type: str = timestamp_type(driver)
    now: str = now_function(driver)

    columns: List[str] = [primary_key_definition(primary_key, primary_key_logical_type, driver)]
    columns.extend(column_definition(fld, driver) for fld in fields)
    if timestamps:
        columns.append(f"created_at {ts_type} NOT NULL DEFAULT {now}")
        columns.append(f"updated_at {ts_type} NOT NULL DEFAULT {now}")
    if soft_deletes:
        columns.append(f"deleted_at {ts_type}")

    body: str = ",\n".join(f"{_INDENT}{col}" for col in columns)
    up: List[str] = [f"CREATE TABLE IF NOT EXISTS {table} (\n{body}\n)"]
    up.extend(
        f"CREATE INDEX idx_{table}_{fld.name} ON {table} ({fld.name})"
        for fld in fields
        if fld.indexed and not fld.unique
    )

    return MigrationPlan(
        mode=MigrationMode.CREATE_TABLE,
        table=table,
        up_statements=tuple(up),
        down_statements=(f"DROP TABLE IF EXISTS {table}",),
    )


def build_alter_table_plan(
    table: str,
    fields: Sequence[FieldDefinition],
    driver: DatabaseDriver,
) -> MigrationPlan:
    """One ADD COLUMN per field up, the matching DROP COLUMN down, same order."""
    return MigrationPlan(
        mode=MigrationMode.ALTER_TABLE,
        table=table,
        up_statements=tuple(
            f"ALTER TABLE {table} ADD COLUMN {column_definition(fld, driver)}"
            for fld in fields
        ),
        down_statements=tuple(
            f"ALTER TABLE {table} DROP COLUMN {fld.name}" for fld in fields
        ),
    )


def build_empty_plan() -> MigrationPlan:
    return MigrationPlan(
        mode=MigrationMode.EMPTY,
        table=None,
        up_statements=(),
        down_statements=(),
    )


def _execute_lines(statement: str, indent: str) -> List[str]:
    """``connection.execute(text(...))`` for one statement."""
    if "\n" not in statement:
        return [f"{indent}connection.execute(text({python_string_literal(statement)}))"]

    inner: str = indent + _DOUBLE_INDENT
    block: str = "\n" + "\n".join(inner + line for line in statement.splitlines()) + "\n" + inner
    literal: str = python_string_literal(block)
    if not literal.startswith('"""'):
        return [f"{indent}connection.execute(text({python_string_literal(statement)}))"]

    return [
        f"{indent}connection.execute(",
        f"{indent}{_INDENT}text(",
        f"{inner}{literal}",
        f"{indent}{_INDENT})",
        f"{indent})",
    ]


# ===========================================================================
# TemplateRenderer
# ===========================================================================


class TemplateRenderer:
    """
    Stateless code-generation engine.

    Each ``render_*`` method returns a complete module as a string.

    Args:
        driver: SQL dialect for migrations and dialect-specific column types.
        primary_key: Primary-key attribute / column name.
        primary_key_type: Logical type of the primary key.
        models_module: Dotted import path of the models package, used by
            seeders, factories and handlers.
    """

    def __init__(
        self,
        *,
        driver: DatabaseDriver = DatabaseDriver.POSTGRES,
        primary_key: str = "id",
        primary_key_type: str = "i64",
        models_module: str = "app.models",
    ) -> None:
        self._driver: DatabaseDriver = driver
        self._pk: str = primary_key
        self._pk_type: str = primary_key_type
        self._models_module: str = models_module
        logger.debug(
            "TemplateRenderer initialised (driver=%s, pk=%s:%s, models=%s).",
            driver.value,
            primary_key,
            primary_key_type,
            models_module,
        )

    @property
    def _pk_annotation(self) -> str:
        return target_type(self._pk_type)

    # ===================================================================
    # 1. Declarative base & index modules
    # ===================================================================

    def render_base(self) -> str:
        lines: List[str] = _module_header("Declarative base shared by every generated model.")
        lines += [
            "from sqlalchemy.orm import DeclarativeBase",
            "",
            "",
            "class Base(DeclarativeBase):",
            f'{_INDENT}"""Base class for all models."""',
            "",
        ]
        return "\n".join(lines)

    @staticmethod
    def render_index_header(title: str, migration_table: Optional[str] = None) -> str:
        lines: List[str] = ['"""', title, "", "Modules are registered here by ormgen.", '"""', ""]
        if migration_table is not None:
            lines.append(f"MIGRATION_TABLE = {migration_table!r}")
            lines.append("")
        return "\n".join(lines)

    # ===================================================================
    # 2. SQLAlchemy model
    # ===================================================================

    def render_model(
        self,
        descriptor: SchemaDescriptor,
        *,
        known_columns: Iterable[str] = (),
        overlaps: Optional[Mapping[str, Sequence[str]]] = None,
    ) -> str:
        """
        Render a declarative model for *descriptor*.

        ``known_columns`` lists columns that exist besides the declared
        fields (timestamps, implicit foreign keys); index / unique name-set
        entries naming them become ``__table_args__`` entries.  Name-set
        entries matching nothing are skipped.

        ``overlaps`` maps a relation name to the other relationships that
        write the same foreign-key column.
        """
        name: str = descriptor.name
        table: str = descriptor.table_name
        overlaps = overlaps or {}

        stdlib: ImportMap = {}
        sa: ImportMap = {"sqlalchemy.orm": {"Mapped", "mapped_column"}}
        local: ImportMap = {".base": {"Base"}}
        type_checking: ImportMap = {}

        def need(group: ImportMap, module: str, *names: str) -> None:
            group.setdefault(module, set()).update(names)

        def need_typing(*names: str) -> None:
            need(stdlib, "typing", *names)

        # --- Columns --------------------------------------------------
        column_lines: List[str] = [self._primary_key_line(stdlib, sa)]

        belongs_to_fks: Dict[str, str] = {
            rel.resolve_foreign_key(name): to_plural(to_snake_case(rel.related_entity))
            for rel in descriptor.relations
            if rel.relation_type == RelationType.BELONGS_TO
        }
        field_names: Set[str] = set(descriptor.field_names)

        for fld in descriptor.fields:
            nullable: bool = descriptor.is_nullable(fld)
            annotation: str = target_type(fld.logical_type, nullable)
            stdlib = merge_import_dicts(
                stdlib, target_type_imports(fld.logical_type, nullable)
            )

            args: List[str] = []
            orm = orm_column_type(fld.logical_type, self._driver)
            if orm is not None:
                expression, orm_imports = orm
                args.append(expression)
                sa = merge_import_dicts(sa, orm_imports)
            if fld.name in belongs_to_fks:
                args.append(f'ForeignKey("{belongs_to_fks[fld.name]}.{self._pk}")')
                need(sa, "sqlalchemy", "ForeignKey")
            if nullable:
                args.append("nullable=True")
            if descriptor.is_unique(fld):
                args.append("unique=True")
            if descriptor.is_indexed(fld):
                args.append("index=True")
            if fld.default is not None:
                args.append(f"server_default=text({fld.default!r})")
                need(sa, "sqlalchemy", "text")

            column_lines.append(
                f"{fld.name}: Mapped[{annotation}] = mapped_column({', '.join(args)})"
            )

        # BelongsTo keys with no declared field get their own column
        for fk, related_table in belongs_to_fks.items():
            if fk in field_names:
                continue
            pk_orm = orm_column_type(self._pk_type, self._driver)
            args = []
            if pk_orm is not None:
                args.append(pk_orm[0])
                sa = merge_import_dicts(sa, pk_orm[1])
            args.append(f'ForeignKey("{related_table}.{self._pk}")')
            nullable = fk in descriptor.nullable
            if nullable:
                args.append("nullable=True")
            args.append("index=True")
            need(sa, "sqlalchemy", "ForeignKey")
            stdlib = merge_import_dicts(
                stdlib, target_type_imports(self._pk_type, nullable)
            )
            column_lines.append(
                f"{fk}: Mapped[{target_type(self._pk_type, nullable)}] = "
                f"mapped_column({', '.join(args)})"
            )

        if descriptor.has_attachments:
            json_expr, json_imports = orm_column_type(LogicalType.JSON, self._driver)  # type: ignore[misc]
            sa = merge_import_dicts(sa, json_imports)
            need_typing("Any", "Dict", "Optional")
            column_lines.append(
                f"files: Mapped[Optional[Dict[str, Any]]] = mapped_column({json_expr}, nullable=True)"
            )

        if descriptor.timestamps or descriptor.soft_deletes:
            need(stdlib, "datetime", "datetime")
            need(sa, "sqlalchemy", "DateTime")
        if descriptor.timestamps:
            need(sa, "sqlalchemy", "func")
            column_lines.append(
                "created_at: Mapped[datetime] = mapped_column("
                "DateTime(timezone=True), server_default=func.now())"
            )
            column_lines.append(
                "updated_at: Mapped[datetime] = mapped_column("
                "DateTime(timezone=True), server_default=func.now(), onupdate=func.now())"
            )
        if descriptor.soft_deletes:
            need_typing("Optional")
            column_lines.append(
                "deleted_at: Mapped[Optional[datetime]] = mapped_column("
                "DateTime(timezone=True), nullable=True)"
            )

        # --- Relations ------------------------------------------------
        relation_lines: List[str] = []
        for rel in descriptor.relations:
            relation_lines.append(self._relation_line(rel, name, overlaps.get(rel.name, ())))
            need(sa, "sqlalchemy.orm", "relationship")
            if rel.relation_type == RelationType.HAS_MANY:
                need_typing("List")
            else:
                need_typing("Optional")
            if rel.related_entity != name:
                need(type_checking, f".{to_snake_case(rel.related_entity)}", rel.related_entity)

        # --- Table args -----------------------------------------------
        known: Set[str] = set(known_columns)
        table_args: List[str] = []
        for col in descriptor.indexed:
            if col not in field_names and col in known:
                table_args.append(f'Index("ix_{table}_{col}", "{col}")')
                need(sa, "sqlalchemy", "Index")
        for col in descriptor.unique:
            if col not in field_names and col in known:
                table_args.append(f'UniqueConstraint("{col}", name="uq_{table}_{col}")')
                need(sa, "sqlalchemy", "UniqueConstraint")

        # --- Class markers --------------------------------------------
        markers: List[str] = []
        if descriptor.soft_deletes:
            markers.append("__soft_delete__ = True")
        if descriptor.tokenize:
            markers.append("__tokenize__ = True")
        for attr, names in (
            ("__translatable__", descriptor.translatable),
            ("__has_one_files__", descriptor.attachments_single),
            ("__has_many_files__", descriptor.attachments_multi),
        ):
            if names:
                markers.append(f"{attr} = {tuple(names)!r}")

        # --- Methods --------------------------------------------------
        method_blocks: List[List[str]] = []
        unique_fields: List[FieldDefinition] = descriptor.unique_fields()
        if unique_fields or descriptor.tokenize:
            need(sa, "sqlalchemy.orm", "Session")
            need_typing("Optional")
        for fld in unique_fields:
            need(sa, "sqlalchemy", "select")
            method_blocks.append(self._finder_method(name, fld))
        if descriptor.tokenize:
            stdlib.setdefault("base64", set())
            method_blocks.append(self._token_methods(name, stdlib))
        method_blocks.append([
            "def __repr__(self) -> str:",
            f'{_INDENT}return f"<{name} {self._pk}={{self.{self._pk}!r}}>"',
        ])

        # --- Assemble -------------------------------------------------
        if type_checking:
            need_typing("TYPE_CHECKING")

        lines: List[str] = _module_header(f"{name} model.")
        lines += _import_section(stdlib, sa, local)
        if type_checking:
            lines += ["", "if TYPE_CHECKING:"]
            lines += indent_lines(build_import_block(type_checking).splitlines())
        lines += ["", ""]

        lines.append(f"class {name}(Base):")
        lines.append(f'{_INDENT}"""ORM model for the ``{table}`` table."""')
        lines.append("")
        lines.append(f'{_INDENT}__tablename__ = "{table}"')
        if table_args:
            lines.append(f"{_INDENT}__table_args__ = (")
            lines += [f"{_DOUBLE_INDENT}{arg}," for arg in table_args]
            lines.append(f"{_INDENT})")
        lines += indent_lines(markers)
        lines.append("")
        lines += indent_lines(column_lines)
        if relation_lines:
            lines.append("")
            lines += indent_lines(relation_lines)
        for block in method_blocks:
            lines.append("")
            lines += indent_lines(block)
        lines.append("")

        content: str = "\n".join(lines)
        logger.debug(
            "Rendered model '%s': %d lines.", name, content.count("\n") + 1
        )
        return content

    def _primary_key_line(self, stdlib: ImportMap, sa: ImportMap) -> str:
        annotation: str = target_type(self._pk_type)
        for module, names in target_type_imports(self._pk_type).items():
            stdlib.setdefault(module, set()).update(names)

        resolved: Optional[LogicalType] = resolve_logical_type(self._pk_type)
        args: List[str] = []
        orm = orm_column_type(self._pk_type, self._driver)
        if orm is not None:
            expression: str = orm[0]
            for module, names in orm[1].items():
                sa.setdefault(module, set()).update(names)
            # SQLite only auto-increments INTEGER PRIMARY KEY columns
            if resolved == LogicalType.INT64:
                expression = 'BigInteger().with_variant(Integer, "sqlite")'
                sa.setdefault("sqlalchemy", set()).add("Integer")
            args.append(expression)
        args.append("primary_key=True")

        if resolved in _INTEGER_TYPES:
            args.append("autoincrement=True")
        elif resolved == LogicalType.UUID:
            stdlib.setdefault("uuid", set()).add("uuid4")
            args.append("default=uuid4")

        return f"{self._pk}: Mapped[{annotation}] = mapped_column({', '.join(args)})"

    def _relation_line(
        self, rel: RelationDefinition, owner: str, overlaps: Sequence[str] = ()
    ) -> str:
        related: str = rel.related_entity
        parts: List[str] = [f'"{related}"', f'foreign_keys="{relation_foreign_keys(rel, owner)}"']
        if rel.relation_type == RelationType.BELONGS_TO and related == owner:
            parts.append(f'remote_side="{owner}.{self._pk}"')

        if rel.relation_type == RelationType.HAS_MANY:
            annotation: str = f'List["{related}"]'
        else:
            annotation = wrap_optional(f'"{related}"')
        if rel.relation_type == RelationType.HAS_ONE:
            parts.append("uselist=False")
        if overlaps:
            parts.append(f'overlaps="{",".join(overlaps)}"')

        return f"{rel.name}: Mapped[{annotation}] = relationship({', '.join(parts)})"

    @staticmethod
    def _finder_method(model: str, fld: FieldDefinition) -> List[str]:
        param: str = safe_identifier(fld.name)
        annotation: str = target_type(fld.logical_type)
        return [
            "@classmethod",
            f'def find_by_{fld.name}(cls, session: Session, {param}: {annotation}) -> Optional["{model}"]:',
            f'{_INDENT}"""Return the {model} whose ``{fld.name}`` equals *{param}*."""',
            f"{_INDENT}return session.scalars(select(cls).where(cls.{fld.name} == {param})).first()",
        ]

    def _token_methods(self, model: str, stdlib: ImportMap) -> List[str]:
        resolved: Optional[LogicalType] = resolve_logical_type(self._pk_type)
        if resolved in _INTEGER_TYPES:
            convert: str = "int(raw)"
        elif resolved == LogicalType.UUID:
            stdlib.setdefault("uuid", set()).add("UUID")
            convert = "UUID(raw)"
        else:
            convert = "raw"

        return [
            "def to_token(self) -> str:",
            f'{_INDENT}"""Opaque URL-safe token for this record\'s primary key."""',
            f'{_INDENT}raw = str(self.{self._pk}).encode("utf-8")',
            f'{_INDENT}return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")',
            "",
            "@classmethod",
            f'def from_token(cls, session: Session, token: str) -> Optional["{model}"]:',
            f'{_INDENT}"""Load the record a token was issued for, or None."""',
            f'{_INDENT}padded = token + "=" * (-len(token) % 4)',
            f"{_INDENT}try:",
            f'{_DOUBLE_INDENT}raw = base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8")',
            f"{_DOUBLE_INDENT}key = {convert}",
            f"{_INDENT}except (ValueError, UnicodeDecodeError):",
            f"{_DOUBLE_INDENT}return None",
            f"{_INDENT}return session.get(cls, key)",
        ]

    # ===================================================================
    # 3. Migration
    # ===================================================================

    def render_migration(
        self,
        class_name: str,
        module_name: str,
        plan: MigrationPlan,
    ) -> str:
        """Render a migration class whose ``up`` / ``down`` run *plan*."""
        if plan.mode == MigrationMode.CREATE_TABLE:
            summary: str = f"Create the ``{plan.table}`` table."
        elif plan.mode == MigrationMode.ALTER_TABLE:
            summary = f"Alter the ``{plan.table}`` table."
        else:
            summary = "Custom migration."

        lines: List[str] = _module_header(
            f"Migration: {module_name}", f"Driver: {self._driver.value}"
        )
        lines += [
            "from sqlalchemy import text",
            "from sqlalchemy.engine import Connection",
            "",
            "",
            f"class {class_name}:",
            f'{_INDENT}"""{summary}"""',
            "",
            f'{_INDENT}name = "{module_name}"',
            "",
            f"{_INDENT}def up(self, connection: Connection) -> None:",
        ]
        lines += self._migration_body(plan.up_statements, "CREATE TABLE example (...)")
        lines += ["", f"{_INDENT}def down(self, connection: Connection) -> None:"]
        lines += self._migration_body(plan.down_statements, "DROP TABLE example")
        lines.append("")
        return "\n".join(lines)

    @staticmethod
    def _migration_body(statements: Sequence[str], example: str) -> List[str]:
        if not statements:
            return [
                f"{_DOUBLE_INDENT}# Write your migration here, e.g.",
                f'{_DOUBLE_INDENT}# connection.execute(text("{example}"))',
                f"{_DOUBLE_INDENT}pass",
            ]
        lines: List[str] = []
        for statement in statements:
            lines += _execute_lines(statement, _DOUBLE_INDENT)
        return lines

    # ===================================================================
    # 4. Seeder
    # ===================================================================

    def render_model_seeder(self, seeder: str, model: str, count: int) -> str:
        """Seeder that inserts *count* placeholder *model* records."""
        var: str = safe_identifier(model)
        plural: str = to_plural(to_snake_case(model))

        lines: List[str] = _module_header(
            f"{seeder}", f"Seeds the database with {model} records."
        )
        lines += [
            "import logging",
            "",
            "from sqlalchemy.orm import Session",
            "",
            f"from {self._models_module} import {model}",
            "",
            "logger = logging.getLogger(__name__)",
            "",
            "",
            f"class {seeder}:",
            f'{_INDENT}"""Seeds {model} records."""',
            "",
            f"{_INDENT}count: int = {count}",
            "",
            f"{_INDENT}def __init__(self, session: Session) -> None:",
            f"{_DOUBLE_INDENT}self.session = session",
            "",
            f"{_INDENT}def run(self) -> None:",
            f'{_DOUBLE_INDENT}logger.info("Seeding {plural}...")',
            f"{_DOUBLE_INDENT}for i in range(1, self.count + 1):",
            f"{_TRIPLE_INDENT}{var} = {model}(",
            f"{_TRIPLE_INDENT}{_INDENT}# Fill in the model fields, e.g.",
            f'{_TRIPLE_INDENT}{_INDENT}# name=f"{model} {{i}}",',
            f'{_TRIPLE_INDENT}{_INDENT}# email=f"{to_snake_case(model)}{{i}}@example.com",',
            f"{_TRIPLE_INDENT})",
            f"{_TRIPLE_INDENT}self.session.add({var})",
            f"{_DOUBLE_INDENT}self.session.commit()",
            f'{_DOUBLE_INDENT}logger.info("Seeded %d {to_snake_case(model)}(s)", self.count)',
            "",
            f"{_INDENT}def run_with_factory(self) -> None:",
            f'{_DOUBLE_INDENT}logger.info("Seeding {plural} with factory...")',
            f"{_DOUBLE_INDENT}# {model}Factory(self.session).create_many(self.count)",
            f"{_DOUBLE_INDENT}self.run()",
            "",
            "",
        ]
        lines += self._seeder_test_scaffold(seeder)
        return "\n".join(lines)

    def render_basic_seeder(self, seeder: str) -> str:
        lines: List[str] = _module_header(f"{seeder}", "Custom database seeder.")
        lines += [
            "import logging",
            "",
            "from sqlalchemy.orm import Session",
            "",
            "logger = logging.getLogger(__name__)",
            "",
            "",
            f"class {seeder}:",
            f'{_INDENT}"""{seeder}."""',
            "",
            f"{_INDENT}def __init__(self, session: Session) -> None:",
            f"{_DOUBLE_INDENT}self.session = session",
            "",
            f"{_INDENT}def run(self) -> None:",
            f'{_DOUBLE_INDENT}logger.info("Running {seeder}...")',
            f"{_DOUBLE_INDENT}# Add your seeding logic here, e.g.",
            f'{_DOUBLE_INDENT}# self.session.add(User(name="Admin", email="admin@example.com"))',
            f"{_DOUBLE_INDENT}# self.session.commit()",
            f'{_DOUBLE_INDENT}logger.info("{seeder} completed!")',
            "",
            "",
        ]
        lines += self._seeder_test_scaffold(seeder)
        return "\n".join(lines)

    @staticmethod
    def _seeder_test_scaffold(seeder: str) -> List[str]:
        lines: List[str] = _section_banner("Test scaffold")
        lines += [
            "",
            "",
            f"def test_{to_snake_case(seeder)}() -> None:",
            f"{_INDENT}# Set up a test session, run the seeder and verify the records.",
            f"{_INDENT}pass",
            "",
        ]
        return lines

    # ===================================================================
    # 5. Factory
    # ===================================================================

    def render_factory(self, factory: str, model: str) -> str:
        """Builder scaffold producing *model* instances."""
        var: str = safe_identifier(model)
        snake: str = to_snake_case(model)
        pk: str = self._pk

        lines: List[str] = _module_header(
            f"{factory}",
            f"Factory for creating {model} instances for testing and seeding.",
        )
        lines += [
            "import random",
            "from typing import Any, Callable, Dict, List, Optional",
            "",
            "from sqlalchemy.orm import Session",
            "",
            f"from {self._models_module} import {model}",
            "",
            f"_NAMES = {_FAKE_NAMES!r}",
            "",
            f"_LOREM = {_LOREM!r}",
            "",
            "",
            f"class {factory}:",
            f'{_INDENT}"""Builds {model} instances; persists them when given a session."""',
            "",
            f"{_INDENT}def __init__(self, session: Optional[Session] = None) -> None:",
            f"{_DOUBLE_INDENT}self.session = session",
            "",
            f"{_INDENT}def definition(self) -> Dict[str, Any]:",
            f'{_DOUBLE_INDENT}"""Default attribute values for a new {model}."""',
            f"{_DOUBLE_INDENT}return {{",
            f"{_TRIPLE_INDENT}# Add default field values, e.g.",
            f'{_TRIPLE_INDENT}# "name": self.fake_name(),',
            f'{_TRIPLE_INDENT}# "email": self.fake_email(),',
            f"{_DOUBLE_INDENT}}}",
            "",
            f"{_INDENT}def make(self, **overrides: Any) -> {model}:",
            f'{_DOUBLE_INDENT}"""Build a {model} without saving it."""',
            f"{_DOUBLE_INDENT}attributes = self.definition()",
            f"{_DOUBLE_INDENT}attributes.update(overrides)",
            f"{_DOUBLE_INDENT}return {model}(**attributes)",
            "",
            f"{_INDENT}def make_many(self, count: int) -> List[{model}]:",
            f"{_DOUBLE_INDENT}return [self.make() for _ in range(count)]",
            "",
            f"{_INDENT}def make_with(self, modifier: Callable[[{model}], None]) -> {model}:",
            f'{_DOUBLE_INDENT}"""Build a {model} and let *modifier* adjust it."""',
            f"{_DOUBLE_INDENT}{var} = self.make()",
            f"{_DOUBLE_INDENT}modifier({var})",
            f"{_DOUBLE_INDENT}return {var}",
            "",
            f"{_INDENT}def create(self, **overrides: Any) -> {model}:",
            f'{_DOUBLE_INDENT}"""Build and save a single {model}."""',
            f"{_DOUBLE_INDENT}{var} = self.make(**overrides)",
            f"{_DOUBLE_INDENT}self._save({var})",
            f"{_DOUBLE_INDENT}return {var}",
            "",
            f"{_INDENT}def create_many(self, count: int) -> List[{model}]:",
            f"{_DOUBLE_INDENT}return [self.create() for _ in range(count)]",
            "",
            f"{_INDENT}def create_with(self, modifier: Callable[[{model}], None]) -> {model}:",
            f"{_DOUBLE_INDENT}{var} = self.make_with(modifier)",
            f"{_DOUBLE_INDENT}self._save({var})",
            f"{_DOUBLE_INDENT}return {var}",
            "",
            f"{_INDENT}def _save(self, {var}: {model}) -> None:",
            f"{_DOUBLE_INDENT}if self.session is None:",
            f'{_TRIPLE_INDENT}raise RuntimeError("{factory} needs a session to save records")',
            f"{_DOUBLE_INDENT}self.session.add({var})",
            f"{_DOUBLE_INDENT}self.session.commit()",
            f"{_DOUBLE_INDENT}self.session.refresh({var})",
            "",
            f"{_INDENT}# -- Fake data -------------------------------------------------------",
            "",
            f"{_INDENT}@staticmethod",
            f"{_INDENT}def fake_name() -> str:",
            f"{_DOUBLE_INDENT}return random.choice(_NAMES)",
            "",
            f"{_INDENT}@staticmethod",
            f"{_INDENT}def fake_email() -> str:",
            f'{_DOUBLE_INDENT}return f"{snake}{{random.randrange(1_000_000)}}@example.com"',
            "",
            f"{_INDENT}@staticmethod",
            f"{_INDENT}def random_number(minimum: int, maximum: int) -> int:",
            f"{_DOUBLE_INDENT}return random.randint(minimum, maximum)",
            "",
            f"{_INDENT}@staticmethod",
            f"{_INDENT}def random_bool() -> bool:",
            f"{_DOUBLE_INDENT}return random.random() < 0.5",
            "",
            f"{_INDENT}@staticmethod",
            f"{_INDENT}def lorem_ipsum(words: int) -> str:",
            f'{_DOUBLE_INDENT}return " ".join(_LOREM.split()[:words])',
            "",
            "",
        ]
        lines += _section_banner("Test scaffold")
        lines += [
            "",
            "",
            f"def test_{to_snake_case(factory)}_make() -> None:",
            f"{_INDENT}assert isinstance({factory}().make(), {model})",
            "",
            "",
            f"def test_{to_snake_case(factory)}_make_many() -> None:",
            f"{_INDENT}assert len({factory}().make_many(5)) == 5",
            "",
            "",
            f"def test_{to_snake_case(factory)}_make_with() -> None:",
            f'{_INDENT}{var} = {factory}().make_with(lambda record: setattr(record, "{pk}", 999))',
            f"{_INDENT}assert {var}.{pk} == 999",
            "",
        ]
        return "\n".join(lines)

    # ===================================================================
    # 6. Handlers
    # ===================================================================

    def render_resource_handler(
        self, handler: str, model: str, *, tokenize: bool = False
    ) -> str:
        """Full CRUD handler with pydantic request / response payloads."""
        var: str = safe_identifier(model)
        plural: str = to_plural(to_snake_case(model))
        pk: str = self._pk
        pk_ann: str = self._pk_annotation
        create_req: str = f"Create{model}Request"
        update_req: str = f"Update{model}Request"
        response: str = f"{model}Response"

        stdlib: ImportMap = {"typing": {"List", "Optional", "Sequence", "Tuple"}}
        stdlib = merge_import_dicts(stdlib, target_type_imports(self._pk_type))

        lines: List[str] = _module_header(
            f"{handler} - CRUD handler for {model}.",
            f"Provides full CRUD operations for the {model} model.",
        )
        lines += _import_section(
            stdlib,
            {
                "pydantic": {"BaseModel", "ConfigDict"},
                "sqlalchemy": {"delete", "func", "select"},
                "sqlalchemy.orm": {"Session"},
            },
            {self._models_module: {model}},
        )
        lines += [
            "",
            "",
            f"class {create_req}(BaseModel):",
            f'{_INDENT}"""Request payload for creating a {model}."""',
            "",
            f"{_INDENT}# Add fields, e.g.",
            f"{_INDENT}# name: str",
            f"{_INDENT}# email: str",
            "",
            "",
            f"class {update_req}(BaseModel):",
            f'{_INDENT}"""Request payload for updating a {model}; every field optional."""',
            "",
            f"{_INDENT}# name: Optional[str] = None",
            f"{_INDENT}# email: Optional[str] = None",
            "",
            "",
            f"class {response}(BaseModel):",
            f'{_INDENT}"""Response payload for a {model}."""',
            "",
            f"{_INDENT}model_config = ConfigDict(from_attributes=True)",
            "",
            f"{_INDENT}{pk}: {pk_ann}",
            f"{_INDENT}# name: str",
            f"{_INDENT}# created_at: datetime",
            "",
            "",
            f"class {handler}:",
            f'{_INDENT}"""Handles {model} CRUD operations."""',
            "",
            f"{_INDENT}def __init__(self, session: Session) -> None:",
            f"{_DOUBLE_INDENT}self.session = session",
            "",
            f"{_INDENT}# -- Index ----------------------------------------------------------",
            "",
            f"{_INDENT}def index(self) -> List[{response}]:",
            f'{_DOUBLE_INDENT}"""List all {plural}.  GET /{plural}"""',
            f"{_DOUBLE_INDENT}records = self.session.scalars(select({model})).all()",
            f"{_DOUBLE_INDENT}return [{response}.model_validate(r) for r in records]",
            "",
            f"{_INDENT}def index_paginated(",
            f"{_DOUBLE_INDENT}self, page: int = 1, per_page: int = 10",
            f"{_INDENT}) -> Tuple[int, List[{response}]]:",
            f'{_DOUBLE_INDENT}"""List {plural} a page at a time.  GET /{plural}?page=1&per_page=10"""',
            f"{_DOUBLE_INDENT}total = self.session.scalar(select(func.count()).select_from({model})) or 0",
            f"{_DOUBLE_INDENT}stmt = (",
            f"{_TRIPLE_INDENT}select({model})",
            f"{_TRIPLE_INDENT}.order_by({model}.{pk})",
            f"{_TRIPLE_INDENT}.offset((max(page, 1) - 1) * per_page)",
            f"{_TRIPLE_INDENT}.limit(per_page)",
            f"{_DOUBLE_INDENT})",
            f"{_DOUBLE_INDENT}records = self.session.scalars(stmt).all()",
            f"{_DOUBLE_INDENT}return total, [{response}.model_validate(r) for r in records]",
            "",
            f"{_INDENT}# -- Show -----------------------------------------------------------",
            "",
            f"{_INDENT}def show(self, {pk}: {pk_ann}) -> Optional[{response}]:",
            f'{_DOUBLE_INDENT}"""GET /{plural}/{{{pk}}}"""',
            f"{_DOUBLE_INDENT}{var} = self.session.get({model}, {pk})",
            f"{_DOUBLE_INDENT}return {response}.model_validate({var}) if {var} is not None else None",
        ]
        if tokenize:
            lines += [
                "",
                f"{_INDENT}def show_by_token(self, token: str) -> Optional[{response}]:",
                f'{_DOUBLE_INDENT}"""GET /{plural}/token/{{token}}"""',
                f"{_DOUBLE_INDENT}{var} = {model}.from_token(self.session, token)",
                f"{_DOUBLE_INDENT}return {response}.model_validate({var}) if {var} is not None else None",
            ]
        lines += [
            "",
            f"{_INDENT}# -- Create ---------------------------------------------------------",
            "",
            f"{_INDENT}def create(self, request: {create_req}) -> {response}:",
            f'{_DOUBLE_INDENT}"""POST /{plural}"""',
            f"{_DOUBLE_INDENT}{var} = {model}(**request.model_dump())",
            f"{_DOUBLE_INDENT}self.session.add({var})",
            f"{_DOUBLE_INDENT}self.session.commit()",
            f"{_DOUBLE_INDENT}self.session.refresh({var})",
            f"{_DOUBLE_INDENT}return {response}.model_validate({var})",
            "",
            f"{_INDENT}# -- Update ---------------------------------------------------------",
            "",
            f"{_INDENT}def update(self, {pk}: {pk_ann}, request: {update_req}) -> Optional[{response}]:",
            f'{_DOUBLE_INDENT}"""PUT /{plural}/{{{pk}}}"""',
            f"{_DOUBLE_INDENT}{var} = self.session.get({model}, {pk})",
            f"{_DOUBLE_INDENT}if {var} is None:",
            f"{_TRIPLE_INDENT}return None",
            f"{_DOUBLE_INDENT}for key, value in request.model_dump(exclude_unset=True).items():",
            f"{_TRIPLE_INDENT}setattr({var}, key, value)",
            f"{_DOUBLE_INDENT}self.session.commit()",
            f"{_DOUBLE_INDENT}self.session.refresh({var})",
            f"{_DOUBLE_INDENT}return {response}.model_validate({var})",
            "",
            f"{_INDENT}# -- Delete ---------------------------------------------------------",
            "",
            f"{_INDENT}def destroy(self, {pk}: {pk_ann}) -> bool:",
            f'{_DOUBLE_INDENT}"""DELETE /{plural}/{{{pk}}}"""',
            f"{_DOUBLE_INDENT}{var} = self.session.get({model}, {pk})",
            f"{_DOUBLE_INDENT}if {var} is None:",
            f"{_TRIPLE_INDENT}return False",
            f"{_DOUBLE_INDENT}self.session.delete({var})",
            f"{_DOUBLE_INDENT}self.session.commit()",
            f"{_DOUBLE_INDENT}return True",
            "",
            f"{_INDENT}def destroy_many(self, ids: Sequence[{pk_ann}]) -> int:",
            f'{_DOUBLE_INDENT}"""DELETE /{plural}"""',
            f"{_DOUBLE_INDENT}result = self.session.execute(delete({model}).where({model}.{pk}.in_(ids)))",
            f"{_DOUBLE_INDENT}self.session.commit()",
            f"{_DOUBLE_INDENT}return result.rowcount",
            "",
            "",
        ]
        lines += _section_banner("Test scaffold")
        lines += [
            "",
            "",
            f"def test_{to_snake_case(handler)}_index() -> None:",
            f"{_INDENT}# Set up a test session, then:",
            f"{_INDENT}# assert isinstance({handler}(session).index(), list)",
            f"{_INDENT}pass",
            "",
            "",
            f"def test_{to_snake_case(handler)}_create() -> None:",
            f"{_INDENT}# request = {create_req}()",
            f"{_INDENT}# assert {handler}(session).create(request).{pk} is not None",
            f"{_INDENT}pass",
            "",
        ]
        return "\n".join(lines)

    def render_model_handler(self, handler: str, model: str) -> str:
        """Thin CRUD passthrough over a session."""
        var: str = safe_identifier(model)
        snake: str = to_snake_case(model)
        pk: str = self._pk
        pk_ann: str = self._pk_annotation

        stdlib: ImportMap = merge_import_dicts(
            {"typing": {"Any", "Dict", "List", "Optional"}},
            target_type_imports(self._pk_type),
        )

        lines: List[str] = _module_header(f"{handler} - Handler for {model}.")
        lines += _import_section(
            stdlib,
            {"sqlalchemy": {"select"}, "sqlalchemy.orm": {"Session"}},
            {self._models_module: {model}},
        )
        lines += [
            "",
            "",
            f"class {handler}:",
            f'{_INDENT}"""{model} handler."""',
            "",
            f"{_INDENT}def __init__(self, session: Session) -> None:",
            f"{_DOUBLE_INDENT}self.session = session",
            "",
            f"{_INDENT}def all(self) -> List[{model}]:",
            f"{_DOUBLE_INDENT}return list(self.session.scalars(select({model})).all())",
            "",
            f"{_INDENT}def find(self, {pk}: {pk_ann}) -> Optional[{model}]:",
            f"{_DOUBLE_INDENT}return self.session.get({model}, {pk})",
            "",
            f"{_INDENT}def create(self, {var}: {model}) -> {model}:",
            f"{_DOUBLE_INDENT}self.session.add({var})",
            f"{_DOUBLE_INDENT}self.session.commit()",
            f"{_DOUBLE_INDENT}self.session.refresh({var})",
            f"{_DOUBLE_INDENT}return {var}",
            "",
            f"{_INDENT}def update(self, {pk}: {pk_ann}, values: Dict[str, Any]) -> Optional[{model}]:",
            f"{_DOUBLE_INDENT}{var} = self.find({pk})",
            f"{_DOUBLE_INDENT}if {var} is None:",
            f"{_TRIPLE_INDENT}return None",
            f"{_DOUBLE_INDENT}for key, value in values.items():",
            f"{_TRIPLE_INDENT}setattr({var}, key, value)",
            f"{_DOUBLE_INDENT}self.session.commit()",
            f"{_DOUBLE_INDENT}return {var}",
            "",
            f"{_INDENT}def delete(self, {pk}: {pk_ann}) -> bool:",
            f'{_DOUBLE_INDENT}"""Delete the {snake}; False when it does not exist."""',
            f"{_DOUBLE_INDENT}{var} = self.find({pk})",
            f"{_DOUBLE_INDENT}if {var} is None:",
            f"{_TRIPLE_INDENT}return False",
            f"{_DOUBLE_INDENT}self.session.delete({var})",
            f"{_DOUBLE_INDENT}self.session.commit()",
            f"{_DOUBLE_INDENT}return True",
            "",
        ]
        return "\n".join(lines)

    @staticmethod
    def render_basic_handler(handler: str) -> str:
        lines: List[str] = _module_header(f"{handler}", "Custom handler.")
        lines += [
            "",
            f"class {handler}:",
            f'{_INDENT}"""{handler}."""',
            "",
            f"{_INDENT}def handle(self) -> str:",
            f'{_DOUBLE_INDENT}"""Example handler method."""',
            f'{_DOUBLE_INDENT}return "Hello from {handler}!"',
            "",
            "",
        ]
        lines += _section_banner("Test scaffold")
        lines += [
            "",
            "",
            f"def test_{to_snake_case(handler)}_handle() -> None:",
            f'{_INDENT}assert {handler}().handle() == "Hello from {handler}!"',
            "",
        ]
        return "\n".join(lines)


__all__: List[str] = [
    "MigrationMode",
    "MigrationPlan",
    "column_definition",
    "primary_key_definition",
    "relation_foreign_keys",
    "build_create_table_plan",
    "build_alter_table_plan",
    "build_empty_plan",
    "TemplateRenderer",
]

logger.debug("ormgen.templates loaded.")
