# File: ormgen/typemap.py
"""
ormgen - Type Mapping Table
============================
Pure lookups from a DSL logical type to:

    * a Python annotation for generated attributes   (``target_type``)
    * a SQL column type per database driver          (``sql_type``)
    * a SQLAlchemy column type expression            (``orm_column_type``)

plus the per-driver dialect helpers used by migrations (primary-key type,
auto-increment suffix, timestamp type, "now" function).

Every driver table is keyed by every ``DatabaseDriver`` member.  Coverage
is checked when this module is imported, so adding a driver to the enum
without mapping it here raises immediately instead of quietly falling back
to a generic default.

Unrecognised logical types are extension types: ``target_type`` returns the
token verbatim and ``sql_type`` returns it upper-cased.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Set, Tuple, Union

from ormgen.models import DatabaseDriver, LogicalType, resolve_logical_type

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("ormgen.typemap")

TypeToken = Union[str, LogicalType]
ImportMap = Dict[str, Set[str]]

_D = DatabaseDriver
_L = LogicalType


def _uniform(value: str) -> Dict[DatabaseDriver, str]:
    """Same literal for every driver."""
    return {driver: value for driver in DatabaseDriver}


def _per_driver(
    default: str, **overrides: str
) -> Dict[DatabaseDriver, str]:
    """``default`` for every driver, with named drivers overridden."""
    table: Dict[DatabaseDriver, str] = _uniform(default)
    for key, value in overrides.items():
        table[DatabaseDriver(key)] = value
    return table


# ---------------------------------------------------------------------------
# Python target types
# ---------------------------------------------------------------------------

# logical type → (annotation, module it is imported from or None)
_TARGET_TYPES: Dict[LogicalType, Tuple[str, Optional[str]]] = {
    _L.STRING: ("str", None),
    _L.TEXT: ("str", None),
    _L.INT8: ("int", None),
    _L.INT16: ("int", None),
    _L.INT32: ("int", None),
    _L.INT64: ("int", None),
    _L.FLOAT32: ("float", None),
    _L.FLOAT64: ("float", None),
    _L.BOOL: ("bool", None),
    _L.DATETIME: ("datetime", "datetime"),
    _L.DATE: ("date", "datetime"),
    _L.TIME: ("time", "datetime"),
    _L.UUID: ("UUID", "uuid"),
    _L.JSON: ("Dict[str, Any]", "typing"),
    _L.JSONB: ("Dict[str, Any]", "typing"),
    _L.DECIMAL: ("Decimal", "decimal"),
    _L.BYTES: ("bytes", None),
}


# ---------------------------------------------------------------------------
# SQL column types (driver-specific)
# ---------------------------------------------------------------------------

_SQL_TYPES: Dict[LogicalType, Dict[DatabaseDriver, str]] = {
    _L.STRING: _uniform("VARCHAR(255)"),
    _L.TEXT: _uniform("TEXT"),
    _L.INT8: _per_driver("SMALLINT", mysql="TINYINT"),
    _L.INT16: _uniform("SMALLINT"),
    _L.INT32: _uniform("INTEGER"),
    _L.INT64: _uniform("BIGINT"),
    _L.FLOAT32: _uniform("REAL"),
    _L.FLOAT64: _uniform("DOUBLE PRECISION"),
    _L.BOOL: _per_driver("BOOLEAN", mysql="TINYINT(1)"),
    _L.DATETIME: _per_driver("DATETIME", postgres="TIMESTAMPTZ", sqlite="TEXT"),
    _L.DATE: _uniform("DATE"),
    _L.TIME: _uniform("TIME"),
    _L.UUID: _per_driver("VARCHAR(36)", postgres="UUID"),
    _L.JSON: _per_driver("TEXT", postgres="JSON"),
    _L.JSONB: _per_driver("TEXT", postgres="JSONB"),
    _L.DECIMAL: _uniform("DECIMAL(19, 4)"),
    _L.BYTES: _per_driver("BLOB", postgres="BYTEA"),
}


# ---------------------------------------------------------------------------
# Migration dialect helpers
# ---------------------------------------------------------------------------

_PRIMARY_KEY_TYPES: Dict[DatabaseDriver, str] = {
    _D.POSTGRES: "BIGSERIAL",
    _D.MYSQL: "BIGINT AUTO_INCREMENT",
    _D.SQLITE: "INTEGER",
    _D.OTHER: "BIGINT",
}

_AUTO_INCREMENT_SUFFIXES: Dict[DatabaseDriver, str] = {
    _D.POSTGRES: "",
    _D.MYSQL: "",
    _D.SQLITE: " AUTOINCREMENT",
    _D.OTHER: "",
}

_TIMESTAMP_TYPES: Dict[DatabaseDriver, str] = {
    _D.POSTGRES: "TIMESTAMPTZ",
    _D.MYSQL: "DATETIME",
    _D.SQLITE: "TEXT",
    _D.OTHER: "TIMESTAMP",
}

_NOW_FUNCTIONS: Dict[DatabaseDriver, str] = {
    _D.POSTGRES: "NOW()",
    _D.MYSQL: "NOW()",
    _D.SQLITE: "CURRENT_TIMESTAMP",
    _D.OTHER: "NOW()",
}


# ---------------------------------------------------------------------------
# SQLAlchemy column types
# ---------------------------------------------------------------------------

# logical type → (expression, sqlalchemy name to import)
_ORM_TYPES: Dict[LogicalType, Tuple[str, str]] = {
    _L.STRING: ("String(255)", "String"),
    _L.TEXT: ("Text", "Text"),
    _L.INT8: ("SmallInteger", "SmallInteger"),
    _L.INT16: ("SmallInteger", "SmallInteger"),
    _L.INT32: ("Integer", "Integer"),
    _L.INT64: ("BigInteger", "BigInteger"),
    _L.FLOAT32: ("Float", "Float"),
    _L.FLOAT64: ("Double", "Double"),
    _L.BOOL: ("Boolean", "Boolean"),
    _L.DATETIME: ("DateTime(timezone=True)", "DateTime"),
    _L.DATE: ("Date", "Date"),
    _L.TIME: ("Time", "Time"),
    _L.UUID: ("Uuid", "Uuid"),
    _L.JSON: ("JSON", "JSON"),
    _L.JSONB: ("JSON", "JSON"),
    _L.DECIMAL: ("Numeric(19, 4)", "Numeric"),
    _L.BYTES: ("LargeBinary", "LargeBinary"),
}

_POSTGRES_DIALECT_MODULE: str = "sqlalchemy.dialects.postgresql"


# ---------------------------------------------------------------------------
# Coverage check
# ---------------------------------------------------------------------------


def _check_coverage() -> None:
    """Fail at import time if any table misses a driver or logical type."""
    problems: List[str] = []

    for name, logical_table in (
        ("target types", _TARGET_TYPES),
        ("SQL types", _SQL_TYPES),
        ("ORM types", _ORM_TYPES),
    ):
        missing_types = [t.value for t in LogicalType if t not in logical_table]
        if missing_types:
            problems.append(f"{name}: no entry for {', '.join(missing_types)}")

    for logical, per_driver in _SQL_TYPES.items():
        missing = [d.value for d in DatabaseDriver if d not in per_driver]
        if missing:
            problems.append(
                f"SQL types: '{logical.value}' unmapped for {', '.join(missing)}"
            )

    for name, driver_table in (
        ("primary key types", _PRIMARY_KEY_TYPES),
        ("auto-increment suffixes", _AUTO_INCREMENT_SUFFIXES),
        ("timestamp types", _TIMESTAMP_TYPES),
        ("now functions", _NOW_FUNCTIONS),
    ):
        missing = [d.value for d in DatabaseDriver if d not in driver_table]
        if missing:
            problems.append(f"{name}: no entry for {', '.join(missing)}")

    if problems:
        raise RuntimeError(
            "Type mapping table is incomplete: " + "; ".join(problems)
        )


_check_coverage()


# ---------------------------------------------------------------------------
# Public lookups
# ---------------------------------------------------------------------------


def _resolve(logical_type: TypeToken) -> Optional[LogicalType]:
    if isinstance(logical_type, LogicalType):
        return logical_type
    return resolve_logical_type(logical_type)


def _coerce_driver(driver: Union[str, DatabaseDriver]) -> DatabaseDriver:
    if isinstance(driver, DatabaseDriver):
        return driver
    return DatabaseDriver.parse(driver)


def wrap_optional(annotation: str) -> str:
    """Wrap *annotation* in ``Optional[...]`` unless it already is one."""
    if annotation.startswith("Optional[") and annotation.endswith("]"):
        return annotation
    return f"Optional[{annotation}]"


def target_type(logical_type: TypeToken, nullable: bool = False) -> str:
    """
    Python annotation for a logical type.

    Examples:
        >>> target_type("i32", nullable=True)
        'Optional[int]'
        >>> target_type("Money")
        'Money'
    """
    resolved: Optional[LogicalType] = _resolve(logical_type)
    if resolved is None:
        annotation: str = str(logical_type).strip()
    else:
        annotation = _TARGET_TYPES[resolved][0]
    return wrap_optional(annotation) if nullable else annotation


def target_type_imports(logical_type: TypeToken, nullable: bool = False) -> ImportMap:
    """Imports needed by the annotation :func:`target_type` returns."""
    imports: ImportMap = {}
    resolved: Optional[LogicalType] = _resolve(logical_type)
    if resolved is not None:
        annotation, module = _TARGET_TYPES[resolved]
        if module == "typing":
            imports.setdefault("typing", set()).update({"Any", "Dict"})
        elif module is not None:
            imports.setdefault(module, set()).add(annotation)
    if nullable:
        imports.setdefault("typing", set()).add("Optional")
    return imports


def sql_type(logical_type: TypeToken, driver: Union[str, DatabaseDriver]) -> str:
    """
    SQL column type for *logical_type* on *driver*.

    Unknown logical types are returned upper-cased.

    Examples:
        >>> sql_type("datetime", DatabaseDriver.SQLITE)
        'TEXT'
        >>> sql_type("geometry", "postgres")
        'GEOMETRY'
    """
    drv: DatabaseDriver = _coerce_driver(driver)
    resolved: Optional[LogicalType] = _resolve(logical_type)
    if resolved is None:
        return str(logical_type).strip().upper()
    return _SQL_TYPES[resolved][drv]


def primary_key_type(driver: Union[str, DatabaseDriver]) -> str:
    return _PRIMARY_KEY_TYPES[_coerce_driver(driver)]


def auto_increment_suffix(driver: Union[str, DatabaseDriver]) -> str:
    return _AUTO_INCREMENT_SUFFIXES[_coerce_driver(driver)]


def timestamp_type(driver: Union[str, DatabaseDriver]) -> str:
    return _TIMESTAMP_TYPES[_coerce_driver(driver)]


def now_function(driver: Union[str, DatabaseDriver]) -> str:
    return _NOW_FUNCTIONS[_coerce_driver(driver)]


def orm_column_type(
    logical_type: TypeToken,
    driver: Union[str, DatabaseDriver] = DatabaseDriver.POSTGRES,
) -> Optional[Tuple[str, ImportMap]]:
    """
    SQLAlchemy type expression and the imports it needs.

    ``jsonb`` maps to the PostgreSQL ``JSONB`` type on postgres and to the
    generic ``JSON`` type elsewhere.  Returns ``None`` for extension types;
    the model generator then lets SQLAlchemy infer the column type from
    the annotation.
    """
    drv: DatabaseDriver = _coerce_driver(driver)
    resolved: Optional[LogicalType] = _resolve(logical_type)
    if resolved is None:
        return None
    if resolved == LogicalType.JSONB and drv == DatabaseDriver.POSTGRES:
        return "JSONB", {_POSTGRES_DIALECT_MODULE: {"JSONB"}}
    expression, name = _ORM_TYPES[resolved]
    return expression, {"sqlalchemy": {name}}


def sql_type_table() -> Mapping[LogicalType, Mapping[DatabaseDriver, str]]:
    """Read-only view of the full (type × driver) SQL table."""
    return {t: dict(per_driver) for t, per_driver in _SQL_TYPES.items()}


__all__: List[str] = [
    "wrap_optional",
    "target_type",
    "target_type_imports",
    "sql_type",
    "sql_type_table",
    "primary_key_type",
    "auto_increment_suffix",
    "timestamp_type",
    "now_function",
    "orm_column_type",
]

logger.debug("ormgen.typemap loaded - %d logical types × %d drivers.",
             len(_SQL_TYPES), len(DatabaseDriver))
