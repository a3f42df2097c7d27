# File: ormgen/__init__.py
"""
ormgen - Schema-Driven Scaffolding for SQLAlchemy Projects
===========================================================

Turns compact field and relation lists (``name:string:unique``,
``posts:has_many:Post``) into SQLAlchemy 2.0 models, raw-SQL migrations,
seeders, factories and request handlers, and keeps each artifact
directory's ``__init__.py`` registry in sync.

Architecture overview::

    ┌──────────────┐     ┌────────────────┐     ┌──────────────────┐
    │  CLI / Entry │────▶│   Generators   │────▶│ TemplateRenderer │
    │   (cli.py)   │     │ (generator.py) │     │  (templates.py)  │
    └──────────────┘     └───────┬────────┘     └──────────────────┘
                                 │
          ┌──────────┬───────────┼───────────┬───────────┐
          ▼          ▼           ▼           ▼           ▼
     ┌────────┐ ┌─────────┐ ┌──────────┐ ┌────────┐ ┌───────────┐
     │  dsl   │ │ typemap │ │validators│ │ config │ │ exporters │
     └────────┘ └─────────┘ └──────────┘ └────────┘ └───────────┘

Usage::

    # As a library
    from ormgen import ModelGenerator, OrmGenConfig, build_descriptor
    descriptor, warnings = build_descriptor("User", fields="name:string")
    ModelGenerator(OrmGenConfig(), root=".").generate(descriptor)

    # From the command line
    ormgen make model User --fields "name:string,email:string:unique" --all
"""

from __future__ import annotations

__version__: str = "0.1.0"
__author__: str = "ormgen contributors"
__license__: str = "MIT"

from ormgen.config import OrmGenConfig, load_config, load_config_or_default
from ormgen.dsl import ParseResult, build_descriptor, parse_field, parse_fields, parse_relation, parse_relations
from ormgen.errors import (
    ConfigError,
    GenerationError,
    GenerationIOError,
    InvalidNameError,
    InvalidSchemaError,
    MissingModelError,
    MissingNameError,
    OrmGenError,
    SchemaSyntaxError,
)
from ormgen.exporters import ArtifactExporter, CommitResult
from ormgen.generator import (
    ControllerGenerator,
    FactoryGenerator,
    GenerationReport,
    MigrationGenerator,
    ModelGenerator,
    ScaffoldGenerator,
    SeederGenerator,
    init_project,
)
from ormgen.models import (
    ArtifactSpec,
    DatabaseDriver,
    FieldDefinition,
    LogicalType,
    RegistryEntry,
    RelationDefinition,
    RelationType,
    SchemaDescriptor,
)
from ormgen.scanner import ModelInfo, scan_models
from ormgen.templates import MigrationMode, MigrationPlan, TemplateRenderer
from ormgen.typemap import sql_type, target_type
from ormgen.utils import Timer, to_camel_case, to_pascal_case, to_plural, to_singular, to_snake_case
from ormgen.validators import ValidationResult, validate_descriptor

# ---------------------------------------------------------------------------
# Public API surface
# ---------------------------------------------------------------------------

__all__: list[str] = [
    # Version info
    "__version__",
    "__author__",
    "__license__",
    # Generators
    "ModelGenerator",
    "MigrationGenerator",
    "SeederGenerator",
    "FactoryGenerator",
    "ControllerGenerator",
    "ScaffoldGenerator",
    "GenerationReport",
    "init_project",
    # Models
    "ArtifactSpec",
    "DatabaseDriver",
    "FieldDefinition",
    "LogicalType",
    "RegistryEntry",
    "RelationDefinition",
    "RelationType",
    "SchemaDescriptor",
    # DSL
    "ParseResult",
    "build_descriptor",
    "parse_field",
    "parse_fields",
    "parse_relation",
    "parse_relations",
    # Config
    "OrmGenConfig",
    "load_config",
    "load_config_or_default",
    # Errors
    "OrmGenError",
    "ConfigError",
    "SchemaSyntaxError",
    "GenerationError",
    "GenerationIOError",
    "InvalidSchemaError",
    "MissingModelError",
    "MissingNameError",
    "InvalidNameError",
    # Rendering & export
    "TemplateRenderer",
    "MigrationMode",
    "MigrationPlan",
    "ModelInfo",
    "scan_models",
    "ArtifactExporter",
    "CommitResult",
    # Type mapping & naming
    "sql_type",
    "target_type",
    "Timer",
    "to_snake_case",
    "to_pascal_case",
    "to_camel_case",
    "to_plural",
    "to_singular",
    # Validation
    "validate_descriptor",
    "ValidationResult",
]
