# File: ormgen/config.py
"""
ormgen - Project Configuration
===============================
Pydantic V2 models for ``ormgen.yaml`` plus the loaders the CLI uses.

Every directory in ``paths`` is relative to an explicit project root that
callers pass in; nothing here reads or changes the process working
directory.

Example ``ormgen.yaml``::

    project:
      name: shop
    database:
      driver: sqlite
    paths:
      models: app/models
    model:
      soft_deletes: true
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Literal, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ormgen.errors import ConfigError
from ormgen.models import DatabaseDriver

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("ormgen.config")

CONFIG_FILENAME: str = "ormgen.yaml"
ENVIRONMENT_VARIABLE: str = "ORMGEN_ENV"

ArtifactKind = Literal["models", "migrations", "seeders", "factories", "handlers"]

_SECTION_CONFIG: ConfigDict = ConfigDict(
    extra="forbid",
    validate_assignment=True,
    str_strip_whitespace=True,
)


def _default_environment() -> str:
    return os.environ.get(ENVIRONMENT_VARIABLE, "development")


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


class ProjectConfig(BaseModel):
    model_config = _SECTION_CONFIG

    name: str = Field(default="ormgen-project", min_length=1)
    environment: str = Field(
        default_factory=_default_environment,
        description="development, production or test.",
    )


class DatabaseConfig(BaseModel):
    model_config = _SECTION_CONFIG

    driver: DatabaseDriver = Field(
        default=DatabaseDriver.POSTGRES,
        description="SQL dialect used for migration column types.",
    )

    @field_validator("driver", mode="before")
    @classmethod
    def _parse_driver(cls, v: Any) -> Any:
        if isinstance(v, str):
            return DatabaseDriver.parse(v)
        return v


class PathsConfig(BaseModel):
    """Artifact directories, relative to the project root."""

    model_config = _SECTION_CONFIG

    models: str = "app/models"
    migrations: str = "app/migrations"
    seeders: str = "app/seeders"
    factories: str = "app/factories"
    handlers: str = "app/handlers"

    @field_validator("models", "migrations", "seeders", "factories", "handlers")
    @classmethod
    def _relative_only(cls, v: str) -> str:
        if not v:
            raise ValueError("Path must not be empty.")
        if Path(v).is_absolute():
            raise ValueError(f"Path '{v}' must be relative to the project root.")
        return v


class MigrationConfig(BaseModel):
    model_config = _SECTION_CONFIG

    table: str = Field(default="_ormgen_migrations", min_length=1)
    timestamps: bool = Field(
        default=True, description="Prefix migration modules with a timestamp."
    )


class SeederConfig(BaseModel):
    model_config = _SECTION_CONFIG

    default_seeder: str = Field(default="DatabaseSeeder", min_length=1)
    default_count: int = Field(default=10, ge=1, le=100_000)


class ModelConfig(BaseModel):
    """Defaults applied to ``make model`` when no flag overrides them."""

    model_config = _SECTION_CONFIG

    timestamps: bool = True
    soft_deletes: bool = False
    tokenize: bool = False
    primary_key: str = Field(default="id", min_length=1)
    primary_key_type: str = Field(default="i64", min_length=1)

    @field_validator("primary_key")
    @classmethod
    def _identifier(cls, v: str) -> str:
        if not v.isidentifier():
            raise ValueError(f"Primary key '{v}' is not a valid identifier.")
        return v


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


class OrmGenConfig(BaseModel):
    """Complete ``ormgen.yaml`` contents."""

    model_config = _SECTION_CONFIG

    project: ProjectConfig = Field(default_factory=ProjectConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    migration: MigrationConfig = Field(default_factory=MigrationConfig)
    seeder: SeederConfig = Field(default_factory=SeederConfig)
    model: ModelConfig = Field(default_factory=ModelConfig)

    @property
    def driver(self) -> DatabaseDriver:
        return self.database.driver

    @property
    def is_production(self) -> bool:
        return self.project.environment == "production"

    def artifact_dir(self, kind: ArtifactKind, root: Union[str, Path]) -> Path:
        """Absolute-or-root-relative directory for one artifact kind."""
        return Path(root) / getattr(self.paths, kind)

    def as_yaml(self) -> str:
        return yaml.safe_dump(
            self.model_dump(mode="json"), sort_keys=False, default_flow_style=False
        )


# ---------------------------------------------------------------------------
# Loaders
# ---------------------------------------------------------------------------


def config_path(root: Union[str, Path]) -> Path:
    return Path(root) / CONFIG_FILENAME


def load_config(path: Union[str, Path]) -> OrmGenConfig:
    """
    Load and validate a YAML configuration file.

    Raises:
        ConfigError: the file is missing, is not valid YAML, is not a
            mapping, or fails validation.
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigError(
            path, "Configuration file not found. Run 'ormgen init' to create one."
        )

    try:
        text: str = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(path, f"Failed to read config file: {exc}") from exc

    try:
        data: Any = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(path, f"Invalid YAML: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(
            path, f"Expected a YAML mapping at top level, got {type(data).__name__}."
        )

    try:
        config: OrmGenConfig = OrmGenConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(path, f"Config validation failed: {exc}") from exc

    logger.info(
        "Loaded config %s (project=%s, driver=%s).",
        path,
        config.project.name,
        config.driver.value,
    )
    return config


def load_config_or_default(path: Union[str, Path]) -> OrmGenConfig:
    """
    Load *path* if it exists, otherwise return the defaults.

    An existing but invalid file still raises ``ConfigError``.
    """
    path = Path(path)
    if not path.exists():
        logger.info("No config at %s, using defaults.", path)
        return OrmGenConfig()
    return load_config(path)


# ---------------------------------------------------------------------------
# Default file content (``ormgen init``)
# ---------------------------------------------------------------------------


def default_config_content(
    driver: Union[str, DatabaseDriver] = DatabaseDriver.POSTGRES,
    project_name: str = "my-ormgen-project",
) -> str:
    """Commented ``ormgen.yaml`` for a new project."""
    drv: DatabaseDriver = (
        driver if isinstance(driver, DatabaseDriver) else DatabaseDriver.parse(driver)
    )
    defaults: OrmGenConfig = OrmGenConfig()

    lines: List[str] = [
        "# ormgen configuration file",
        "# Paths are relative to the project root (ormgen --root, default: .).",
        "",
        "project:",
        f"  name: {project_name}",
        f"  # environment: development  # unset: ${ENVIRONMENT_VARIABLE} or development",
        "",
        "database:",
        f"  driver: {drv.value}  # postgres, mysql, sqlite, other",
        "",
        "paths:",
    ]
    paths: Dict[str, Any] = defaults.paths.model_dump()
    for key, value in paths.items():
        lines.append(f"  {key}: {value}")

    lines += [
        "",
        "migration:",
        f"  table: {defaults.migration.table}",
        "  timestamps: true",
        "",
        "seeder:",
        f"  default_seeder: {defaults.seeder.default_seeder}",
        f"  default_count: {defaults.seeder.default_count}",
        "",
        "model:",
        "  timestamps: true",
        "  soft_deletes: false",
        "  tokenize: false",
        f"  primary_key: {defaults.model.primary_key}",
        f"  primary_key_type: {defaults.model.primary_key_type}",
        "",
    ]
    return "\n".join(lines)


__all__: List[str] = [
    "CONFIG_FILENAME",
    "ENVIRONMENT_VARIABLE",
    "ProjectConfig",
    "DatabaseConfig",
    "PathsConfig",
    "MigrationConfig",
    "SeederConfig",
    "ModelConfig",
    "OrmGenConfig",
    "config_path",
    "load_config",
    "load_config_or_default",
    "default_config_content",
]

logger.debug("ormgen.config loaded.")
