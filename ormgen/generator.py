# File: ormgen/generator.py
"""
ormgen - Artifact Generators (Orchestrator)
============================================

Connects the phases of one generation request:

    Descriptor → Validation → Template Rendering → Write → Registry

One generator class per artifact kind.  Each has:

    ``render(...)``   returns an ``ArtifactSpec`` (path, text, registry
                      entry) and writes nothing to disk.
    ``generate(...)`` renders, then commits through ``ArtifactExporter``
                      and returns the written path.

``ScaffoldGenerator`` drives the composite ``make model --migration
--seeder --factory`` flow and produces a ``GenerationReport``.

Error handling strategy:
    - Precondition failures (missing name, missing model, invalid schema)
      raise before anything is written.
    - I/O failures raise ``GenerationIOError`` naming the path and step.
    - The scaffold flow records failures in its report instead of raising;
      steps after a failed model are skipped.
"""

from __future__ import annotations

import keyword
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Set, Union

from ormgen.config import ArtifactKind, OrmGenConfig
from ormgen.errors import (
    GenerationError,
    GenerationIOError,
    InvalidNameError,
    InvalidSchemaError,
    MissingModelError,
    MissingNameError,
)
from ormgen.exporters import INDEX_FILENAME, ArtifactExporter, CommitResult, ensure_index
from ormgen.models import (
    ArtifactSpec,
    FieldDefinition,
    RegistryEntry,
    RelationType,
    SchemaDescriptor,
)
from ormgen.scanner import ScannedRelation, scan_models
from ormgen.templates import (
    MigrationMode,
    MigrationPlan,
    TemplateRenderer,
    build_alter_table_plan,
    build_create_table_plan,
    build_empty_plan,
    relation_foreign_keys,
)
from ormgen.utils import Timer, path_to_module, to_pascal_case, to_snake_case
from ormgen.validators import ValidationResult, implicit_columns, validate_descriptor

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("ormgen.generator")

_INDEX_TITLES: Dict[str, str] = {
    "models": "Database models.",
    "migrations": "Database migrations.",
    "seeders": "Database seeders.",
    "factories": "Model factories.",
    "handlers": "Request handlers.",
}

_MIGRATION_TIMESTAMP_FORMAT: str = "%Y%m%d%H%M%S"


# ---------------------------------------------------------------------------
# Naming
# ---------------------------------------------------------------------------


def canonical_name(name: str, suffix: str, *accepted: str) -> str:
    """
    PascalCase *name* ending in *suffix*.

    A name already ending in *suffix* or one of *accepted* keeps its
    ending.

    Examples:
        >>> canonical_name("user", "Seeder")
        'UserSeeder'
        >>> canonical_name("UserController", "Handler", "Controller")
        'UserController'
    """
    pascal: str = to_pascal_case(name)
    if not pascal:
        return pascal
    for ending in (suffix, *accepted):
        if pascal.endswith(ending):
            return pascal
    return pascal + suffix


def strip_suffix(name: str, suffix: str) -> str:
    if name.endswith(suffix) and len(name) > len(suffix):
        return name[: -len(suffix)]
    return name


def require_identifier(kind: str, name: str) -> str:
    """
    Return *name* unchanged if it can be used as a Python module or class
    name.

    Raises:
        InvalidNameError: *name* is not an identifier or is a keyword.
    """
    if not name.isidentifier() or keyword.iskeyword(name):
        raise InvalidNameError(kind, name)
    return name


# ---------------------------------------------------------------------------
# Shared base
# ---------------------------------------------------------------------------


class _ArtifactGenerator:
    """Directory, index and commit plumbing shared by every generator."""

    kind: ArtifactKind
    label: str

    def __init__(
        self,
        config: OrmGenConfig,
        root: Union[str, Path],
        *,
        exporter: Optional[ArtifactExporter] = None,
    ) -> None:
        self.config: OrmGenConfig = config
        self.root: Path = Path(root)
        self.exporter: ArtifactExporter = exporter or ArtifactExporter()
        self.renderer: TemplateRenderer = TemplateRenderer(
            driver=config.driver,
            primary_key=config.model.primary_key,
            primary_key_type=config.model.primary_key_type,
            models_module=path_to_module(config.paths.models),
        )

    @property
    def directory(self) -> Path:
        return self.config.artifact_dir(self.kind, self.root)

    @property
    def index_path(self) -> Path:
        return self.directory / INDEX_FILENAME

    def index_header(self) -> str:
        return self.renderer.render_index_header(_INDEX_TITLES[self.kind])

    def ensure_index(self) -> bool:
        return ensure_index(self.index_path, self.index_header())

    def artifact(
        self, module_token: str, content: str, export_token: Optional[str]
    ) -> ArtifactSpec:
        """
        Raises:
            InvalidNameError: the module or export name is not an identifier.
        """
        require_identifier(self.label, module_token)
        if export_token is not None:
            require_identifier(self.label, export_token)
        return ArtifactSpec(
            file_path=self.directory / f"{module_token}.py",
            content=content,
            registry_entry=RegistryEntry(
                index_path=self.index_path,
                module_token=module_token,
                export_token=export_token,
            ),
        )

    @staticmethod
    def model_name(model: str) -> str:
        """PascalCase *model*; it is imported by name from the models package."""
        return require_identifier("model", to_pascal_case(model))

    def commit(self, artifact: ArtifactSpec) -> CommitResult:
        """Pre-create the index, then write and register *artifact*."""
        self.ensure_index()
        return self.exporter.commit(artifact)


# ===========================================================================
# Model
# ===========================================================================


class ModelGenerator(_ArtifactGenerator):
    """SQLAlchemy declarative model per entity."""

    kind: ArtifactKind = "models"
    label: str = "model"

    def canonical(self, descriptor: SchemaDescriptor) -> SchemaDescriptor:
        """Descriptor with its entity name in PascalCase."""
        if not descriptor.name:
            raise MissingNameError("model")
        pascal: str = to_pascal_case(descriptor.name)
        if pascal == descriptor.name:
            return descriptor
        return descriptor.model_copy(update={"name": pascal})

    def validate(self, descriptor: SchemaDescriptor) -> ValidationResult:
        return validate_descriptor(descriptor, self.config.model.primary_key)

    def known_columns(self, descriptor: SchemaDescriptor) -> List[str]:
        """Implicit columns plus BelongsTo foreign keys."""
        columns: List[str] = implicit_columns(descriptor, self.config.model.primary_key)
        for rel in descriptor.relations:
            if rel.relation_type == RelationType.BELONGS_TO:
                fk: str = rel.resolve_foreign_key(descriptor.name)
                if fk not in columns:
                    columns.append(fk)
        return columns

    def column_fields(self, descriptor: SchemaDescriptor) -> List[FieldDefinition]:
        """
        Every non-key column of the model as a ``FieldDefinition``.

        Declared fields come first with the name-set overrides folded in,
        then the shared attachments column, then BelongsTo foreign keys
        that are not declared fields.  Timestamps are left to the
        migration plan.
        """
        columns: List[FieldDefinition] = [
            fld.model_copy(update={
                "nullable": descriptor.is_nullable(fld),
                "unique": descriptor.is_unique(fld),
                "indexed": descriptor.is_indexed(fld),
            })
            for fld in descriptor.fields
        ]
        names: List[str] = [c.name for c in columns]

        if descriptor.has_attachments and "files" not in names:
            columns.append(FieldDefinition(name="files", logical_type="json", nullable=True))
            names.append("files")

        for rel in descriptor.relations:
            if rel.relation_type != RelationType.BELONGS_TO:
                continue
            fk: str = rel.resolve_foreign_key(descriptor.name)
            if fk in names:
                continue
            columns.append(FieldDefinition(
                name=fk,
                logical_type=self.config.model.primary_key_type,
                nullable=fk in descriptor.nullable,
                indexed=True,
            ))
            names.append(fk)
        return columns

    def relation_overlaps(self, descriptor: SchemaDescriptor) -> Dict[str, List[str]]:
        """
        For each relation of *descriptor*, the other relationships that
        write the same foreign-key column.

        Candidates are the descriptor's own relations and those of the
        models already in the models directory, so the second side of a
        BelongsTo / HasMany pair names the first.
        """
        keys: Dict[str, str] = {
            rel.name: relation_foreign_keys(rel, descriptor.name)
            for rel in descriptor.relations
        }
        if not keys:
            return {}

        existing: List[ScannedRelation] = []
        if self.directory.is_dir():
            for info in scan_models(self.directory):
                if info.name != descriptor.name:
                    existing.extend(info.relations)

        overlaps: Dict[str, List[str]] = {}
        for name, key in keys.items():
            names: Set[str] = {other for other, k in keys.items() if k == key and other != name}
            names.update(rel.name for rel in existing if rel.foreign_keys == key)
            if names:
                overlaps[name] = sorted(names)
        return overlaps

    def render(self, descriptor: SchemaDescriptor, *, validate: bool = True) -> ArtifactSpec:
        """
        Reads existing models to resolve relationship overlaps; writes
        nothing.

        Raises:
            MissingNameError: the descriptor has no entity name.
            InvalidSchemaError: validation reported errors.
        """
        descriptor = self.canonical(descriptor)

        if validate:
            result: ValidationResult = self.validate(descriptor)
            for warning in result.warnings:
                logger.warning("%s", warning)
            if result.has_errors:
                raise InvalidSchemaError(
                    descriptor.name, [str(e) for e in result.errors]
                )

        content: str = self.renderer.render_model(
            descriptor,
            known_columns=self.known_columns(descriptor),
            overlaps=self.relation_overlaps(descriptor),
        )
        return self.artifact(to_snake_case(descriptor.name), content, descriptor.name)

    def base_artifact(self) -> ArtifactSpec:
        return self.artifact("base", self.renderer.render_base(), "Base")

    def ensure_base(self) -> Optional[CommitResult]:
        """Write ``base.py`` if it is missing; make sure it is registered."""
        artifact: ArtifactSpec = self.base_artifact()
        if artifact.file_path.exists():
            self.ensure_index()
            self.exporter.register_entry(artifact.registry_entry)
            return None
        return self.commit(artifact)

    def generate(self, descriptor: SchemaDescriptor) -> Path:
        artifact: ArtifactSpec = self.render(descriptor)
        self.ensure_base()
        return self.commit(artifact).artifact_path


# ===========================================================================
# Migration
# ===========================================================================


class MigrationGenerator(_ArtifactGenerator):
    """Raw-SQL migration modules."""

    kind: ArtifactKind = "migrations"
    label: str = "migration"

    def index_header(self) -> str:
        return self.renderer.render_index_header(
            _INDEX_TITLES[self.kind], migration_table=self.config.migration.table
        )

    def module_name(self, name: str, timestamp: Optional[datetime] = None) -> str:
        """
        ``m<YYYYmmddHHMMSS>_<snake>`` with migration timestamps on,
        otherwise ``<snake>``.
        """
        snake: str = to_snake_case(name)
        if not self.config.migration.timestamps:
            return snake
        stamp: str = (timestamp or datetime.now()).strftime(_MIGRATION_TIMESTAMP_FORMAT)
        return f"m{stamp}_{snake}"

    def build_plan(
        self,
        mode: MigrationMode,
        *,
        table: Optional[str] = None,
        fields: Sequence[FieldDefinition] = (),
        timestamps: bool = True,
        soft_deletes: bool = False,
    ) -> MigrationPlan:
        """
        Raises:
            MissingNameError: create / alter mode without a table.
        """
        if mode == MigrationMode.EMPTY:
            return build_empty_plan()
        if not table:
            raise MissingNameError("table")
        if mode == MigrationMode.ALTER_TABLE:
            return build_alter_table_plan(table, fields, self.config.driver)
        return build_create_table_plan(
            table,
            fields,
            self.config.driver,
            primary_key=self.config.model.primary_key,
            primary_key_logical_type=self.config.model.primary_key_type,
            timestamps=timestamps,
            soft_deletes=soft_deletes,
        )

    def render(
        self,
        name: str,
        *,
        mode: MigrationMode = MigrationMode.EMPTY,
        table: Optional[str] = None,
        fields: Sequence[FieldDefinition] = (),
        timestamps: bool = True,
        soft_deletes: bool = False,
        timestamp: Optional[datetime] = None,
    ) -> ArtifactSpec:
        if not name or not to_snake_case(name):
            raise MissingNameError("migration")

        plan: MigrationPlan = self.build_plan(
            mode,
            table=table,
            fields=fields,
            timestamps=timestamps,
            soft_deletes=soft_deletes,
        )
        module: str = self.module_name(name, timestamp)
        class_name: str = to_pascal_case(name)
        content: str = self.renderer.render_migration(class_name, module, plan)
        return self.artifact(module, content, class_name)

    def generate(self, name: str, **options) -> Path:
        return self.commit(self.render(name, **options)).artifact_path


# ===========================================================================
# Seeder
# ===========================================================================


class SeederGenerator(_ArtifactGenerator):
    """Model seeders and basic seeders."""

    kind: ArtifactKind = "seeders"
    label: str = "seeder"

    def render(
        self,
        name: str,
        *,
        model: Optional[str] = None,
        count: Optional[int] = None,
    ) -> ArtifactSpec:
        seeder: str = canonical_name(name, "Seeder")
        if not seeder:
            raise MissingNameError("seeder")

        if model:
            content: str = self.renderer.render_model_seeder(
                seeder,
                self.model_name(model),
                count if count is not None else self.config.seeder.default_count,
            )
        else:
            content = self.renderer.render_basic_seeder(seeder)
        return self.artifact(to_snake_case(seeder), content, seeder)

    def generate(
        self, name: str, *, model: Optional[str] = None, count: Optional[int] = None
    ) -> Path:
        return self.commit(self.render(name, model=model, count=count)).artifact_path


# ===========================================================================
# Factory
# ===========================================================================


class FactoryGenerator(_ArtifactGenerator):
    """Builder scaffolds producing model instances."""

    kind: ArtifactKind = "factories"
    label: str = "factory"

    def render(self, name: str, *, model: Optional[str] = None) -> ArtifactSpec:
        factory: str = canonical_name(name, "Factory")
        if not factory:
            raise MissingNameError("factory")

        target: str = (
            self.model_name(model)
            if model
            else require_identifier("model", strip_suffix(factory, "Factory"))
        )
        content: str = self.renderer.render_factory(factory, target)
        return self.artifact(to_snake_case(factory), content, factory)

    def generate(self, name: str, *, model: Optional[str] = None) -> Path:
        return self.commit(self.render(name, model=model)).artifact_path


# ===========================================================================
# Controller
# ===========================================================================


class ControllerGenerator(_ArtifactGenerator):
    """
    Request handlers in three modes:

    * resource: ``resource=True`` with a model; full CRUD plus payloads.
    * model-backed: a model without ``resource``.
    * basic: neither.
    """

    kind: ArtifactKind = "handlers"
    label: str = "controller"

    def render(
        self,
        name: str,
        *,
        model: Optional[str] = None,
        resource: bool = False,
        tokenize: Optional[bool] = None,
    ) -> ArtifactSpec:
        """
        Raises:
            MissingNameError: empty handler name.
            MissingModelError: ``resource=True`` without a model.
        """
        handler: str = canonical_name(name, "Handler", "Controller")
        if not handler:
            raise MissingNameError("controller")

        if resource:
            if not model:
                raise MissingModelError(handler)
            content: str = self.renderer.render_resource_handler(
                handler,
                self.model_name(model),
                tokenize=self.config.model.tokenize if tokenize is None else tokenize,
            )
        elif model:
            content = self.renderer.render_model_handler(handler, self.model_name(model))
        else:
            content = self.renderer.render_basic_handler(handler)
        return self.artifact(to_snake_case(handler), content, handler)

    def generate(
        self,
        name: str,
        *,
        model: Optional[str] = None,
        resource: bool = False,
        tokenize: Optional[bool] = None,
    ) -> Path:
        artifact: ArtifactSpec = self.render(
            name, model=model, resource=resource, tokenize=tokenize
        )
        return self.commit(artifact).artifact_path


# ===========================================================================
# Scaffold: model + optional migration / seeder / factory
# ===========================================================================


@dataclass(frozen=False, slots=True)
class GenerationStepMetric:
    """Timing and outcome for a single scaffold step."""

    step_name: str = ""
    success: bool = True
    elapsed_seconds: float = 0.0
    detail: str = ""


@dataclass(frozen=False, slots=True)
class GenerationReport:
    """Outcome of ``ScaffoldGenerator.generate()``."""

    success: bool = False
    entity: str = ""
    root: str = ""

    artifacts: List[Path] = field(default_factory=list)
    total_bytes: int = 0
    total_lines: int = 0
    total_elapsed_seconds: float = 0.0

    step_metrics: List[GenerationStepMetric] = field(default_factory=list)
    parse_warnings: List[str] = field(default_factory=list)
    validation_errors: List[str] = field(default_factory=list)
    validation_warnings: List[str] = field(default_factory=list)
    generation_errors: List[str] = field(default_factory=list)
    io_errors: List[str] = field(default_factory=list)
    skipped_steps: List[str] = field(default_factory=list)

    @property
    def total_files(self) -> int:
        return len(self.artifacts)

    def record(self, result: CommitResult) -> None:
        self.artifacts.append(result.artifact_path)
        self.total_bytes += result.size_bytes
        self.total_lines += result.line_count

    def summary(self) -> str:
        """Return a human-readable summary string."""
        lines: List[str] = []
        status: str = "SUCCESS" if self.success else "FAILED"
        lines.append("=" * 60)
        lines.append("  ormgen - Scaffold Report")
        lines.append("=" * 60)
        lines.append(f"  Status:          {status}")
        lines.append(f"  Entity:          {self.entity}")
        lines.append(f"  Root:            {self.root}")
        lines.append(f"  Files generated: {self.total_files}")
        lines.append(f"  Total lines:     {self.total_lines:,}")
        lines.append(f"  Total bytes:     {self.total_bytes:,}")
        lines.append(f"  Total time:      {self.total_elapsed_seconds:.3f}s")

        if self.step_metrics:
            lines.append("-" * 60)
            lines.append("  Steps:")
            for step in self.step_metrics:
                icon: str = "ok" if step.success else "!!"
                lines.append(
                    f"    {icon} {step.step_name:<12s} "
                    f"{step.elapsed_seconds:>7.3f}s  {step.detail}"
                )

        for title, items in (
            ("Parse Warnings", self.parse_warnings),
            ("Validation Errors", self.validation_errors),
            ("Validation Warnings", self.validation_warnings),
            ("Generation Errors", self.generation_errors),
            ("I/O Errors", self.io_errors),
            ("Skipped Steps", self.skipped_steps),
        ):
            if items:
                lines.append("-" * 60)
                lines.append(f"  {title} ({len(items)}):")
                lines.extend(f"    - {item}" for item in items)

        lines.append("=" * 60)
        return "\n".join(lines)


class ScaffoldGenerator:
    """
    Model plus any of migration, seeder and factory in one request.

    Usage::

        report = ScaffoldGenerator(config, root).generate(
            descriptor, migration=True, seeder=True, factory=True
        )
        print(report.summary())
    """

    def __init__(
        self,
        config: OrmGenConfig,
        root: Union[str, Path],
        *,
        exporter: Optional[ArtifactExporter] = None,
    ) -> None:
        shared: ArtifactExporter = exporter or ArtifactExporter()
        self.root: Path = Path(root)
        self.models: ModelGenerator = ModelGenerator(config, root, exporter=shared)
        self.migrations: MigrationGenerator = MigrationGenerator(config, root, exporter=shared)
        self.seeders: SeederGenerator = SeederGenerator(config, root, exporter=shared)
        self.factories: FactoryGenerator = FactoryGenerator(config, root, exporter=shared)

    def generate(
        self,
        descriptor: SchemaDescriptor,
        *,
        migration: bool = False,
        seeder: bool = False,
        factory: bool = False,
        timestamp: Optional[datetime] = None,
        parse_warnings: Sequence[str] = (),
    ) -> GenerationReport:
        report: GenerationReport = GenerationReport(root=str(self.root))
        report.parse_warnings.extend(parse_warnings)

        with Timer("scaffold") as total:
            ok: bool = self._step_model(descriptor, report)
            entity: str = report.entity
            canonical: Optional[SchemaDescriptor] = (
                self.models.canonical(descriptor) if ok else None
            )

            follow_ups = (
                ("migration", migration, lambda: self.migrations.render(
                    f"create_{canonical.table_name}_table",
                    mode=MigrationMode.CREATE_TABLE,
                    table=canonical.table_name,
                    fields=self.models.column_fields(canonical),
                    timestamps=canonical.timestamps,
                    soft_deletes=canonical.soft_deletes,
                    timestamp=timestamp,
                ), self.migrations),
                ("seeder", seeder, lambda: self.seeders.render(entity, model=entity), self.seeders),
                ("factory", factory, lambda: self.factories.render(entity, model=entity), self.factories),
            )
            for step_name, wanted, render, generator in follow_ups:
                if not wanted:
                    continue
                if not ok:
                    report.skipped_steps.append(step_name)
                    continue
                self._run_step(step_name, render, generator, report)

        report.total_elapsed_seconds = total.elapsed
        report.success = not (
            report.validation_errors or report.generation_errors or report.io_errors
        )
        if report.success:
            logger.info(
                "Scaffold for '%s' complete: %d file(s) in %.3fs.",
                report.entity,
                report.total_files,
                report.total_elapsed_seconds,
            )
        else:
            logger.error("Scaffold for '%s' failed.", report.entity or "<unnamed>")
        return report

    # -----------------------------------------------------------------
    # Steps
    # -----------------------------------------------------------------

    def _step_model(self, descriptor: SchemaDescriptor, report: GenerationReport) -> bool:
        with Timer("model") as t:
            try:
                canonical: SchemaDescriptor = self.models.canonical(descriptor)
            except MissingNameError as exc:
                report.generation_errors.append(str(exc))
                report.step_metrics.append(GenerationStepMetric(
                    step_name="model", success=False, elapsed_seconds=t.elapsed, detail=str(exc),
                ))
                return False
            report.entity = canonical.name

            validation: ValidationResult = self.models.validate(canonical)
            report.validation_warnings.extend(str(w) for w in validation.warnings)
            if validation.has_errors:
                report.validation_errors.extend(str(e) for e in validation.errors)
                detail: str = f"{validation.error_count} validation error(s)"
                success: bool = False
            else:
                success = self._commit_model(canonical, report)
                detail = "" if not success else canonical.table_name

        report.step_metrics.append(GenerationStepMetric(
            step_name="model", success=success, elapsed_seconds=t.elapsed, detail=detail,
        ))
        return success

    def _commit_model(self, canonical: SchemaDescriptor, report: GenerationReport) -> bool:
        try:
            artifact: ArtifactSpec = self.models.render(canonical, validate=False)
            base: Optional[CommitResult] = self.models.ensure_base()
            if base is not None:
                report.record(base)
            report.record(self.models.commit(artifact))
        except GenerationIOError as exc:
            report.io_errors.append(str(exc))
            return False
        return True

    def _run_step(
        self,
        step_name: str,
        render: Callable[[], ArtifactSpec],
        generator: _ArtifactGenerator,
        report: GenerationReport,
    ) -> None:
        detail: str = ""
        with Timer(step_name) as t:
            try:
                result: CommitResult = generator.commit(render())
                report.record(result)
                detail = result.artifact_path.name
                success: bool = True
            except GenerationIOError as exc:
                report.io_errors.append(str(exc))
                detail = str(exc)
                success = False
            except GenerationError as exc:
                report.generation_errors.append(str(exc))
                detail = str(exc)
                success = False
        report.step_metrics.append(GenerationStepMetric(
            step_name=step_name, success=success, elapsed_seconds=t.elapsed, detail=detail,
        ))


# ===========================================================================
# Project initialisation
# ===========================================================================


def init_project(config: OrmGenConfig, root: Union[str, Path]) -> List[Path]:
    """
    Create every artifact directory with its index module, the shared
    model base and the default seeder.  Existing files are left alone.

    Returns the paths that were created.
    """
    root = Path(root)
    exporter: ArtifactExporter = ArtifactExporter()
    created: List[Path] = []

    models: ModelGenerator = ModelGenerator(config, root, exporter=exporter)
    seeders: SeederGenerator = SeederGenerator(config, root, exporter=exporter)
    generators: List[_ArtifactGenerator] = [
        models,
        MigrationGenerator(config, root, exporter=exporter),
        seeders,
        FactoryGenerator(config, root, exporter=exporter),
        ControllerGenerator(config, root, exporter=exporter),
    ]
    for generator in generators:
        if generator.ensure_index():
            created.append(generator.index_path)

    base: Optional[CommitResult] = models.ensure_base()
    if base is not None:
        created.append(base.artifact_path)

    default_seeder: ArtifactSpec = seeders.render(config.seeder.default_seeder)
    if not default_seeder.file_path.exists():
        created.append(seeders.commit(default_seeder).artifact_path)

    logger.info("Initialised project at %s (%d file(s) created).", root, len(created))
    return created


__all__: List[str] = [
    "canonical_name",
    "strip_suffix",
    "require_identifier",
    "ModelGenerator",
    "MigrationGenerator",
    "SeederGenerator",
    "FactoryGenerator",
    "ControllerGenerator",
    "GenerationStepMetric",
    "GenerationReport",
    "ScaffoldGenerator",
    "init_project",
]

logger.debug("ormgen.generator loaded.")
