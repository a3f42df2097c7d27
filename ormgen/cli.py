# File: ormgen/cli.py
"""
ormgen - Command-Line Interface
================================

Thin ``argparse`` front end over the generators.

Usage examples::

    # New project: ormgen.yaml, artifact packages, base model, default seeder
    ormgen init --driver sqlite

    # Model plus create-table migration, seeder and factory
    ormgen make model Post \\
        --fields "title:string:unique,body:text,published_at:datetime:nullable" \\
        --relations "author:belongs_to:User,comments:has_many:Comment" \\
        --all

    # Alter-table migration
    ormgen make migration add_bio_to_users --table users --fields "bio:text:nullable"

    # CRUD handler
    ormgen make controller Post --model Post --resource

    # Show the resolved configuration
    ormgen -c ./ormgen.yaml config

    # List existing models with their table and features
    ormgen models

Exit codes:
    0 - success
    1 - validation error
    2 - generation error
    3 - I/O error
    4 - input/argument error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Dict, List, NoReturn, Optional, Sequence

from ormgen.config import (
    CONFIG_FILENAME,
    OrmGenConfig,
    config_path,
    default_config_content,
    load_config,
    load_config_or_default,
)
from ormgen.dsl import build_descriptor, parse_fields, parse_fields_strict
from ormgen.errors import (
    ConfigError,
    GenerationError,
    GenerationIOError,
    InvalidSchemaError,
    SchemaSyntaxError,
)
from ormgen.generator import (
    ControllerGenerator,
    FactoryGenerator,
    GenerationReport,
    MigrationGenerator,
    ScaffoldGenerator,
    SeederGenerator,
    init_project,
)
from ormgen.models import DatabaseDriver, FieldDefinition
from ormgen.scanner import ModelInfo, scan_models
from ormgen.templates import MigrationMode
from ormgen.utils import write_file

# ---------------------------------------------------------------------------
# Logger (configured in _setup_logging)
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("ormgen")


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_VALIDATION_ERROR: int = 1
EXIT_GENERATION_ERROR: int = 2
EXIT_IO_ERROR: int = 3
EXIT_INPUT_ERROR: int = 4


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure the ``ormgen`` logger.

    Args:
        verbosity: 0 = WARNING, 1 = INFO, 2+ = DEBUG.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    fmt: str = "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"
    datefmt: str = "%H:%M:%S"
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root_logger: logging.Logger = logging.getLogger("ormgen")
    root_logger.setLevel(level)

    # Remove existing handlers to prevent duplication
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _add_model_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("name", help="Entity name, e.g. User or blog_post.")

    schema = parser.add_argument_group("schema")
    schema.add_argument(
        "-f", "--fields",
        metavar="BATCH",
        help='Comma-separated fields, e.g. "name:string,age:i32:nullable".',
    )
    schema.add_argument(
        "-r", "--relations",
        metavar="BATCH",
        help='Comma-separated relations, e.g. "posts:has_many:Post".',
    )
    schema.add_argument("--table", help="Table name (default: plural snake_case of NAME).")
    schema.add_argument("--translatable", metavar="NAMES", help="Translatable fields.")
    schema.add_argument("--attachment", metavar="NAMES", help="Single-file attachment names.")
    schema.add_argument("--attachments", metavar="NAMES", help="Multi-file attachment names.")
    schema.add_argument("--indexed", metavar="NAMES", help="Columns to index.")
    schema.add_argument("--unique", metavar="NAMES", help="Columns with a unique constraint.")
    schema.add_argument("--nullable", metavar="NAMES", help="Fields to make nullable.")
    schema.add_argument(
        "--strict",
        action="store_true",
        help="Fail on the first malformed field or relation instead of skipping it.",
    )

    flags = parser.add_argument_group("model flags (default: from ormgen.yaml)")
    flags.add_argument("--soft-deletes", action=argparse.BooleanOptionalAction, default=None)
    flags.add_argument("--timestamps", action=argparse.BooleanOptionalAction, default=None)
    flags.add_argument("--tokenize", action=argparse.BooleanOptionalAction, default=None)

    extras = parser.add_argument_group("companion artifacts")
    extras.add_argument("-m", "--migration", action="store_true", help="Also create a migration.")
    extras.add_argument("-s", "--seeder", action="store_true", help="Also create a seeder.")
    extras.add_argument("--factory", action="store_true", help="Also create a factory.")
    extras.add_argument(
        "-a", "--all",
        action="store_true",
        help="Shorthand for --migration --seeder --factory.",
    )


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    from ormgen import __version__

    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="ormgen",
        description=(
            "ormgen - scaffolding for SQLAlchemy projects.\n\n"
            "Turns compact field and relation lists into models, migrations, "
            "seeders, factories and request handlers."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s init --driver sqlite\n"
            '  %(prog)s make model User -f "name:string,email:string:unique" --all\n'
            "  %(prog)s make controller User --model User --resource\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"ormgen v{__version__}")
    parser.add_argument(
        "-c", "--config",
        metavar="PATH",
        help=f"Config file (default: <root>/{CONFIG_FILENAME}).",
    )
    parser.add_argument(
        "--root",
        metavar="DIR",
        default=".",
        help="Project root all paths are resolved against (default: current directory).",
    )

    verbosity_group = parser.add_argument_group("verbosity")
    verbosity_group.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG).",
    )
    verbosity_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Suppress all output except errors.",
    )

    commands = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

    # --- init ---
    init = commands.add_parser("init", help="Create ormgen.yaml and the artifact packages.")
    init.add_argument(
        "--driver",
        default=DatabaseDriver.POSTGRES.value,
        help="postgres, mysql, sqlite or other (default: postgres).",
    )
    init.add_argument("--name", default="my-ormgen-project", help="Project name.")
    init.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing ormgen.yaml.",
    )

    # --- config ---
    commands.add_parser("config", help="Print the resolved configuration as YAML.")

    # --- models ---
    commands.add_parser("models", help="List the models found in the models directory.")

    # --- make ---
    make = commands.add_parser("make", help="Generate an artifact.")
    kinds = make.add_subparsers(dest="kind", required=True, metavar="KIND")

    _add_model_arguments(kinds.add_parser("model", help="SQLAlchemy model."))

    migration = kinds.add_parser("migration", help="Raw-SQL migration.")
    migration.add_argument("name", help="Migration name, e.g. create_users_table.")
    mode = migration.add_mutually_exclusive_group()
    mode.add_argument("--create", metavar="TABLE", help="Create-table migration.")
    mode.add_argument("--table", metavar="TABLE", help="Alter-table migration.")
    migration.add_argument("-f", "--fields", metavar="BATCH", help="Columns to create or add.")
    migration.add_argument("--soft-deletes", action="store_true", help="Add deleted_at (create only).")
    migration.add_argument(
        "--no-timestamps",
        action="store_true",
        help="Omit created_at / updated_at (create only).",
    )
    migration.add_argument("--strict", action="store_true")

    seeder = kinds.add_parser("seeder", help="Database seeder.")
    seeder.add_argument("name")
    seeder.add_argument("--model", help="Seed records of this model.")
    seeder.add_argument("--count", type=int, help="Records per run (default: from config).")

    factory = kinds.add_parser("factory", help="Model factory.")
    factory.add_argument("name")
    factory.add_argument("--model", help="Model to build (default: NAME minus 'Factory').")

    controller = kinds.add_parser("controller", help="Request handler.")
    controller.add_argument("name")
    controller.add_argument("--model", help="Model the handler works on.")
    controller.add_argument(
        "--resource",
        action="store_true",
        help="Full CRUD with request / response payloads (requires --model).",
    )
    controller.add_argument("--tokenize", action=argparse.BooleanOptionalAction, default=None)

    return parser


# ---------------------------------------------------------------------------
# Config resolution
# ---------------------------------------------------------------------------


def _resolve_config(args: argparse.Namespace) -> OrmGenConfig:
    """An explicit ``-c`` must exist; the implicit one may be absent."""
    if args.config:
        return load_config(Path(args.config))
    return load_config_or_default(config_path(args.root))


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _run_init(args: argparse.Namespace) -> int:
    root: Path = Path(args.root)
    target: Path = Path(args.config) if args.config else config_path(root)

    driver: DatabaseDriver = DatabaseDriver.parse(args.driver)
    if target.exists() and not args.force:
        logger.warning("%s already exists, keeping it (use --force to overwrite).", target)
    else:
        write_file(target, default_config_content(driver, args.name))
        print(f"Created {target}")

    config: OrmGenConfig = load_config(target)
    for path in init_project(config, root):
        print(f"Created {path}")
    return EXIT_SUCCESS


def _run_config(args: argparse.Namespace) -> int:
    print(_resolve_config(args).as_yaml(), end="")
    return EXIT_SUCCESS


def _run_models(args: argparse.Namespace) -> int:
    config: OrmGenConfig = _resolve_config(args)
    directory: Path = config.artifact_dir("models", args.root)
    models: List[ModelInfo] = scan_models(directory)
    if not models:
        print(f"No models found in {directory}")
        return EXIT_SUCCESS

    rows: List[List[str]] = [["Model", "Table", "Fields", "Features"]]
    for info in models:
        rows.append([info.name, info.table, str(len(info.columns)), ", ".join(info.features) or "-"])
    widths: List[int] = [max(len(row[i]) for row in rows) for i in range(len(rows[0]) - 1)]

    for row in rows:
        cells: List[str] = [cell.ljust(width) for cell, width in zip(row, widths)]
        print("  ".join(cells + [row[-1]]))
    print(f"\n{len(models)} model(s) in {directory}")
    return EXIT_SUCCESS


def _run_make_model(args: argparse.Namespace, config: OrmGenConfig) -> int:
    descriptor, warnings = build_descriptor(
        args.name,
        fields=args.fields,
        relations=args.relations,
        table=args.table,
        translatable=args.translatable,
        attachments_single=args.attachment,
        attachments_multi=args.attachments,
        indexed=args.indexed,
        unique=args.unique,
        nullable=args.nullable,
        soft_deletes=_pick(args.soft_deletes, config.model.soft_deletes),
        timestamps=_pick(args.timestamps, config.model.timestamps),
        tokenize=_pick(args.tokenize, config.model.tokenize),
        strict=args.strict,
    )

    report: GenerationReport = ScaffoldGenerator(config, args.root).generate(
        descriptor,
        migration=args.migration or args.all,
        seeder=args.seeder or args.all,
        factory=args.factory or args.all,
        parse_warnings=warnings,
    )
    print(report.summary())

    if report.success:
        return EXIT_SUCCESS
    if report.validation_errors:
        return EXIT_VALIDATION_ERROR
    if report.io_errors:
        return EXIT_IO_ERROR
    return EXIT_GENERATION_ERROR


def _run_make_migration(args: argparse.Namespace, config: OrmGenConfig) -> int:
    fields: List[FieldDefinition]
    if args.strict:
        fields = parse_fields_strict(args.fields)
    else:
        fields = parse_fields(args.fields).items

    if args.create:
        mode, table = MigrationMode.CREATE_TABLE, args.create
    elif args.table:
        mode, table = MigrationMode.ALTER_TABLE, args.table
    else:
        mode, table = MigrationMode.EMPTY, None
        if fields:
            logger.warning("Ignoring --fields: an empty migration takes no columns.")

    path: Path = MigrationGenerator(config, args.root).generate(
        args.name,
        mode=mode,
        table=table,
        fields=fields,
        timestamps=not args.no_timestamps,
        soft_deletes=args.soft_deletes,
    )
    print(f"Created {path}")
    return EXIT_SUCCESS


def _run_make_seeder(args: argparse.Namespace, config: OrmGenConfig) -> int:
    path: Path = SeederGenerator(config, args.root).generate(
        args.name, model=args.model, count=args.count
    )
    print(f"Created {path}")
    return EXIT_SUCCESS


def _run_make_factory(args: argparse.Namespace, config: OrmGenConfig) -> int:
    path: Path = FactoryGenerator(config, args.root).generate(args.name, model=args.model)
    print(f"Created {path}")
    return EXIT_SUCCESS


def _run_make_controller(args: argparse.Namespace, config: OrmGenConfig) -> int:
    path: Path = ControllerGenerator(config, args.root).generate(
        args.name, model=args.model, resource=args.resource, tokenize=args.tokenize
    )
    print(f"Created {path}")
    return EXIT_SUCCESS


_MAKE_COMMANDS: Dict[str, Callable[[argparse.Namespace, OrmGenConfig], int]] = {
    "model": _run_make_model,
    "migration": _run_make_migration,
    "seeder": _run_make_seeder,
    "factory": _run_make_factory,
    "controller": _run_make_controller,
}


def _pick(flag: Optional[bool], default: bool) -> bool:
    return default if flag is None else flag


def _dispatch(args: argparse.Namespace) -> int:
    """Run the selected command, mapping exceptions to exit codes."""
    try:
        if args.command == "init":
            return _run_init(args)
        if args.command == "config":
            return _run_config(args)
        if args.command == "models":
            return _run_models(args)
        config: OrmGenConfig = _resolve_config(args)
        return _MAKE_COMMANDS[args.kind](args, config)
    except (ConfigError, SchemaSyntaxError, ValueError) as exc:
        logger.error("%s", exc)
        return EXIT_INPUT_ERROR
    except InvalidSchemaError as exc:
        logger.error("%s", exc)
        return EXIT_VALIDATION_ERROR
    except GenerationIOError as exc:
        logger.error("%s", exc)
        return EXIT_IO_ERROR
    except GenerationError as exc:
        logger.error("%s", exc)
        return EXIT_GENERATION_ERROR
    except OSError as exc:
        logger.error("I/O error: %s", exc)
        return EXIT_IO_ERROR


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def cli_main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """
    Main CLI entry point.

    Args:
        argv: Optional argument list (defaults to sys.argv[1:]).
    """
    parser: argparse.ArgumentParser = _build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    if args.quiet:
        verbosity: int = -1
        logging.disable(logging.WARNING)
    else:
        verbosity = args.verbose

    _setup_logging(verbosity)
    logger.info("Root: %s", Path(args.root).resolve())

    exit_code: int = _dispatch(args)
    if exit_code != EXIT_SUCCESS:
        logger.error("ormgen failed with exit code %d.", exit_code)
    sys.exit(exit_code)


def main() -> NoReturn:
    """Console-script entry point."""
    cli_main()


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "cli_main",
    "main",
    "EXIT_SUCCESS",
    "EXIT_VALIDATION_ERROR",
    "EXIT_GENERATION_ERROR",
    "EXIT_IO_ERROR",
    "EXIT_INPUT_ERROR",
]

logger.debug("ormgen.cli loaded.")
