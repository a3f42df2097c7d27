# File: ormgen/scanner.py
"""
ormgen - Model Scanner
=======================

Reads the models package back without importing it.  Each module is
parsed with ``ast`` and every class deriving from ``Base`` is described
by a ``ModelInfo``: table name, mapped columns, relationships and the
class markers written by the model generator.

Used by ``ormgen models`` and by the model generator, which looks up
relationships in other models that share a foreign-key column.
"""

from __future__ import annotations

import ast
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Tuple, Union

from ormgen.errors import GenerationIOError
from ormgen.exporters import INDEX_FILENAME
from ormgen.utils import to_plural, to_snake_case

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("ormgen.scanner")

_BASE_CLASS: str = "Base"


@dataclass(frozen=True, slots=True)
class ScannedRelation:
    name: str
    target: str
    foreign_keys: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ModelInfo:
    """What a generated (or hand-written) model module declares."""

    name: str
    table: str
    path: Path
    columns: Tuple[str, ...] = ()
    relations: Tuple[ScannedRelation, ...] = ()
    soft_deletes: bool = False
    tokenize: bool = False
    translatable: Tuple[str, ...] = ()

    @property
    def timestamps(self) -> bool:
        return "created_at" in self.columns and "updated_at" in self.columns

    @property
    def features(self) -> List[str]:
        flags: List[Tuple[str, bool]] = [
            ("timestamps", self.timestamps),
            ("soft_deletes", self.soft_deletes),
            ("tokenize", self.tokenize),
            ("relations", bool(self.relations)),
            ("translatable", bool(self.translatable)),
        ]
        return [label for label, enabled in flags if enabled]


# ---------------------------------------------------------------------------
# AST helpers
# ---------------------------------------------------------------------------


def _call_name(node: ast.AST) -> str:
    if not isinstance(node, ast.Call):
        return ""
    func = node.func
    if isinstance(func, ast.Name):
        return func.id
    if isinstance(func, ast.Attribute):
        return func.attr
    return ""


def _string_constant(node: Optional[ast.AST]) -> Optional[str]:
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        return node.value
    return None


def _literal(node: ast.AST) -> Any:
    try:
        return ast.literal_eval(node)
    except (ValueError, TypeError, SyntaxError):
        return None


def _derives_from_base(node: ast.ClassDef) -> bool:
    for base in node.bases:
        if isinstance(base, ast.Name) and base.id == _BASE_CLASS:
            return True
        if isinstance(base, ast.Attribute) and base.attr == _BASE_CLASS:
            return True
    return False


def _relation(name: str, call: ast.Call) -> ScannedRelation:
    target: Optional[str] = _string_constant(call.args[0]) if call.args else None
    foreign_keys: Optional[str] = None
    for kw in call.keywords:
        if kw.arg == "foreign_keys":
            foreign_keys = _string_constant(kw.value)
    return ScannedRelation(name=name, target=target or "", foreign_keys=foreign_keys)


def _describe(node: ast.ClassDef, path: Path) -> ModelInfo:
    table: Optional[str] = None
    columns: List[str] = []
    relations: List[ScannedRelation] = []
    soft_deletes = tokenize = False
    translatable: Tuple[str, ...] = ()

    for stmt in node.body:
        if isinstance(stmt, ast.AnnAssign) and isinstance(stmt.target, ast.Name):
            attr: str = stmt.target.id
            kind: str = _call_name(stmt.value) if stmt.value is not None else ""
            if kind == "mapped_column":
                columns.append(attr)
            elif kind == "relationship":
                relations.append(_relation(attr, stmt.value))  # type: ignore[arg-type]
            continue

        if not isinstance(stmt, ast.Assign) or len(stmt.targets) != 1:
            continue
        target = stmt.targets[0]
        if not isinstance(target, ast.Name):
            continue
        if target.id == "__tablename__":
            table = _string_constant(stmt.value)
        elif target.id == "__soft_delete__":
            soft_deletes = _literal(stmt.value) is True
        elif target.id == "__tokenize__":
            tokenize = _literal(stmt.value) is True
        elif target.id == "__translatable__":
            value = _literal(stmt.value)
            if isinstance(value, (tuple, list)):
                translatable = tuple(str(v) for v in value)

    return ModelInfo(
        name=node.name,
        table=table or to_plural(to_snake_case(node.name)),
        path=path,
        columns=tuple(columns),
        relations=tuple(relations),
        soft_deletes=soft_deletes or "deleted_at" in columns,
        tokenize=tokenize,
        translatable=translatable,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_model_source(source: str, path: Union[str, Path] = "<string>") -> List[ModelInfo]:
    """
    Describe every ``Base`` subclass declared in *source*.

    Raises:
        SyntaxError: *source* is not valid Python.
    """
    tree: ast.Module = ast.parse(source, filename=str(path))
    return [
        _describe(node, Path(path))
        for node in tree.body
        if isinstance(node, ast.ClassDef) and _derives_from_base(node)
    ]


def scan_models(directory: Union[str, Path]) -> List[ModelInfo]:
    """
    Scan every module in *directory* except the index, sorted by model name.

    Modules that fail to parse are logged and skipped.

    Raises:
        GenerationIOError: the directory is missing or a module is unreadable.
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise GenerationIOError(
            directory, FileNotFoundError(f"Models directory not found: {directory}")
        )

    models: List[ModelInfo] = []
    for path in sorted(directory.glob("*.py")):
        if path.name == INDEX_FILENAME:
            continue
        try:
            source: str = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise GenerationIOError(path, exc) from exc
        try:
            models.extend(parse_model_source(source, path))
        except SyntaxError as exc:
            logger.warning("Skipping %s: %s", path, exc)

    models.sort(key=lambda m: m.name)
    logger.debug("Scanned %s: %d model(s).", directory, len(models))
    return models


__all__: List[str] = [
    "ScannedRelation",
    "ModelInfo",
    "parse_model_source",
    "scan_models",
]

logger.debug("ormgen.scanner loaded.")
