# File: ormgen/errors.py
"""
ormgen - Error Taxonomy
========================

Two families of errors are raised by the engine:

    * ``SchemaSyntaxError``: a single DSL token could not be parsed.
      Batch parsers absorb these per token and report them as warnings.
    * ``GenerationError``: a generation request cannot proceed.
      These always abort the current request.

``GenerationIOError`` carries the offending path and the underlying
``OSError`` so callers can surface it verbatim.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Union

if TYPE_CHECKING:
    from ormgen.models import ArtifactSpec


class OrmGenError(Exception):
    """Base class for every error raised by ormgen."""


class ConfigError(OrmGenError):
    """The configuration file is missing, unreadable or invalid."""

    def __init__(self, path: Union[str, Path], message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path: Path = Path(path)


# ---------------------------------------------------------------------------
# DSL parsing errors
# ---------------------------------------------------------------------------


class SchemaSyntaxError(OrmGenError, ValueError):
    """A DSL token could not be parsed."""

    def __init__(self, token: str, message: str) -> None:
        super().__init__(message)
        self.token: str = token


class MalformedFieldError(SchemaSyntaxError):
    """Field token has fewer than two colon-separated parts."""

    def __init__(self, token: str) -> None:
        super().__init__(
            token,
            f"Invalid field definition '{token}'. "
            "Expected format: name:type[:modifiers]",
        )


class MalformedRelationError(SchemaSyntaxError):
    """Relation token has fewer than three colon-separated parts."""

    def __init__(self, token: str) -> None:
        super().__init__(
            token,
            f"Invalid relation definition '{token}'. "
            "Expected format: name:kind:Entity[:foreign_key]",
        )


class UnknownModifierError(SchemaSyntaxError):
    def __init__(self, token: str, modifier: str) -> None:
        super().__init__(token, f"Unknown modifier: {modifier}")
        self.modifier: str = modifier


class UnknownRelationKindError(SchemaSyntaxError):
    def __init__(self, token: str, kind: str) -> None:
        super().__init__(token, f"Unknown relation type: {kind}")
        self.kind: str = kind


class EmptyDefaultError(SchemaSyntaxError):
    """``default=`` modifier with no value."""

    def __init__(self, token: str) -> None:
        super().__init__(token, f"Empty default value in field definition '{token}'")


# ---------------------------------------------------------------------------
# Generation errors
# ---------------------------------------------------------------------------


class GenerationError(OrmGenError):
    """A generation request was aborted."""


class MissingNameError(GenerationError):
    def __init__(self, kind: str = "entity") -> None:
        super().__init__(f"A {kind} name is required")
        self.kind: str = kind


class InvalidNameError(GenerationError):
    """A name that would not be a valid Python module or class name."""

    def __init__(self, kind: str, name: str) -> None:
        super().__init__(f"Invalid {kind} name '{name}': not a Python identifier")
        self.kind: str = kind
        self.name: str = name


class MissingModelError(GenerationError):
    def __init__(self, handler_name: str) -> None:
        super().__init__(
            f"Resource controller '{handler_name}' requires a model"
        )
        self.handler_name: str = handler_name


class InvalidSchemaError(GenerationError):
    """The schema descriptor failed semantic validation."""

    def __init__(self, entity: str, problems: List[str]) -> None:
        joined: str = "; ".join(problems)
        super().__init__(f"Schema for '{entity}' is invalid: {joined}")
        self.entity: str = entity
        self.problems: List[str] = list(problems)


class CommitStep(str, Enum):
    """The two steps of committing an artifact to disk."""

    WRITE_ARTIFACT = "write_artifact"
    UPDATE_REGISTRY = "update_registry"


class GenerationIOError(GenerationError):
    """
    A read, write or directory creation failed.

    When raised from a commit, ``step`` says which step failed and
    ``artifact`` holds the rendered artifact.  If ``step`` is
    ``UPDATE_REGISTRY`` the artifact file is already on disk and only the
    registry update needs to be retried.
    """

    def __init__(
        self,
        path: Union[str, Path],
        cause: BaseException,
        *,
        step: Optional[CommitStep] = None,
        artifact: Optional["ArtifactSpec"] = None,
    ) -> None:
        self.path: Path = Path(path)
        self.cause: BaseException = cause
        self.step: Optional[CommitStep] = step
        self.artifact: Optional["ArtifactSpec"] = artifact
        where: str = f" during {step.value}" if step is not None else ""
        super().__init__(f"I/O error on '{self.path}'{where}: {cause}")


__all__: List[str] = [
    "OrmGenError",
    "ConfigError",
    "SchemaSyntaxError",
    "MalformedFieldError",
    "MalformedRelationError",
    "UnknownModifierError",
    "UnknownRelationKindError",
    "EmptyDefaultError",
    "GenerationError",
    "MissingNameError",
    "InvalidNameError",
    "MissingModelError",
    "InvalidSchemaError",
    "CommitStep",
    "GenerationIOError",
]
