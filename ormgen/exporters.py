# File: ormgen/exporters.py
"""
ormgen - Artifact Exporter & Registry Updater
==============================================

Responsible for:
    1. Writing a rendered artifact to disk atomically.
    2. Keeping the per-kind index module (``<dir>/__init__.py``) in sync
       by idempotently appending ``from . import <module>`` and an
       optional ``from .<module> import <Export>`` line.
    3. Pre-creating index modules with a header docstring.

Committing an artifact is an explicit two-step operation: write the file,
then update the registry.  The two steps are not transactional.  If the
second step fails the artifact stays on disk and the raised
``GenerationIOError`` names the failed step and carries the artifact, so
the caller can retry just the registry update with
``ArtifactExporter.register_entry``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from ormgen.errors import CommitStep, GenerationIOError
from ormgen.models import ArtifactSpec, RegistryEntry
from ormgen.utils import (
    count_lines,
    ensure_directory,
    read_text_or_empty,
    sha256_hex,
    write_file,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("ormgen.exporters")

INDEX_FILENAME: str = "__init__.py"


# ---------------------------------------------------------------------------
# Registry lines
# ---------------------------------------------------------------------------


def module_line(module_token: str) -> str:
    """The line that declares *module_token* in an index module."""
    return f"from . import {module_token}"


def export_line(module_token: str, export_token: str) -> str:
    """The line that re-exports *export_token* from *module_token*."""
    return f"from .{module_token} import {export_token}"


def is_registered(index_text: str, module_token: str) -> bool:
    """True when *index_text* has a line exactly declaring *module_token*."""
    wanted: str = module_line(module_token)
    return any(line.strip() == wanted for line in index_text.splitlines())


# ---------------------------------------------------------------------------
# Registry operations
# ---------------------------------------------------------------------------


def ensure_index(index_path: Path, header: str) -> bool:
    """
    Create *index_path* with *header* if it does not exist yet.

    Returns True when the file was created.

    Raises:
        GenerationIOError: the directory or file could not be created.
    """
    if index_path.exists():
        return False
    try:
        write_file(index_path, header if header.endswith("\n") else header + "\n")
    except OSError as exc:
        raise GenerationIOError(index_path, exc) from exc
    logger.info("Created index module %s", index_path)
    return True


def register(
    index_path: Path,
    module_token: str,
    export_token: Optional[str] = None,
) -> bool:
    """
    Append the declaration of *module_token* to *index_path*.

    A missing index file reads as empty.  When the module is already
    declared the file is left untouched.  Returns True when lines were
    appended.

    Raises:
        GenerationIOError: reading or writing the index failed.
    """
    try:
        text: str = read_text_or_empty(index_path)
    except OSError as exc:
        raise GenerationIOError(index_path, exc) from exc

    if is_registered(text, module_token):
        logger.debug("%s already registered in %s", module_token, index_path)
        return False

    additions: List[str] = [module_line(module_token)]
    if export_token:
        additions.append(export_line(module_token, export_token))

    if text and not text.endswith("\n"):
        text += "\n"
    text += "\n".join(additions) + "\n"

    try:
        write_file(index_path, text)
    except OSError as exc:
        raise GenerationIOError(index_path, exc) from exc

    logger.info("Registered %s in %s", module_token, index_path)
    return True


# ---------------------------------------------------------------------------
# Commit result
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CommitResult:
    """Immutable record of one committed artifact."""

    artifact_path: Path
    index_path: Path
    size_bytes: int
    line_count: int
    sha256: str
    registered: bool  # False when the index already declared the module


# ---------------------------------------------------------------------------
# ArtifactExporter
# ---------------------------------------------------------------------------


class ArtifactExporter:
    """
    Writes artifacts and updates their registry.

    Usage::

        exporter = ArtifactExporter()
        result = exporter.commit(artifact)

    Thread-safety: NOT thread-safe.  One invocation owns the project tree.
    """

    def __init__(self, *, atomic_writes: bool = True) -> None:
        self._atomic_writes: bool = atomic_writes
        logger.debug("ArtifactExporter initialised: atomic=%s.", atomic_writes)

    # -----------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------

    def commit(self, artifact: ArtifactSpec) -> CommitResult:
        """
        Write *artifact* then register it.

        Raises:
            GenerationIOError: with ``step`` set to the step that failed.
                On ``UPDATE_REGISTRY`` the artifact file is already written.
        """
        size: int = self.write_artifact(artifact)

        try:
            registered: bool = self._register(artifact.registry_entry)
        except GenerationIOError as exc:
            logger.error(
                "Wrote %s but failed to update registry %s: %s",
                artifact.file_path,
                exc.path,
                exc.cause,
            )
            raise GenerationIOError(
                exc.path,
                exc.cause,
                step=CommitStep.UPDATE_REGISTRY,
                artifact=artifact,
            ) from exc.cause

        return CommitResult(
            artifact_path=artifact.file_path,
            index_path=artifact.registry_entry.index_path,
            size_bytes=size,
            line_count=count_lines(artifact.content),
            sha256=sha256_hex(artifact.content),
            registered=registered,
        )

    def write_artifact(self, artifact: ArtifactSpec) -> int:
        """Step one: write the artifact file.  Returns bytes written."""
        path: Path = artifact.file_path
        if path.exists():
            logger.info("Overwriting existing file %s", path)
        try:
            ensure_directory(path.parent)
            size: int = write_file(path, artifact.content, atomic=self._atomic_writes)
        except OSError as exc:
            raise GenerationIOError(
                path, exc, step=CommitStep.WRITE_ARTIFACT, artifact=artifact
            ) from exc
        logger.info("Wrote %s (%d bytes)", path, size)
        return size

    def register_entry(self, entry: RegistryEntry) -> bool:
        """
        Step two on its own: apply a registry entry.

        Used to retry after a commit failed at ``UPDATE_REGISTRY``.
        """
        return self._register(entry)

    # -----------------------------------------------------------------
    # Internal
    # -----------------------------------------------------------------

    @staticmethod
    def _register(entry: RegistryEntry) -> bool:
        return register(entry.index_path, entry.module_token, entry.export_token)


__all__: List[str] = [
    "INDEX_FILENAME",
    "module_line",
    "export_line",
    "is_registered",
    "ensure_index",
    "register",
    "CommitResult",
    "ArtifactExporter",
]

logger.debug("ormgen.exporters loaded.")
