"""
tests/conftest.py
Shared fixtures for the ormgen test suite.

No external mocking libraries are used; real file I/O is performed
inside temporary directories managed by pytest's tmp_path fixtures.
"""

from __future__ import annotations

import logging
import pathlib
from typing import Any, Callable, Dict

import pytest
import yaml

from ormgen.config import CONFIG_FILENAME, OrmGenConfig
from ormgen.dsl import build_descriptor
from ormgen.models import DatabaseDriver, SchemaDescriptor
from ormgen.templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Logging isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_ormgen_logging():
    """The CLI installs its own handler on the ``ormgen`` logger; undo it."""
    yield
    ormgen_logger = logging.getLogger("ormgen")
    ormgen_logger.handlers.clear()
    ormgen_logger.setLevel(logging.NOTSET)
    ormgen_logger.propagate = True
    logging.disable(logging.NOTSET)


# ---------------------------------------------------------------------------
# Configuration fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def config() -> OrmGenConfig:
    """Default configuration (postgres, app/<kind> directories)."""
    return OrmGenConfig()


@pytest.fixture()
def sqlite_config() -> OrmGenConfig:
    return OrmGenConfig.model_validate({"database": {"driver": "sqlite"}})


@pytest.fixture()
def project_root(tmp_path: pathlib.Path) -> pathlib.Path:
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture()
def write_config(project_root: pathlib.Path) -> Callable[[Dict[str, Any]], pathlib.Path]:
    """Write a dict as ``ormgen.yaml`` in the project root and return the path."""

    def _write(data: Dict[str, Any]) -> pathlib.Path:
        path = project_root / CONFIG_FILENAME
        with open(path, "w", encoding="utf-8") as fh:
            yaml.safe_dump(data, fh, default_flow_style=False)
        return path

    return _write


# ---------------------------------------------------------------------------
# Renderer fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def renderer() -> TemplateRenderer:
    return TemplateRenderer(driver=DatabaseDriver.POSTGRES)


# ---------------------------------------------------------------------------
# Descriptor fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def user_descriptor() -> SchemaDescriptor:
    """User with a unique email, a nullable bio and two has-many relations."""
    descriptor, warnings = build_descriptor(
        "User",
        fields="name:string,email:string:unique:indexed,bio:text:nullable,age:i32",
        relations="posts:has_many:Post,comments:has_many:Comment",
    )
    assert warnings == []
    return descriptor


@pytest.fixture()
def post_descriptor() -> SchemaDescriptor:
    """Post belonging to a User, with a declared foreign-key field."""
    descriptor, warnings = build_descriptor(
        "Post",
        fields="title:string:unique,body:text,author_id:i64,status:string:default='draft'",
        relations="author:belongs_to:User:author_id,cover:has_one:Image",
        indexed="created_at",
        soft_deletes=True,
    )
    assert warnings == []
    return descriptor
