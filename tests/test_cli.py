"""
tests/test_cli.py
End-to-end tests for the ``ormgen`` command line (ormgen.cli).

Every command runs against a temporary project root passed via --root.
"""

from __future__ import annotations

import pathlib
from typing import Any, Callable, Dict

import pytest
import yaml

from ormgen.cli import (
    EXIT_GENERATION_ERROR,
    EXIT_INPUT_ERROR,
    EXIT_IO_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
    cli_main,
)
from ormgen.config import CONFIG_FILENAME


def _run(*argv: str) -> int:
    with pytest.raises(SystemExit) as exc_info:
        cli_main(list(argv))
    return exc_info.value.code


@pytest.fixture()
def initialised(project_root: pathlib.Path) -> pathlib.Path:
    assert _run("--root", str(project_root), "-q", "init", "--driver", "sqlite") == EXIT_SUCCESS
    return project_root


# ===========================================================================
# init / config
# ===========================================================================


class TestInit:

    def test_init(self, project_root: pathlib.Path, capsys: pytest.CaptureFixture) -> None:
        code = _run("--root", str(project_root), "init", "--driver", "sqlite", "--name", "blog")
        out = capsys.readouterr().out

        assert code == EXIT_SUCCESS
        data = yaml.safe_load((project_root / CONFIG_FILENAME).read_text(encoding="utf-8"))
        assert data["database"]["driver"] == "sqlite"
        assert data["project"]["name"] == "blog"
        assert (project_root / "app" / "models" / "base.py").is_file()
        assert (project_root / "app" / "seeders" / "database_seeder.py").is_file()
        assert out.count("Created ") == 8

    def test_init_keeps_existing_config(self, initialised: pathlib.Path) -> None:
        config_file = initialised / CONFIG_FILENAME
        before = config_file.read_text(encoding="utf-8")
        assert _run("--root", str(initialised), "-q", "init", "--driver", "mysql") == EXIT_SUCCESS
        assert config_file.read_text(encoding="utf-8") == before

    def test_init_force(self, initialised: pathlib.Path) -> None:
        code = _run("--root", str(initialised), "-q", "init", "--driver", "mysql", "--force")
        assert code == EXIT_SUCCESS
        data = yaml.safe_load((initialised / CONFIG_FILENAME).read_text(encoding="utf-8"))
        assert data["database"]["driver"] == "mysql"

    def test_init_unknown_driver(self, project_root: pathlib.Path) -> None:
        assert _run("--root", str(project_root), "init", "--driver", "oracle") == EXIT_INPUT_ERROR
        assert not (project_root / CONFIG_FILENAME).exists()


class TestConfigCommand:

    def test_prints_resolved_yaml(
        self,
        project_root: pathlib.Path,
        write_config: Callable[[Dict[str, Any]], pathlib.Path],
        capsys: pytest.CaptureFixture,
    ) -> None:
        write_config({"database": {"driver": "mysql"}})
        assert _run("--root", str(project_root), "config") == EXIT_SUCCESS
        data = yaml.safe_load(capsys.readouterr().out)
        assert data["database"]["driver"] == "mysql"
        assert data["paths"]["models"] == "app/models"

    def test_missing_explicit_config(self, project_root: pathlib.Path) -> None:
        missing = project_root / "nope.yaml"
        assert _run("-c", str(missing), "config") == EXIT_INPUT_ERROR

    def test_version(self, capsys: pytest.CaptureFixture) -> None:
        assert _run("--version") == 0
        assert "ormgen v" in capsys.readouterr().out


# ===========================================================================
# models
# ===========================================================================


class TestModelsCommand:

    def test_lists_generated_models(
        self, initialised: pathlib.Path, capsys: pytest.CaptureFixture
    ) -> None:
        root = str(initialised)
        assert _run("--root", root, "-q", "make", "model", "User", "-f", "email:string", "--tokenize") == 0
        assert _run(
            "--root", root, "-q", "make", "model", "Post",
            "-f", "title:string", "-r", "author:belongs_to:User", "--soft-deletes",
        ) == 0
        capsys.readouterr()

        assert _run("--root", root, "models") == EXIT_SUCCESS
        lines = capsys.readouterr().out.splitlines()

        assert lines[0].split() == ["Model", "Table", "Fields", "Features"]
        post = next(line for line in lines if line.startswith("Post "))
        user = next(line for line in lines if line.startswith("User "))
        assert "posts" in post
        assert "timestamps, soft_deletes, relations" in post
        assert "users" in user
        assert "timestamps, tokenize" in user
        assert "soft_deletes" not in user
        assert lines[-1].startswith("2 model(s) in ")

    def test_empty_models_directory(
        self, initialised: pathlib.Path, capsys: pytest.CaptureFixture
    ) -> None:
        assert _run("--root", str(initialised), "models") == EXIT_SUCCESS
        assert "No models found in " in capsys.readouterr().out

    def test_missing_models_directory(self, project_root: pathlib.Path) -> None:
        assert _run("--root", str(project_root), "-q", "models") == EXIT_IO_ERROR


# ===========================================================================
# make model
# ===========================================================================


class TestMakeModel:

    def test_all(self, initialised: pathlib.Path, capsys: pytest.CaptureFixture) -> None:
        code = _run(
            "--root", str(initialised),
            "make", "model", "Post",
            "-f", "title:string:unique,body:text",
            "-r", "author:belongs_to:User",
            "--all",
        )
        out = capsys.readouterr().out
        app = initialised / "app"

        assert code == EXIT_SUCCESS
        assert "SUCCESS" in out
        assert (app / "models" / "post.py").is_file()
        assert (app / "seeders" / "post_seeder.py").is_file()
        assert (app / "factories" / "post_factory.py").is_file()
        (migration,) = list((app / "migrations").glob("m*_create_posts_table.py"))
        source = migration.read_text(encoding="utf-8")
        assert "id INTEGER PRIMARY KEY AUTOINCREMENT" in source
        assert "user_id BIGINT NOT NULL" in source

    def test_flags_default_from_config(
        self,
        project_root: pathlib.Path,
        write_config: Callable[[Dict[str, Any]], pathlib.Path],
    ) -> None:
        write_config({"model": {"soft_deletes": True}})
        assert _run("--root", str(project_root), "-q", "make", "model", "Tag", "-f", "name:string") == 0
        source = (project_root / "app" / "models" / "tag.py").read_text(encoding="utf-8")
        assert "__soft_delete__ = True" in source

    def test_flag_overrides_config(
        self,
        project_root: pathlib.Path,
        write_config: Callable[[Dict[str, Any]], pathlib.Path],
    ) -> None:
        write_config({"model": {"soft_deletes": True}})
        code = _run(
            "--root", str(project_root), "-q",
            "make", "model", "Tag", "-f", "name:string", "--no-soft-deletes",
        )
        assert code == EXIT_SUCCESS
        source = (project_root / "app" / "models" / "tag.py").read_text(encoding="utf-8")
        assert "__soft_delete__" not in source

    def test_invalid_schema(self, project_root: pathlib.Path) -> None:
        code = _run("--root", str(project_root), "-q", "make", "model", "Thing", "-f", "class:string")
        assert code == EXIT_VALIDATION_ERROR
        assert not (project_root / "app").exists()

    def test_malformed_token_skipped(
        self, project_root: pathlib.Path, capsys: pytest.CaptureFixture
    ) -> None:
        code = _run("--root", str(project_root), "-q", "make", "model", "Tag", "-f", "name:string,broken")
        assert code == EXIT_SUCCESS
        assert "Parse Warnings (1)" in capsys.readouterr().out

    def test_malformed_token_strict(self, project_root: pathlib.Path) -> None:
        code = _run(
            "--root", str(project_root), "-q",
            "make", "model", "Tag", "-f", "name:string,broken", "--strict",
        )
        assert code == EXIT_INPUT_ERROR
        assert not (project_root / "app").exists()


# ===========================================================================
# Other make commands
# ===========================================================================


class TestMakeOthers:

    def test_create_migration(self, initialised: pathlib.Path, capsys: pytest.CaptureFixture) -> None:
        code = _run(
            "--root", str(initialised),
            "make", "migration", "create_users_table",
            "--create", "users", "-f", "name:string,email:string:unique",
        )
        assert code == EXIT_SUCCESS
        out = capsys.readouterr().out
        (migration,) = list((initialised / "app" / "migrations").glob("m*_create_users_table.py"))
        assert f"Created {migration}" in out
        assert "email VARCHAR(255) NOT NULL UNIQUE" in migration.read_text(encoding="utf-8")

    def test_alter_migration(self, initialised: pathlib.Path) -> None:
        code = _run(
            "--root", str(initialised), "-q",
            "make", "migration", "add_bio_to_users", "--table", "users", "-f", "bio:text:nullable",
        )
        assert code == EXIT_SUCCESS
        (migration,) = list((initialised / "app" / "migrations").glob("m*_add_bio_to_users.py"))
        assert "ALTER TABLE users ADD COLUMN bio TEXT" in migration.read_text(encoding="utf-8")

    def test_create_without_table_name_is_usage_error(self, initialised: pathlib.Path) -> None:
        assert _run("--root", str(initialised), "make", "migration", "x", "--create") == 2

    def test_seeder(self, initialised: pathlib.Path) -> None:
        code = _run(
            "--root", str(initialised), "-q",
            "make", "seeder", "user", "--model", "User", "--count", "5",
        )
        assert code == EXIT_SUCCESS
        source = (initialised / "app" / "seeders" / "user_seeder.py").read_text(encoding="utf-8")
        assert "count: int = 5" in source

    def test_seeder_name_not_identifier(self, initialised: pathlib.Path) -> None:
        index = initialised / "app" / "seeders" / "__init__.py"
        before = index.read_text(encoding="utf-8")
        assert _run("--root", str(initialised), "-q", "make", "seeder", "2fa") == EXIT_GENERATION_ERROR
        assert index.read_text(encoding="utf-8") == before

    def test_factory(self, initialised: pathlib.Path) -> None:
        assert _run("--root", str(initialised), "-q", "make", "factory", "UserFactory") == 0
        assert (initialised / "app" / "factories" / "user_factory.py").is_file()

    def test_controller_resource(self, initialised: pathlib.Path) -> None:
        code = _run(
            "--root", str(initialised), "-q",
            "make", "controller", "user", "--model", "User", "--resource", "--tokenize",
        )
        assert code == EXIT_SUCCESS
        source = (initialised / "app" / "handlers" / "user_handler.py").read_text(encoding="utf-8")
        assert "def show_by_token" in source

    def test_controller_resource_without_model(self, initialised: pathlib.Path) -> None:
        code = _run("--root", str(initialised), "-q", "make", "controller", "user", "--resource")
        assert code == EXIT_GENERATION_ERROR

    def test_io_error(self, project_root: pathlib.Path) -> None:
        (project_root / "app").write_text("not a directory", encoding="utf-8")
        assert _run("--root", str(project_root), "-q", "make", "seeder", "user") == EXIT_IO_ERROR
