"""
tests/test_config.py
Unit tests for ormgen.config (ormgen.yaml models and loaders).
"""

from __future__ import annotations

import pathlib
from typing import Any, Callable, Dict

import pytest
import yaml

from ormgen.config import (
    CONFIG_FILENAME,
    ENVIRONMENT_VARIABLE,
    OrmGenConfig,
    config_path,
    default_config_content,
    load_config,
    load_config_or_default,
)
from ormgen.errors import ConfigError
from ormgen.models import DatabaseDriver

WriteConfig = Callable[[Dict[str, Any]], pathlib.Path]


# ===========================================================================
# Defaults
# ===========================================================================


class TestDefaults:

    def test_default_values(self, config: OrmGenConfig) -> None:
        assert config.driver == DatabaseDriver.POSTGRES
        assert config.paths.models == "app/models"
        assert config.migration.table == "_ormgen_migrations"
        assert config.migration.timestamps is True
        assert config.seeder.default_seeder == "DatabaseSeeder"
        assert config.seeder.default_count == 10
        assert config.model.primary_key == "id"
        assert config.model.soft_deletes is False

    def test_artifact_dir(self, config: OrmGenConfig, tmp_path: pathlib.Path) -> None:
        assert config.artifact_dir("seeders", tmp_path) == tmp_path / "app" / "seeders"

    def test_environment_from_variable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(ENVIRONMENT_VARIABLE, "production")
        assert OrmGenConfig().is_production

    def test_environment_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(ENVIRONMENT_VARIABLE, raising=False)
        config = OrmGenConfig()
        assert config.project.environment == "development"
        assert not config.is_production

    def test_as_yaml_round_trips(self, sqlite_config: OrmGenConfig) -> None:
        data = yaml.safe_load(sqlite_config.as_yaml())
        assert data["database"]["driver"] == "sqlite"
        assert OrmGenConfig.model_validate(data) == sqlite_config


# ===========================================================================
# Validation
# ===========================================================================


class TestValidation:

    @pytest.mark.parametrize("alias", ["postgresql", "pg", "PostgreS"])
    def test_driver_aliases(self, alias: str) -> None:
        config = OrmGenConfig.model_validate({"database": {"driver": alias}})
        assert config.driver == DatabaseDriver.POSTGRES

    def test_unknown_driver_rejected(self) -> None:
        with pytest.raises(ValueError):
            OrmGenConfig.model_validate({"database": {"driver": "oracle"}})

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(ValueError):
            OrmGenConfig.model_validate({"paths": {"views": "app/views"}})

    def test_absolute_path_rejected(self) -> None:
        with pytest.raises(ValueError):
            OrmGenConfig.model_validate({"paths": {"models": "/srv/models"}})

    def test_primary_key_must_be_identifier(self) -> None:
        with pytest.raises(ValueError):
            OrmGenConfig.model_validate({"model": {"primary_key": "my-id"}})


# ===========================================================================
# Loading
# ===========================================================================


class TestLoadConfig:

    def test_load(self, write_config: WriteConfig) -> None:
        path = write_config(
            {
                "project": {"name": "shop"},
                "database": {"driver": "mysql"},
                "paths": {"models": "shop/models"},
                "model": {"soft_deletes": True},
            }
        )
        config = load_config(path)
        assert config.project.name == "shop"
        assert config.driver == DatabaseDriver.MYSQL
        assert config.paths.models == "shop/models"
        assert config.paths.seeders == "app/seeders"
        assert config.model.soft_deletes is True

    def test_empty_file_gives_defaults(self, project_root: pathlib.Path) -> None:
        path = project_root / CONFIG_FILENAME
        path.write_text("", encoding="utf-8")
        assert load_config(path) == OrmGenConfig()

    def test_missing_file(self, project_root: pathlib.Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config(project_root / CONFIG_FILENAME)

    def test_invalid_yaml(self, project_root: pathlib.Path) -> None:
        path = project_root / CONFIG_FILENAME
        path.write_text("database: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_non_mapping(self, project_root: pathlib.Path) -> None:
        path = project_root / CONFIG_FILENAME
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    def test_validation_failure_is_config_error(self, write_config: WriteConfig) -> None:
        path = write_config({"seeder": {"default_count": 0}})
        with pytest.raises(ConfigError) as exc_info:
            load_config(path)
        assert exc_info.value.path == path

    def test_or_default_when_missing(self, project_root: pathlib.Path) -> None:
        assert load_config_or_default(config_path(project_root)) == OrmGenConfig()

    def test_or_default_still_validates(self, write_config: WriteConfig) -> None:
        path = write_config({"database": {"driver": "oracle"}})
        with pytest.raises(ConfigError):
            load_config_or_default(path)


# ===========================================================================
# Default content
# ===========================================================================


class TestDefaultContent:

    def test_parses_back(self, project_root: pathlib.Path) -> None:
        path = project_root / CONFIG_FILENAME
        path.write_text(default_config_content("sqlite3", "blog"), encoding="utf-8")
        config = load_config(path)
        assert config.driver == DatabaseDriver.SQLITE
        assert config.project.name == "blog"
        assert config.paths == OrmGenConfig().paths

    def test_environment_left_to_variable(
        self, project_root: pathlib.Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv(ENVIRONMENT_VARIABLE, "production")
        path = project_root / CONFIG_FILENAME
        path.write_text(default_config_content(), encoding="utf-8")
        assert "environment" not in yaml.safe_load(path.read_text(encoding="utf-8"))["project"]
        assert load_config(path).is_production

    def test_mentions_every_section(self) -> None:
        content = default_config_content()
        for section in ("project:", "database:", "paths:", "migration:", "seeder:", "model:"):
            assert section in content
