"""Tests for configuration models and file persistence.

Tests use the AAA pattern (Arrange-Act-Assert) for clarity.
"""

from __future__ import annotations

import json
import stat
from pathlib import Path

import pytest
from pydantic import ValidationError

from casbin_rule_store.config import DatabaseConfig, EnforcerConfig, get_config_path
from casbin_rule_store.exceptions import (
    ConfigError,
    ConfigNotFoundError,
    MissingDriverError,
    MissingSourceError,
)


class TestDatabaseConfig:
    """Tests for DatabaseConfig.resolve_link."""

    def test_link_wins(self):
        config = DatabaseConfig(link="sqlite:", driver="mysql", source="x")

        assert config.resolve_link() == "sqlite:"

    def test_driver_and_source_are_joined(self):
        config = DatabaseConfig(driver="postgresql+psycopg", source="user:pw@localhost/app")

        assert config.resolve_link() == "postgresql+psycopg:user:pw@localhost/app"

    def test_empty_source_is_allowed(self):
        assert DatabaseConfig(driver="sqlite", source="").resolve_link() == "sqlite:"

    @pytest.mark.parametrize("driver", [None, ""])
    def test_missing_driver(self, driver: str | None):
        with pytest.raises(MissingDriverError):
            DatabaseConfig(driver=driver, source="x").resolve_link()

    def test_missing_source(self):
        with pytest.raises(MissingSourceError):
            DatabaseConfig(driver="sqlite").resolve_link()

    def test_default_table_name(self):
        assert DatabaseConfig().table_name == "casbin_policy"

    def test_empty_table_name_rejected(self):
        with pytest.raises(ValidationError):
            DatabaseConfig(table_name="")


class TestEnforcerConfig:
    """Tests for EnforcerConfig validation and defaults."""

    def test_defaults(self):
        config = EnforcerConfig(model_path="model.conf")

        assert config.enable is True
        assert config.auto_save is True
        assert config.auto_load is False
        assert config.auto_load_interval == 60.0
        assert config.log_path is None

    def test_blank_model_path_rejected(self):
        with pytest.raises(ValidationError, match="model_path must not be empty"):
            EnforcerConfig(model_path="  ")

    def test_non_positive_interval_rejected(self):
        with pytest.raises(ValidationError):
            EnforcerConfig(model_path="model.conf", auto_load_interval=0)


class TestConfigFile:
    """Tests for save_to_file / load_from_file."""

    def test_save_and_load(self, tmp_path: Path):
        # Arrange
        path = tmp_path / "nested" / "config.json"
        config = EnforcerConfig(
            model_path="rbac_model.conf",
            auto_load=True,
            auto_load_interval=5,
            database=DatabaseConfig(link="sqlite:", table_name="rules"),
        )

        # Act
        config.save_to_file(path)
        loaded = EnforcerConfig.load_from_file(path)

        # Assert
        assert loaded == config
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigNotFoundError, match="casbin-rule-store init"):
            EnforcerConfig.load_from_file(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "config.json"
        path.write_text("{not json")

        with pytest.raises(ConfigError, match="Invalid JSON"):
            EnforcerConfig.load_from_file(path)

    def test_validation_errors_are_listed(self, tmp_path: Path):
        # Arrange
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"database": {"table_name": ""}}))

        # Act
        with pytest.raises(ConfigError) as exc_info:
            EnforcerConfig.load_from_file(path)

        # Assert
        message = str(exc_info.value)
        assert "  - model_path:" in message
        assert "  - database.table_name:" in message


def test_config_path_location():
    path = get_config_path()

    assert path.name == "casbin_rule_store_config.json"
    assert "casbin-rule-store" in str(path.parent)
