"""Tests for create_enforcer and ManagedEnforcer.

Tests use the AAA pattern (Arrange-Act-Assert) for clarity.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from unittest.mock import patch

import pytest
from sqlalchemy import Engine

from casbin_rule_store.adapter import PolicyStoreAdapter
from casbin_rule_store.config import DatabaseConfig, EnforcerConfig
from casbin_rule_store.constants import CASBIN_COMPONENT_LOGGER_NAMES
from casbin_rule_store.enforcer import create_enforcer
from casbin_rule_store.exceptions import (
    ConfigError,
    InvalidLinkError,
    MissingDriverError,
    MissingSourceError,
)
from casbin_rule_store.telemetry import get_system_logger
from support import sqlite_link


@pytest.fixture
def config(model_path: Path, db_path: Path) -> EnforcerConfig:
    return EnforcerConfig(
        model_path=str(model_path),
        database=DatabaseConfig(link=sqlite_link(db_path)),
    )


class TestCreateEnforcer:
    """Tests for create_enforcer."""

    def test_rbac_example_flow(self, config: EnforcerConfig):
        """Roles granted through g rules are enforced and persisted."""
        # Arrange
        with create_enforcer(config) as managed:
            enforcer = managed.enforcer

            # Act
            enforcer.add_policy("role_1", "node_1")
            enforcer.add_policies([["role_2", "node_2"], ["role_3", "node_3"]])
            enforcer.add_grouping_policy("user_1", "role_1")
            enforcer.add_grouping_policy("user_1", "role_2")

            # Assert
            assert enforcer.enforce("user_1", "node_1")
            assert enforcer.enforce("user_1", "node_2")
            assert not enforcer.enforce("user_1", "node_3")

            enforcer.remove_grouping_policy("user_1", "role_2")
            assert not enforcer.enforce("user_1", "node_2")

        # A second enforcer sees the persisted rules
        with create_enforcer(config) as reopened:
            assert reopened.enforcer.enforce("user_1", "node_1")
            assert not reopened.enforcer.enforce("user_1", "node_2")
            assert sorted(reopened.enforcer.get_policy()) == [
                ["role_1", "node_1"],
                ["role_2", "node_2"],
                ["role_3", "node_3"],
            ]

    def test_driver_and_source_build_the_link(self, config: EnforcerConfig, db_path: Path):
        # Arrange
        config.database = DatabaseConfig(driver="sqlite", source=f"/{db_path}")

        # Act
        with create_enforcer(config) as managed:
            managed.enforcer.add_policy("role_1", "node_1")

        # Assert
        assert db_path.exists()

    def test_missing_driver_raises(self, config: EnforcerConfig):
        config.database = DatabaseConfig(source="/tmp/policy.db")

        with pytest.raises(MissingDriverError):
            create_enforcer(config)

    def test_missing_source_raises(self, config: EnforcerConfig):
        config.database = DatabaseConfig(driver="sqlite")

        with pytest.raises(MissingSourceError):
            create_enforcer(config)

    def test_invalid_link_raises(self, config: EnforcerConfig):
        config.database = DatabaseConfig(link="no-driver-here")

        with pytest.raises(InvalidLinkError):
            create_enforcer(config)

    def test_missing_model_file_raises(self, config: EnforcerConfig, tmp_path: Path):
        config.model_path = str(tmp_path / "missing.conf")

        with pytest.raises(ConfigError, match="Model file not found"):
            create_enforcer(config)

    def test_disabled_enforcer_allows_everything(self, config: EnforcerConfig):
        config.enable = False

        with create_enforcer(config) as managed:
            assert managed.enforcer.enforce("nobody", "anything")

    def test_auto_save_off_does_not_persist(self, config: EnforcerConfig):
        # Arrange
        config.auto_save = False

        # Act
        with create_enforcer(config) as managed:
            managed.enforcer.add_policy("role_1", "node_1")

        # Assert
        with create_enforcer(config) as reopened:
            assert reopened.enforcer.get_policy() == []

    def test_no_reloader_without_auto_load(self, config: EnforcerConfig):
        with create_enforcer(config) as managed:
            assert managed.reloader is None

    def test_auto_load_picks_up_external_changes(self, config: EnforcerConfig):
        # Arrange
        config.auto_load = True
        config.auto_load_interval = 0.05

        with create_enforcer(config) as managed:
            assert managed.reloader is not None
            assert managed.reloader.running

            # Act: another writer adds a rule directly
            with PolicyStoreAdapter(link=config.database.resolve_link()) as writer:
                writer.add_policy("p", "p", ["role_1", "node_1"])
                writer.add_policy("g", "g", ["user_1", "role_1"])

            deadline = time.monotonic() + 5
            while not managed.enforcer.enforce("user_1", "node_1") and time.monotonic() < deadline:
                time.sleep(0.02)

            # Assert
            assert managed.enforcer.enforce("user_1", "node_1")

        assert not managed.reloader.running

    def test_caller_engine_is_not_disposed(self, config: EnforcerConfig, engine: Engine):
        # Arrange
        config.database = DatabaseConfig()

        # Act
        with patch.object(engine, "dispose") as dispose:
            with create_enforcer(config, engine=engine) as managed:
                managed.enforcer.add_policy("role_1", "node_1")

        # Assert
        dispose.assert_not_called()
        assert managed.adapter.closed

    def test_custom_table_name(self, config: EnforcerConfig):
        config.database.table_name = "casbin_policy_test"

        with create_enforcer(config) as managed:
            assert managed.adapter.table_name == "casbin_policy_test"


class TestManagedEnforcer:
    """Tests for ManagedEnforcer.close()."""

    def test_close_stops_reloader_before_adapter(self, config: EnforcerConfig):
        # Arrange
        config.auto_load = True
        managed = create_enforcer(config)
        calls = []

        # Act
        with (
            patch.object(managed.reloader, "stop", side_effect=lambda: calls.append("reloader")),
            patch.object(managed.adapter, "close", side_effect=lambda: calls.append("adapter")),
        ):
            managed.close()

        # Assert
        assert calls == ["reloader", "adapter"]

        # Release for real
        managed.close()


class TestLogging:
    """Tests for the logging side of create_enforcer."""

    def test_debug_turns_on_casbin_logs(self, config: EnforcerConfig, tmp_path: Path):
        # Arrange
        config.debug = True
        config.log_path = str(tmp_path / "system.jsonl")

        # Act
        with create_enforcer(config):
            # Assert
            for name in CASBIN_COMPONENT_LOGGER_NAMES:
                logger = logging.getLogger(name)
                assert not logger.disabled
                assert logger.isEnabledFor(logging.DEBUG)

    def test_default_config_leaves_logging_to_the_application(self, config: EnforcerConfig):
        # Act
        with create_enforcer(config):
            logger = get_system_logger()

            # Assert
            assert logger.handlers == []
            assert logger.propagate is True
            assert logging.getLogger("casbin").handlers == []

    def test_log_path_configures_file_logging(self, config: EnforcerConfig, tmp_path: Path):
        config.log_path = str(tmp_path / "logs" / "system.jsonl")

        with create_enforcer(config):
            assert len(get_system_logger().handlers) == 1

        assert (tmp_path / "logs" / "system.jsonl").exists()
