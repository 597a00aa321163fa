"""Configuration for casbin-rule-store.

Defines configuration models for the policy database and the enforcer built
on top of it. The CLI stores config at the OS-appropriate location (see
get_config_path()); applications can also build EnforcerConfig directly.

Example usage:
    # Load from config file
    config = EnforcerConfig.load_from_file(config_path)

    # Save new configuration
    config.save_to_file(config_path)
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Self

from pydantic import BaseModel, Field, ValidationError, model_validator

from casbin_rule_store.constants import (
    CONFIG_DIR,
    CONFIG_FILENAME,
    DEFAULT_AUTO_LOAD_INTERVAL_SECONDS,
    DEFAULT_TABLE_NAME,
    LINK_DRIVER_DELIMITER,
)
from casbin_rule_store.exceptions import (
    ConfigError,
    ConfigNotFoundError,
    MissingDriverError,
    MissingSourceError,
)

__all__ = [
    "DatabaseConfig",
    "EnforcerConfig",
    "get_config_path",
]


def get_config_path() -> Path:
    """Get the full path to the CLI configuration file.

    - macOS: ~/Library/Application Support/casbin-rule-store/casbin_rule_store_config.json
    - Linux: ~/.config/casbin-rule-store/casbin_rule_store_config.json
    - Windows: %APPDATA%\\casbin-rule-store\\casbin_rule_store_config.json
    """
    return Path(CONFIG_DIR) / CONFIG_FILENAME


class DatabaseConfig(BaseModel):
    """Policy database settings.

    Either ``link`` is set, or ``driver`` and ``source`` together describe
    the same thing split in two (``driver`` + ":" + ``source``).

    Attributes:
        link: Driver-prefixed link, e.g. "sqlite://var/lib/app/policy.db".
        driver: SQLAlchemy driver name, e.g. "postgresql+psycopg".
        source: Connection details after "driver://".
        table_name: Policy table name.
    """

    link: str | None = None
    driver: str | None = None
    source: str | None = None
    table_name: str = Field(default=DEFAULT_TABLE_NAME, min_length=1)

    def resolve_link(self) -> str:
        """Return the driver-prefixed link for this config.

        Raises:
            MissingDriverError: If no link is set and driver is empty.
            MissingSourceError: If no link is set and source is missing.
        """
        if self.link:
            return self.link
        if not self.driver:
            raise MissingDriverError("Database driver is required when no link is configured")
        if self.source is None:
            raise MissingSourceError("Database source is required when no link is configured")
        return f"{self.driver}{LINK_DRIVER_DELIMITER}{self.source}"


class EnforcerConfig(BaseModel):
    """Enforcer configuration.

    Attributes:
        model_path: Path to the Casbin model definition (model.conf).
        enable: Whether enforcement is on. When off, every request is allowed.
        debug: Log at DEBUG, including pycasbin's own logs.
        auto_load: Periodically reload the policy from the database.
        auto_load_interval: Seconds between reloads when auto_load is on.
        auto_save: Persist each policy change through the adapter immediately.
        database: Policy database settings.
        log_path: JSONL file for system logs (stderr when unset).
    """

    model_path: str
    enable: bool = True
    debug: bool = False
    auto_load: bool = False
    auto_load_interval: float = Field(default=DEFAULT_AUTO_LOAD_INTERVAL_SECONDS, gt=0)
    auto_save: bool = True
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    log_path: str | None = None

    @model_validator(mode="after")
    def model_path_not_blank(self) -> Self:
        if not self.model_path.strip():
            raise ValueError("model_path must not be empty")
        return self

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to JSON file.

        Creates parent directories if they don't exist. The file may hold
        database credentials, so it is written with 0o600 permissions.

        Args:
            config_path: Path where the config should be saved.
        """
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(self.model_dump(), f, indent=2)
            f.write("\n")

        config_path.chmod(0o600)

    @classmethod
    def load_from_file(cls, config_path: Path) -> EnforcerConfig:
        """Load configuration from JSON file.

        Args:
            config_path: Path to the config file.

        Returns:
            EnforcerConfig instance with loaded configuration.

        Raises:
            ConfigNotFoundError: If config file doesn't exist.
            ConfigError: If config file is invalid or missing required fields.
        """
        if not config_path.exists():
            raise ConfigNotFoundError(
                f"Configuration file not found at {config_path}.\n"
                "Run 'casbin-rule-store init' to create it."
            )

        try:
            with config_path.open(encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in config file {config_path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Could not read config file {config_path}: {e}") from e

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            errors = []
            for error in e.errors():
                loc = ".".join(str(x) for x in error["loc"])
                errors.append(f"  - {loc}: {error['msg']}")

            raise ConfigError(
                f"Invalid configuration in {config_path}:\n"
                + "\n".join(errors)
                + "\n\nEdit the config file or run 'casbin-rule-store init' to recreate."
            ) from e
