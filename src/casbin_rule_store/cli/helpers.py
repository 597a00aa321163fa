"""Shared helpers for CLI commands.

Loads the CLI config and opens the adapter or enforcer it describes,
turning library errors into a "✗ ..." message and exit code 1.
"""

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import NoReturn

import click

from casbin_rule_store.adapter import PolicyStoreAdapter
from casbin_rule_store.config import EnforcerConfig, get_config_path
from casbin_rule_store.enforcer import ManagedEnforcer, create_enforcer
from casbin_rule_store.exceptions import RuleStoreError
from casbin_rule_store.telemetry import configure_logging

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to config file (default: OS config location)",
)


def fail(message: str) -> NoReturn:
    """Print an error and exit with status 1."""
    click.echo(f"✗ {message}", err=True)
    sys.exit(1)


def load_config(config_path: Path | None) -> EnforcerConfig:
    """Load the CLI config or exit with an error.

    Also sets up JSON logging to stderr (or the configured log file).
    """
    try:
        config = EnforcerConfig.load_from_file(config_path or get_config_path())
    except RuleStoreError as e:
        fail(str(e))

    configure_logging(
        debug=config.debug,
        log_path=Path(config.log_path) if config.log_path else None,
    )
    return config


@contextmanager
def open_adapter(config: EnforcerConfig) -> Iterator[PolicyStoreAdapter]:
    """Open the configured policy table, closing it afterwards."""
    try:
        adapter = PolicyStoreAdapter(
            link=config.database.resolve_link(),
            table_name=config.database.table_name,
        )
    except RuleStoreError as e:
        fail(str(e))

    with adapter:
        try:
            yield adapter
        except RuleStoreError as e:
            fail(str(e))


@contextmanager
def open_enforcer(config: EnforcerConfig) -> Iterator[ManagedEnforcer]:
    """Create the configured enforcer without periodic reload."""
    one_shot = config.model_copy(update={"auto_load": False})
    try:
        managed = create_enforcer(one_shot)
    except RuleStoreError as e:
        fail(str(e))

    with managed:
        try:
            yield managed
        except RuleStoreError as e:
            fail(str(e))
