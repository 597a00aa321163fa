"""Table command group for casbin-rule-store CLI.

Provides policy table lifecycle subcommands.
"""

from pathlib import Path

import click

from ..helpers import config_option, load_config, open_adapter


@click.group()
def table() -> None:
    """Policy table commands."""
    pass


@table.command("create")
@config_option
def table_create(config_path: Path | None) -> None:
    """Create the policy table if it does not exist."""
    config = load_config(config_path)

    with open_adapter(config) as adapter:
        click.echo(f"✓ Policy table ready: {adapter.table_name}")


@table.command("drop")
@config_option
@click.confirmation_option(prompt="Drop the policy table and every stored rule?")
def table_drop(config_path: Path | None) -> None:
    """Drop the policy table and every stored rule."""
    config = load_config(config_path)

    with open_adapter(config) as adapter:
        adapter.table.drop()
        click.echo(f"✓ Dropped policy table: {adapter.table_name}")
