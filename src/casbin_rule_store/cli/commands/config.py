"""Config command group for casbin-rule-store CLI.

Provides configuration inspection subcommands.
"""

import json
from pathlib import Path

import click

from casbin_rule_store.config import get_config_path

from ..helpers import config_option, load_config


@click.group()
def config() -> None:
    """Configuration management commands."""
    pass


@config.command("show")
@config_option
def config_show(config_path: Path | None) -> None:
    """Display current configuration as JSON."""
    loaded = load_config(config_path)
    click.echo(json.dumps(loaded.model_dump(), indent=2))


@config.command("path")
def config_path_cmd() -> None:
    """Show config file path.

    Displays the OS-appropriate config file location.
    """
    path = get_config_path()
    click.echo(str(path))

    if not path.exists():
        click.echo("(file does not exist - run 'casbin-rule-store init' to create)", err=True)
