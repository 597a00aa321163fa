"""Init command for casbin-rule-store CLI.

Handles interactive and non-interactive configuration initialization.
"""

from pathlib import Path

import click

from casbin_rule_store.config import DatabaseConfig, EnforcerConfig, get_config_path
from casbin_rule_store.constants import DEFAULT_AUTO_LOAD_INTERVAL_SECONDS, DEFAULT_TABLE_NAME
from casbin_rule_store.exceptions import RuleStoreError
from casbin_rule_store.storage import parse_link

from ..helpers import config_option, fail, open_adapter
from ..prompts import prompt_link, prompt_with_retry


@click.command()
@config_option
@click.option("--model", "model_path", type=click.Path(dir_okay=False), help="Casbin model file (model.conf)")
@click.option("--link", help="Database link, e.g. sqlite://var/lib/app/policy.db")
@click.option("--table", "table_name", default=DEFAULT_TABLE_NAME, show_default=True, help="Policy table name")
@click.option("--auto-load/--no-auto-load", default=False, help="Reload policy periodically")
@click.option(
    "--interval",
    type=click.FloatRange(min=0, min_open=True),
    default=DEFAULT_AUTO_LOAD_INTERVAL_SECONDS,
    show_default=True,
    help="Seconds between reloads",
)
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--non-interactive", is_flag=True, help="Fail instead of prompting for missing values")
@click.option("--force", is_flag=True, help="Overwrite existing configuration")
def init(
    config_path: Path | None,
    model_path: str | None,
    link: str | None,
    table_name: str,
    auto_load: bool,
    interval: float,
    debug: bool,
    non_interactive: bool,
    force: bool,
) -> None:
    """Initialize configuration and create the policy table.

    Prompts for the model file and database link unless they are given as
    options. With --non-interactive, both options are required.
    """
    target = config_path or get_config_path()

    if target.exists() and not force:
        fail(f"Configuration already exists at {target} (use --force to overwrite)")

    if non_interactive and (model_path is None or link is None):
        fail("--model and --link are required with --non-interactive")

    model_path = model_path or prompt_with_retry("Model file path")
    if link is None:
        link = prompt_link()

    try:
        parse_link(link)
    except RuleStoreError as e:
        fail(str(e))

    config = EnforcerConfig(
        model_path=model_path,
        debug=debug,
        auto_load=auto_load,
        auto_load_interval=interval,
        database=DatabaseConfig(link=link, table_name=table_name),
    )

    # Creating the adapter creates the table
    with open_adapter(config) as adapter:
        click.echo(f"Policy table ready: {adapter.table_name}")

    config.save_to_file(target)
    click.echo(f"Configuration saved to {target}")
    if not Path(model_path).is_file():
        click.echo(f"Warning: model file not found at {model_path}", err=True)
