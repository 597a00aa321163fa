"""Main CLI entry point for casbin-rule-store.

Defines the CLI group and registers all subcommands.

Commands:
    init    - Initialize configuration and create the policy table
    config  - Configuration management commands
        show - Display current configuration
        path - Show config file path
    policy  - Policy management commands
        list   - List stored rules
        add    - Add a rule
        remove - Remove a rule
        check  - Check a request against the stored policy
    table   - Policy table commands
        create - Create the policy table
        drop   - Drop the policy table

Usage:
    casbin-rule-store -h, --help      Show help message
    casbin-rule-store -v, --version   Show version
    casbin-rule-store init            Initialize configuration
    casbin-rule-store policy list     List stored rules

Subcommand help:
    casbin-rule-store COMMAND -h      Show help for a specific command
"""

import sys

import click

from casbin_rule_store import __version__

from .commands.config import config
from .commands.init import init
from .commands.policy import policy
from .commands.table import table


class ReorderedGroup(click.Group):
    """Custom group that shows commands before custom help text."""

    def format_epilog(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        """Add extra help after commands section."""
        formatter.write(
            """
Quick Start:
  casbin-rule-store init --model rbac_model.conf --link sqlite://tmp/policy.db
  casbin-rule-store policy add p role_1 node_1
  casbin-rule-store policy add g user_1 role_1
  casbin-rule-store policy check user_1 node_1

Database Links (--link):
  driver:details, where details is everything after "driver://"
  sqlite:                          In-memory SQLite
  sqlite://var/lib/app/policy.db   SQLite file (absolute path)
  postgresql+psycopg:user:pw@host/db
"""
        )


@click.group(
    cls=ReorderedGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.pass_context
def cli(ctx: click.Context, version: bool) -> None:
    """casbin-rule-store: relational policy storage for Casbin."""
    if version:
        click.echo(f"casbin-rule-store {__version__}")
        sys.exit(0)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Register commands
cli.add_command(init)
cli.add_command(config)
cli.add_command(policy)
cli.add_command(table)


def main() -> None:
    """CLI entry point."""
    cli()
