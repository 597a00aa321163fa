"""Interactive prompt helpers for CLI commands.

Provides reusable prompt utilities for gathering user input.
"""

import click

from casbin_rule_store.exceptions import InvalidLinkError
from casbin_rule_store.storage import parse_link


def prompt_with_retry(prompt_text: str) -> str:
    """Prompt for a required value, retrying if empty.

    Args:
        prompt_text: Text to show in prompt.

    Returns:
        Non-empty string value from user.
    """
    while True:
        value: str = click.prompt(prompt_text, type=str, default="", show_default=False)
        if value.strip():
            return value.strip()
        click.echo("  This field is required.")


def prompt_link() -> str:
    """Prompt for a database link until it has a driver prefix.

    Returns:
        Link of the form ``driver:details``.
    """
    while True:
        link = prompt_with_retry("Database link (driver:details, e.g. sqlite://var/lib/policy.db)")
        try:
            parse_link(link)
        except InvalidLinkError as e:
            click.echo(f"  {e}")
            continue
        return link
