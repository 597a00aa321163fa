"""Policy command group for casbin-rule-store CLI.

Provides policy management subcommands. Changes go through a Casbin
enforcer with auto-save, so the table is updated the same way an
application would update it.
"""

from pathlib import Path

import click

from casbin_rule_store.codec import decode_rule

from ..helpers import config_option, fail, load_config, open_adapter, open_enforcer


def _section(ptype: str) -> str:
    """Map a ptype ("p", "p2", "g", "g2", ...) to its model section."""
    sec = ptype[:1]
    if sec not in ("p", "g"):
        fail(f"Unknown policy type {ptype!r}: expected p, p2, ..., g, g2, ...")
    return sec


@click.group()
def policy() -> None:
    """Policy management commands."""
    pass


@policy.command("list")
@config_option
@click.option("--ptype", help="Only show rules of this type (e.g. p, g)")
def policy_list(config_path: Path | None, ptype: str | None) -> None:
    """List stored policy rules, one line per row."""
    config = load_config(config_path)

    with open_adapter(config) as adapter:
        records = adapter.table.select_all()

    shown = [record for record in records if ptype is None or record.ptype == ptype]
    for record in shown:
        click.echo(decode_rule(record))
    click.echo(f"{len(shown)} rule{'s' if len(shown) != 1 else ''}", err=True)


@policy.command("add")
@config_option
@click.argument("ptype")
@click.argument("fields", nargs=-1, required=True)
def policy_add(config_path: Path | None, ptype: str, fields: tuple[str, ...]) -> None:
    """Add a rule, e.g. `policy add p role_1 node_1` or `policy add g user_1 role_1`."""
    config = load_config(config_path)
    sec = _section(ptype)

    with open_enforcer(config) as managed:
        enforcer = managed.enforcer
        if sec == "p":
            added = enforcer.add_named_policy(ptype, *fields)
        else:
            added = enforcer.add_named_grouping_policy(ptype, *fields)

    if added:
        click.echo(f"✓ Added {ptype}, {', '.join(fields)}")
    else:
        click.echo(f"Rule already exists: {ptype}, {', '.join(fields)}")


@policy.command("remove")
@config_option
@click.argument("ptype")
@click.argument("fields", nargs=-1, required=True)
def policy_remove(config_path: Path | None, ptype: str, fields: tuple[str, ...]) -> None:
    """Remove a rule, e.g. `policy remove p role_1 node_1`."""
    config = load_config(config_path)
    sec = _section(ptype)

    with open_enforcer(config) as managed:
        enforcer = managed.enforcer
        if sec == "p":
            removed = enforcer.remove_named_policy(ptype, *fields)
        else:
            removed = enforcer.remove_named_grouping_policy(ptype, *fields)

    if removed:
        click.echo(f"✓ Removed {ptype}, {', '.join(fields)}")
    else:
        fail(f"Rule not found: {ptype}, {', '.join(fields)}")


@policy.command("check")
@config_option
@click.argument("request", nargs=-1, required=True)
def policy_check(config_path: Path | None, request: tuple[str, ...]) -> None:
    """Check a request against the stored policy, e.g. `policy check user_1 node_1`.

    Exit codes:
        0: Request is allowed
        1: Request is denied (or an error occurred)
    """
    config = load_config(config_path)

    with open_enforcer(config) as managed:
        allowed = managed.enforcer.enforce(*request)

    if allowed:
        click.echo(f"✓ allowed: {', '.join(request)}")
    else:
        fail(f"denied: {', '.join(request)}")
