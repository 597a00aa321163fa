"""Test helpers shared across test modules."""

from __future__ import annotations

from pathlib import Path

from casbin_rule_store.adapter import PolicyStoreAdapter


def sqlite_link(path: Path) -> str:
    """Driver-prefixed link for an absolute SQLite file path."""
    return f"sqlite:/{path}"


def stored_rows(adapter: PolicyStoreAdapter) -> list[tuple[str, ...]]:
    """All stored rows as sorted (ptype, v0..v5) tuples."""
    return sorted((r.ptype, *r.values) for r in adapter.table.select_all())


def pad(ptype: str, *fields: str) -> tuple[str, ...]:
    """Row tuple for a rule, with trailing fields empty."""
    values = list(fields) + [""] * (6 - len(fields))
    return (ptype, *values)
