"""Policy table schema.

One table per adapter, no primary key and no indexes:

    ptype VARCHAR(10)  NOT NULL DEFAULT ''
    v0..v5 VARCHAR(256) NOT NULL DEFAULT ''

Rows are a multiset; duplicate rules are stored as duplicate rows.
"""

from __future__ import annotations

from sqlalchemy import Column, MetaData, String, Table

from casbin_rule_store.constants import (
    PTYPE_COLUMN,
    PTYPE_COLUMN_LENGTH,
    VALUE_COLUMN_LENGTH,
    VALUE_COLUMNS,
)

__all__ = ["build_policy_table"]


def build_policy_table(name: str, metadata: MetaData | None = None) -> Table:
    """Describe the policy table under the given name.

    Args:
        name: Table name.
        metadata: MetaData to register the table in. A private one is used
            when omitted so adapters with the same table name never clash.

    Returns:
        SQLAlchemy Table with ptype and v0..v5 columns.
    """
    columns = [
        Column(PTYPE_COLUMN, String(PTYPE_COLUMN_LENGTH), nullable=False, server_default=""),
    ]
    columns.extend(
        Column(column, String(VALUE_COLUMN_LENGTH), nullable=False, server_default="")
        for column in VALUE_COLUMNS
    )
    return Table(name, metadata or MetaData(), *columns, comment="policy table")
