"""Relational storage for policy rules.

Structure:
    link.py    - ``driver:details`` link parsing and engine creation
    schema.py  - policy table definition (ptype, v0..v5)
    table.py   - RuleTable: rows, equality filters and transactions
"""

from casbin_rule_store.storage.link import DatabaseLink, create_engine_from_link, parse_link
from casbin_rule_store.storage.schema import build_policy_table
from casbin_rule_store.storage.table import RuleTable, database_errors

__all__ = [
    "DatabaseLink",
    "RuleTable",
    "build_policy_table",
    "create_engine_from_link",
    "database_errors",
    "parse_link",
]
