"""RuleTable - row-level access to the policy table.

This is the storage collaborator used by the adapter. It speaks in
RuleRecords and equality filters and hides SQLAlchemy from the caller:

- create() / drop():     schema lifecycle (idempotent)
- insert(records):       one bulk INSERT
- select_all():          every row, in storage order
- delete(matches):       one DELETE for an OR of equality filters
- update(values, match): one UPDATE for an equality filter
- transaction():         RuleTable bound to a single transaction

A filter is plain data: a mapping of column name to required value. A list
of filters means "any of these". Every SQLAlchemy failure is re-raised as
DatabaseError.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager

from sqlalchemy import Connection, Engine, Table, and_, delete, insert, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.elements import ColumnElement

from casbin_rule_store.codec import RuleRecord
from casbin_rule_store.exceptions import DatabaseError
from casbin_rule_store.storage.schema import build_policy_table
from casbin_rule_store.telemetry.system_logger import get_system_logger

__all__ = [
    "RuleTable",
    "database_errors",
]

_system_logger = get_system_logger()


@contextmanager
def database_errors(operation: str, table: str | None = None) -> Iterator[None]:
    """Translate SQLAlchemy errors raised in the block into DatabaseError.

    Args:
        operation: Short name of the storage operation (for the message).
        table: Table involved, if any (for the log entry).

    Raises:
        DatabaseError: Chained from the original SQLAlchemyError.
    """
    try:
        yield
    except SQLAlchemyError as e:
        _system_logger.error(
            {
                "event": "database_error",
                "operation": operation,
                "table": table,
                "error_type": type(e).__name__,
                "error": str(e),
            }
        )
        raise DatabaseError(operation, str(e)) from e


class RuleTable:
    """Policy table bound to an Engine or to one open Connection.

    When bound to an Engine, each call runs in its own short transaction.
    When bound to a Connection (see transaction()), calls join the caller's
    transaction and nothing is committed here.
    """

    def __init__(self, bind: Engine | Connection, table: Table) -> None:
        self._bind = bind
        self._table = table

    @classmethod
    def for_engine(cls, engine: Engine, name: str) -> RuleTable:
        """Create a RuleTable for the named table on an engine."""
        return cls(engine, build_policy_table(name))

    @property
    def name(self) -> str:
        return self._table.name

    @property
    def table(self) -> Table:
        return self._table

    @contextmanager
    def _connect(self) -> Iterator[Connection]:
        if isinstance(self._bind, Connection):
            yield self._bind
        else:
            with self._bind.begin() as conn:
                yield conn

    def _predicate(self, matches: Sequence[Mapping[str, str]]) -> ColumnElement[bool]:
        clauses = [
            and_(*(self._table.c[column] == value for column, value in match.items()))
            for match in matches
        ]
        return or_(*clauses)

    # --- schema ---

    def create(self) -> None:
        """Create the table if it does not exist."""
        with database_errors("create table", self.name), self._connect() as conn:
            self._table.create(conn, checkfirst=True)

    def drop(self) -> None:
        """Drop the table if it exists."""
        with database_errors("drop table", self.name), self._connect() as conn:
            self._table.drop(conn, checkfirst=True)

    # --- rows ---

    def insert(self, records: Sequence[RuleRecord]) -> int:
        """Insert records in a single statement.

        Returns:
            Number of records inserted (0 without touching storage when empty).
        """
        if not records:
            return 0
        rows = [record.to_row() for record in records]
        with database_errors("insert", self.name), self._connect() as conn:
            conn.execute(insert(self._table), rows)
        return len(rows)

    def select_all(self) -> list[RuleRecord]:
        """Read every row. No ordering is applied and no limit is set."""
        with database_errors("select", self.name), self._connect() as conn:
            rows = conn.execute(select(self._table)).mappings().all()
        return [RuleRecord(**row) for row in rows]

    def delete(self, matches: Sequence[Mapping[str, str]]) -> int:
        """Delete every row matching any of the filters, in one statement.

        Args:
            matches: Equality filters; a row is deleted if it satisfies at
                least one. An empty list deletes nothing.

        Returns:
            Number of rows deleted as reported by the driver.
        """
        if not matches:
            return 0
        stmt = delete(self._table).where(self._predicate(matches))
        with database_errors("delete", self.name), self._connect() as conn:
            result = conn.execute(stmt)
        return result.rowcount

    def update(self, values: Mapping[str, str], match: Mapping[str, str]) -> int:
        """Set ``values`` on every row matching the filter.

        Returns:
            Number of rows updated as reported by the driver.
        """
        stmt = update(self._table).where(self._predicate([match])).values(**values)
        with database_errors("update", self.name), self._connect() as conn:
            result = conn.execute(stmt)
        return result.rowcount

    @contextmanager
    def transaction(self) -> Iterator[RuleTable]:
        """Run a block of table calls in one transaction.

        Commits when the block exits normally and rolls back on any
        exception; the connection is released on every exit path.

        Yields:
            RuleTable bound to the transaction's connection.
        """
        if isinstance(self._bind, Connection):
            yield self
            return
        with database_errors("transaction", self.name), self._bind.begin() as conn:
            yield RuleTable(conn, self._table)
