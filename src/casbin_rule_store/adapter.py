"""Policy store adapter - persists a Casbin model in one relational table.

PolicyStoreAdapter implements pycasbin's adapter interfaces (Adapter,
batch add/remove, UpdateAdapter) on top of RuleTable:

    load_policy            - read every row into the model
    save_policy            - drop, recreate and bulk-insert the whole model
    add_policy(ies)        - insert one row / one bulk insert
    remove_policy          - delete rows matching a rule's non-empty fields
    remove_filtered_policy - delete rows matching fields from an offset
    remove_policies        - one DELETE over an OR of rule filters
    update_policy(ies)     - update rows by match; batch runs in one transaction

The adapter caches no policy state. Every call goes to the database, and the
first storage error is raised as DatabaseError.

save_policy is not crash-safe: it runs drop, create and insert as separate
statements, so a failure between them can leave the table missing or empty.
Use it for occasional full snapshots; rely on the per-rule methods (auto-save)
for routine persistence.
"""

from __future__ import annotations

__all__ = ["PolicyStoreAdapter"]

from collections.abc import Sequence
from types import TracebackType
from typing import TYPE_CHECKING

from casbin import persist
from casbin.persist.adapters.update_adapter import UpdateAdapter
from sqlalchemy import Engine

from casbin_rule_store.codec import (
    RuleRecord,
    build_filter_rule,
    decode_rule,
    encode_rule,
    prefix_match_fields,
)
from casbin_rule_store.constants import DEFAULT_TABLE_NAME, POLICY_SECTIONS
from casbin_rule_store.exceptions import AdapterClosedError, InvalidLinkError
from casbin_rule_store.storage import RuleTable, create_engine_from_link
from casbin_rule_store.telemetry.system_logger import get_system_logger

if TYPE_CHECKING:
    from casbin.model import Model

_system_logger = get_system_logger()


class PolicyStoreAdapter(persist.Adapter, UpdateAdapter):
    """Casbin adapter backed by a SQLAlchemy table.

    Usage:
        with PolicyStoreAdapter(link="sqlite://var/lib/app/policy.db") as adapter:
            enforcer = casbin.Enforcer("model.conf", adapter)

    An engine passed by the caller stays owned by the caller; an engine built
    from ``link`` is disposed by close(). Every policy operation raises
    AdapterClosedError once the adapter is closed.
    """

    def __init__(
        self,
        engine: Engine | None = None,
        link: str | None = None,
        table_name: str | None = None,
    ) -> None:
        """Resolve the database and make sure the policy table exists.

        Args:
            engine: Pre-built SQLAlchemy engine. Takes precedence over link.
            link: Driver-prefixed link (``driver:details``) used when no
                engine is given.
            table_name: Policy table name (default: casbin_policy).

        Raises:
            InvalidLinkError: If neither engine nor a valid link is given.
            DatabaseError: If the policy table cannot be created.
        """
        if engine is None:
            if link is None:
                raise InvalidLinkError("Either an engine or a database link is required")
            engine = create_engine_from_link(link)
            self._owns_engine = True
        else:
            self._owns_engine = False

        self._engine: Engine | None = engine
        self._table = RuleTable.for_engine(engine, table_name or DEFAULT_TABLE_NAME)

        try:
            self._table.create()
        except Exception:
            self.close()
            raise

        _system_logger.debug(
            {
                "event": "adapter_initialized",
                "table": self._table.name,
                "dialect": engine.dialect.name,
                "owns_engine": self._owns_engine,
            }
        )

    @property
    def table_name(self) -> str:
        return self._table.name

    @property
    def table(self) -> RuleTable:
        """The policy table. Raises AdapterClosedError after close()."""
        if self._engine is None:
            raise AdapterClosedError(f"Adapter for table {self.table_name!r} is closed")
        return self._table

    @property
    def closed(self) -> bool:
        return self._engine is None

    # --- lifecycle ---

    def close(self) -> None:
        """Release the engine if this adapter created it. Safe to call twice."""
        if self._engine is None:
            return
        if self._owns_engine:
            self._engine.dispose()
        self._engine = None

    def __enter__(self) -> PolicyStoreAdapter:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # --- load / save ---

    def load_policy(self, model: Model) -> None:
        """Load every stored rule into the model.

        All rows are read before the model is touched, so a failed read
        leaves the model unchanged.
        """
        records = self.table.select_all()
        for record in records:
            persist.load_policy_line(decode_rule(record), model)

        _system_logger.debug(
            {"event": "policy_loaded", "table": self.table_name, "rules_count": len(records)}
        )

    def save_policy(self, model: Model) -> bool:
        """Replace the stored policy with every p and g rule in the model."""
        records = [
            encode_rule(ptype, rule)
            for sec in POLICY_SECTIONS
            for ptype, assertion in model.model.get(sec, {}).items()
            for rule in assertion.policy
        ]

        self.table.drop()
        self.table.create()
        self.table.insert(records)

        _system_logger.debug(
            {"event": "policy_saved", "table": self.table_name, "rules_count": len(records)}
        )
        return True

    # --- add ---

    def add_policy(self, sec: str, ptype: str, rule: Sequence[str]) -> bool:
        """Insert one rule."""
        self.table.insert([encode_rule(ptype, rule)])
        self._log_change("policy_added", sec, ptype, 1)
        return True

    def add_policies(self, sec: str, ptype: str, rules: Sequence[Sequence[str]]) -> bool:
        """Insert several rules in one statement. No-op for an empty list."""
        count = self.table.insert([encode_rule(ptype, rule) for rule in rules])
        self._log_change("policies_added", sec, ptype, count)
        return True

    # --- remove ---

    def remove_policy(self, sec: str, ptype: str, rule: Sequence[str]) -> bool:
        """Delete every row matching the rule's non-empty fields."""
        return self._delete_matching(sec, ptype, encode_rule(ptype, rule))

    def remove_filtered_policy(
        self, sec: str, ptype: str, field_index: int, *field_values: str
    ) -> bool:
        """Delete every row whose fields from ``field_index`` on match ``field_values``.

        Empty values leave their position unconstrained.
        """
        return self._delete_matching(sec, ptype, build_filter_rule(ptype, field_index, field_values))

    def remove_policies(self, sec: str, ptype: str, rules: Sequence[Sequence[str]]) -> bool:
        """Delete rows matching any of the rules, in a single statement.

        Each rule constrains ptype plus every position it supplies. No-op
        for an empty list.
        """
        matches = [prefix_match_fields(ptype, rule) for rule in rules]
        deleted = self.table.delete(matches)
        self._log_change("policies_removed", sec, ptype, deleted)
        return True

    def _delete_matching(self, sec: str, ptype: str, record: RuleRecord) -> bool:
        deleted = self.table.delete([record.match_fields()])
        self._log_change("policy_removed", sec, ptype, deleted)
        return True

    # --- update ---

    def update_policy(
        self, sec: str, ptype: str, old_rule: Sequence[str], new_policy: Sequence[str]
    ) -> bool:
        """Rewrite every row matching ``old_rule`` to hold ``new_policy``.

        Rows are matched like remove_policy. There is no row identity, so all
        matching rows receive the same new values.
        """
        updated = self._update_matching(self.table, ptype, old_rule, new_policy)
        self._log_change("policy_updated", sec, ptype, updated)
        return True

    def update_policies(
        self,
        sec: str,
        ptype: str,
        old_rules: Sequence[Sequence[str]],
        new_rules: Sequence[Sequence[str]],
    ) -> bool:
        """Apply ``old_rules[i] -> new_rules[i]`` for every pair, all or nothing.

        Pairs beyond the shorter list are ignored. The updates share one
        transaction; any failure rolls back every pair.
        """
        if not old_rules or not new_rules:
            return True

        updated = 0
        with self.table.transaction() as tx:
            for old_rule, new_rule in zip(old_rules, new_rules):
                updated += self._update_matching(tx, ptype, old_rule, new_rule)

        self._log_change("policies_updated", sec, ptype, updated)
        return True

    @staticmethod
    def _update_matching(
        table: RuleTable, ptype: str, old_rule: Sequence[str], new_rule: Sequence[str]
    ) -> int:
        old_record = encode_rule(ptype, old_rule)
        new_record = encode_rule(ptype, new_rule)
        return table.update(new_record.value_row(), old_record.match_fields())

    def _log_change(self, event: str, sec: str, ptype: str, rows: int) -> None:
        _system_logger.debug(
            {"event": event, "table": self.table_name, "sec": sec, "ptype": ptype, "rows": rows}
        )
