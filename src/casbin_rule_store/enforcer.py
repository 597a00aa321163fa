"""Enforcer factory - a configured Casbin enforcer over the policy table.

Example usage:
    config = EnforcerConfig(
        model_path="rbac_model.conf",
        database=DatabaseConfig(link="sqlite://var/lib/app/policy.db"),
    )
    with create_enforcer(config) as managed:
        managed.enforcer.add_policy("role_1", "node_1")
        managed.enforcer.enforce("user_1", "node_1")
"""

from __future__ import annotations

__all__ = [
    "ManagedEnforcer",
    "create_enforcer",
]

from dataclasses import dataclass
from pathlib import Path
from types import TracebackType

import casbin
from sqlalchemy import Engine

from casbin_rule_store.adapter import PolicyStoreAdapter
from casbin_rule_store.config import EnforcerConfig
from casbin_rule_store.exceptions import ConfigError
from casbin_rule_store.reloader import PolicyReloader
from casbin_rule_store.telemetry.system_logger import configure_logging, set_casbin_logging


@dataclass
class ManagedEnforcer:
    """An enforcer together with the resources it depends on.

    close() stops the reloader (if any) and then closes the adapter, so the
    reloader never queries a released engine.

    Attributes:
        enforcer: The Casbin enforcer.
        adapter: Adapter persisting the enforcer's policy.
        reloader: Periodic reloader, when auto_load is enabled.
    """

    enforcer: casbin.Enforcer
    adapter: PolicyStoreAdapter
    reloader: PolicyReloader | None = None

    def close(self) -> None:
        if self.reloader is not None:
            self.reloader.stop()
        self.adapter.close()

    def __enter__(self) -> ManagedEnforcer:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def create_enforcer(config: EnforcerConfig, engine: Engine | None = None) -> ManagedEnforcer:
    """Create an enforcer backed by the policy table.

    Loads the stored policy, applies the enable/auto-save flags and starts
    periodic reloading when auto_load is set. Logging is configured only
    when debug or log_path is set; debug also turns on pycasbin's own logs.

    Args:
        config: Enforcer configuration.
        engine: Pre-built SQLAlchemy engine. When given, the database link in
            config is ignored and the engine is not disposed on close().

    Returns:
        ManagedEnforcer wrapping the enforcer, adapter and reloader.

    Raises:
        ConfigError: If the model file does not exist.
        MissingDriverError: If the database config lacks a driver, or the
            driver package is not installed.
        MissingSourceError: If the database config lacks a source.
        InvalidLinkError: If the database link is malformed.
        DatabaseError: If the policy table cannot be created or read.
    """
    if config.debug or config.log_path:
        configure_logging(
            debug=config.debug,
            log_path=Path(config.log_path) if config.log_path else None,
        )

    model_path = Path(config.model_path)
    if not model_path.is_file():
        raise ConfigError(f"Model file not found: {model_path}")

    link = None if engine is not None else config.database.resolve_link()
    adapter = PolicyStoreAdapter(engine=engine, link=link, table_name=config.database.table_name)

    try:
        enforcer = casbin.Enforcer(str(model_path), adapter)
    except Exception:
        adapter.close()
        raise

    set_casbin_logging(config.debug)
    enforcer.enable_enforce(config.enable)
    enforcer.enable_auto_save(config.auto_save)

    reloader = None
    if config.auto_load:
        reloader = PolicyReloader(enforcer, config.auto_load_interval)
        reloader.start()

    return ManagedEnforcer(enforcer=enforcer, adapter=adapter, reloader=reloader)
