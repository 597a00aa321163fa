"""Operational logging for casbin-rule-store."""

from casbin_rule_store.telemetry.system_logger import (
    JsonFormatter,
    configure_logging,
    get_system_logger,
    set_casbin_logging,
)

__all__ = [
    "JsonFormatter",
    "configure_logging",
    "get_system_logger",
    "set_casbin_logging",
]
