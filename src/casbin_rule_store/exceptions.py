"""Exception hierarchy for casbin-rule-store.

All errors raised by the adapter, storage layer and configuration derive from
RuleStoreError, so callers can catch one base class.
"""

from __future__ import annotations

__all__ = [
    "RuleStoreError",
    "InvalidLinkError",
    "MissingDriverError",
    "MissingSourceError",
    "DatabaseError",
    "AdapterClosedError",
    "ConfigError",
    "ConfigNotFoundError",
]


class RuleStoreError(Exception):
    """Base exception for all casbin-rule-store errors."""


class InvalidLinkError(RuleStoreError, ValueError):
    """Raised when a database link has no driver prefix (``driver:details``)."""


class MissingDriverError(RuleStoreError, ValueError):
    """Raised when a database driver is missing from the config or not installed."""


class MissingSourceError(RuleStoreError, ValueError):
    """Raised when a driver/source database config has no source."""


class DatabaseError(RuleStoreError):
    """Raised when the storage layer fails.

    Covers table create/drop, insert, select, update, delete and transactions.
    The underlying SQLAlchemy error is available as ``__cause__``.
    """

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation


class AdapterClosedError(RuleStoreError):
    """Raised when a closed adapter is used."""


class ConfigError(RuleStoreError, ValueError):
    """Raised when the configuration is invalid or cannot be read."""


class ConfigNotFoundError(ConfigError):
    """Raised when the configuration file does not exist."""
