"""System logger for casbin-rule-store.

Operational events (table lifecycle, policy load/save, storage failures,
reloads) go to the ``casbin-rule-store.system`` logger. Events are logged as
dicts and serialized one per line by JsonFormatter:

    {"time": "2024-01-15T10:30:00.123Z", "level": "DEBUG",
     "event": "policy_loaded", "table": "casbin_policy", "rules_count": 5}

Nothing is emitted until configure_logging() attaches a handler, so
embedding applications keep control of their logging setup.
"""

from __future__ import annotations

__all__ = [
    "JsonFormatter",
    "configure_logging",
    "get_system_logger",
    "set_casbin_logging",
]

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from casbin_rule_store.constants import (
    CASBIN_COMPONENT_LOGGER_NAMES,
    CASBIN_LOGGER_NAME,
    SYSTEM_LOGGER_NAME,
)


class JsonFormatter(logging.Formatter):
    """Render log records as single-line JSON with an ISO 8601 UTC timestamp.

    Dict messages are merged into the output object; anything else is
    stored under "message".
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, object] = {
            "time": timestamp.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
        }
        if isinstance(record.msg, dict):
            entry.update(record.msg)
        else:
            entry["message"] = record.getMessage()
        if record.exc_info:
            entry["stacktrace"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def get_system_logger() -> logging.Logger:
    """Return the shared system logger."""
    return logging.getLogger(SYSTEM_LOGGER_NAME)


def configure_logging(debug: bool = False, log_path: Path | None = None) -> logging.Logger:
    """Attach a JSON handler to the system logger and to pycasbin's logger.

    Calling this again replaces the handler installed by the previous call.
    Libraries embedding the adapter should leave this to the application.

    Args:
        debug: Log at DEBUG (per-operation events, pycasbin's own logs)
            instead of INFO.
        log_path: Write JSONL to this file. Logs go to stderr when None.

    Returns:
        The configured system logger.
    """
    level = logging.DEBUG if debug else logging.INFO
    logger = get_system_logger()
    casbin_logger = logging.getLogger(CASBIN_LOGGER_NAME)

    for target in (logger, casbin_logger):
        for existing in list(target.handlers):
            if getattr(existing, "_casbin_rule_store", False):
                target.removeHandler(existing)
                existing.close()

    handler: logging.Handler
    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter())
    handler._casbin_rule_store = True  # type: ignore[attr-defined]

    for target in (logger, casbin_logger):
        target.addHandler(handler)
        target.setLevel(level)
        target.propagate = False
    return logger


def set_casbin_logging(enabled: bool) -> None:
    """Turn pycasbin's component loggers on or off.

    casbin.Enforcer disables them while it is constructed unless asked to
    log, so call this after the enforcer exists.
    """
    for name in CASBIN_COMPONENT_LOGGER_NAMES:
        logging.getLogger(name).disabled = not enabled
