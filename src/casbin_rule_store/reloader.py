"""Periodic policy reload.

Provides PolicyReloader, which refreshes an enforcer's in-memory policy from
the database every ``interval`` seconds, so changes written by other
processes become visible without a restart.

Triggers:
- Background timer (start()/stop())
- Direct call: reload_now()

A failed reload is logged and leaves the last successfully loaded policy in
place; the next tick tries again.
"""

from __future__ import annotations

__all__ = [
    "PolicyReloader",
    "ReloadResult",
]

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Literal

from casbin_rule_store.constants import POLICY_SECTIONS
from casbin_rule_store.exceptions import RuleStoreError
from casbin_rule_store.telemetry.system_logger import get_system_logger

if TYPE_CHECKING:
    from casbin import Enforcer


@dataclass
class ReloadResult:
    """Result of a policy reload attempt.

    Attributes:
        status: "success", "database_error" or "unexpected_error".
        old_rules_count: Number of rules before reload.
        new_rules_count: Number of rules after reload.
        error: Error message if status is not "success".
    """

    status: Literal["success", "database_error", "unexpected_error"]
    old_rules_count: int = 0
    new_rules_count: int = 0
    error: str | None = None


class PolicyReloader:
    """Reloads an enforcer's policy from storage on a fixed interval.

    The timer runs on a daemon thread. Reloads are serialized by a lock, so
    reload_now() may be called while the timer is running.
    """

    def __init__(
        self,
        enforcer: Enforcer,
        interval: float,
        system_logger: logging.Logger | None = None,
    ) -> None:
        """Initialize policy reloader.

        Args:
            enforcer: Enforcer whose policy is refreshed.
            interval: Seconds between reloads. Must be positive.
            system_logger: Logger for reload events (default: system logger).
        """
        if interval <= 0:
            raise ValueError(f"Reload interval must be positive, got {interval}")

        self._enforcer = enforcer
        self._interval = interval
        self._logger = system_logger or get_system_logger()

        self._last_reload_at: datetime | None = None
        self._reload_count = 0

        self._reload_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        """Whether the background timer is active."""
        return self._thread is not None and self._thread.is_alive()

    @property
    def current_rules_count(self) -> int:
        """Number of p and g rules currently held by the enforcer."""
        model = self._enforcer.get_model().model
        return sum(
            len(assertion.policy)
            for sec in POLICY_SECTIONS
            for assertion in model.get(sec, {}).values()
        )

    @property
    def last_reload_at(self) -> str | None:
        """ISO 8601 timestamp of last successful reload, or None."""
        return self._last_reload_at.isoformat() if self._last_reload_at else None

    @property
    def reload_count(self) -> int:
        """Number of successful reloads."""
        return self._reload_count

    def start(self) -> None:
        """Start the background timer. Does nothing if already running."""
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run,
            name="casbin-rule-store-reloader",
            daemon=True,
        )
        self._thread.start()
        self._logger.info({"event": "policy_reloader_started", "interval_seconds": self._interval})

    def stop(self, timeout: float | None = None) -> None:
        """Stop the background timer and wait for the thread to exit.

        If the thread is still busy when ``timeout`` expires, it keeps its
        stop signal and stays tracked; start() does nothing until it exits.
        """
        thread = self._thread
        if thread is None:
            return
        self._stop_event.set()
        thread.join(timeout)
        if thread.is_alive():
            self._logger.warning(
                {"event": "policy_reloader_stop_timeout", "timeout_seconds": timeout}
            )
            return
        self._thread = None
        self._logger.info({"event": "policy_reloader_stopped", "reload_count": self._reload_count})

    def _run(self) -> None:
        while not self._stop_event.wait(self._interval):
            self.reload_now()

    def reload_now(self) -> ReloadResult:
        """Reload policy from storage.

        On failure the enforcer keeps its previous policy.

        Returns:
            ReloadResult with status and rule counts.
        """
        with self._reload_lock:
            old_count = self.current_rules_count

            try:
                self._enforcer.load_policy()
            except RuleStoreError as e:
                return self._failed("database_error", str(e), old_count)
            except Exception as e:
                return self._failed("unexpected_error", f"{type(e).__name__}: {e}", old_count)

            self._last_reload_at = datetime.now(timezone.utc)
            self._reload_count += 1

            result = ReloadResult(
                status="success",
                old_rules_count=old_count,
                new_rules_count=self.current_rules_count,
            )
            self._logger.debug(
                {
                    "event": "policy_reloaded",
                    "old_rules_count": result.old_rules_count,
                    "new_rules_count": result.new_rules_count,
                    "reload_count": self._reload_count,
                }
            )
            return result

    def _failed(
        self, status: Literal["database_error", "unexpected_error"], error: str, old_count: int
    ) -> ReloadResult:
        self._logger.error({"event": "policy_reload_failed", "error_type": status, "error": error})
        return ReloadResult(status=status, old_rules_count=old_count, error=error)
