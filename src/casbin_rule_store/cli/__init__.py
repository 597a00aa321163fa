"""Command-line interface for casbin-rule-store.

Provides commands for initializing configuration, managing the policy
table and inspecting or changing stored rules.
"""

from .main import cli, main

__all__ = ["cli", "main"]
