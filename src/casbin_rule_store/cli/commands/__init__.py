"""CLI subcommands for casbin-rule-store."""
