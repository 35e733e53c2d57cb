"""CLI commands for cleanctl.

This package contains all subcommand implementations.
"""

from cleanctl.cli.commands import clean, history, orphans, permissions, validate

__all__ = ["clean", "history", "orphans", "permissions", "validate"]
