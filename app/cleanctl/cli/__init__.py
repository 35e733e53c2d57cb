"""CLI package for cleanctl.

This package contains the Typer application and all subcommands.
"""

from cleanctl.cli.main import app

__all__ = ["app"]
