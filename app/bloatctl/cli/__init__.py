"""CLI package for bloatctl.

This package contains the Typer application and all subcommands.
"""

from bloatctl.cli.main import app

__all__ = ["app"]
