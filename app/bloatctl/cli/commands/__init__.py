"""CLI commands for bloatctl.

This package contains all subcommand implementations.
"""

from bloatctl.cli.commands import apps, catalog, device, remove, restore, settings

__all__ = ["apps", "catalog", "device", "remove", "restore", "settings"]
