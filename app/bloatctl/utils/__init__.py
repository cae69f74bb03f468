"""Utility modules for bloatctl.

This module exports commonly used utility functions.
"""

from bloatctl.utils.formatting import (
    console,
    err_console,
    format_package,
    format_risk,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from bloatctl.utils.shell import CommandResult, command_exists, run_command

__all__ = [
    "CommandResult",
    "command_exists",
    "console",
    "err_console",
    "format_package",
    "format_risk",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
]
