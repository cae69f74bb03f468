"""Privileged channels for changing package state.

This module provides the abstract channel interface and the ADB-backed
implementation.
"""

from bloatctl.channels.adb import AdbChannel
from bloatctl.channels.base import ChannelError, PrivilegedChannel

__all__ = ["AdbChannel", "ChannelError", "PrivilegedChannel"]
