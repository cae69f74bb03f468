"""Package inventory providers.

This module exports the providers used to read package statuses from a device.
"""

from bloatctl.scanners.adb import AdbInventory
from bloatctl.scanners.base import InventoryProvider

__all__ = ["AdbInventory", "InventoryProvider"]
