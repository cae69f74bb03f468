"""Abstract base class for package inventory providers.

This module defines the InventoryProvider interface used to initialize
and reconcile the status tracker.
"""

from abc import ABC, abstractmethod

from bloatctl.models.package import PackageStatus


class InventoryProvider(ABC):
    """Abstract base class for device package inventories.

    Example:
        >>> inventory = AdbInventory()
        >>> if inventory.is_available():
        ...     statuses = inventory.read()
    """

    @abstractmethod
    def read(self) -> dict[str, PackageStatus]:
        """Read the status of every package known to the device.

        Returns:
            Mapping from package identifier to its current status.

        Raises:
            RuntimeError: If the inventory cannot be read.
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the inventory can be queried on this system.

        Returns:
            True if the provider can be used, False otherwise.
        """

    def count(self) -> tuple[int, int]:
        """Count installed and uninstalled packages.

        Returns:
            Tuple of (installed_count, uninstalled_count).
        """
        statuses = self.read().values()
        installed = sum(1 for status in statuses if status is PackageStatus.INSTALLED)
        return installed, len(statuses) - installed
