"""Package status models.

This module defines the per-package installation state tracked on the
device and the two list views the selection is scoped to.
"""

from enum import Enum


class PackageStatus(str, Enum):
    """Installation state of a package for the active device user.

    Attributes:
        INSTALLED: Package is installed for the user.
        UNINSTALLED: Package was removed for the user but remains on the
            system partition, so it can be restored.
    """

    INSTALLED = "installed"
    UNINSTALLED = "uninstalled"

    @property
    def flipped(self) -> "PackageStatus":
        """Return the opposite status."""
        if self is PackageStatus.INSTALLED:
            return PackageStatus.UNINSTALLED
        return PackageStatus.INSTALLED


class AppView(str, Enum):
    """List view that scopes the current selection.

    Attributes:
        INSTALLED: Packages that can be selected for removal.
        UNINSTALLED: Packages that can be selected for restoring.
    """

    INSTALLED = "installed"
    UNINSTALLED = "uninstalled"

    @property
    def status(self) -> PackageStatus:
        """Package status a selectable package must have in this view."""
        return PackageStatus(self.value)
