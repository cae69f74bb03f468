"""ADB package inventory implementation.

Lists packages with ``pm list packages``. A package removed for the user
with ``pm uninstall --user`` still shows up with ``-u`` (include
uninstalled) but not without it, which is how its status is derived.
"""

import logging
import subprocess

from bloatctl.channels.adb import adb_args
from bloatctl.models.package import PackageStatus
from bloatctl.scanners.base import InventoryProvider
from bloatctl.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)


class AdbInventory(InventoryProvider):
    """Inventory of the packages on an ADB-attached device.

    Attributes:
        serial: Target device serial (None = the only attached device).
        user: Android user id to list packages for.
        timeout: Maximum seconds to wait for each listing.
        system_only: Restrict the inventory to system packages.
    """

    _PREFIX = "package:"

    def __init__(
        self,
        serial: str | None = None,
        user: int = 0,
        timeout: float = 60.0,
        system_only: bool = False,
    ) -> None:
        self.serial = serial
        self.user = user
        self.timeout = timeout
        self.system_only = system_only

    def is_available(self) -> bool:
        """Check if the adb binary is installed."""
        return command_exists("adb")

    def read(self) -> dict[str, PackageStatus]:
        """Read installed and uninstalled packages for the user.

        Returns:
            Mapping from package identifier to its status.

        Raises:
            RuntimeError: If adb is unavailable or a listing fails.
        """
        if not self.is_available():
            msg = "adb is not installed or not on PATH"
            raise RuntimeError(msg)

        known = self._list_packages(include_uninstalled=True)
        installed = self._list_packages(include_uninstalled=False)

        statuses = {
            name: PackageStatus.INSTALLED if name in installed else PackageStatus.UNINSTALLED
            for name in sorted(known | installed)
        }
        logger.debug(
            "Inventory: %d installed, %d uninstalled",
            len(installed),
            len(statuses) - len(installed),
        )
        return statuses

    def _list_packages(self, include_uninstalled: bool) -> set[str]:
        """Run ``pm list packages`` and collect package identifiers.

        Raises:
            RuntimeError: If the command fails or times out.
        """
        args = ["shell", "pm", "list", "packages"]
        if include_uninstalled:
            args.append("-u")
        if self.system_only:
            args.append("-s")
        args.extend(["--user", str(self.user)])

        try:
            result = run_command(adb_args(*args, serial=self.serial), timeout=self.timeout)
        except subprocess.TimeoutExpired as e:
            msg = f"pm list packages timed out after {self.timeout:g}s"
            raise RuntimeError(msg) from e

        if not result.success:
            msg = f"pm list packages failed: {result.output or 'unknown error'}"
            raise RuntimeError(msg)

        packages: set[str] = set()
        for line in result.stdout.splitlines():
            line = line.strip()
            if not line.startswith(self._PREFIX):
                if line:
                    logger.debug("Skipping unexpected pm output line: %r", line[:100])
                continue
            name = line[len(self._PREFIX) :].strip()
            if name:
                packages.add(name)
        return packages
