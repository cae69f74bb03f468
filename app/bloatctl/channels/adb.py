"""ADB privileged channel implementation.

Removes and restores packages for a single Android user through the
shell user of an authorized ADB connection, without root.
"""

import logging
import subprocess

from bloatctl.channels.base import ChannelError, PrivilegedChannel
from bloatctl.utils.shell import CommandResult, command_exists, run_command

logger = logging.getLogger(__name__)


def adb_args(*args: str, serial: str | None = None) -> list[str]:
    """Build an adb command line, targeting a device serial if given.

    Args:
        *args: Arguments following ``adb``.
        serial: Optional device serial passed with ``-s``.

    Returns:
        Complete argument list.
    """
    command = ["adb"]
    if serial:
        command.extend(["-s", serial])
    command.extend(args)
    return command


class AdbChannel(PrivilegedChannel):
    """Channel issuing package-manager commands over ADB.

    Permission means the device is attached and has authorized this
    host for USB debugging (``adb get-state`` reports ``device``).

    Attributes:
        serial: Target device serial (None = the only attached device).
        user: Android user id packages are managed for.
        timeout: Maximum seconds to wait for any single adb call.
    """

    def __init__(
        self,
        serial: str | None = None,
        user: int = 0,
        timeout: float = 60.0,
        dry_run: bool = False,
    ) -> None:
        """Initialize the ADB channel.

        Args:
            serial: Target device serial.
            user: Android user id.
            timeout: Per-call timeout in seconds.
            dry_run: If True, only simulate package operations.
        """
        super().__init__(dry_run=dry_run)
        self.serial = serial
        self.user = user
        self.timeout = timeout

    def is_available(self) -> bool:
        """Check if the adb binary is installed."""
        return command_exists("adb")

    def has_permission(self) -> bool:
        """Check if the device is attached and authorized."""
        try:
            result = self._adb("get-state")
        except ChannelError as e:
            logger.warning("Cannot query device state: %s", e)
            return False

        state = result.stdout.strip()
        if not result.success or state != "device":
            logger.info("Device not authorized (state=%r): %s", state, result.stderr.strip())
            return False
        return True

    def request_permission(self) -> None:
        """Re-trigger the USB debugging authorization prompt on the device.

        The prompt is answered on the device itself; this call does not
        wait for it.
        """
        try:
            self._adb("reconnect", "offline")
        except ChannelError as e:
            logger.warning("Could not request device authorization: %s", e)

    def uninstall(self, package: str) -> bool:
        """Uninstall a package for the configured user, keeping its data.

        Args:
            package: Package identifier.

        Returns:
            True if the package manager reported success.

        Raises:
            ChannelError: If adb is missing or the call timed out.
        """
        if self.dry_run:
            logger.info("Dry-run: would uninstall %s", package)
            return True

        result = self._adb("shell", "pm", "uninstall", "-k", "--user", str(self.user), package)
        return self._check(result, package, "Success", "uninstall")

    def reinstall(self, package: str) -> bool:
        """Reinstall a package that is still present on the system image.

        Args:
            package: Package identifier.

        Returns:
            True if the package manager reported the package installed.

        Raises:
            ChannelError: If adb is missing or the call timed out.
        """
        if self.dry_run:
            logger.info("Dry-run: would reinstall %s", package)
            return True

        result = self._adb(
            "shell",
            "cmd",
            "package",
            "install-existing",
            "--user",
            str(self.user),
            package,
        )
        return self._check(result, package, "installed for user", "reinstall")

    def _adb(self, *args: str) -> CommandResult:
        """Run an adb command bounded by the channel timeout.

        Raises:
            ChannelError: If adb is missing or the call timed out.
        """
        command = adb_args(*args, serial=self.serial)
        logger.debug("Executing %s", " ".join(command))
        try:
            return run_command(command, timeout=self.timeout)
        except subprocess.TimeoutExpired as e:
            msg = f"adb {args[0]} timed out after {self.timeout:g}s"
            raise ChannelError(msg) from e
        except FileNotFoundError as e:
            msg = "adb is not installed or not on PATH"
            raise ChannelError(msg) from e

    def _check(self, result: CommandResult, package: str, marker: str, verb: str) -> bool:
        """Interpret package manager output for a single package.

        ``pm`` can exit 0 while printing ``Failure [...]``, so the output
        marker decides success rather than the return code alone.
        """
        if result.success and marker in result.stdout:
            logger.info("%s: %s succeeded", package, verb)
            return True

        logger.warning(
            "%s: %s failed (exit %d): %s",
            package,
            verb,
            result.returncode,
            result.output or "no output",
        )
        return False
