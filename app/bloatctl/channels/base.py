"""Abstract base class for privileged channels.

This module defines the PrivilegedChannel interface: the four operations
the orchestrator relies on to change package state on a device it has
no root access to.
"""

from abc import ABC, abstractmethod

from bloatctl.models.action import Direction


class ChannelError(Exception):
    """Raised when a channel call cannot complete (missing tool, timeout)."""


class PrivilegedChannel(ABC):
    """Abstract base class for delegated-privilege package channels.

    A channel runs package-manager commands as a higher-privilege
    principal. How it does so is up to the implementation.

    Attributes:
        dry_run: If True, report success without changing anything.

    Example:
        >>> channel = AdbChannel(dry_run=True)
        >>> if channel.has_permission():
        ...     channel.uninstall("com.example.bloat")
    """

    def __init__(self, dry_run: bool = False) -> None:
        """Initialize the channel.

        Args:
            dry_run: If True, only simulate package operations.
        """
        self._dry_run = dry_run

    @property
    def dry_run(self) -> bool:
        """Check if channel is in dry-run mode."""
        return self._dry_run

    @abstractmethod
    def has_permission(self) -> bool:
        """Check if the channel is currently authorized.

        Returns:
            True if package operations may be issued.
        """

    @abstractmethod
    def request_permission(self) -> None:
        """Ask for authorization without waiting for the answer."""

    @abstractmethod
    def uninstall(self, package: str) -> bool:
        """Uninstall a package for the device user.

        Args:
            package: Package identifier.

        Returns:
            True if the package was uninstalled.

        Raises:
            ChannelError: If the call could not be completed.
        """

    @abstractmethod
    def reinstall(self, package: str) -> bool:
        """Reinstall a previously uninstalled package.

        Args:
            package: Package identifier.

        Returns:
            True if the package was reinstalled.

        Raises:
            ChannelError: If the call could not be completed.
        """

    def transition(self, package: str, direction: Direction) -> bool:
        """Dispatch a package to uninstall() or reinstall().

        Args:
            package: Package identifier.
            direction: Transition to apply.

        Returns:
            Result of the underlying primitive.
        """
        if direction is Direction.REMOVE:
            return self.uninstall(package)
        return self.reinstall(package)
