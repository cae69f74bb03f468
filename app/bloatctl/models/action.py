"""Action models for batch package transitions.

This module defines the direction of a batch operation, the outcome of
each per-package transition, and the report returned for a whole batch.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from bloatctl.models.package import AppView, PackageStatus


class Direction(str, Enum):
    """Direction of a package state transition.

    Attributes:
        REMOVE: Uninstall the package for the device user.
        RESTORE: Reinstall a previously removed package.
    """

    REMOVE = "remove"
    RESTORE = "restore"

    @property
    def source_status(self) -> PackageStatus:
        """Status a package has before the transition."""
        if self is Direction.REMOVE:
            return PackageStatus.INSTALLED
        return PackageStatus.UNINSTALLED

    @property
    def target_status(self) -> PackageStatus:
        """Status a package has after a successful transition."""
        return self.source_status.flipped

    @property
    def view(self) -> AppView:
        """List view from which packages are selected for this direction."""
        return AppView(self.source_status.value)


@dataclass(frozen=True, slots=True)
class OperationResult:
    """Outcome of a single package transition within a batch.

    Attributes:
        package: Package identifier that was operated on.
        direction: Direction of the transition.
        success: Whether the transition succeeded.
        message: Optional diagnostic or informational text.
        dispatched: False when the package was already in the target
            state and the channel was never invoked.
    """

    package: str
    direction: Direction
    success: bool
    message: str | None = None
    dispatched: bool = True

    def __post_init__(self) -> None:
        """Validate result data after initialization."""
        if not self.package:
            msg = "Package name cannot be empty"
            raise ValueError(msg)

    @property
    def failed(self) -> bool:
        """Check if the transition failed."""
        return not self.success


class BatchOutcome(str, Enum):
    """Overall outcome of a batch run.

    Attributes:
        COMPLETED: Every selected package was attempted.
        CANCELLED: The batch stopped early; some packages were not attempted.
        PERMISSION_DENIED: The privileged channel refused access, so no
            package was attempted.
    """

    COMPLETED = "completed"
    CANCELLED = "cancelled"
    PERMISSION_DENIED = "permission_denied"


@dataclass(frozen=True, slots=True)
class BatchReport:
    """Report for a single batch run.

    Attributes:
        direction: Direction the batch applied.
        outcome: Overall outcome of the run.
        results: Per-package results, keyed by package identifier.
        skipped: Packages not attempted because the batch was cancelled.
    """

    direction: Direction
    outcome: BatchOutcome
    results: Mapping[str, OperationResult] = field(default_factory=dict)
    skipped: tuple[str, ...] = ()

    @classmethod
    def permission_denied(cls, direction: Direction) -> "BatchReport":
        """Create the report for a batch halted by missing permission."""
        return cls(direction=direction, outcome=BatchOutcome.PERMISSION_DENIED)

    @property
    def is_permission_denied(self) -> bool:
        """Check if the batch was halted by missing permission."""
        return self.outcome is BatchOutcome.PERMISSION_DENIED

    @property
    def succeeded(self) -> list[str]:
        """Packages whose transition succeeded."""
        return [pkg for pkg, result in self.results.items() if result.success]

    @property
    def failed(self) -> list[str]:
        """Packages whose transition failed."""
        return [pkg for pkg, result in self.results.items() if result.failed]

    @property
    def ok(self) -> bool:
        """Check if every selected package was attempted and succeeded."""
        return self.outcome is BatchOutcome.COMPLETED and not self.failed
