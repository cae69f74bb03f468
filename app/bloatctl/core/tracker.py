"""Selection and package status tracking.

This module provides the StatusTracker, the per-session context object
holding the cached installed/uninstalled status of every known package,
the packages currently selected in the active view, and the per-package
locks that serialize transitions.

Status only changes through confirmed operation results or an explicit
inventory reconciliation; selecting a package never changes its status.
"""

import logging
import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass

from bloatctl.models.action import OperationResult
from bloatctl.models.catalog import Catalog, ClassificationRecord, RemovalRisk
from bloatctl.models.package import AppView, PackageStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TrackedPackage:
    """A package as shown in the active view.

    Attributes:
        name: Package identifier.
        status: Cached installation status.
        record: Catalog classification, None if the package is not listed.
        selected: Whether the package is in the current selection.
    """

    name: str
    status: PackageStatus
    record: ClassificationRecord | None = None
    selected: bool = False

    @property
    def removal_risk(self) -> RemovalRisk:
        """Removal risk from the catalog, UNKNOWN when unlisted."""
        if self.record is None:
            return RemovalRisk.UNKNOWN
        return self.record.removal_risk


class StatusTracker:
    """Tracks package statuses and the selection for the active view.

    Attributes:
        view: List view the selection is scoped to.
        risk_filter: Secondary filter on removal risk (None = any).
    """

    def __init__(
        self,
        statuses: Mapping[str, PackageStatus] | None = None,
        catalog: Catalog | None = None,
        view: AppView = AppView.INSTALLED,
    ) -> None:
        """Initialize the tracker.

        Args:
            statuses: Initial package statuses from the inventory.
            catalog: Catalog used to annotate packages.
            view: Initial list view.
        """
        self._statuses: dict[str, PackageStatus] = dict(statuses or {})
        self._catalog = catalog
        self._view = view
        self._risk_filter: RemovalRisk | None = None
        self._selection: dict[str, None] = {}
        self._state_lock = threading.RLock()
        self._package_locks: dict[str, threading.Lock] = {}

    @property
    def view(self) -> AppView:
        """Currently active list view."""
        return self._view

    @property
    def risk_filter(self) -> RemovalRisk | None:
        """Active removal risk filter, None meaning no filter."""
        return self._risk_filter

    @property
    def catalog(self) -> Catalog | None:
        """Catalog used for annotation, if any."""
        return self._catalog

    @property
    def selection(self) -> tuple[str, ...]:
        """Snapshot of the selected packages in selection order."""
        with self._state_lock:
            return tuple(self._selection)

    def statuses(self) -> dict[str, PackageStatus]:
        """Snapshot of all cached package statuses."""
        with self._state_lock:
            return dict(self._statuses)

    def status_of(self, package: str) -> PackageStatus | None:
        """Cached status of a package, None if it is unknown."""
        with self._state_lock:
            return self._statuses.get(package)

    def is_selected(self, package: str) -> bool:
        """Check if a package is currently selected."""
        with self._state_lock:
            return package in self._selection

    def attach_catalog(self, catalog: Catalog | None) -> None:
        """Use a (new) catalog snapshot to annotate packages."""
        with self._state_lock:
            self._catalog = catalog
            if self._risk_filter is not None:
                self._drop_filtered_out()

    def select(self, package: str) -> bool:
        """Add a package to the selection.

        Packages whose status does not match the active view, or which
        are hidden by the active filter, cannot be selected.

        Returns:
            True if the package is selected after the call.
        """
        with self._state_lock:
            if not self._is_selectable(package):
                logger.debug("Not selecting %s in %s view", package, self._view.value)
                return False
            self._selection[package] = None
            return True

    def deselect(self, package: str) -> bool:
        """Remove a package from the selection.

        Returns:
            True if the package was selected before the call.
        """
        with self._state_lock:
            if package not in self._selection:
                return False
            del self._selection[package]
            return True

    def clear_selection(self) -> None:
        """Deselect every package."""
        with self._state_lock:
            self._selection.clear()

    def switch_view(self, view: AppView) -> None:
        """Switch the list view.

        Selections do not carry across views and the risk filter is reset.
        """
        with self._state_lock:
            self._view = view
            self._risk_filter = None
            self._selection.clear()

    def set_filter(self, risk: RemovalRisk | None) -> None:
        """Set the removal risk filter, dropping selections it hides."""
        with self._state_lock:
            self._risk_filter = risk
            if risk is not None:
                self._drop_filtered_out()

    def visible(self) -> list[TrackedPackage]:
        """List packages shown in the active view, sorted by name."""
        with self._state_lock:
            return [
                TrackedPackage(
                    name=name,
                    status=status,
                    record=self._record_for(name),
                    selected=name in self._selection,
                )
                for name, status in sorted(self._statuses.items())
                if status is self._view.status and self._matches_filter(name)
            ]

    def apply_result(self, result: OperationResult) -> None:
        """Record the outcome of a package transition.

        A successful transition moves the package to the target status
        and out of the selection, since it no longer belongs to the view.
        A failed one changes nothing so the user can inspect or retry.
        """
        if result.failed:
            logger.debug(
                "Keeping %s unchanged after failed %s",
                result.package,
                result.direction.value,
            )
            return

        with self._state_lock:
            previous = self._statuses.get(result.package)
            target = result.direction.target_status
            if previous is not target:
                self._statuses[result.package] = target
                logger.debug(
                    "%s: %s -> %s",
                    result.package,
                    previous.value if previous else "unknown",
                    target.value,
                )
            self._selection.pop(result.package, None)

    def reconcile(self, inventory: Mapping[str, PackageStatus]) -> list[str]:
        """Replace cached statuses with a fresh inventory read.

        Selections that no longer match the active view are dropped.

        Args:
            inventory: Authoritative package statuses from the device.

        Returns:
            Sorted packages whose cached status disagreed with the inventory.
        """
        with self._state_lock:
            drifted = sorted(
                name
                for name in self._statuses.keys() | inventory.keys()
                if self._statuses.get(name) != inventory.get(name)
            )
            self._statuses = dict(inventory)
            for name in list(self._selection):
                if not self._is_selectable(name):
                    del self._selection[name]

        if drifted:
            logger.info("Reconciled %d package status(es) with inventory", len(drifted))
        return drifted

    @contextmanager
    def package_lock(self, package: str) -> Iterator[None]:
        """Hold the exclusive lock for a single package identifier."""
        with self._state_lock:
            lock = self._package_locks.setdefault(package, threading.Lock())
        with lock:
            yield

    def _record_for(self, package: str) -> ClassificationRecord | None:
        if self._catalog is None:
            return None
        return self._catalog.get(package)

    def _matches_filter(self, package: str) -> bool:
        if self._risk_filter is None:
            return True
        record = self._record_for(package)
        risk = record.removal_risk if record is not None else RemovalRisk.UNKNOWN
        return risk is self._risk_filter

    def _is_selectable(self, package: str) -> bool:
        return self._statuses.get(package) is self._view.status and self._matches_filter(package)

    def _drop_filtered_out(self) -> None:
        for name in list(self._selection):
            if not self._matches_filter(name):
                del self._selection[name]
