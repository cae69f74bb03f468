"""Batch orchestration of package transitions.

Applies one transition direction to a selection of packages through a
privileged channel. The batch is gated on channel permission, each
package is attempted exactly once and independently of the others, and
every result is pushed into the status tracker as soon as it is known.
"""

import logging
import threading
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor

from bloatctl.channels.base import ChannelError, PrivilegedChannel
from bloatctl.core.tracker import StatusTracker
from bloatctl.models.action import BatchOutcome, BatchReport, Direction, OperationResult

logger = logging.getLogger(__name__)

ResultCallback = Callable[[OperationResult], None]


class BatchOrchestrator:
    """Runs remove/restore batches against a privileged channel.

    Attributes:
        max_workers: Packages processed concurrently (1 = sequential).
    """

    def __init__(
        self,
        channel: PrivilegedChannel,
        tracker: StatusTracker,
        max_workers: int = 1,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            channel: Channel used to uninstall and reinstall packages.
            tracker: Tracker updated with every result.
            max_workers: Number of packages processed concurrently.
        """
        if max_workers < 1:
            msg = f"max_workers must be at least 1, got {max_workers}"
            raise ValueError(msg)
        self._channel = channel
        self._tracker = tracker
        self.max_workers = max_workers

    def run_batch(
        self,
        selection: Iterable[str],
        direction: Direction,
        cancel: threading.Event | None = None,
        on_result: ResultCallback | None = None,
    ) -> BatchReport:
        """Apply a transition to every selected package.

        Cancellation only takes effect between packages: an invocation
        already handed to the channel runs to completion, and packages
        not yet started are reported as skipped.

        Args:
            selection: Package identifiers to operate on.
            direction: Transition to apply.
            cancel: Optional event that stops the batch when set.
            on_result: Optional callback invoked after each package.

        Returns:
            BatchReport with per-package results. If the channel lacks
            permission, the report has outcome PERMISSION_DENIED and no
            results, and no package was touched.
        """
        if not self._channel.has_permission():
            logger.warning("Privileged channel not authorized; %s batch halted", direction.value)
            return BatchReport.permission_denied(direction)

        packages = list(dict.fromkeys(selection))
        results: dict[str, OperationResult] = {}
        results_lock = threading.Lock()

        def run_one(package: str) -> None:
            if cancel is not None and cancel.is_set():
                return
            result = self._transition(package, direction)
            with results_lock:
                results[package] = result
            if on_result is not None:
                on_result(result)

        logger.info("Starting %s batch for %d package(s)", direction.value, len(packages))

        if self.max_workers == 1 or len(packages) <= 1:
            for package in packages:
                run_one(package)
        else:
            with ThreadPoolExecutor(
                max_workers=self.max_workers,
                thread_name_prefix="bloatctl-batch",
            ) as executor:
                for future in [executor.submit(run_one, pkg) for pkg in packages]:
                    future.result()

        skipped = tuple(pkg for pkg in packages if pkg not in results)
        outcome = BatchOutcome.CANCELLED if skipped else BatchOutcome.COMPLETED
        ordered = {pkg: results[pkg] for pkg in packages if pkg in results}

        logger.info(
            "%s batch %s: %d succeeded, %d failed, %d skipped",
            direction.value,
            outcome.value,
            sum(1 for r in ordered.values() if r.success),
            sum(1 for r in ordered.values() if r.failed),
            len(skipped),
        )
        return BatchReport(
            direction=direction,
            outcome=outcome,
            results=ordered,
            skipped=skipped,
        )

    def _transition(self, package: str, direction: Direction) -> OperationResult:
        """Apply a transition to one package under its lock.

        The current status is read at dispatch time, so a package that
        already reached the target state is reported as a successful
        no-op without involving the channel.
        """
        with self._tracker.package_lock(package):
            if self._tracker.status_of(package) is direction.target_status:
                result = OperationResult(
                    package=package,
                    direction=direction,
                    success=True,
                    message=f"Already {direction.target_status.value}",
                    dispatched=False,
                )
                self._tracker.deselect(package)
                return result

            try:
                success = self._channel.transition(package, direction)
            except ChannelError as e:
                logger.warning("%s: %s failed: %s", package, direction.value, e)
                result = OperationResult(
                    package=package,
                    direction=direction,
                    success=False,
                    message=str(e),
                )
            else:
                result = OperationResult(
                    package=package,
                    direction=direction,
                    success=success,
                    message=self._message(success, direction),
                )

            self._tracker.apply_result(result)
            return result

    def _message(self, success: bool, direction: Direction) -> str:
        if not success:
            return "Package manager reported failure"
        if self._channel.dry_run:
            return "Dry-run completed"
        return f"Package {direction.target_status.value}"
