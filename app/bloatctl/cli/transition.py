"""Shared implementation of the remove and restore commands.

Builds a selection in the view matching the transition direction,
confirms it with the user, runs the batch and reports the results.
"""

import logging

import typer
from rich.markup import escape

from bloatctl.cli.display import create_packages_table, create_results_table, print_results_summary
from bloatctl.cli.session import load_catalog, load_tracker, open_session
from bloatctl.core.orchestrator import BatchOrchestrator
from bloatctl.core.tracker import StatusTracker
from bloatctl.models.action import Direction, OperationResult
from bloatctl.models.catalog import RemovalRisk
from bloatctl.utils.formatting import (
    console,
    print_error,
    print_info,
    print_warning,
)

logger = logging.getLogger(__name__)


def build_selection(
    tracker: StatusTracker,
    packages: list[str],
    risk: RemovalRisk | None,
) -> list[str]:
    """Select packages in the tracker's current view.

    With only ``risk`` given, every visible package of that risk is
    selected. Explicit packages that cannot be selected in the view are
    reported and left out.

    Args:
        tracker: Tracker already switched to the right view.
        packages: Package identifiers named on the command line.
        risk: Optional removal risk filter.

    Returns:
        Packages that could not be selected.
    """
    tracker.set_filter(risk)
    rejected: list[str] = []

    if packages:
        for package in packages:
            if not tracker.select(package):
                rejected.append(package)
    else:
        for pkg in tracker.visible():
            tracker.select(pkg.name)

    return rejected


def _explain_rejection(tracker: StatusTracker, package: str, direction: Direction) -> str:
    status = tracker.status_of(package)
    if status is None:
        return f"{escape(package)} is not present on the device"
    if status is direction.target_status:
        return f"{escape(package)} is already {status.value}"
    return f"{escape(package)} does not match the --risk filter"


def _confirm(count: int, direction: Direction) -> bool:
    return typer.confirm(
        f"\n{direction.value.capitalize()} {count} package(s)?",
        default=False,
    )


def _print_progress(result: OperationResult) -> None:
    mark = "[success]✓[/success]" if result.success else "[error]✗[/error]"
    console.print(f"  {mark} {escape(result.package)}")


def run_transition(
    direction: Direction,
    packages: list[str],
    risk: RemovalRisk | None,
    yes: bool,
    dry_run: bool,
    system_only: bool = False,
) -> None:
    """Run a remove or restore command end to end.

    Raises:
        typer.Exit: With code 1 on permission denial, an empty selection
            or any failed package.
    """
    if not packages and risk is None:
        print_error("Name at least one package or use --risk to select by category.")
        raise typer.Exit(code=1)

    with open_session(dry_run=dry_run, system_only=system_only) as session:
        catalog = load_catalog(session)
        tracker = load_tracker(session, direction.view, catalog)

        rejected = build_selection(tracker, packages, risk)
        for package in rejected:
            print_warning(f"Skipping {_explain_rejection(tracker, package, direction)}.")

        selection = tracker.selection
        if not selection:
            print_info("Nothing selected. Nothing to do.")
            return
        logger.debug("Selected %d package(s) for %s", len(selection), direction.value)

        planned = [pkg for pkg in tracker.visible() if pkg.selected]
        console.print(create_packages_table(planned, f"Selected for {direction.value}"))

        needs_confirm = direction is Direction.REMOVE and session.settings.confirm_before_uninstall
        if needs_confirm and not yes and not dry_run and not _confirm(len(selection), direction):
            print_info("Aborted.")
            raise typer.Exit(code=0)

        orchestrator = BatchOrchestrator(
            session.channel,
            tracker,
            max_workers=session.settings.batch_workers,
        )
        console.print(f"\n[bold]Applying {direction.value}...[/bold]\n")
        report = orchestrator.run_batch(selection, direction, on_result=_print_progress)

        if report.is_permission_denied:
            print_error("The device has not authorized USB debugging for this computer.")
            print_info("Accept the authorization prompt on the device, then run the command again.")
            session.channel.request_permission()
            raise typer.Exit(code=1)

    console.print()
    console.print(create_results_table(report))
    print_results_summary(report)
    if dry_run:
        print_info("\nDry-run mode: No changes were made.")

    if not report.ok:
        raise typer.Exit(code=1)
