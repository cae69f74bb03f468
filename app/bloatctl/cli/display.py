"""Shared Rich display functions for packages and batch results.

Provides reusable table builders and summary printers used by the
list, remove and restore commands.
"""

from rich.markup import escape
from rich.table import Table

from bloatctl.core.tracker import TrackedPackage
from bloatctl.models.action import BatchOutcome, BatchReport, Direction
from bloatctl.models.catalog import Catalog, RemovalRisk
from bloatctl.utils.formatting import console, format_package, format_risk, print_success


def create_packages_table(packages: list[TrackedPackage], title: str) -> Table:
    """Create a Rich table listing packages with their classification.

    Args:
        packages: Packages to display.
        title: Table title.

    Returns:
        Rich Table configured for package display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column("", width=2, justify="center")
    table.add_column("Package", no_wrap=True)
    table.add_column("Risk", width=12)
    table.add_column("Origin", width=8, style="muted")
    table.add_column("Description", style="text", overflow="ellipsis")

    for pkg in packages:
        marker = "[success]●[/]" if pkg.selected else ""
        record = pkg.record
        table.add_row(
            marker,
            format_package(pkg.name, pkg.status),
            format_risk(pkg.removal_risk),
            record.install_origin.value if record else "-",
            escape(_first_line(record.description)) if record else "[muted]not listed[/muted]",
        )

    return table


def create_results_table(report: BatchReport) -> Table:
    """Create a Rich table displaying per-package batch results.

    Args:
        report: Report returned by the orchestrator.

    Returns:
        Rich Table configured for results display.
    """
    table = Table(
        title="Results",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=8, justify="center")
    table.add_column("Action", width=8)
    table.add_column("Package", no_wrap=True)
    table.add_column("Message")

    for package, result in report.results.items():
        if result.success:
            status = "[success]OK[/success]"
        else:
            status = "[error]FAIL[/error]"
        table.add_row(
            status,
            result.direction.value,
            package,
            f"[muted]{escape(result.message or '')}[/muted]",
        )

    for package in report.skipped:
        table.add_row("[warning]SKIP[/warning]", report.direction.value, package, "")

    return table


def print_results_summary(report: BatchReport) -> None:
    """Print a summary line for a batch report.

    Args:
        report: Report returned by the orchestrator.
    """
    succeeded = len(report.succeeded)
    failed = len(report.failed)

    if report.ok:
        verb = "removed" if report.direction is Direction.REMOVE else "restored"
        print_success(f"All {succeeded} package(s) {verb} successfully.")
        return

    parts = [f"[success]{succeeded} succeeded[/success]", f"[error]{failed} failed[/error]"]
    if report.outcome is BatchOutcome.CANCELLED:
        parts.append(f"[warning]{len(report.skipped)} skipped[/warning]")
    console.print("\n" + ", ".join(parts))


def print_catalog_summary(catalog: Catalog) -> None:
    """Print the revision and per-risk counts of a catalog."""
    console.print(f"Revision: [info]{escape(catalog.revision)}[/info]")
    console.print(f"Entries:  [info]{len(catalog)}[/info]")
    counts = catalog.count_by_risk()
    for risk in RemovalRisk:
        if counts[risk]:
            console.print(f"  {format_risk(risk)}: {counts[risk]}")


def _first_line(text: str) -> str:
    line = text.strip().splitlines()[0] if text.strip() else ""
    return line or "-"
