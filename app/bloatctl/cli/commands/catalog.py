"""Catalog commands.

Provides commands to refresh the bloatware classification catalog,
check whether it is up to date, and look up a single package.
"""

from typing import Annotated

import typer
from rich.markup import escape

from bloatctl.catalog.errors import FetchError, SyncError
from bloatctl.cli.display import print_catalog_summary
from bloatctl.cli.session import open_session
from bloatctl.utils.formatting import (
    console,
    format_risk,
    print_error,
    print_info,
    print_success,
    print_warning,
)

app = typer.Typer(
    help="Manage the bloatware classification catalog.",
    no_args_is_help=True,
)


@app.command()
def sync(
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Download the catalog even if the cached revision is current.",
        ),
    ] = False,
) -> None:
    """Download the catalog if a newer revision is available.

    Examples:
        bloatctl catalog sync           # Refresh only when outdated
        bloatctl catalog sync --force   # Always download
    """
    with open_session() as session:
        try:
            result = session.synchronizer.sync(force=force)
        except SyncError as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e

    if result.notice:
        print_warning(result.notice)
    elif result.refreshed:
        print_success("Catalog updated.")
    else:
        print_success("Catalog is up to date.")

    print_catalog_summary(result.catalog)


@app.command()
def status() -> None:
    """Show the cached revision and whether a newer one exists."""
    with open_session() as session:
        cached = session.synchronizer.load_cached()
        if cached is None:
            print_info("No catalog cached yet. Run 'bloatctl catalog sync'.")
            raise typer.Exit(code=0)

        print_catalog_summary(cached)

        try:
            stale = session.synchronizer.needs_update()
        except FetchError as e:
            print_warning(f"Could not check for updates: {e}")
            raise typer.Exit(code=1) from e

    if stale:
        print_info("A newer catalog revision is available. Run 'bloatctl catalog sync'.")
    else:
        print_success("Catalog is up to date.")


@app.command()
def show(
    package: Annotated[str, typer.Argument(help="Package identifier, e.g. com.facebook.katana")],
) -> None:
    """Show the classification of a single package."""
    with open_session() as session:
        cached = session.synchronizer.load_cached()

    if cached is None:
        print_error("No catalog cached yet. Run 'bloatctl catalog sync' first.")
        raise typer.Exit(code=1)

    record = cached.get(package)
    if record is None:
        print_warning(
            f"{escape(package)} is not listed in catalog revision {escape(cached.revision[:12])}."
        )
        raise typer.Exit(code=1)

    console.print(f"[bold]{escape(package)}[/bold]")
    console.print(f"Removal: {format_risk(record.removal_risk)}")
    console.print(f"[muted]{escape(record.removal_risk.description)}[/muted]")
    console.print(f"Origin:  {record.install_origin.value}")
    if record.description:
        console.print()
        console.print(escape(record.description))
