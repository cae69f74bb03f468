"""List command implementation.

Lists the packages on the attached device for the installed or
uninstalled view, annotated with their catalog classification.
"""

from typing import Annotated

import typer

from bloatctl.cli.display import create_packages_table
from bloatctl.cli.session import load_catalog, load_tracker, open_session
from bloatctl.models.catalog import RemovalRisk
from bloatctl.models.package import AppView
from bloatctl.utils.formatting import console, print_info

app = typer.Typer(
    help="List device packages with their classification.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def list_packages(
    ctx: typer.Context,
    uninstalled: Annotated[
        bool,
        typer.Option(
            "--uninstalled",
            "-u",
            help="Show packages that were removed and can be restored.",
        ),
    ] = False,
    risk: Annotated[
        RemovalRisk | None,
        typer.Option(
            "--risk",
            "-r",
            help="Only show packages with this removal risk.",
            case_sensitive=False,
        ),
    ] = None,
    listed_only: Annotated[
        bool,
        typer.Option(
            "--listed",
            "-l",
            help="Only show packages present in the catalog.",
        ),
    ] = False,
    system_only: Annotated[
        bool,
        typer.Option(
            "--system",
            "-s",
            help="Only consider system packages.",
        ),
    ] = False,
) -> None:
    """List device packages.

    Examples:
        bloatctl list                       # Installed packages
        bloatctl list --risk recommended    # Safe-to-remove candidates
        bloatctl list --uninstalled         # Packages that can be restored
        bloatctl list --system              # System packages only
    """
    if ctx.invoked_subcommand is not None:
        return

    view = AppView.UNINSTALLED if uninstalled else AppView.INSTALLED

    with open_session(system_only=system_only) as session:
        catalog = load_catalog(session)
        tracker = load_tracker(session, view, catalog)

    tracker.set_filter(risk)
    packages = tracker.visible()
    if listed_only:
        packages = [pkg for pkg in packages if pkg.record is not None]

    if not packages:
        print_info(f"No {view.value} packages match.")
        return

    title = f"{view.value.capitalize()} Packages"
    if risk is not None:
        title += f" ({risk.value})"
    console.print(create_packages_table(packages, title))
    console.print(f"\n[dim]{len(packages)} package(s)[/dim]")
