"""Remove command implementation.

Uninstalls selected packages for the device user through ADB.
"""

from typing import Annotated

import typer

from bloatctl.cli.transition import run_transition
from bloatctl.models.action import Direction
from bloatctl.models.catalog import RemovalRisk

app = typer.Typer(
    help="Remove packages from the device.",
    invoke_without_command=True,
    context_settings={"allow_interspersed_args": True},
)


@app.callback(invoke_without_command=True)
def remove_packages(
    ctx: typer.Context,
    packages: Annotated[
        list[str] | None,
        typer.Argument(help="Package identifiers to remove."),
    ] = None,
    risk: Annotated[
        RemovalRisk | None,
        typer.Option(
            "--risk",
            "-r",
            help="Select every installed package with this removal risk.",
            case_sensitive=False,
        ),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip confirmation prompt and proceed.",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show what would be done without making changes.",
        ),
    ] = False,
    system_only: Annotated[
        bool,
        typer.Option(
            "--system",
            "-s",
            help="Only select among system packages.",
        ),
    ] = False,
) -> None:
    """Remove packages for the device user.

    Removed packages stay on the system partition and can be brought
    back with 'bloatctl restore'.

    Examples:
        bloatctl remove com.facebook.katana
        bloatctl remove --risk recommended --dry-run
    """
    if ctx.invoked_subcommand is not None:
        return

    run_transition(
        Direction.REMOVE,
        packages or [],
        risk,
        yes=yes,
        dry_run=dry_run,
        system_only=system_only,
    )
