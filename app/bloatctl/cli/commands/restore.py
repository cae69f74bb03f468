"""Restore command implementation.

Reinstalls previously removed packages for the device user.
"""

from typing import Annotated

import typer

from bloatctl.cli.transition import run_transition
from bloatctl.models.action import Direction
from bloatctl.models.catalog import RemovalRisk

app = typer.Typer(
    help="Restore previously removed packages.",
    invoke_without_command=True,
    context_settings={"allow_interspersed_args": True},
)


@app.callback(invoke_without_command=True)
def restore_packages(
    ctx: typer.Context,
    packages: Annotated[
        list[str] | None,
        typer.Argument(help="Package identifiers to restore."),
    ] = None,
    risk: Annotated[
        RemovalRisk | None,
        typer.Option(
            "--risk",
            "-r",
            help="Select every uninstalled package with this removal risk.",
            case_sensitive=False,
        ),
    ] = None,
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
    """Restore removed packages.

    Examples:
        bloatctl restore com.sec.android.app.sbrowser
        bloatctl restore --risk expert
    """
    if ctx.invoked_subcommand is not None:
        return

    run_transition(
        Direction.RESTORE,
        packages or [],
        risk,
        yes=True,
        dry_run=dry_run,
        system_only=system_only,
    )
