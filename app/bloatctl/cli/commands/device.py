"""Device command implementation.

Reports whether an authorized device is reachable and summarizes its
package inventory.
"""

from typing import Annotated

import typer

from bloatctl.cli.session import open_session
from bloatctl.utils.formatting import (
    console,
    print_error,
    print_info,
    print_success,
    print_warning,
)

app = typer.Typer(
    help="Show the state of the attached device.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def device(
    ctx: typer.Context,
    authorize: Annotated[
        bool,
        typer.Option(
            "--authorize",
            "-a",
            help="Re-trigger the USB debugging authorization prompt.",
        ),
    ] = False,
) -> None:
    """Check the connection and authorization of the device.

    Examples:
        bloatctl device
        bloatctl device --authorize
    """
    if ctx.invoked_subcommand is not None:
        return

    with open_session() as session:
        channel = session.channel
        if not channel.is_available():
            print_error("adb is not installed or not on PATH.")
            raise typer.Exit(code=1)

        if not channel.has_permission():
            print_warning("No authorized device attached.")
            if authorize:
                channel.request_permission()
                print_info("Authorization requested. Accept the prompt on the device.")
            else:
                print_info("Run 'bloatctl device --authorize' to request authorization.")
            raise typer.Exit(code=1)

        try:
            installed, uninstalled = session.inventory.count()
        except RuntimeError as e:
            print_error(f"Cannot read device packages: {e}")
            raise typer.Exit(code=1) from e

    target = session.settings.adb_serial or "default device"
    print_success(f"Device authorized ({target}, user {session.settings.android_user}).")
    console.print(f"  Installed packages:   {installed}")
    console.print(f"  Uninstalled packages: {uninstalled}")
