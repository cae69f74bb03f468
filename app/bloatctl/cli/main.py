"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from bloatctl import __version__
from bloatctl.cli.commands import apps, catalog, device, remove, restore, settings
from bloatctl.utils.formatting import err_console

# Create main Typer app
app = typer.Typer(
    name="bloatctl",
    help="Remove and restore Android bloatware over ADB.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"bloatctl version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool, quiet: bool) -> None:
    """Route library logging to stderr through Rich.

    Args:
        verbose: Log debug messages.
        quiet: Only log errors.
    """
    level = logging.WARNING
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR

    root = logging.getLogger("bloatctl")
    root.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(
            RichHandler(console=err_console, show_path=verbose, rich_tracebacks=verbose)
        )


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
) -> None:
    """bloatctl - Remove and restore Android bloatware over ADB.

    Packages are classified by the community debloat catalog and
    removed for the device user only, so every change can be undone.
    """
    configure_logging(verbose, quiet)

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


# Register commands
app.add_typer(catalog.app, name="catalog")
app.add_typer(apps.app, name="list")
app.add_typer(remove.app, name="remove")
app.add_typer(restore.app, name="restore")
app.add_typer(device.app, name="device")
app.add_typer(settings.app, name="settings")


if __name__ == "__main__":
    app()
