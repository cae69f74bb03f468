"""Settings commands.

Shows and changes the persisted user preferences.
"""

from typing import Annotated

import typer
from rich.table import Table

from bloatctl.cli.session import load_user_settings
from bloatctl.core.settings import SettingsError
from bloatctl.core.store import CatalogStore
from bloatctl.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show or change user preferences.",
    no_args_is_help=True,
)


@app.command()
def show() -> None:
    """Show the current settings."""
    store = CatalogStore()
    settings = load_user_settings(store)

    table = Table(title="Settings", show_header=True, header_style="bold_header")
    table.add_column("Setting", style="info")
    table.add_column("Value")
    for name, value in settings.model_dump().items():
        table.add_row(name, "-" if value is None else str(value))

    console.print(table)
    console.print(f"\n[dim]{store.settings_path}[/dim]")


@app.command("set")
def set_settings(
    auto_update: Annotated[
        bool | None,
        typer.Option(
            "--auto-update/--no-auto-update",
            help="Check for a newer catalog revision before using the cache.",
        ),
    ] = None,
    confirm: Annotated[
        bool | None,
        typer.Option(
            "--confirm/--no-confirm",
            help="Ask for confirmation before removing packages.",
        ),
    ] = None,
) -> None:
    """Change one or more preferences.

    Examples:
        bloatctl settings set --no-auto-update
        bloatctl settings set --confirm
    """
    changes: dict[str, bool] = {}
    if auto_update is not None:
        changes["auto_update_catalog"] = auto_update
    if confirm is not None:
        changes["confirm_before_uninstall"] = confirm

    if not changes:
        print_info("Nothing to change. See 'bloatctl settings set --help'.")
        raise typer.Exit(code=0)

    store = CatalogStore()
    settings = load_user_settings(store).model_copy(update=changes)

    try:
        path = store.save_settings(settings)
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    for name, value in changes.items():
        print_success(f"{name} = {str(value).lower()}")
    print_info(f"Saved to {path}")
