"""Per-invocation session wiring for CLI commands.

A Session bundles the store, settings, synchronizer, channel and
inventory built for one command run, so each command receives its
collaborators explicitly instead of reaching for global state.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

import typer
from rich.markup import escape

from bloatctl.catalog.errors import SyncError
from bloatctl.catalog.fetcher import CatalogFetcher
from bloatctl.catalog.sync import CatalogSynchronizer
from bloatctl.channels.adb import AdbChannel
from bloatctl.core.settings import Settings, SettingsError
from bloatctl.core.store import CatalogStore
from bloatctl.core.tracker import StatusTracker
from bloatctl.models.catalog import Catalog
from bloatctl.models.package import AppView
from bloatctl.scanners.adb import AdbInventory
from bloatctl.utils.formatting import print_error, print_info, print_warning

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """Collaborators shared by the commands of one CLI invocation."""

    store: CatalogStore
    settings: Settings
    fetcher: CatalogFetcher
    synchronizer: CatalogSynchronizer
    channel: AdbChannel
    inventory: AdbInventory


def load_user_settings(store: CatalogStore) -> Settings:
    """Load settings or exit with a helpful error message.

    Raises:
        typer.Exit: If the settings file is invalid.
    """
    try:
        return store.load_settings()
    except SettingsError as e:
        print_error(f"Failed to load settings: {e}")
        print_info(f"Fix or remove {store.settings_path} to continue.")
        raise typer.Exit(code=1) from e


@contextmanager
def open_session(dry_run: bool = False, system_only: bool = False) -> Iterator[Session]:
    """Build a Session from the user's settings.

    Args:
        dry_run: Simulate package operations on the channel.
        system_only: Limit the inventory to system packages.

    Yields:
        Session whose HTTP client is closed on exit.
    """
    store = CatalogStore()
    settings = load_user_settings(store)
    fetcher = CatalogFetcher(
        catalog_url=settings.catalog_url,
        revision_url=settings.revision_url,
        timeout=settings.http_timeout_seconds,
    )
    try:
        yield Session(
            store=store,
            settings=settings,
            fetcher=fetcher,
            synchronizer=CatalogSynchronizer(fetcher, store, settings),
            channel=AdbChannel(
                serial=settings.adb_serial,
                user=settings.android_user,
                timeout=settings.channel_timeout_seconds,
                dry_run=dry_run,
            ),
            inventory=AdbInventory(
                serial=settings.adb_serial,
                user=settings.android_user,
                timeout=settings.channel_timeout_seconds,
                system_only=system_only,
            ),
        )
    finally:
        fetcher.close()


def load_catalog(session: Session, force: bool = False) -> Catalog | None:
    """Sync the catalog, reporting problems without failing the command.

    Args:
        session: Active session.
        force: Refresh even if the cached revision is current.

    Returns:
        Catalog to use, or None if none could be loaded at all.
    """
    try:
        result = session.synchronizer.sync(force=force)
    except SyncError as e:
        print_warning(f"{e}. Packages will be shown without classification.")
        return None

    if result.notice:
        revision = escape(result.catalog.revision[:12])
        print_warning(f"{escape(result.notice)} (using cached revision {revision})")
    elif result.refreshed:
        print_info(f"Catalog updated to revision {escape(result.catalog.revision[:12])}.")
    return result.catalog


def load_tracker(session: Session, view: AppView, catalog: Catalog | None) -> StatusTracker:
    """Read the device inventory into a StatusTracker.

    Raises:
        typer.Exit: If the inventory cannot be read.
    """
    try:
        statuses = session.inventory.read()
    except RuntimeError as e:
        print_error(f"Cannot read device packages: {e}")
        raise typer.Exit(code=1) from e

    return StatusTracker(statuses=statuses, catalog=catalog, view=view)
