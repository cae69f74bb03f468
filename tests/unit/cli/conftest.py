"""Fixtures shared by the CLI command tests."""

from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from bloatctl.catalog.sync import SyncResult
from bloatctl.cli.session import Session
from bloatctl.core.settings import Settings
from bloatctl.core.store import CatalogStore
from bloatctl.models.catalog import Catalog
from bloatctl.models.package import PackageStatus


@pytest.fixture
def device_statuses() -> dict[str, PackageStatus]:
    """Package statuses reported by the fake device."""
    return {
        "com.facebook.katana": PackageStatus.INSTALLED,
        "com.android.systemui": PackageStatus.INSTALLED,
        "com.google.android.gm": PackageStatus.INSTALLED,
        "com.samsung.android.bixby.agent": PackageStatus.UNINSTALLED,
    }


@pytest.fixture
def fake_session(
    tmp_path: Path,
    sample_catalog: Catalog,
    device_statuses: dict[str, PackageStatus],
) -> Session:
    """Session whose network and device collaborators are mocks."""
    store = CatalogStore(cache_dir=tmp_path / "cache", settings_path=tmp_path / "settings.toml")

    synchronizer = MagicMock()
    synchronizer.sync.return_value = SyncResult(catalog=sample_catalog)
    synchronizer.load_cached.return_value = sample_catalog

    channel = MagicMock()
    channel.dry_run = False
    channel.has_permission.return_value = True
    channel.is_available.return_value = True
    channel.transition.return_value = True

    inventory = MagicMock()
    inventory.read.return_value = dict(device_statuses)
    inventory.count.return_value = (3, 1)

    return Session(
        store=store,
        settings=Settings(),
        fetcher=MagicMock(),
        synchronizer=synchronizer,
        channel=channel,
        inventory=inventory,
    )


@pytest.fixture
def fake_open_session(fake_session: Session) -> Callable[..., AbstractContextManager[Session]]:
    """Replacement for open_session yielding fake_session."""

    @contextmanager
    def open_session(dry_run: bool = False, system_only: bool = False) -> Iterator[Session]:
        fake_session.channel.dry_run = dry_run  # type: ignore[misc]
        fake_session.inventory.system_only = system_only  # type: ignore[misc]
        yield fake_session

    return open_session
