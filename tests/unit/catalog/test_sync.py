"""Unit tests for CatalogSynchronizer.

A fake fetcher records how often each network read happens; the store
works on a temporary directory.
"""

import json
import threading
from pathlib import Path

import pytest
from bloatctl.catalog.errors import FetchError, MalformedRevisionError, SyncError, UnreachableError
from bloatctl.catalog.sync import CatalogSynchronizer
from bloatctl.core.settings import Settings
from bloatctl.core.store import CatalogStore, StoreError


class FakeFetcher:
    """Stand-in for CatalogFetcher counting its calls."""

    def __init__(
        self,
        raw: bytes = b"{}",
        revision: str = "abc123",
        fetch_error: FetchError | None = None,
        revision_error: FetchError | None = None,
    ) -> None:
        self.raw = raw
        self.revision = revision
        self.fetch_error = fetch_error
        self.revision_error = revision_error
        self.fetch_calls = 0
        self.revision_calls = 0
        self.gate: threading.Event | None = None

    def fetch(self) -> tuple[bytes, str]:
        self.fetch_calls += 1
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if self.fetch_error is not None:
            raise self.fetch_error
        return self.raw, self.revision

    def fetch_revision(self) -> str:
        self.revision_calls += 1
        if self.revision_error is not None:
            raise self.revision_error
        return self.revision


@pytest.fixture
def store(tmp_path: Path) -> CatalogStore:
    """Store rooted in a temporary directory."""
    return CatalogStore(cache_dir=tmp_path / "cache", settings_path=tmp_path / "settings.toml")


def make_sync(
    fetcher: FakeFetcher,
    store: CatalogStore,
    settings: Settings | None = None,
) -> CatalogSynchronizer:
    """Build a synchronizer around the fake fetcher."""
    return CatalogSynchronizer(fetcher, store, settings)  # type: ignore[arg-type]


class TestNeedsUpdate:
    """Tests for CatalogSynchronizer.needs_update."""

    def test_true_without_cached_revision(self, store: CatalogStore) -> None:
        """No cached revision means stale, without any network call."""
        fetcher = FakeFetcher()

        assert make_sync(fetcher, store).needs_update() is True
        assert fetcher.revision_calls == 0

    def test_false_when_revisions_match(self, store: CatalogStore) -> None:
        """Matching revisions are current."""
        store.save_catalog(b"{}", "abc123")
        fetcher = FakeFetcher(revision="abc123")

        assert make_sync(fetcher, store).needs_update() is False
        assert fetcher.revision_calls == 1
        assert fetcher.fetch_calls == 0

    def test_true_when_revisions_differ(self, store: CatalogStore) -> None:
        """A different remote revision is stale."""
        store.save_catalog(b"{}", "abc123")

        assert make_sync(FakeFetcher(revision="def456"), store).needs_update() is True

    def test_propagates_fetch_error(self, store: CatalogStore) -> None:
        """A failing revision read raises."""
        store.save_catalog(b"{}", "abc123")
        fetcher = FakeFetcher(revision_error=UnreachableError("offline"))

        with pytest.raises(UnreachableError):
            make_sync(fetcher, store).needs_update()


class TestSync:
    """Tests for CatalogSynchronizer.sync."""

    def test_first_sync_fetches_and_stores(self, store: CatalogStore, catalog_bytes: bytes) -> None:
        """Without a cache the catalog is fetched, parsed and persisted."""
        fetcher = FakeFetcher(raw=catalog_bytes, revision="abc123")
        synchronizer = make_sync(fetcher, store)

        result = synchronizer.sync()

        assert result.refreshed is True
        assert result.notice is None
        assert result.catalog.revision == "abc123"
        assert len(result.catalog) == 4
        assert store.read_catalog() == catalog_bytes
        assert store.read_revision() == "abc123"
        assert synchronizer.catalog is result.catalog

    def test_current_revision_skips_full_fetch(
        self, store: CatalogStore, catalog_bytes: bytes
    ) -> None:
        """When the revisions match only the revision is read."""
        store.save_catalog(catalog_bytes, "abc123")
        fetcher = FakeFetcher(revision="abc123")

        result = make_sync(fetcher, store).sync()

        assert result.refreshed is False
        assert result.catalog.revision == "abc123"
        assert fetcher.revision_calls == 1
        assert fetcher.fetch_calls == 0

    def test_stale_revision_refreshes(self, store: CatalogStore, catalog_bytes: bytes) -> None:
        """A newer remote revision triggers a full fetch."""
        store.save_catalog(b"{}", "abc123")
        fetcher = FakeFetcher(raw=catalog_bytes, revision="def456")

        result = make_sync(fetcher, store).sync()

        assert result.refreshed is True
        assert result.catalog.revision == "def456"
        assert store.read_revision() == "def456"

    def test_force_fetches_even_when_current(self, store: CatalogStore) -> None:
        """force skips the staleness check."""
        store.save_catalog(b"{}", "abc123")
        fetcher = FakeFetcher(revision="abc123")

        result = make_sync(fetcher, store).sync(force=True)

        assert result.refreshed is True
        assert fetcher.fetch_calls == 1
        assert fetcher.revision_calls == 0

    def test_auto_update_disabled_uses_cache(self, store: CatalogStore) -> None:
        """With auto-update off and a cache present, nothing is fetched."""
        store.save_catalog(b"{}", "abc123")
        fetcher = FakeFetcher(revision="def456")

        result = make_sync(fetcher, store, Settings(auto_update_catalog=False)).sync()

        assert result.refreshed is False
        assert result.catalog.revision == "abc123"
        assert fetcher.fetch_calls == 0
        assert fetcher.revision_calls == 0

    def test_auto_update_disabled_still_fetches_without_cache(self, store: CatalogStore) -> None:
        """The first sync fetches even with auto-update off."""
        fetcher = FakeFetcher(revision="abc123")

        result = make_sync(fetcher, store, Settings(auto_update_catalog=False)).sync()

        assert result.refreshed is True
        assert fetcher.fetch_calls == 1

    def test_refresh_failure_falls_back_to_cache(
        self, store: CatalogStore, catalog_bytes: bytes
    ) -> None:
        """A failed refresh returns the cached catalog with a notice."""
        store.save_catalog(catalog_bytes, "abc123")
        fetcher = FakeFetcher(revision="def456", fetch_error=UnreachableError("offline"))

        result = make_sync(fetcher, store).sync()

        assert result.refreshed is False
        assert result.catalog.revision == "abc123"
        assert len(result.catalog) == 4
        assert result.notice is not None
        assert "offline" in result.notice
        assert store.read_revision() == "abc123"

    def test_update_check_failure_falls_back_to_cache(self, store: CatalogStore) -> None:
        """A failed revision check returns the cache with a notice."""
        store.save_catalog(b"{}", "abc123")
        fetcher = FakeFetcher(revision_error=MalformedRevisionError("no sha"))

        result = make_sync(fetcher, store).sync()

        assert result.catalog.revision == "abc123"
        assert result.notice is not None
        assert "Update check failed" in result.notice
        assert fetcher.fetch_calls == 0

    def test_invalid_document_falls_back_to_cache(self, store: CatalogStore) -> None:
        """An unparseable download does not replace the cache."""
        store.save_catalog(b"{}", "abc123")
        fetcher = FakeFetcher(raw=b"[]", revision="def456")

        result = make_sync(fetcher, store).sync()

        assert result.catalog.revision == "abc123"
        assert result.notice is not None
        assert store.read_catalog() == b"{}"
        assert store.read_revision() == "abc123"

    def test_deeply_nested_document_falls_back_to_cache(self, store: CatalogStore) -> None:
        """A document too deep to decode keeps the cached catalog."""
        store.save_catalog(b'{"com.a": {}}', "abc")
        fetcher = FakeFetcher(raw=b'{"a":' * 100_000 + b"1" + b"}" * 100_000, revision="def")

        result = make_sync(fetcher, store).sync(force=True)

        assert result.catalog.revision == "abc"
        assert "com.a" in result.catalog
        assert result.notice is not None
        assert store.read_revision() == "abc"

    def test_failure_without_cache_raises(self, store: CatalogStore) -> None:
        """With nothing cached a failed fetch raises SyncError."""
        fetcher = FakeFetcher(fetch_error=UnreachableError("offline"))

        with pytest.raises(SyncError, match="offline"):
            make_sync(fetcher, store).sync()

    def test_corrupt_cache_treated_as_missing(self, store: CatalogStore) -> None:
        """A corrupt cached document is ignored and refetched."""
        store.save_catalog(b"garbage", "abc123")
        fetcher = FakeFetcher(raw=json.dumps({"x": {}}).encode(), revision="abc123")

        result = make_sync(fetcher, store).sync()

        assert result.refreshed is True
        assert "x" in result.catalog

    def test_store_failure_keeps_fresh_catalog(
        self,
        store: CatalogStore,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """A failing save still returns the freshly fetched catalog."""

        def fail_save(raw: bytes, revision: str) -> None:
            raise StoreError("disk full")

        monkeypatch.setattr(store, "save_catalog", fail_save)
        fetcher = FakeFetcher(revision="abc123")

        result = make_sync(fetcher, store).sync()

        assert result.refreshed is True
        assert result.catalog.revision == "abc123"
        assert result.notice == "disk full"

    def test_concurrent_syncs_fetch_once(self, store: CatalogStore, catalog_bytes: bytes) -> None:
        """Callers arriving during a sync share its result."""
        fetcher = FakeFetcher(raw=catalog_bytes, revision="abc123")
        fetcher.gate = threading.Event()
        synchronizer = make_sync(fetcher, store)
        results = []

        def worker() -> None:
            results.append(synchronizer.sync())

        first = threading.Thread(target=worker)
        first.start()
        while fetcher.fetch_calls == 0:
            threading.Event().wait(0.01)
        second = threading.Thread(target=worker)
        second.start()
        threading.Event().wait(0.05)
        fetcher.gate.set()
        first.join(timeout=5)
        second.join(timeout=5)

        assert fetcher.fetch_calls == 1
        assert len(results) == 2
        assert results[0].catalog is results[1].catalog

    def test_sequential_syncs_not_joined(self, store: CatalogStore) -> None:
        """Once a sync finishes, the next call runs on its own."""
        fetcher = FakeFetcher(revision="abc123")
        synchronizer = make_sync(fetcher, store)

        synchronizer.sync(force=True)
        synchronizer.sync(force=True)

        assert fetcher.fetch_calls == 2
