"""Catalog synchronization.

This module provides the CatalogSynchronizer, which decides whether the
cached catalog is stale, refreshes it through the fetcher and parser,
persists it via the store, and falls back to the cached copy whenever a
refresh fails.
"""

import logging
import threading
from concurrent.futures import Future
from dataclasses import dataclass

from bloatctl.catalog.errors import CatalogError, SyncError
from bloatctl.catalog.fetcher import CatalogFetcher
from bloatctl.catalog.parser import parse_catalog
from bloatctl.core.settings import Settings
from bloatctl.core.store import CatalogStore, StoreError
from bloatctl.models.catalog import Catalog

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SyncResult:
    """Outcome of a sync call.

    Attributes:
        catalog: Catalog the caller should use.
        refreshed: True if a new catalog was fetched during this call.
        notice: Non-fatal problem encountered (e.g. the refresh failed
            and the cached catalog was returned instead).
    """

    catalog: Catalog
    refreshed: bool = False
    notice: str | None = None


class CatalogSynchronizer:
    """Keeps the classification catalog up to date.

    At most one sync runs at a time per synchronizer; callers arriving
    while a sync is in flight wait for it and receive the same result
    instead of triggering another fetch.
    """

    def __init__(
        self,
        fetcher: CatalogFetcher,
        store: CatalogStore,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the synchronizer.

        Args:
            fetcher: Fetcher used for the network reads.
            store: Store holding the cached catalog and revision.
            settings: Settings consulted for the auto-update preference.
        """
        self._fetcher = fetcher
        self._store = store
        self._settings = settings if settings is not None else Settings()
        self._catalog: Catalog | None = None
        self._lock = threading.Lock()
        self._inflight: Future[SyncResult] | None = None

    @property
    def catalog(self) -> Catalog | None:
        """Catalog currently held in memory, if any."""
        return self._catalog

    def load_cached(self) -> Catalog | None:
        """Load the catalog persisted in the store.

        Returns:
            Parsed cached catalog, or None if nothing usable is cached.
        """
        if self._catalog is not None:
            return self._catalog

        raw = self._store.read_catalog()
        revision = self._store.read_revision()
        if raw is None or revision is None:
            return None

        try:
            self._catalog = parse_catalog(raw, revision)
        except CatalogError as e:
            logger.warning("Ignoring corrupt cached catalog: %s", e)
            return None
        return self._catalog

    def needs_update(self) -> bool:
        """Check whether the remote catalog revision differs from ours.

        Only the cheap revision listing is fetched.

        Returns:
            True if no revision is cached or the remote one differs.

        Raises:
            FetchError: If the remote revision cannot be determined.
        """
        cached = self._store.read_revision()
        if cached is None:
            return True
        remote = self._fetcher.fetch_revision()
        logger.debug("Catalog revision cached=%s remote=%s", cached, remote)
        return remote != cached

    def sync(self, force: bool = False) -> SyncResult:
        """Return an up-to-date catalog, refreshing it if needed.

        Args:
            force: Refresh even if the cached revision is current.

        Returns:
            SyncResult holding the catalog to use.

        Raises:
            SyncError: If the refresh failed and nothing is cached.
        """
        inflight: Future[SyncResult]
        with self._lock:
            if self._inflight is not None:
                inflight = self._inflight
                owner = False
            else:
                inflight = Future()
                self._inflight = inflight
                owner = True

        if not owner:
            logger.debug("Joining in-flight catalog sync")
            return inflight.result()

        try:
            result = self._sync(force)
        except BaseException as e:
            inflight.set_exception(e)
            raise
        else:
            inflight.set_result(result)
            return result
        finally:
            with self._lock:
                self._inflight = None

    def _sync(self, force: bool) -> SyncResult:
        """Run one sync sequence (see sync())."""
        cached = self.load_cached()

        if not force and cached is not None:
            if not self._settings.auto_update_catalog:
                return SyncResult(catalog=cached)
            try:
                stale = self.needs_update()
            except CatalogError as e:
                logger.warning("Catalog update check failed: %s", e)
                return SyncResult(catalog=cached, notice=f"Update check failed: {e}")
            if not stale:
                return SyncResult(catalog=cached)

        try:
            raw, revision = self._fetcher.fetch()
            catalog = parse_catalog(raw, revision)
        except CatalogError as e:
            if cached is None:
                raise SyncError(f"Cannot load catalog and none is cached: {e}") from e
            logger.warning("Catalog refresh failed, keeping revision %s: %s", cached.revision, e)
            return SyncResult(catalog=cached, notice=f"Catalog refresh failed: {e}")

        self._catalog = catalog
        try:
            self._store.save_catalog(raw, revision)
        except StoreError as e:
            logger.warning("Could not cache catalog: %s", e)
            return SyncResult(catalog=catalog, refreshed=True, notice=str(e))

        logger.info("Catalog updated to revision %s (%d entries)", revision, len(catalog))
        return SyncResult(catalog=catalog, refreshed=True)
