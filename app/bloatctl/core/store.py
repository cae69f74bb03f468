"""Durable storage for the cached catalog and user settings.

This module provides the CatalogStore class, which keeps the raw catalog
bytes and the revision they belong to in the cache directory, and the
user preferences in the settings file. It holds no policy: deciding when
to read or write is up to the caller.
"""

import logging
import os
from pathlib import Path
from tempfile import NamedTemporaryFile

from bloatctl.core.paths import get_cache_dir, get_settings_path
from bloatctl.core.settings import Settings, load_settings, save_settings

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when the store cannot persist data."""


class CatalogStore:
    """Key-value persistence for catalog bytes, revision and settings.

    Storage locations:
        ~/.cache/bloatctl/uad_lists.json  (raw catalog bytes)
        ~/.cache/bloatctl/revision        (last-known revision)
        ~/.config/bloatctl/settings.toml  (user preferences)
    """

    CATALOG_FILENAME = "uad_lists.json"
    REVISION_FILENAME = "revision"

    def __init__(
        self,
        cache_dir: Path | None = None,
        settings_path: Path | None = None,
    ) -> None:
        """Initialize CatalogStore.

        Args:
            cache_dir: Optional override for the cache directory.
            settings_path: Optional override for the settings file.
        """
        self._cache_dir = cache_dir if cache_dir is not None else get_cache_dir()
        self._settings_path = settings_path if settings_path is not None else get_settings_path()

    @property
    def catalog_path(self) -> Path:
        """Path to the cached catalog document."""
        return self._cache_dir / self.CATALOG_FILENAME

    @property
    def revision_path(self) -> Path:
        """Path to the last-known revision file."""
        return self._cache_dir / self.REVISION_FILENAME

    @property
    def settings_path(self) -> Path:
        """Path to the settings file."""
        return self._settings_path

    def read_catalog(self) -> bytes | None:
        """Read the cached catalog bytes.

        Returns:
            Raw catalog bytes, or None if nothing is cached or the file
            cannot be read.
        """
        try:
            return self.catalog_path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Cannot read cached catalog %s: %s", self.catalog_path, e)
            return None

    def read_revision(self) -> str | None:
        """Read the last-known catalog revision.

        Returns:
            Revision string, or None if none is stored.
        """
        try:
            revision = self.revision_path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Cannot read catalog revision %s: %s", self.revision_path, e)
            return None
        return revision or None

    def save_catalog(self, raw: bytes, revision: str) -> None:
        """Persist catalog bytes together with their revision.

        The bytes are written before the revision so that an interrupted
        save never records a new revision against stale bytes.

        Args:
            raw: Raw catalog document.
            revision: Revision the document belongs to.

        Raises:
            StoreError: If either file cannot be written.
        """
        try:
            self._cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreError(f"Cannot create cache directory {self._cache_dir}: {e}") from e

        self._write_atomic(self.catalog_path, raw)
        self._write_atomic(self.revision_path, revision.encode("utf-8"))
        logger.debug("Stored catalog revision %s (%d bytes)", revision, len(raw))

    def load_settings(self) -> Settings:
        """Load user settings (defaults when none are saved).

        Raises:
            SettingsError: If the settings file is invalid.
        """
        return load_settings(self._settings_path)

    def save_settings(self, settings: Settings) -> Path:
        """Persist user settings.

        Raises:
            SettingsError: If the settings file cannot be written.
        """
        return save_settings(settings, self._settings_path)

    def _write_atomic(self, path: Path, data: bytes) -> None:
        """Write bytes to a file via a temporary file and os.replace()."""
        tmp_path: Path | None = None
        try:
            with NamedTemporaryFile(
                mode="wb",
                dir=path.parent,
                delete=False,
                suffix=".tmp",
            ) as f:
                tmp_path = Path(f.name)
                f.write(data)
            os.replace(str(tmp_path), str(path))
        except OSError as e:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
            raise StoreError(f"Failed to write {path}: {e}") from e
