"""User settings and preferences.

This module provides the settings model and the TOML I/O functions for
the persisted preferences (catalog auto-update, uninstall confirmation)
and the tunables of the catalog fetcher and the privileged channel.

Settings are stored in ~/.config/bloatctl/settings.toml
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from bloatctl.core.paths import get_settings_path

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_URL = (
    "https://raw.githubusercontent.com/Universal-Debloater-Alliance/"
    "universal-android-debloater-next-generation/main/resources/assets/uad_lists.json"
)
DEFAULT_REVISION_URL = (
    "https://api.github.com/repos/Universal-Debloater-Alliance/"
    "universal-android-debloater-next-generation/commits"
    "?path=resources%2Fassets%2Fuad_lists.json"
)


class Settings(BaseModel):
    """Persisted bloatctl settings.

    Attributes:
        auto_update_catalog: Check for a newer catalog revision on sync.
        confirm_before_uninstall: Ask before removing packages.
        catalog_url: URL of the classification document.
        revision_url: URL listing the latest commits of the document.
        http_timeout_seconds: Timeout for each catalog HTTP request.
        channel_timeout_seconds: Timeout for each privileged channel call.
        adb_serial: Serial of the target device when several are attached.
        android_user: Android user id the packages are managed for.
        batch_workers: Number of packages processed concurrently.
    """

    model_config = ConfigDict(extra="forbid")

    auto_update_catalog: Annotated[
        bool,
        Field(description="Check for catalog updates on sync"),
    ] = True
    confirm_before_uninstall: Annotated[
        bool,
        Field(description="Ask for confirmation before removing packages"),
    ] = True
    catalog_url: Annotated[str, Field(min_length=1)] = DEFAULT_CATALOG_URL
    revision_url: Annotated[str, Field(min_length=1)] = DEFAULT_REVISION_URL
    http_timeout_seconds: Annotated[
        float,
        Field(ge=1, le=120, description="HTTP timeout in seconds (1-120)"),
    ] = 15.0
    channel_timeout_seconds: Annotated[
        float,
        Field(ge=5, le=600, description="Privileged channel timeout in seconds (5-600)"),
    ] = 60.0
    adb_serial: Annotated[str | None, Field(description="Target device serial")] = None
    android_user: Annotated[int, Field(ge=0, description="Android user id")] = 0
    batch_workers: Annotated[
        int,
        Field(ge=1, le=8, description="Concurrent package operations (1-8)"),
    ] = 1


class SettingsError(Exception):
    """Base exception for settings errors."""


class SettingsParseError(SettingsError):
    """Raised when the settings file cannot be parsed."""


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from a TOML file.

    A missing file is not an error: defaults are returned instead.

    Args:
        path: Path to the settings file. If None, uses the default path.

    Returns:
        Validated Settings object.

    Raises:
        SettingsParseError: If the TOML syntax is invalid.
        SettingsError: If the file cannot be read or fails validation.
    """
    settings_path = path or get_settings_path()

    if not settings_path.exists():
        logger.debug("No settings file at %s, using defaults", settings_path)
        return Settings()

    try:
        with open(settings_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise SettingsParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise SettingsError(f"Failed to read settings: {e}") from e

    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise SettingsError(f"Invalid settings content: {e}") from e


def save_settings(settings: Settings, path: Path | None = None) -> Path:
    """Save settings to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        settings: The Settings object to save.
        path: Path to save to. If None, uses the default path.

    Returns:
        Path where the settings were saved.

    Raises:
        SettingsError: If the file cannot be written.
    """
    settings_path = path or get_settings_path()

    try:
        settings_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise SettingsError(f"Cannot create settings directory: {e}") from e

    data = _settings_to_dict(settings)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=settings_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(settings_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise SettingsError(f"Failed to write settings: {e}") from e

    return settings_path


def _settings_to_dict(settings: Settings) -> dict[str, object]:
    """Convert Settings to a dictionary for TOML serialization.

    The two user preferences are always written; everything else only
    when it differs from the default. TOML has no null, so None values
    are dropped.

    Args:
        settings: The Settings to convert.

    Returns:
        Dictionary ready for TOML serialization.
    """
    result: dict[str, object] = {
        "auto_update_catalog": settings.auto_update_catalog,
        "confirm_before_uninstall": settings.confirm_before_uninstall,
    }
    defaults = Settings()
    for name, value in settings.model_dump(exclude_none=True).items():
        if name in result:
            continue
        if value != getattr(defaults, name):
            result[name] = value
    return result
