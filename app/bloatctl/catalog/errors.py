"""Exceptions raised while fetching, parsing and syncing the catalog."""

from enum import Enum


class CatalogError(Exception):
    """Base exception for catalog-related errors."""


class FetchErrorKind(str, Enum):
    """Reason a catalog fetch failed."""

    UNREACHABLE = "unreachable"
    MALFORMED_REVISION = "malformed_revision"


class FetchError(CatalogError):
    """Raised when the catalog or its revision cannot be retrieved.

    Attributes:
        kind: Why the fetch failed.
    """

    kind: FetchErrorKind = FetchErrorKind.UNREACHABLE


class UnreachableError(FetchError):
    """Raised on timeouts, connection failures and error HTTP statuses."""

    kind = FetchErrorKind.UNREACHABLE


class MalformedRevisionError(FetchError):
    """Raised when no revision can be extracted from the revision response."""

    kind = FetchErrorKind.MALFORMED_REVISION


class ParseError(CatalogError):
    """Base exception for catalog parsing errors."""


class InvalidDocumentError(ParseError):
    """Raised when the catalog document is not a mapping of packages."""


class SyncError(CatalogError):
    """Raised when a sync fails and no cached catalog is available."""
