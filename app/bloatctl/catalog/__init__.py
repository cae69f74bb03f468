"""Bloatware classification catalog.

This module provides fetching, parsing and synchronization of the
community-maintained catalog of removable packages.
"""

from bloatctl.catalog.errors import (
    CatalogError,
    FetchError,
    FetchErrorKind,
    InvalidDocumentError,
    MalformedRevisionError,
    ParseError,
    SyncError,
    UnreachableError,
)
from bloatctl.catalog.fetcher import CatalogFetcher
from bloatctl.catalog.parser import parse_catalog, parse_record
from bloatctl.catalog.sync import CatalogSynchronizer, SyncResult

__all__ = [
    "CatalogError",
    "CatalogFetcher",
    "CatalogSynchronizer",
    "FetchError",
    "FetchErrorKind",
    "InvalidDocumentError",
    "MalformedRevisionError",
    "ParseError",
    "SyncError",
    "SyncResult",
    "UnreachableError",
    "parse_catalog",
    "parse_record",
]
