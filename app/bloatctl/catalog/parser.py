"""Conversion of the raw catalog document into a Catalog.

The document is a JSON object keyed by package identifier. Each value is
expected to hold ``list`` (install origin), ``description`` and
``removal`` (risk category). Malformed entries are healed field by field
and always kept; only a document that is not a JSON object is rejected.
"""

import json
import logging
from typing import Any

from bloatctl.catalog.errors import InvalidDocumentError
from bloatctl.models.catalog import (
    Catalog,
    ClassificationRecord,
    InstallOrigin,
    RemovalRisk,
)

logger = logging.getLogger(__name__)


def parse_catalog(raw: bytes | str, revision: str) -> Catalog:
    """Parse a catalog document.

    Args:
        raw: Raw JSON document.
        revision: Revision to stamp on the resulting catalog.

    Returns:
        Catalog with one record per key of the document.

    Raises:
        InvalidDocumentError: If the document is not a JSON object.
    """
    try:
        document: Any = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidDocumentError(f"Catalog is not valid JSON: {e}") from e
    except RecursionError as e:
        raise InvalidDocumentError("Catalog is nested too deeply to decode") from e

    if not isinstance(document, dict):
        msg = f"Catalog must be a JSON object, got {type(document).__name__}"
        raise InvalidDocumentError(msg)

    records: dict[str, ClassificationRecord] = {}
    degraded = 0

    for package, entry in document.items():
        record = parse_record(entry)
        if not record.is_classified:
            degraded += 1
        records[package] = record

    if degraded:
        logger.debug("%d catalog entries have no recognized removal category", degraded)

    return Catalog(revision=revision, records=records)


def parse_record(entry: Any) -> ClassificationRecord:
    """Build a classification record from a single catalog entry.

    Args:
        entry: Decoded JSON value for one package.

    Returns:
        ClassificationRecord with unknown/empty fields where the entry
        is missing or malformed.
    """
    if not isinstance(entry, dict):
        return ClassificationRecord()

    description = entry.get("description")
    if not isinstance(description, str):
        description = ""

    return ClassificationRecord(
        install_origin=InstallOrigin.from_label(entry.get("list")),
        description=description,
        removal_risk=RemovalRisk.from_label(entry.get("removal")),
    )
