"""Data models for bloatctl.

This module exports the core data structures used throughout the application.
"""

from bloatctl.models.action import (
    BatchOutcome,
    BatchReport,
    Direction,
    OperationResult,
)
from bloatctl.models.catalog import (
    Catalog,
    ClassificationRecord,
    InstallOrigin,
    RemovalRisk,
)
from bloatctl.models.package import AppView, PackageStatus

__all__ = [
    "AppView",
    "BatchOutcome",
    "BatchReport",
    "Catalog",
    "ClassificationRecord",
    "Direction",
    "InstallOrigin",
    "OperationResult",
    "PackageStatus",
    "RemovalRisk",
]
