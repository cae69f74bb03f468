"""Catalog models for the community bloatware classification.

This module defines the classification record attached to each known
package identifier and the immutable catalog snapshot that groups them.
"""

from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


class InstallOrigin(str, Enum):
    """Where a package typically originates from.

    Attributes:
        OEM: Shipped by the device manufacturer.
        CARRIER: Shipped by the mobile network operator.
        UNKNOWN: Absent or unrecognized origin label.
    """

    OEM = "oem"
    CARRIER = "carrier"
    UNKNOWN = "unknown"

    @classmethod
    def from_label(cls, label: object) -> "InstallOrigin":
        """Map a catalog label to an origin, ignoring case.

        Args:
            label: Raw value from the catalog document.

        Returns:
            Matching InstallOrigin, or UNKNOWN for anything unrecognized.
        """
        if isinstance(label, str):
            normalized = label.strip().lower()
            for origin in cls:
                if origin.value == normalized:
                    return origin
        return cls.UNKNOWN


# Ordered from least to most dangerous to remove
_RISK_DESCRIPTIONS: dict[str, str] = {
    "recommended": (
        "Pointless or outright negative packages, and/or apps available through Google Play."
    ),
    "advanced": (
        "Breaks obscure or minor parts of functionality, or apps that aren't easily "
        "enabled/installed through Settings/Google Play. Also used for useful apps "
        "that can easily be replaced by a better alternative."
    ),
    "expert": (
        "Breaks widespread and/or important functionality, but nothing important to "
        "the basic operation of the operating system."
    ),
    "unsafe": (
        "Can break vital parts of the operating system. Removal carries an extremely "
        "high risk of bootlooping the device."
    ),
    "system": "System apps that come pre-installed with the device.",
}


class RemovalRisk(str, Enum):
    """Risk of removing a package, in increasing order of danger.

    UNKNOWN is kept as an explicit member so that entries with an
    unrecognized category are still represented in the catalog.
    """

    RECOMMENDED = "recommended"
    ADVANCED = "advanced"
    EXPERT = "expert"
    UNSAFE = "unsafe"
    SYSTEM = "system"
    UNKNOWN = "unknown"

    @classmethod
    def from_label(cls, label: object) -> "RemovalRisk":
        """Map a catalog label to a risk level, ignoring case.

        Args:
            label: Raw value from the catalog document.

        Returns:
            Matching RemovalRisk, or UNKNOWN for anything unrecognized.
        """
        if isinstance(label, str):
            normalized = label.strip().lower()
            for risk in cls:
                if risk.value == normalized:
                    return risk
        return cls.UNKNOWN

    @property
    def rank(self) -> int | None:
        """Position on the risk scale (0 = safest), None for UNKNOWN."""
        if self is RemovalRisk.UNKNOWN:
            return None
        return list(_RISK_DESCRIPTIONS).index(self.value)

    @property
    def description(self) -> str:
        """Human-readable explanation of the risk level."""
        return _RISK_DESCRIPTIONS.get(self.value, "Not classified by the catalog.")


@dataclass(frozen=True, slots=True)
class ClassificationRecord:
    """Classification of a single package identifier.

    Attributes:
        install_origin: Where the package typically comes from.
        description: Free-text rationale from the catalog (may be empty).
        removal_risk: How risky it is to remove the package.
    """

    install_origin: InstallOrigin = InstallOrigin.UNKNOWN
    description: str = ""
    removal_risk: RemovalRisk = RemovalRisk.UNKNOWN

    @property
    def is_classified(self) -> bool:
        """Check if the catalog assigned a known risk level."""
        return self.removal_risk is not RemovalRisk.UNKNOWN


@dataclass(frozen=True, slots=True)
class Catalog:
    """Immutable snapshot of the classification catalog.

    The records mapping is exposed read-only; a refresh produces a new
    Catalog rather than mutating an existing one.

    Attributes:
        revision: Opaque identifier of the catalog version (commit sha).
        records: Mapping from package identifier to its classification.
    """

    revision: str
    records: Mapping[str, ClassificationRecord] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Freeze the records mapping."""
        if not self.revision:
            msg = "Catalog revision cannot be empty"
            raise ValueError(msg)
        object.__setattr__(self, "records", MappingProxyType(dict(self.records)))

    def __len__(self) -> int:
        return len(self.records)

    def __contains__(self, package: object) -> bool:
        return package in self.records

    def get(self, package: str) -> ClassificationRecord | None:
        """Look up the classification for a package identifier."""
        return self.records.get(package)

    def count_by_risk(self) -> dict[RemovalRisk, int]:
        """Count records per removal risk level.

        Returns:
            Dictionary with an entry for every RemovalRisk member.
        """
        counts = Counter(record.removal_risk for record in self.records.values())
        return {risk: counts.get(risk, 0) for risk in RemovalRisk}
