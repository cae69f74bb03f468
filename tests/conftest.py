"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import json

import pytest
from bloatctl.models.catalog import Catalog, ClassificationRecord, InstallOrigin, RemovalRisk


@pytest.fixture
def catalog_document() -> dict[str, object]:
    """Sample catalog document in the community list format."""
    return {
        "com.facebook.katana": {
            "list": "Oem",
            "description": "Facebook app\nPreinstalled on many phones",
            "dependencies": [],
            "neededBy": [],
            "labels": [],
            "removal": "Recommended",
        },
        "com.samsung.android.bixby.agent": {
            "list": "Oem",
            "description": "Bixby voice assistant",
            "removal": "Advanced",
        },
        "com.vzw.hss.myverizon": {
            "list": "Carrier",
            "description": "My Verizon",
            "removal": "Recommended",
        },
        "com.android.systemui": {
            "list": "Aosp",
            "description": "System UI. DO NOT REMOVE.",
            "removal": "Unsafe",
        },
    }


@pytest.fixture
def catalog_bytes(catalog_document: dict[str, object]) -> bytes:
    """Sample catalog document serialized to JSON bytes."""
    return json.dumps(catalog_document).encode("utf-8")


@pytest.fixture
def sample_catalog() -> Catalog:
    """Small parsed catalog for tracker and display tests."""
    return Catalog(
        revision="abc123",
        records={
            "com.facebook.katana": ClassificationRecord(
                install_origin=InstallOrigin.OEM,
                description="Facebook app",
                removal_risk=RemovalRisk.RECOMMENDED,
            ),
            "com.samsung.android.bixby.agent": ClassificationRecord(
                install_origin=InstallOrigin.OEM,
                description="Bixby voice assistant",
                removal_risk=RemovalRisk.ADVANCED,
            ),
            "com.android.systemui": ClassificationRecord(
                description="System UI",
                removal_risk=RemovalRisk.UNSAFE,
            ),
        },
    )


@pytest.fixture
def mock_pm_list_all() -> str:
    """Sample `pm list packages -u` output (installed and uninstalled)."""
    return """package:com.android.systemui
package:com.facebook.katana
package:com.samsung.android.bixby.agent
package:com.google.android.gm"""


@pytest.fixture
def mock_pm_list_installed() -> str:
    """Sample `pm list packages` output (installed only)."""
    return """package:com.android.systemui
package:com.facebook.katana
package:com.google.android.gm"""
