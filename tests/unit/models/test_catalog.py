"""Unit tests for catalog models.

Tests for InstallOrigin, RemovalRisk, ClassificationRecord and Catalog.
"""

import pytest
from bloatctl.models.catalog import Catalog, ClassificationRecord, InstallOrigin, RemovalRisk


class TestInstallOrigin:
    """Tests for InstallOrigin enum."""

    @pytest.mark.parametrize(
        ("label", "expected"),
        [
            ("Oem", InstallOrigin.OEM),
            ("carrier", InstallOrigin.CARRIER),
            ("  CARRIER ", InstallOrigin.CARRIER),
            ("Google", InstallOrigin.UNKNOWN),
            ("", InstallOrigin.UNKNOWN),
            (None, InstallOrigin.UNKNOWN),
            (42, InstallOrigin.UNKNOWN),
        ],
    )
    def test_from_label(self, label: object, expected: InstallOrigin) -> None:
        """from_label maps labels case-insensitively, UNKNOWN otherwise."""
        assert InstallOrigin.from_label(label) is expected


class TestRemovalRisk:
    """Tests for RemovalRisk enum."""

    def test_from_label_case_insensitive(self) -> None:
        """Category labels are matched ignoring case."""
        assert RemovalRisk.from_label("Recommended") is RemovalRisk.RECOMMENDED
        assert RemovalRisk.from_label("EXPERT") is RemovalRisk.EXPERT

    def test_from_label_unrecognized(self) -> None:
        """Unrecognized categories become UNKNOWN."""
        assert RemovalRisk.from_label("bogus") is RemovalRisk.UNKNOWN
        assert RemovalRisk.from_label(None) is RemovalRisk.UNKNOWN

    def test_rank_orders_by_danger(self) -> None:
        """Rank increases from recommended to system."""
        ranks = [
            RemovalRisk.RECOMMENDED.rank,
            RemovalRisk.ADVANCED.rank,
            RemovalRisk.EXPERT.rank,
            RemovalRisk.UNSAFE.rank,
            RemovalRisk.SYSTEM.rank,
        ]
        assert ranks == [0, 1, 2, 3, 4]

    def test_unknown_has_no_rank(self) -> None:
        """UNKNOWN is not placed on the risk scale."""
        assert RemovalRisk.UNKNOWN.rank is None

    def test_every_risk_has_description(self) -> None:
        """Every member has a non-empty description."""
        for risk in RemovalRisk:
            assert risk.description


class TestClassificationRecord:
    """Tests for ClassificationRecord dataclass."""

    def test_defaults(self) -> None:
        """A default record is unknown and unclassified."""
        record = ClassificationRecord()
        assert record.install_origin is InstallOrigin.UNKNOWN
        assert record.description == ""
        assert record.removal_risk is RemovalRisk.UNKNOWN
        assert record.is_classified is False

    def test_is_classified(self) -> None:
        """A record with a known risk is classified."""
        assert ClassificationRecord(removal_risk=RemovalRisk.EXPERT).is_classified is True

    def test_immutable(self) -> None:
        """ClassificationRecord is frozen."""
        record = ClassificationRecord()
        with pytest.raises(AttributeError):
            record.description = "changed"  # type: ignore[misc]


class TestCatalog:
    """Tests for Catalog dataclass."""

    def test_empty_revision_rejected(self) -> None:
        """Catalog requires a revision."""
        with pytest.raises(ValueError, match="revision cannot be empty"):
            Catalog(revision="")

    def test_lookup(self, sample_catalog: Catalog) -> None:
        """get and `in` find listed packages only."""
        assert "com.facebook.katana" in sample_catalog
        assert "com.example.missing" not in sample_catalog
        record = sample_catalog.get("com.facebook.katana")
        assert record is not None
        assert record.removal_risk is RemovalRisk.RECOMMENDED
        assert sample_catalog.get("com.example.missing") is None

    def test_len(self, sample_catalog: Catalog) -> None:
        """len returns the number of records."""
        assert len(sample_catalog) == 3

    def test_records_read_only(self, sample_catalog: Catalog) -> None:
        """The records mapping cannot be mutated."""
        with pytest.raises(TypeError):
            sample_catalog.records["com.example.new"] = ClassificationRecord()  # type: ignore[index]

    def test_records_detached_from_input(self) -> None:
        """Mutating the source dict does not change the catalog."""
        source = {"com.example.a": ClassificationRecord()}
        catalog = Catalog(revision="r1", records=source)
        source["com.example.b"] = ClassificationRecord()
        assert len(catalog) == 1

    def test_count_by_risk(self, sample_catalog: Catalog) -> None:
        """count_by_risk covers every member, zero included."""
        counts = sample_catalog.count_by_risk()
        assert set(counts) == set(RemovalRisk)
        assert counts[RemovalRisk.RECOMMENDED] == 1
        assert counts[RemovalRisk.ADVANCED] == 1
        assert counts[RemovalRisk.UNSAFE] == 1
        assert counts[RemovalRisk.SYSTEM] == 0
