"""Tests for service tier presets."""

from pathlib import Path

import pytest

from spaces_mcp.domains.spaces.models import ServiceTier
from spaces_mcp.domains.spaces.tiers import DEFAULT_TIERS, TierCatalog
from spaces_mcp.utils.errors import ConfigurationError


class TestDefaults:
    """Test built-in presets."""

    def test_every_tier_has_preset(self) -> None:
        assert set(DEFAULT_TIERS) == set(ServiceTier)

    def test_free_tier(self) -> None:
        catalog = TierCatalog()

        assert catalog.quota_for(ServiceTier.FREE) == {
            "limits.cpu": "2",
            "limits.memory": "4Gi",
            "requests.storage": "10Gi",
        }
        (item,) = catalog.limit_range_for(ServiceTier.FREE)
        assert item.default == {"cpu": "500m", "memory": "512Mi"}
        assert item.default_request == {"cpu": "100m", "memory": "128Mi"}

    def test_returned_specs_are_copies(self) -> None:
        catalog = TierCatalog()

        catalog.quota_for(ServiceTier.PRO)["limits.cpu"] = "999"
        catalog.limit_range_for(ServiceTier.PRO)[0].default["cpu"] = "999"

        assert catalog.quota_for(ServiceTier.PRO)["limits.cpu"] == "4"
        assert catalog.limit_range_for(ServiceTier.PRO)[0].default["cpu"] == "1"


class TestLoad:
    """Test YAML overrides."""

    def test_no_path_uses_defaults(self) -> None:
        catalog = TierCatalog.load(None)

        assert catalog.quota_for(ServiceTier.TEAM)["limits.cpu"] == "8"

    def test_override_one_tier(self, tmp_path: Path) -> None:
        path = tmp_path / "tiers.yaml"
        path.write_text(
            "tiers:\n"
            "  pro:\n"
            "    quota:\n"
            '      limits.cpu: "6"\n'
            "      limits.memory: 12Gi\n"
        )

        catalog = TierCatalog.load(path)

        assert catalog.quota_for(ServiceTier.PRO) == {"limits.cpu": "6", "limits.memory": "12Gi"}
        assert catalog.limit_range_for(ServiceTier.PRO) == []
        assert catalog.quota_for(ServiceTier.FREE)["limits.cpu"] == "2"

    def test_unknown_tier(self, tmp_path: Path) -> None:
        path = tmp_path / "tiers.yaml"
        path.write_text("tiers:\n  ENTERPRISE:\n    quota: {}\n")

        with pytest.raises(ConfigurationError, match="ENTERPRISE"):
            TierCatalog.load(path)

    def test_missing_tiers_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "tiers.yaml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(ConfigurationError):
            TierCatalog.load(path)

    def test_unreadable_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError):
            TierCatalog.load(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "tiers.yaml"
        path.write_text("tiers: [unclosed\n")

        with pytest.raises(ConfigurationError):
            TierCatalog.load(path)
