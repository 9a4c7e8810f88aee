"""Tests for quota usage parsing."""

from kubernetes import client

from spaces_mcp.models.quota import DimensionUsage, read_quota_usage


class TestReadQuotaUsage:
    """Test read_quota_usage."""

    def test_missing_dimensions_report_zero(self) -> None:
        """Dimensions absent from status read as "0"."""
        usage = read_quota_usage({"hard": {"limits.cpu": "2"}, "used": {}})

        assert usage is not None
        assert usage.cpu.used == "0"
        assert usage.cpu.limit == "2"
        assert usage.memory.used == "0"
        assert usage.memory.limit == "0"
        assert usage.storage.used == "0"
        assert usage.storage.limit == "0"

    def test_none_status(self) -> None:
        assert read_quota_usage(None) is None

    def test_status_without_used(self) -> None:
        """Quota status is filled in after creation; partial status is not ready."""
        assert read_quota_usage({"hard": {"limits.cpu": "2"}}) is None
        assert read_quota_usage({"hard": {"limits.cpu": "2"}, "used": None}) is None
        assert read_quota_usage({}) is None

    def test_v1_status_object(self) -> None:
        status = client.V1ResourceQuotaStatus(
            hard={"limits.cpu": "4", "limits.memory": "8Gi", "requests.storage": "50Gi"},
            used={"limits.cpu": "1500m", "limits.memory": "2Gi", "requests.storage": "5Gi"},
        )

        usage = read_quota_usage(status)

        assert usage is not None
        assert usage.cpu.used == "1500m"
        assert usage.cpu.percentage == 37.5
        assert usage.memory.percentage == 25.0
        assert usage.storage.percentage == 10.0

    def test_other_dimensions_ignored(self) -> None:
        usage = read_quota_usage(
            {
                "hard": {"pods": "10", "limits.cpu": "2"},
                "used": {"pods": "3", "limits.cpu": "1"},
            }
        )

        assert usage is not None
        assert set(usage.model_dump()) == {"cpu", "memory", "storage"}


class TestDimensionUsage:
    """Test per-dimension percentages."""

    def test_zero_limit_has_no_percentage(self) -> None:
        assert DimensionUsage.from_values("1", "0").percentage is None

    def test_unparseable_quantity(self) -> None:
        usage = DimensionUsage.from_values("lots", "2")

        assert usage.used == "lots"
        assert usage.percentage is None

    def test_rounds_to_one_decimal(self) -> None:
        assert DimensionUsage.from_values("1", "3").percentage == 33.3

    def test_empty_values(self) -> None:
        usage = DimensionUsage.from_values(None, "")

        assert usage.used == "0"
        assert usage.limit == "0"
