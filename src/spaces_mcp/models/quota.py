"""Quota usage snapshots and limit range defaults."""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any

from kubernetes.utils import parse_quantity  # type: ignore[import-untyped]
from pydantic import BaseModel, Field

# Quota dimensions reported for every space; others in the status are ignored.
CPU_KEY = "limits.cpu"
MEMORY_KEY = "limits.memory"
STORAGE_KEY = "requests.storage"


class DimensionUsage(BaseModel):
    """Used vs. hard limit for one quota dimension."""

    used: str = Field("0", description="Observed usage in native units")
    limit: str = Field("0", description="Hard limit in native units")
    percentage: float | None = Field(
        None, description="Usage as a percentage of the limit, when both parse"
    )

    @classmethod
    def from_values(cls, used: Any, limit: Any) -> "DimensionUsage":
        used_str = str(used) if used not in (None, "") else "0"
        limit_str = str(limit) if limit not in (None, "") else "0"
        return cls(
            used=used_str,
            limit=limit_str,
            percentage=_percentage(used_str, limit_str),
        )


class QuotaUsage(BaseModel):
    """CPU, memory and storage usage of a space."""

    cpu: DimensionUsage = Field(default_factory=DimensionUsage)
    memory: DimensionUsage = Field(default_factory=DimensionUsage)
    storage: DimensionUsage = Field(default_factory=DimensionUsage)


class LimitRangeItem(BaseModel):
    """Default requests/limits applied to one container type."""

    type: str = Field("Container", description="LimitRange item type")
    default: dict[str, str] = Field(
        default_factory=dict, description="Default limits (cpu, memory)"
    )
    default_request: dict[str, str] = Field(
        default_factory=dict, description="Default requests (cpu, memory)"
    )


def _percentage(used: str, limit: str) -> float | None:
    try:
        used_q = Decimal(parse_quantity(used))
        limit_q = Decimal(parse_quantity(limit))
    except (ValueError, TypeError, InvalidOperation):
        return None
    if limit_q <= 0:
        return None
    return round(float(used_q / limit_q * 100), 1)


def _field(status: Any, name: str) -> Any:
    if isinstance(status, Mapping):
        return status.get(name)
    return getattr(status, name, None)


def read_quota_usage(status: Any) -> QuotaUsage | None:
    """Parse a ResourceQuota status into a usage snapshot.

    Quota status is filled in asynchronously after creation, so a status
    without both ``hard`` and ``used`` mappings means "not yet available"
    and yields None instead of an error.

    Args:
        status: ``V1ResourceQuotaStatus`` or an equivalent dict.

    Returns:
        The snapshot, or None if the status is not populated yet.
    """
    if status is None:
        return None

    hard = _field(status, "hard")
    used = _field(status, "used")
    if not isinstance(hard, Mapping) or not isinstance(used, Mapping):
        return None

    return QuotaUsage(
        cpu=DimensionUsage.from_values(used.get(CPU_KEY), hard.get(CPU_KEY)),
        memory=DimensionUsage.from_values(used.get(MEMORY_KEY), hard.get(MEMORY_KEY)),
        storage=DimensionUsage.from_values(used.get(STORAGE_KEY), hard.get(STORAGE_KEY)),
    )
