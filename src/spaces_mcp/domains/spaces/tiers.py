"""Quota and limit range presets per service tier."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from spaces_mcp.domains.spaces.models import ServiceTier
from spaces_mcp.models.quota import LimitRangeItem
from spaces_mcp.utils.errors import ConfigurationError

logger = logging.getLogger(__name__)


class TierResources(BaseModel):
    """Resources granted to spaces of one tier."""

    quota: dict[str, str] = Field(default_factory=dict, description="ResourceQuota hard limits")
    limit_range: list[LimitRangeItem] = Field(
        default_factory=list, description="LimitRange items"
    )


def _container_defaults(
    cpu_limit: str, memory_limit: str, cpu_request: str, memory_request: str
) -> list[LimitRangeItem]:
    return [
        LimitRangeItem(
            type="Container",
            default={"cpu": cpu_limit, "memory": memory_limit},
            default_request={"cpu": cpu_request, "memory": memory_request},
        )
    ]


DEFAULT_TIERS: dict[ServiceTier, TierResources] = {
    ServiceTier.FREE: TierResources(
        quota={"limits.cpu": "2", "limits.memory": "4Gi", "requests.storage": "10Gi"},
        limit_range=_container_defaults("500m", "512Mi", "100m", "128Mi"),
    ),
    ServiceTier.PRO: TierResources(
        quota={"limits.cpu": "4", "limits.memory": "8Gi", "requests.storage": "50Gi"},
        limit_range=_container_defaults("1", "1Gi", "250m", "256Mi"),
    ),
    ServiceTier.TEAM: TierResources(
        quota={"limits.cpu": "8", "limits.memory": "16Gi", "requests.storage": "200Gi"},
        limit_range=_container_defaults("2", "2Gi", "500m", "512Mi"),
    ),
}


class TierCatalog:
    """Lookup of tier presets, optionally overridden from YAML.

    The YAML file maps tier names to ``quota`` and ``limit_range`` entries::

        tiers:
          PRO:
            quota:
              limits.cpu: "6"
            limit_range:
              - type: Container
                default: {cpu: "1", memory: 1Gi}
                default_request: {cpu: 250m, memory: 256Mi}

    Tiers missing from the file keep their built-in presets.
    """

    def __init__(self, tiers: dict[ServiceTier, TierResources] | None = None) -> None:
        self._tiers = dict(DEFAULT_TIERS)
        if tiers:
            self._tiers.update(tiers)

    @classmethod
    def load(cls, path: Path | None) -> "TierCatalog":
        """Build a catalog from an optional YAML override file.

        Raises:
            ConfigurationError: If the file cannot be read or parsed.
        """
        if path is None:
            return cls()

        try:
            data = yaml.safe_load(path.read_text())
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to read tiers file {path}: {e}") from e

        raw_tiers: Any = (data or {}).get("tiers", {}) if isinstance(data, dict) else None
        if not isinstance(raw_tiers, dict):
            raise ConfigurationError(f"Tiers file {path} must contain a 'tiers' mapping")

        overrides: dict[ServiceTier, TierResources] = {}
        for name, spec in raw_tiers.items():
            try:
                tier = ServiceTier(str(name).upper())
                overrides[tier] = TierResources.model_validate(spec or {})
            except (ValueError, PydanticValidationError) as e:
                raise ConfigurationError(f"Invalid tier '{name}' in {path}: {e}") from e

        logger.info(f"Loaded {len(overrides)} tier override(s) from {path}")
        return cls(overrides)

    def resources_for(self, tier: ServiceTier) -> TierResources:
        return self._tiers[tier]

    def quota_for(self, tier: ServiceTier) -> dict[str, str]:
        """ResourceQuota hard limits for a tier."""
        return dict(self._tiers[tier].quota)

    def limit_range_for(self, tier: ServiceTier) -> list[LimitRangeItem]:
        """LimitRange items for a tier."""
        return [item.model_copy(deep=True) for item in self._tiers[tier].limit_range]
