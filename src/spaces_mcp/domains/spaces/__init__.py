"""Tenant spaces: namespace, quota and limit range per space."""

from spaces_mcp.domains.spaces.models import (
    ServiceTier,
    Space,
    SpaceCreate,
    SpaceStatus,
    namespace_for,
    validate_space_name,
)
from spaces_mcp.domains.spaces.provisioner import ProvisioningStep, SpaceProvisioner, run_steps
from spaces_mcp.domains.spaces.store import InMemorySpaceStore, SpaceStore
from spaces_mcp.domains.spaces.tiers import TierCatalog, TierResources

__all__ = [
    "InMemorySpaceStore",
    "ProvisioningStep",
    "ServiceTier",
    "Space",
    "SpaceCreate",
    "SpaceProvisioner",
    "SpaceStatus",
    "SpaceStore",
    "TierCatalog",
    "TierResources",
    "namespace_for",
    "run_steps",
    "validate_space_name",
]
