"""Pydantic models for spaces."""

from __future__ import annotations

import hashlib
import re
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field

from spaces_mcp.models.quota import LimitRangeItem
from spaces_mcp.utils.errors import ValidationError

SPACE_NAME_PATTERN = re.compile(r"^[a-z][a-z0-9-]*[a-z0-9]$")
SPACE_NAME_MIN_LENGTH = 3
SPACE_NAME_MAX_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 500

NAMESPACE_PREFIX = "ws-"
# DNS-1123 label limit
NAMESPACE_MAX_LENGTH = 63
_DNS_LABEL = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")


class SpaceStatus(str, Enum):
    """Lifecycle of a space."""

    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    DELETING = "DELETING"
    DELETED = "DELETED"


class ServiceTier(str, Enum):
    """Service tier of a space owner."""

    FREE = "FREE"
    PRO = "PRO"
    TEAM = "TEAM"


def validate_space_name(name: str) -> str:
    """Check a display name against the naming policy.

    Names are 3-50 characters of lowercase letters, digits and hyphens,
    starting with a letter and ending with a letter or digit.

    Raises:
        ValidationError: If the name violates the policy.
    """
    if not SPACE_NAME_MIN_LENGTH <= len(name) <= SPACE_NAME_MAX_LENGTH:
        raise ValidationError(
            "name",
            f"must be {SPACE_NAME_MIN_LENGTH}-{SPACE_NAME_MAX_LENGTH} characters",
        )
    if not SPACE_NAME_PATTERN.match(name):
        raise ValidationError(
            "name",
            "use lowercase letters, digits and hyphens; start with a letter "
            "and end with a letter or digit",
        )
    return name


def validate_description(description: str | None) -> str | None:
    """Check the optional description length."""
    if description is not None and len(description) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(
            "description", f"must be at most {DESCRIPTION_MAX_LENGTH} characters"
        )
    return description


def namespace_for(space_id: str) -> str:
    """Derive the cluster namespace name for a space.

    Pure function of the space id. Ids that are already DNS-safe map to
    ``ws-<id>``; anything else is sanitized and suffixed with a digest of
    the original id so distinct ids never share a namespace.
    """
    candidate = f"{NAMESPACE_PREFIX}{space_id}"
    if len(candidate) <= NAMESPACE_MAX_LENGTH and _DNS_LABEL.match(candidate):
        return candidate

    digest = hashlib.sha256(space_id.encode("utf-8")).hexdigest()[:12]
    sanitized = re.sub(r"[^a-z0-9-]+", "-", space_id.lower()).strip("-")
    room = NAMESPACE_MAX_LENGTH - len(NAMESPACE_PREFIX) - len(digest) - 1
    sanitized = sanitized[:room].strip("-")
    if not sanitized:
        return f"{NAMESPACE_PREFIX}{digest}"
    return f"{NAMESPACE_PREFIX}{sanitized}-{digest}"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Space(BaseModel):
    """A tenant space as held by the record store."""

    id: str = Field(..., description="Space identifier")
    owner_id: str = Field(..., description="Subject of the owning user")
    name: str = Field(..., description="Display name")
    description: str | None = Field(None, description="Space description")
    tier: ServiceTier = Field(ServiceTier.FREE, description="Owner's service tier")
    namespace: str = Field(..., description="Cluster namespace derived from the id")
    status: SpaceStatus = Field(SpaceStatus.PENDING, description="Lifecycle status")
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)

    def touch(self, status: SpaceStatus | None = None) -> "Space":
        """Return a copy with a new status and updated timestamp."""
        update: dict[str, object] = {"updated_at": _now()}
        if status is not None:
            update["status"] = status
        return self.model_copy(update=update)


class SpaceCreate(BaseModel):
    """Request model for creating a space."""

    name: str = Field(..., description="Display name (3-50 chars, lowercase, hyphens)")
    description: str | None = Field(None, description="Space description")
    tier: ServiceTier = Field(ServiceTier.FREE, description="Service tier")
    quota: dict[str, str] = Field(
        default_factory=dict, description="Hard limits keyed by quota dimension"
    )
    limit_range: list[LimitRangeItem] = Field(
        default_factory=list, description="Default container requests/limits"
    )
